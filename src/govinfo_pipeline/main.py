"""
Main Entry Point

Command line interface for the govInfo pipeline. Each subcommand runs one
GovInfoPipeline job and writes its output under --output-dir.
"""

import argparse
import logging
import sys
from typing import List, Optional

from .coreutils.config import GovInfoConfig
from .coreutils.logging import setup_logging
from .errors import GovInfoError
from .orchestration.pipeline import GovInfoPipeline

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="govinfo-pipeline", description="govInfo API data pipeline"
    )
    parser.add_argument("--output-dir", default=None, help="Output directory")
    parser.add_argument(
        "--api-key", default=None, help="govInfo API key (default: GOVINFO_API_KEY)"
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )
    parser.add_argument("--log-dir", default="logs", help="Directory for log files")
    parser.add_argument(
        "--skip-existing",
        action="store_true",
        help="Reuse output files that already exist instead of fetching again",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("collections", help="List all collections")

    published = commands.add_parser(
        "published", help="All packages of a collection published in a date range"
    )
    published.add_argument("collection", help="Collection code, e.g. BILLS")
    published.add_argument("start_date", help="Start date (YYYY-MM-DD)")
    published.add_argument("end_date", help="End date (YYYY-MM-DD)")
    published.add_argument("--page-size", type=int, default=None)
    published.add_argument("--filename", default=None, help="Output CSV filename")

    updates = commands.add_parser(
        "updates", help="All packages of a collection modified since a date"
    )
    updates.add_argument("collection", help="Collection code, e.g. BILLS")
    updates.add_argument("start_date", help="Start date/time (ISO 8601)")
    updates.add_argument("end_date", nargs="?", default=None, help="Optional end date/time")
    updates.add_argument("--page-size", type=int, default=None)
    updates.add_argument("--filename", default=None, help="Output CSV filename")

    granules = commands.add_parser("granules", help="All granules of a package")
    granules.add_argument("package_id")
    granules.add_argument("--page-size", type=int, default=None)

    package_text = commands.add_parser("package-text", help="Download package text")
    package_text.add_argument("package_id")

    granule_text = commands.add_parser("granule-text", help="Download granule text")
    granule_text.add_argument("package_id")
    granule_text.add_argument("granule_id")

    related = commands.add_parser("related", help="Related-content edges of an access id")
    related.add_argument("access_id")
    related.add_argument(
        "--no-expand",
        action="store_true",
        help="Only list relationship types, do not follow relationship links",
    )

    return parser


def run_command(args: argparse.Namespace, pipeline: GovInfoPipeline) -> str:
    """Dispatch a parsed command to the pipeline and return the written path"""
    if args.command == "collections":
        _, path = pipeline.run_collections()
    elif args.command == "published":
        _, path = pipeline.run_published(
            args.collection,
            args.start_date,
            args.end_date,
            page_size=args.page_size,
            filename=args.filename,
        )
    elif args.command == "updates":
        _, path = pipeline.run_collection_updates(
            args.collection,
            args.start_date,
            args.end_date,
            page_size=args.page_size,
            filename=args.filename,
        )
    elif args.command == "granules":
        _, path = pipeline.run_granules(args.package_id, page_size=args.page_size)
    elif args.command == "package-text":
        path = pipeline.run_package_text(args.package_id)
    elif args.command == "granule-text":
        path = pipeline.run_granule_text(args.package_id, args.granule_id)
    elif args.command == "related":
        _, path = pipeline.run_related(args.access_id, expand=not args.no_expand)
    else:
        raise ValueError(f"Unknown command: {args.command}")
    return path


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    args = build_parser().parse_args(argv)
    setup_logging(getattr(logging, args.log_level), log_dir=args.log_dir)

    config = GovInfoConfig.from_env(api_key=args.api_key, output_dir=args.output_dir)
    pipeline = GovInfoPipeline(config, skip_existing=args.skip_existing)

    try:
        path = run_command(args, pipeline)
    except (GovInfoError, ValueError, OSError) as e:
        logger.error(f"❌ {args.command} failed: {e}")
        return 1

    print(f"✅ {args.command} completed: {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
