"""
Pipeline Orchestrator

Each run_* method performs one end-to-end job:
1. Extract: fetch from govInfo (following pagination where needed)
2. Transform: records -> table, or HTML -> text
3. Load: write a CSV or .txt under the output directory

Errors are logged and re-raised; nothing is written for a failed run.
"""

import os
import re
from typing import Dict, List, Optional, Tuple, Any
import logging

import polars as pl

from ..coreutils.config import GovInfoConfig
from ..coreutils.time import DateLike, format_date

# Extract layer imports
from ..extract.govinfo_api import GovInfoAPIClient
from ..extract.paginator import fetch_all, fetch_all_granules, fetch_collection_updates

# Transform layer imports
from ..transformation.schemas import GRANULE_COLUMNS, PACKAGE_COLUMNS
from ..transformation.text import html_to_text
from ..transformation.transformers import (
    collections_to_dataframe,
    records_to_dataframe,
    related_to_dataframe,
)
from ..transformation.validators import validate_package_frame

# Load layer imports
from ..load.local_storage import file_exists, load_csv, save_csv, save_text

logger = logging.getLogger(__name__)

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def _safe_name(value: str) -> str:
    return _UNSAFE_FILENAME_CHARS.sub("_", str(value)).strip("_") or "unnamed"


class GovInfoPipeline:
    """Orchestrates govInfo extract -> transform -> load runs"""

    def __init__(
        self,
        config: Optional[GovInfoConfig] = None,
        client: Optional[GovInfoAPIClient] = None,
        output_dir: Optional[str] = None,
        skip_existing: bool = False,
    ):
        """
        Initialize the pipeline

        Args:
            config: Settings (GOVINFO_* environment variables if not provided)
            client: API client (built from config if not provided)
            output_dir: Where files are written (overrides config.output_dir)
            skip_existing: Reuse an output file that is already on disk instead
                of fetching again
        """
        if config is None:
            config = client.config if client is not None else GovInfoConfig.from_env()
        self.config = config
        self.client = client or GovInfoAPIClient(config)
        self.output_dir = output_dir or config.output_dir
        self.skip_existing = skip_existing

    def _path(self, filename: str) -> str:
        return os.path.join(self.output_dir, filename)

    def _existing(self, path: str) -> bool:
        if self.skip_existing and file_exists(path):
            logger.info(f"⏭️  {path} already exists, skipping")
            return True
        return False

    def run_collections(self) -> Tuple[pl.DataFrame, str]:
        """List every collection and save collections.csv"""
        logger.info("🚀 Fetching collection list")
        try:
            df = collections_to_dataframe(self.client.get_collections())
            path = save_csv(df, self._path("collections.csv"))
        except Exception as e:
            logger.error(f"❌ Collections run failed: {e}")
            raise

        logger.info(f"✅ {df.height} collections saved to {path}")
        return df, path

    def run_published(
        self,
        collection: str,
        start_date: DateLike,
        end_date: DateLike,
        page_size: Optional[int] = None,
        filename: Optional[str] = None,
    ) -> Tuple[pl.DataFrame, str]:
        """
        Fetch every package published in a date range and save it as CSV

        Returns:
            Tuple[pl.DataFrame, str]: Package table and saved file path
        """
        logger.info(f"🚀 Published run: {collection} {start_date} -> {end_date}")
        filename = filename or _safe_name(
            f"{collection.lower()}_{format_date(start_date)}_{format_date(end_date)}"
        ) + ".csv"
        path = self._path(filename)
        if self._existing(path):
            return load_csv(path), path

        try:
            records = fetch_all(
                collection,
                start_date,
                end_date,
                page_size=page_size or self.config.page_size,
                client=self.client,
            )
            df = records_to_dataframe(records, PACKAGE_COLUMNS)
            validate_package_frame(df, "packageId")
            path = save_csv(df, path)
        except Exception as e:
            logger.error(f"❌ Published run failed: {e}")
            raise

        logger.info(f"✅ {df.height} packages saved to {path}")
        return df, path

    def run_collection_updates(
        self,
        collection: str,
        start_date: DateLike,
        end_date: Optional[DateLike] = None,
        page_size: Optional[int] = None,
        filename: Optional[str] = None,
    ) -> Tuple[pl.DataFrame, str]:
        """Fetch every package of a collection modified since start_date and save it as CSV"""
        logger.info(f"🚀 Collection update run: {collection} since {start_date}")
        suffix = format_date(end_date) if end_date else "latest"
        filename = filename or _safe_name(
            f"{collection.lower()}_modified_{format_date(start_date)}_{suffix}"
        ) + ".csv"
        path = self._path(filename)
        if self._existing(path):
            return load_csv(path), path

        try:
            records = fetch_collection_updates(
                collection,
                start_date,
                end_date,
                page_size=page_size or self.config.page_size,
                client=self.client,
            )
            df = records_to_dataframe(records, PACKAGE_COLUMNS)
            validate_package_frame(df, "packageId")
            path = save_csv(df, path)
        except Exception as e:
            logger.error(f"❌ Collection update run failed: {e}")
            raise

        logger.info(f"✅ {df.height} packages saved to {path}")
        return df, path

    def run_granules(
        self, package_id: str, page_size: Optional[int] = None
    ) -> Tuple[pl.DataFrame, str]:
        """Fetch every granule of a package and save {package_id}_granules.csv"""
        logger.info(f"🚀 Granule listing run: {package_id}")
        path = self._path(f"{_safe_name(package_id)}_granules.csv")
        if self._existing(path):
            return load_csv(path), path

        try:
            records = fetch_all_granules(
                package_id,
                page_size=page_size or self.config.page_size,
                client=self.client,
            )
            df = records_to_dataframe(records, GRANULE_COLUMNS)
            validate_package_frame(df, "granuleId")
            path = save_csv(df, path)
        except Exception as e:
            logger.error(f"❌ Granule listing run failed: {e}")
            raise

        logger.info(f"✅ {df.height} granules saved to {path}")
        return df, path

    def run_package_text(self, package_id: str) -> str:
        """Download a package's text rendition, strip the HTML and save {package_id}.txt"""
        logger.info(f"🚀 Package text run: {package_id}")
        path = self._path(f"{_safe_name(package_id)}.txt")
        if self._existing(path):
            return path

        try:
            text = html_to_text(self.client.get_package_text(package_id))
            path = save_text(text, path)
        except Exception as e:
            logger.error(f"❌ Package text run failed: {e}")
            raise

        logger.info(f"✅ Package text saved to {path}")
        return path

    def run_granule_text(self, package_id: str, granule_id: str) -> str:
        """Download a granule's text rendition, strip the HTML and save {granule_id}.txt"""
        logger.info(f"🚀 Granule text run: {package_id}/{granule_id}")
        path = self._path(f"{_safe_name(granule_id)}.txt")
        if self._existing(path):
            return path

        try:
            raw = self.client.get_granule_text(package_id, granule_id)
            text = html_to_text(raw)
            path = save_text(text, path)
        except Exception as e:
            logger.error(f"❌ Granule text run failed: {e}")
            raise

        logger.info(f"✅ Granule text saved to {path}")
        return path

    def run_related(
        self, access_id: str, expand: bool = True
    ) -> Tuple[pl.DataFrame, str]:
        """
        Build the related-content edge list for an access id and save {access_id}_related.csv

        Args:
            access_id: Package or granule id
            expand: Follow each relationshipLink to list the related documents
        """
        logger.info(f"🚀 Related content run: {access_id} (expand={expand})")
        try:
            related = self.client.get_related(access_id)

            results_by_link: Dict[str, List[Dict[str, Any]]] = {}
            if expand:
                for rel in related.relationships:
                    if rel.relationship_link:
                        results_by_link[rel.relationship_link] = (
                            self.client.get_relationship_results(rel.relationship_link)
                        )

            df = related_to_dataframe(related, results_by_link, access_id=access_id)
            path = save_csv(df, self._path(f"{_safe_name(access_id)}_related.csv"))
        except Exception as e:
            logger.error(f"❌ Related content run failed: {e}")
            raise

        logger.info(f"✅ {df.height} related-content edges saved to {path}")
        return df, path
