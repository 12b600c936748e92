"""
Test CLI - argument parsing and dispatch to the pipeline
"""

from unittest.mock import patch

import pytest

from govinfo_pipeline.errors import FetchExhaustedError
from govinfo_pipeline.main import build_parser, main


@pytest.fixture
def mock_pipeline():
    with patch("govinfo_pipeline.main.GovInfoPipeline") as pipeline_cls:
        yield pipeline_cls.return_value


def test_published_command(mock_pipeline, tmp_path):
    mock_pipeline.run_published.return_value = (None, "out/bills.csv")

    code = main(
        [
            "--output-dir", str(tmp_path),
            "--log-dir", str(tmp_path / "logs"),
            "published", "BILLS", "2024-01-01", "2024-01-31",
            "--page-size", "50",
        ]
    )

    assert code == 0
    mock_pipeline.run_published.assert_called_once_with(
        "BILLS", "2024-01-01", "2024-01-31", page_size=50, filename=None
    )


def test_related_no_expand(mock_pipeline, tmp_path):
    mock_pipeline.run_related.return_value = (None, "out/x.csv")

    code = main(["--log-dir", str(tmp_path), "related", "BILLS-118hr1ih", "--no-expand"])

    assert code == 0
    mock_pipeline.run_related.assert_called_once_with("BILLS-118hr1ih", expand=False)


def test_granule_text_command(mock_pipeline, tmp_path):
    mock_pipeline.run_granule_text.return_value = "out/G-1.txt"

    assert main(["--log-dir", str(tmp_path), "granule-text", "CREC-2024-03-01", "G-1"]) == 0
    mock_pipeline.run_granule_text.assert_called_once_with("CREC-2024-03-01", "G-1")


def test_api_errors_give_exit_code_1(mock_pipeline, tmp_path):
    mock_pipeline.run_package_text.side_effect = FetchExhaustedError("https://x", 10)

    assert main(["--log-dir", str(tmp_path), "package-text", "BILLS-1"]) == 1


def test_api_key_flag_reaches_config(tmp_path):
    with patch("govinfo_pipeline.main.GovInfoPipeline") as pipeline_cls:
        pipeline_cls.return_value.run_collections.return_value = (None, "collections.csv")
        main(["--api-key", "cli-key", "--log-dir", str(tmp_path), "collections"])

    config = pipeline_cls.call_args.args[0]
    assert config.api_key == "cli-key"


def test_command_is_required():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


@pytest.mark.parametrize(
    "error", [ValueError("packageId has 1 null values"), OSError("disk full")]
)
def test_validation_and_write_errors_give_exit_code_1(mock_pipeline, tmp_path, error):
    mock_pipeline.run_granules.side_effect = error

    assert main(["--log-dir", str(tmp_path), "granules", "CREC-2024-03-01"]) == 1


def test_skip_existing_flag_reaches_pipeline(tmp_path):
    with patch("govinfo_pipeline.main.GovInfoPipeline") as pipeline_cls:
        pipeline_cls.return_value.run_collections.return_value = (None, "collections.csv")
        main(["--skip-existing", "--log-dir", str(tmp_path), "collections"])

    assert pipeline_cls.call_args.kwargs["skip_existing"] is True
