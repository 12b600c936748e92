"""
Test response schemas - listing envelopes and summaries
"""

import pytest

from conftest import make_page, package
from govinfo_pipeline.errors import MalformedResponseError
from govinfo_pipeline.extract.schemas import (
    CollectionsResponse,
    PackageSummary,
    RelatedResponse,
    parse_model,
    parse_page,
)


def test_parse_page_reads_envelope_and_records():
    payload = make_page([package("BILLS-1")], "https://api.govinfo.gov/next", count=42)
    payload["message"] = "Only 10000 results can be returned"

    page = parse_page(payload)

    assert page.count == 42
    assert page.next_page == "https://api.govinfo.gov/next"
    assert page.previous_page is None
    assert page.message == "Only 10000 results can be returned"
    assert page.records == [package("BILLS-1")]


def test_parse_page_treats_blank_links_as_absent():
    payload = make_page([])
    payload["nextPage"] = "  "
    payload["previousPage"] = ""

    page = parse_page(payload)

    assert page.next_page is None
    assert page.previous_page is None


def test_parse_page_custom_records_key():
    page = parse_page(make_page([{"granuleId": "G1"}], records_key="granules"), "granules")

    assert page.records == [{"granuleId": "G1"}]


@pytest.mark.parametrize(
    "payload",
    [
        ["not", "an", "object"],
        None,
        {"count": 1, "nextPage": None},
        {"count": 1, "packages": {"packageId": "BILLS-1"}},
        {"nextPage": None, "packages": []},
        {"count": "many", "packages": []},
        {"count": 1, "nextPage": 5, "packages": []},
    ],
)
def test_parse_page_rejects_unexpected_shapes(payload):
    with pytest.raises(MalformedResponseError):
        parse_page(payload)


def test_package_summary_download_links():
    summary = parse_model(
        PackageSummary,
        {
            "packageId": "BILLS-118hr1ih",
            "title": "Lower Energy Costs Act",
            "collectionCode": "BILLS",
            "download": {
                "txtLink": "https://api.govinfo.gov/packages/BILLS-118hr1ih/htm",
                "pdfLink": "https://api.govinfo.gov/packages/BILLS-118hr1ih/pdf",
            },
            "pages": "175",
        },
    )

    assert summary.package_id == "BILLS-118hr1ih"
    assert summary.download.txt_link.endswith("/htm")
    assert summary.download.xml_link is None
    # Unknown fields are kept
    assert summary.model_extra["pages"] == "175"


def test_package_summary_requires_package_id():
    with pytest.raises(MalformedResponseError):
        parse_model(PackageSummary, {"title": "no id"})


def test_collections_and_related_models():
    collections = parse_model(
        CollectionsResponse,
        {
            "collections": [
                {"collectionCode": "BILLS", "collectionName": "Congressional Bills", "packageCount": 10}
            ]
        },
    )
    related = parse_model(
        RelatedResponse,
        {
            "accessId": "BILLS-118hr1ih",
            "relationships": [
                {"relationship": "Bill Versions", "collection": "BILLS", "relationshipLink": "https://x"}
            ],
        },
    )

    assert collections.collections[0].collection_code == "BILLS"
    assert collections.collections[0].granule_count is None
    assert related.relationships[0].relationship_link == "https://x"
