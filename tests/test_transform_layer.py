"""
Test Transform Layer - records to tables, HTML to text, validation
"""

import polars as pl
import pytest

from conftest import package
from govinfo_pipeline.extract.schemas import (
    CollectionsResponse,
    RelatedResponse,
)
from govinfo_pipeline.transformation.schemas import (
    COLLECTIONS_SCHEMA,
    GRANULE_COLUMNS,
    PACKAGE_COLUMNS,
    RELATED_EDGES_SCHEMA,
)
from govinfo_pipeline.transformation.text import html_to_text
from govinfo_pipeline.transformation.transformers import (
    collections_to_dataframe,
    records_to_dataframe,
    related_to_dataframe,
)
from govinfo_pipeline.transformation.validators import validate_package_frame


def test_records_keep_order_and_base_columns_first():
    records = [
        package("BILLS-3", billType="hr"),
        package("BILLS-1"),
        {"packageId": "BILLS-2", "session": "1"},
    ]

    df = records_to_dataframe(records, PACKAGE_COLUMNS)

    assert df.columns == PACKAGE_COLUMNS + ["billType", "session"]
    assert df["packageId"].to_list() == ["BILLS-3", "BILLS-1", "BILLS-2"]
    assert df["billType"].to_list() == ["hr", None, None]
    assert df["title"].to_list()[2] is None
    assert all(dtype == pl.String for dtype in df.dtypes)


def test_nested_and_scalar_values_become_strings():
    records = [
        {
            "packageId": "BILLS-1",
            "congress": 118,
            "isGLP": False,
            "download": {"txtLink": "https://x/htm", "pdfLink": "https://x/pdf"},
            "members": [{"name": "Smith"}],
        }
    ]

    row = records_to_dataframe(records).row(0, named=True)

    assert row["congress"] == "118"
    assert row["isGLP"] == "false"
    assert row["download"] == '{"pdfLink":"https://x/pdf","txtLink":"https://x/htm"}'
    assert row["members"] == '[{"name":"Smith"}]'


def test_empty_records_give_empty_table_with_base_columns():
    df = records_to_dataframe([], GRANULE_COLUMNS)

    assert df.height == 0
    assert df.columns == GRANULE_COLUMNS


def test_same_records_give_identical_tables():
    records = [package("BILLS-1"), package("BILLS-2", extra={"a": 1})]

    assert records_to_dataframe(records).equals(records_to_dataframe(records))


def test_collections_table():
    response = CollectionsResponse.model_validate(
        {
            "collections": [
                {"collectionCode": "BILLS", "collectionName": "Congressional Bills", "packageCount": 5, "granuleCount": 0},
                {"collectionCode": "CREC", "collectionName": "Congressional Record"},
            ]
        }
    )

    df = collections_to_dataframe(response)

    assert df.schema == COLLECTIONS_SCHEMA
    assert df["collection_code"].to_list() == ["BILLS", "CREC"]
    assert df["package_count"].to_list() == [5, None]


def test_related_edges_expanded():
    link = "https://api.govinfo.gov/related/BILLS-118hr1ih/BILLS"
    related = RelatedResponse.model_validate(
        {
            "accessId": "BILLS-118hr1ih",
            "relationships": [
                {"relationship": "Bill Versions", "collection": "BILLS", "relationshipLink": link},
                {"relationship": "Public Law", "collection": "PLAW", "relationshipLink": "https://y"},
            ],
        }
    )
    results = {
        link: [
            {"packageId": "BILLS-118hr1eh", "dateIssued": "2023-03-30", "packageLink": "https://a"},
            {"packageId": "BILLS-118hr1rfs", "dateIssued": "2023-04-03"},
        ]
    }

    df = related_to_dataframe(related, results)

    assert df.schema == RELATED_EDGES_SCHEMA
    assert df.height == 3
    assert df["target_package_id"].to_list() == ["BILLS-118hr1eh", "BILLS-118hr1rfs", None]
    assert df["target_link"].to_list() == ["https://a", None, "https://y"]
    assert set(df["source_access_id"].to_list()) == {"BILLS-118hr1ih"}


def test_related_edges_without_relationships():
    df = related_to_dataframe(RelatedResponse.model_validate({}), access_id="X")

    assert df.height == 0
    assert df.schema == RELATED_EDGES_SCHEMA


def test_related_edges_fall_back_to_given_access_id():
    related = RelatedResponse.model_validate(
        {"relationships": [{"relationship": "Bill Versions", "collection": "BILLS"}]}
    )

    df = related_to_dataframe(related, access_id="BILLS-118hr1ih")

    assert df["source_access_id"].to_list() == ["BILLS-118hr1ih"]


def test_html_to_text_prefers_pre_block():
    html = (
        "<html><head><title>BILLS-118hr1ih</title><style>pre{}</style></head>"
        "<body><pre>\r\n118th CONGRESS   \r\n  1st Session\r\n\r\n\r\n\r\n"
        "                                H. R. 1\r\n</pre></body></html>"
    )

    text = html_to_text(html)

    assert text == "118th CONGRESS\n  1st Session\n\n                                H. R. 1\n"
    assert "BILLS-118hr1ih" not in text


def test_html_to_text_without_pre_and_entities():
    text = html_to_text("<html><body><p>Section 1 &amp; 2</p><script>x()</script></body></html>")

    assert text == "Section 1 & 2\n"


def test_html_to_text_empty_document():
    assert html_to_text("<html><body></body></html>") == ""


def test_validate_package_frame():
    df = records_to_dataframe([package("BILLS-1"), package("BILLS-1")])

    assert validate_package_frame(df, "packageId") is True


def test_validate_package_frame_rejects_null_and_missing_ids():
    with pytest.raises(ValueError):
        validate_package_frame(records_to_dataframe([{"title": "no id"}]), "packageId")
    with pytest.raises(ValueError):
        validate_package_frame(pl.DataFrame({"title": ["x"]}), "granuleId")
