"""
Data Transformers - Transform Layer

Pure functions that turn raw govInfo records into Polars DataFrames.
"""

import json
from typing import Any, Dict, List, Optional, Sequence
import logging

import polars as pl

from ..extract.schemas import CollectionsResponse, RelatedResponse
from .schemas import COLLECTIONS_SCHEMA, PACKAGE_COLUMNS, RELATED_EDGES_SCHEMA

logger = logging.getLogger(__name__)


def _to_cell(value: Any) -> Optional[str]:
    """Flatten a JSON value into a CSV-safe string"""
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value, sort_keys=True, separators=(",", ":"))
    return str(value)


def records_to_dataframe(
    records: Sequence[Dict[str, Any]], base_columns: Sequence[str] = PACKAGE_COLUMNS
) -> pl.DataFrame:
    """
    Convert API records into an all-String DataFrame

    Base columns always come first (null where a record lacks them); any other
    keys follow in the order they are first seen. Row order is record order.

    Args:
        records: Raw package or granule descriptors
        base_columns: Columns guaranteed to be present

    Returns:
        pl.DataFrame: One row per record
    """
    columns: List[str] = list(base_columns)
    seen = set(columns)
    for record in records:
        for key in record:
            if key not in seen:
                seen.add(key)
                columns.append(key)

    schema = pl.Schema([(col, pl.String()) for col in columns])
    if not records:
        return pl.DataFrame(schema=schema)

    rows = [{col: _to_cell(record.get(col)) for col in columns} for record in records]
    df = pl.from_dicts(rows, schema=schema)

    logger.info(f"Built table with {df.height} rows, {df.width} columns")
    return df


def collections_to_dataframe(response: CollectionsResponse) -> pl.DataFrame:
    """One row per collection: code, name, package and granule counts"""
    rows = [
        {
            "collection_code": c.collection_code,
            "collection_name": c.collection_name,
            "package_count": c.package_count,
            "granule_count": c.granule_count,
        }
        for c in response.collections
    ]
    if not rows:
        return pl.DataFrame(schema=COLLECTIONS_SCHEMA)
    return pl.from_dicts(rows, schema=COLLECTIONS_SCHEMA)


def related_to_dataframe(
    related: RelatedResponse,
    results_by_link: Optional[Dict[str, List[Dict[str, Any]]]] = None,
    access_id: Optional[str] = None,
) -> pl.DataFrame:
    """
    Build the related-content edge list for one access id

    Each relationship yields one edge per result fetched from its
    relationshipLink. A relationship whose results were not fetched (or came
    back empty) yields a single edge with null target columns.

    Args:
        related: Parsed /related/{accessId} response
        results_by_link: relationshipLink -> results from that link
        access_id: Source id, used when the response does not echo it

    Returns:
        pl.DataFrame: Edges with RELATED_EDGES_SCHEMA
    """
    results_by_link = results_by_link or {}
    source = related.access_id or access_id
    rows: List[Dict[str, Any]] = []

    for rel in related.relationships:
        base = {
            "source_access_id": source,
            "relationship": rel.relationship,
            "collection": rel.collection,
        }
        results = results_by_link.get(rel.relationship_link or "", [])
        if not results:
            rows.append(
                {
                    **base,
                    "target_package_id": None,
                    "target_granule_id": None,
                    "date_issued": None,
                    "target_link": rel.relationship_link,
                }
            )
            continue

        for result in results:
            rows.append(
                {
                    **base,
                    "target_package_id": _to_cell(result.get("packageId")),
                    "target_granule_id": _to_cell(result.get("granuleId")),
                    "date_issued": _to_cell(result.get("dateIssued")),
                    "target_link": _to_cell(
                        result.get("packageLink") or result.get("granuleLink")
                    ),
                }
            )

    if not rows:
        return pl.DataFrame(schema=RELATED_EDGES_SCHEMA)

    df = pl.from_dicts(rows, schema=RELATED_EDGES_SCHEMA)
    logger.info(f"Built {df.height} related-content edges for {source}")
    return df
