"""
Transform Layer Schemas

Column layouts for the tables written to CSV. Record tables are all-String:
the API owns the record schema, so values are stored as received.
"""

import polars as pl

# Leading columns of package tables; any other keys follow in first-seen order
PACKAGE_COLUMNS = [
    "packageId",
    "lastModified",
    "packageLink",
    "docClass",
    "title",
    "congress",
    "dateIssued",
]

GRANULE_COLUMNS = [
    "granuleId",
    "granuleLink",
    "granuleClass",
    "title",
]

COLLECTIONS_SCHEMA = pl.Schema(
    [
        ("collection_code", pl.String()),
        ("collection_name", pl.String()),
        ("package_count", pl.Int64()),
        ("granule_count", pl.Int64()),
    ]
)

RELATED_EDGES_SCHEMA = pl.Schema(
    [
        ("source_access_id", pl.String()),
        ("relationship", pl.String()),
        ("collection", pl.String()),
        ("target_package_id", pl.String()),
        ("target_granule_id", pl.String()),
        ("date_issued", pl.String()),
        ("target_link", pl.String()),
    ]
)
