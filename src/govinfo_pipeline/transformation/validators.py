"""
Data Validators - Transform Layer

Checks run on record tables before they are written.
"""

import polars as pl
import logging

logger = logging.getLogger(__name__)


def validate_package_frame(df: pl.DataFrame, id_column: str = "packageId") -> bool:
    """
    Validate a package/granule table

    Args:
        df: Table built by records_to_dataframe
        id_column: Identifier column that must be present and non-null

    Returns:
        bool: True if valid, raises exception if invalid
    """
    if id_column not in df.columns:
        raise ValueError(f"Missing id column '{id_column}'. Columns: {df.columns}")

    null_count = df.select(pl.col(id_column).is_null().sum()).item()
    if null_count > 0:
        raise ValueError(f"Null values found in '{id_column}': {null_count}")

    # The API can list a package twice when it is modified while paging
    duplicates = df.height - df.select(pl.col(id_column).n_unique()).item()
    if duplicates > 0:
        logger.warning(f"{duplicates} duplicate '{id_column}' values in table")

    logger.info(f"Validation passed: {df.height} records")
    return True
