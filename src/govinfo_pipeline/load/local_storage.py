"""
Local Storage - Load Layer

Pure functions for local file storage operations.
Handles CSV tables and plain-text documents.
"""

import polars as pl
import os
from pathlib import Path
from typing import Union
import logging

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def _ensure_parent(filepath: PathLike) -> Path:
    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def save_csv(df: pl.DataFrame, filepath: PathLike) -> str:
    """
    Save DataFrame to CSV file

    Args:
        df: DataFrame to save
        filepath: Path to save file

    Returns:
        str: Path to saved file
    """
    logger.info(f"Saving DataFrame to CSV: {filepath}")

    path = _ensure_parent(filepath)
    df.write_csv(path)

    logger.info(f"Saved {df.height} records to {filepath}")
    return str(path)


def load_csv(filepath: PathLike) -> pl.DataFrame:
    """
    Load DataFrame from CSV file, every column read as String

    Args:
        filepath: Path to CSV file

    Returns:
        pl.DataFrame: Loaded DataFrame
    """
    logger.info(f"Loading DataFrame from CSV: {filepath}")

    if not os.path.exists(filepath):
        raise FileNotFoundError(f"CSV file not found: {filepath}")

    df = pl.read_csv(filepath, infer_schema_length=0)

    logger.info(f"Loaded {df.height} records from {filepath}")
    return df


def save_text(text: str, filepath: PathLike) -> str:
    """
    Save a text document (UTF-8)

    Args:
        text: Document content
        filepath: Path to save file

    Returns:
        str: Path to saved file
    """
    path = _ensure_parent(filepath)
    path.write_text(text, encoding="utf-8")

    logger.info(f"Saved {len(text)} characters to {filepath}")
    return str(path)


def file_exists(filepath: PathLike) -> bool:
    """
    Check if file exists

    Args:
        filepath: Path to file

    Returns:
        bool: True if file exists
    """
    return os.path.exists(filepath)
