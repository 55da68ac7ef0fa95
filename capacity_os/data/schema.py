"""
Schema validation and column alias mapping.
"""
import logging

import pandas as pd
from typing import List, Tuple, Dict

from capacity_os.config import REQUIRED_COLUMNS, OPTIONAL_COLUMNS, COLUMN_ALIASES

logger = logging.getLogger(__name__)


class SchemaValidationError(Exception):
    """Raised when required columns are missing."""
    pass


def normalise_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Rename store column names to canonical names."""
    renames = {
        alias: canonical for alias, canonical in COLUMN_ALIASES.items()
        if alias in df.columns and canonical not in df.columns
    }
    if not renames:
        return df
    return df.rename(columns=renames)


def validate_required_columns(df: pd.DataFrame, table_name: str) -> Tuple[bool, List[str]]:
    """
    Validate that required columns exist in dataframe.
    Returns (is_valid, missing_columns).
    """
    if table_name not in REQUIRED_COLUMNS:
        return True, []

    required = REQUIRED_COLUMNS[table_name]
    missing = [col for col in required if col not in df.columns]

    return len(missing) == 0, missing


def check_optional_columns(df: pd.DataFrame, table_name: str) -> List[str]:
    """
    Check which optional columns are missing.
    Returns list of missing optional columns.
    """
    if table_name not in OPTIONAL_COLUMNS:
        return []

    optional = OPTIONAL_COLUMNS[table_name]
    return [col for col in optional if col not in df.columns]


def validate_schema(df: pd.DataFrame, table_name: str, strict: bool = True) -> Dict:
    """
    Full schema validation.

    Args:
        df: DataFrame to validate
        table_name: Name of table for column requirements lookup
        strict: If True, raise error on missing required columns

    Returns:
        Dict with validation results
    """
    is_valid, missing_required = validate_required_columns(df, table_name)
    missing_optional = check_optional_columns(df, table_name)

    result = {
        "is_valid": is_valid,
        "missing_required": missing_required,
        "missing_optional": missing_optional,
        "total_columns": len(df.columns),
        "total_rows": len(df),
    }

    if strict and not is_valid:
        raise SchemaValidationError(
            f"Missing required columns in {table_name}: {missing_required}"
        )

    if missing_optional:
        logger.debug("%s missing optional columns: %s", table_name, missing_optional)

    return result


def parse_timestamps(values) -> pd.Series:
    """
    Parse entry timestamps to tz-aware UTC.

    Each value is parsed as ISO 8601 on its own, so a store that mixes
    `YYYY-MM-DD HH:MM:SS` rows with millisecond ISO strings keeps every row.
    Naive values are taken as UTC; unparseable values become NaT.
    """
    return pd.to_datetime(values, errors="coerce", utc=True, format="ISO8601")


def ensure_column_types(df: pd.DataFrame) -> pd.DataFrame:
    """Ensure consistent column types."""
    df = df.copy()

    if "duration_minutes" in df.columns:
        df["duration_minutes"] = pd.to_numeric(df["duration_minutes"], errors="coerce").fillna(0)

    # Unparseable timestamps become NaT and fall outside every window
    if "timestamp" in df.columns:
        df["timestamp"] = parse_timestamps(df["timestamp"])

    for col in ["id", "charge_code"]:
        if col in df.columns:
            df[col] = df[col].astype(str)

    return df
