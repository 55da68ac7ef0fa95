"""
Data loading utilities with Streamlit caching.

The time-entry store owns persistence; this module only reads its export.
"""
import logging

import pandas as pd
import streamlit as st
from pathlib import Path
from typing import Optional, Dict, Any

from capacity_os.config import config, TABLE_FILES
from capacity_os.data.schema import normalise_columns, validate_schema, ensure_column_types

logger = logging.getLogger(__name__)


def _load_file(filepath: Path) -> Optional[pd.DataFrame]:
    """Load a single file (parquet or csv)."""
    parquet_path = filepath.with_suffix(".parquet")
    csv_path = filepath.with_suffix(".csv")

    if parquet_path.exists():
        logger.info("Reading %s", parquet_path)
        return pd.read_parquet(parquet_path)
    elif csv_path.exists():
        logger.info("Reading %s", csv_path)
        return pd.read_csv(csv_path)
    return None


def prepare_time_entries(df: pd.DataFrame) -> pd.DataFrame:
    """Normalise, validate and type a raw time-entry export."""
    df = normalise_columns(df)
    validate_schema(df, "time_entries", strict=True)
    return ensure_column_types(df)


@st.cache_data(ttl=config.cache_ttl_seconds)
def load_time_entries() -> pd.DataFrame:
    """Load the time-entry export."""
    filepath = config.processed_dir / TABLE_FILES["time_entries"]
    df = _load_file(filepath)
    if df is None:
        st.error(f"Could not find {TABLE_FILES['time_entries']} in {config.processed_dir}")
        st.stop()

    return prepare_time_entries(df)


def get_data_status() -> Dict[str, Any]:
    """Get status of all data files."""
    status = {"processed": {}}

    for key, filename in TABLE_FILES.items():
        parquet_path = config.processed_dir / f"{filename}.parquet"
        csv_path = config.processed_dir / f"{filename}.csv"
        status["processed"][key] = {
            "parquet_exists": parquet_path.exists(),
            "csv_exists": csv_path.exists(),
        }

    return status
