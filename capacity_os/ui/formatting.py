"""
Consistent number and display formatting.

Undefined metrics (None / NaN) render as "N/A".
"""
import pandas as pd
from typing import Union, Optional

from capacity_os.config import (
    FORMAT_COUNT, FORMAT_CURRENCY, FORMAT_HOURS, FORMAT_PERCENT, NOT_AVAILABLE,
)


# =============================================================================
# NUMBER FORMATTERS
# =============================================================================

def fmt_currency(value: Union[float, int, None], decimals: int = 0) -> str:
    """Format as currency: $1,234 or $1,234.56"""
    if value is None or pd.isna(value):
        return NOT_AVAILABLE
    if decimals == 0:
        return FORMAT_CURRENCY.format(value)
    return f"${value:,.{decimals}f}"


def fmt_hours(value: Union[float, int, None]) -> str:
    """Format hours: 1,234.5"""
    if value is None or pd.isna(value):
        return NOT_AVAILABLE
    return FORMAT_HOURS.format(value)


def fmt_rate(value: Union[float, int, None]) -> str:
    """Format hours per client: 5.5 hr/c"""
    if value is None or pd.isna(value):
        return NOT_AVAILABLE
    return f"{FORMAT_HOURS.format(value)} hr/c"


def fmt_percent(value: Union[float, int, None], decimals: int = 1) -> str:
    """Format percentage: 12.3%"""
    if value is None or pd.isna(value):
        return NOT_AVAILABLE
    if decimals == 1:
        return FORMAT_PERCENT.format(value)
    return f"{value:,.{decimals}f}%"


def fmt_count(value: Union[float, int, None]) -> str:
    """Format count: 1,234"""
    if value is None or pd.isna(value):
        return NOT_AVAILABLE
    return FORMAT_COUNT.format(int(value))


def clamp_percent(value: Optional[float]) -> float:
    """Gauge position in [0, 100]. Display only."""
    if value is None or pd.isna(value):
        return 0.0
    return max(0.0, min(100.0, float(value)))


# =============================================================================
# DATAFRAME FORMATTERS
# =============================================================================

def format_metric_df(df: pd.DataFrame) -> pd.DataFrame:
    """
    Format a metrics dataframe for display.

    Applies appropriate formatting to known column types.
    """
    df = df.copy()

    currency_cols = ["projected_revenue", "monthly_revenue"]
    hours_cols = [
        "hours", "total_capacity_hours", "projected_required_hours",
        "Advisors", "Support", "Preparers", "Reviewers", "total", "actual_hours",
    ]
    rate_cols = ["hours_per_client", "actual_hours_per_client"]
    percent_cols = [
        "utilisation_pct", "target_utilisation_pct",
        "est_utilisation_pct", "actual_utilisation_pct",
    ]
    count_cols = ["max_clients", "open_capacity", "projected_client_count"]

    for col in df.columns:
        if col in currency_cols:
            df[col] = df[col].apply(fmt_currency)
        elif col in hours_cols:
            df[col] = df[col].apply(fmt_hours)
        elif col in rate_cols:
            df[col] = df[col].apply(fmt_rate)
        elif col in percent_cols:
            df[col] = df[col].apply(fmt_percent)
        elif col in count_cols:
            df[col] = df[col].apply(fmt_count)

    return df
