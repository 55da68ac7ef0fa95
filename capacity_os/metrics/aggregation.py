"""
Time aggregation metrics pack.

Single source of truth for: logged hours per staffing bucket over a window,
weekly trend, role breakdown, top charge codes.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, Optional, Sequence, Union

import numpy as np
import pandas as pd

from capacity_os.config import config
from capacity_os.data.roles import Bucket, bucket_for_category
from capacity_os.data.schema import parse_timestamps

logger = logging.getLogger(__name__)

Instant = Union[datetime, pd.Timestamp, str]


def to_utc(value: Instant) -> pd.Timestamp:
    """Coerce an instant to a tz-aware UTC timestamp (naive values are taken as UTC)."""
    ts = pd.Timestamp(value)
    if ts.tzinfo is None:
        return ts.tz_localize("UTC")
    return ts.tz_convert("UTC")


def utc_now() -> pd.Timestamp:
    return pd.Timestamp.now(tz="UTC")


# =============================================================================
# WINDOWS
# =============================================================================

@dataclass(frozen=True)
class TimeWindow:
    """
    Time interval over entry timestamps.

    closed="right" keeps entries strictly after start and up to end;
    closed="both" also keeps entries at start.
    """
    start: pd.Timestamp
    end: pd.Timestamp
    closed: str = "right"

    def mask(self, timestamps: pd.Series) -> pd.Series:
        ts = parse_timestamps(timestamps)
        after_start = ts >= self.start if self.closed == "both" else ts > self.start
        return after_start & (ts <= self.end)

    def contains(self, value: Instant) -> bool:
        return bool(self.mask(pd.Series([value])).iloc[0])


def trailing_window(now: Optional[Instant] = None, days: Optional[int] = None) -> TimeWindow:
    """Window of the last `days` days ending at `now`."""
    if days is None:
        days = config.trailing_window_days
    end = utc_now() if now is None else to_utc(now)
    return TimeWindow(start=end - pd.Timedelta(days=days), end=end, closed="right")


def date_range_window(start_date: Union[date, str], end_date: Union[date, str]) -> TimeWindow:
    """Calendar-date range, inclusive of both days (UTC)."""
    start = to_utc(pd.Timestamp(start_date).normalize())
    end = to_utc(pd.Timestamp(end_date).normalize()) + pd.Timedelta(days=1) - pd.Timedelta(1, unit="ns")
    return TimeWindow(start=start, end=end, closed="both")


def filter_entries_by_window(entries: pd.DataFrame, window: TimeWindow) -> pd.DataFrame:
    if len(entries) == 0 or "timestamp" not in entries.columns:
        return entries.iloc[0:0]
    return entries[window.mask(entries["timestamp"])]


# =============================================================================
# BUCKET MAPPING
# =============================================================================

def map_buckets(entries: pd.DataFrame) -> pd.Series:
    """Bucket for each entry (None where the category is unmapped)."""
    if "category" not in entries.columns:
        return pd.Series([bucket_for_category(None)] * len(entries), index=entries.index, dtype=object)
    return entries["category"].map(bucket_for_category).astype(object)


def filter_entries_by_bucket(entries: pd.DataFrame, bucket: Optional[Bucket]) -> pd.DataFrame:
    """Entries counting against `bucket`; all entries when bucket is None."""
    if bucket is None:
        return entries
    return entries[map_buckets(entries) == bucket]


# =============================================================================
# AGGREGATION
# =============================================================================

@dataclass(frozen=True)
class BucketHours:
    """Logged time per bucket. total_hours is the sum of the bucket values."""
    minutes: Dict[Bucket, float]
    hours: Dict[Bucket, float]
    total_hours: float
    unmapped_minutes: float = 0.0
    entry_count: int = 0
    window: Optional[TimeWindow] = field(default=None, compare=False)

    def __getitem__(self, bucket: Bucket) -> float:
        return self.hours[bucket]

    def get(self, bucket: Bucket, default: float = 0.0) -> float:
        return self.hours.get(bucket, default)


def aggregate_bucket_hours(entries: pd.DataFrame,
                           window: Optional[TimeWindow] = None,
                           buckets: Optional[Sequence[Bucket]] = None) -> BucketHours:
    """
    Sum logged minutes per bucket and convert to hours.

    Entries whose category maps to no bucket are left out of every total.
    The input frame is not modified.
    """
    if buckets is None:
        buckets = tuple(Bucket)

    df = entries if window is None else filter_entries_by_window(entries, window)

    if len(df) == 0:
        minutes = {b: 0.0 for b in buckets}
        return BucketHours(
            minutes=minutes,
            hours={b: 0.0 for b in buckets},
            total_hours=0.0,
            window=window,
        )

    mapped = map_buckets(df)
    durations = pd.to_numeric(df["duration_minutes"], errors="coerce").fillna(0)
    minutes = {b: float(durations[mapped == b].sum()) for b in buckets}
    hours = {b: minutes[b] / 60 for b in buckets}
    unmapped = float(durations[mapped.isna()].sum())

    if unmapped:
        logger.debug("Excluded %d unmapped entries (%.0f minutes)", int(mapped.isna().sum()), unmapped)

    return BucketHours(
        minutes=minutes,
        hours=hours,
        total_hours=sum(hours[b] for b in buckets),
        unmapped_minutes=unmapped,
        entry_count=len(df),
        window=window,
    )


def aggregate_trailing_hours(entries: pd.DataFrame,
                             now: Optional[Instant] = None,
                             days: Optional[int] = None,
                             buckets: Optional[Sequence[Bucket]] = None) -> BucketHours:
    """Run-rate hours over the trailing window ending at `now`."""
    window = trailing_window(now, days)
    logger.debug("Trailing window %s -> %s", window.start, window.end)
    return aggregate_bucket_hours(entries, window=window, buckets=buckets)


# =============================================================================
# ANALYTICS VIEWS
# =============================================================================

def compute_weekly_trend(entries: pd.DataFrame,
                         now: Optional[Instant] = None,
                         weeks: Optional[int] = None,
                         buckets: Optional[Sequence[Bucket]] = None) -> pd.DataFrame:
    """
    Hours per bucket in consecutive 7-day windows ending at `now`.

    Week i covers (now - 7(i+1) days, now - 7i days]. All weeks share one
    `now`, so boundaries do not move while the trend is built. Oldest first.
    """
    if weeks is None:
        weeks = config.trend_weeks
    if buckets is None:
        buckets = tuple(Bucket)
    end = utc_now() if now is None else to_utc(now)

    rows = []
    for i in range(weeks):
        week_end = end - pd.Timedelta(days=7 * i)
        week_start = week_end - pd.Timedelta(days=7)
        totals = aggregate_bucket_hours(entries, TimeWindow(week_start, week_end), buckets)
        row = {
            "week_start": week_start,
            "week_end": week_end,
            "label": f"{week_start:%b} {week_start.day}-{week_end.day}",
        }
        for b in buckets:
            row[b.value] = totals[b]
        row["total"] = totals.total_hours
        rows.append(row)

    return pd.DataFrame(rows).iloc[::-1].reset_index(drop=True)


def compute_bucket_breakdown(entries: pd.DataFrame,
                             buckets: Optional[Sequence[Bucket]] = None) -> pd.DataFrame:
    """Logged time and share of total per bucket, buckets with no time dropped."""
    totals = aggregate_bucket_hours(entries, buckets=buckets)
    result = pd.DataFrame([
        {"bucket": b.value, "label": b.label, "minutes": m, "hours": totals.hours[b]}
        for b, m in totals.minutes.items()
    ], columns=["bucket", "label", "minutes", "hours"])

    result["total_hours"] = totals.total_hours
    result["share_pct"] = np.where(
        result["total_hours"] > 0,
        result["hours"] / result["total_hours"] * 100,
        0
    )
    return result[result["minutes"] > 0].reset_index(drop=True)


def compute_top_charge_codes(entries: pd.DataFrame, n: Optional[int] = None) -> pd.DataFrame:
    """Charge codes by logged hours, highest first."""
    if n is None:
        n = config.top_charge_codes
    if len(entries) == 0 or "charge_code" not in entries.columns:
        return pd.DataFrame(columns=["charge_code", "hours"])

    durations = pd.to_numeric(entries["duration_minutes"], errors="coerce").fillna(0)
    result = (durations / 60).groupby(entries["charge_code"]).sum().rename("hours").reset_index()
    result = result.sort_values("hours", ascending=False, kind="mergesort")
    return result.head(n).reset_index(drop=True)
