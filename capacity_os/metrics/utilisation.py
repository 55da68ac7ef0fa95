"""
Utilisation & capacity metrics pack.

Single source of truth for: bucket capacity, utilisation, max clients,
open capacity, run rate.

Every ratio that divides by a capacity or a per-client figure returns None
when the divisor is not positive. Callers render None as "N/A" and never
raise alerts on it.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Optional

import pandas as pd

from capacity_os.data.roles import Bucket

SOURCE_ASSUMPTION = "assumption"
SOURCE_MEASURED = "measured"


@dataclass(frozen=True)
class BucketAssumptions:
    """Staffing inputs for one bucket, per period (month)."""
    headcount: float
    capacity_per_head: float
    hours_per_client: float
    target_utilisation_pct: float = 85.0

    @property
    def total_capacity_hours(self) -> float:
        return total_capacity_hours(self.headcount, self.capacity_per_head)


@dataclass(frozen=True)
class CapacitySnapshot:
    """Derived capacity state of one bucket for the current period."""
    bucket: Bucket
    total_capacity_hours: float
    hours: float
    utilisation_pct: Optional[float]
    target_utilisation_pct: float
    max_clients: Optional[int]
    open_capacity: Optional[int]
    source: str = SOURCE_ASSUMPTION

    @property
    def is_defined(self) -> bool:
        return self.utilisation_pct is not None


def _finite_or_none(value: float) -> Optional[float]:
    if value is None or not math.isfinite(value):
        return None
    return value


def total_capacity_hours(headcount: float, capacity_per_head: float) -> float:
    return headcount * capacity_per_head


def required_hours(active_clients: float, hours_per_client: float) -> float:
    return active_clients * hours_per_client


def compute_utilisation_pct(hours: float, capacity_hours: float) -> Optional[float]:
    """
    Utilisation as a percentage of capacity, unclamped.

    Returns None when capacity is zero or negative.
    """
    if not capacity_hours > 0:
        return None
    return _finite_or_none(hours / capacity_hours * 100)


def firm_utilisation(utilisations: Iterable[Optional[float]]) -> Optional[float]:
    """Most stressed bucket sets the firm figure. None if no bucket is defined."""
    defined = [u for u in utilisations if u is not None]
    if not defined:
        return None
    return max(defined)


def compute_max_clients(capacity_hours: float,
                        hours_per_client: float,
                        target_utilisation_pct: float = 100.0) -> Optional[int]:
    """
    Whole clients a bucket can carry at its target utilisation.

    Floored, since a partial client slot cannot be sold.
    """
    if not hours_per_client > 0:
        return None
    bookable_hours = capacity_hours * target_utilisation_pct / 100
    clients = _finite_or_none(bookable_hours / hours_per_client)
    return None if clients is None else math.floor(clients)


def compute_open_capacity(max_clients: Optional[int], active_clients: int) -> Optional[int]:
    if max_clients is None:
        return None
    return max(0, max_clients - active_clients)


# =============================================================================
# SNAPSHOTS
# =============================================================================

def build_assumption_snapshot(bucket: Bucket,
                              assumptions: BucketAssumptions,
                              active_clients: int) -> CapacitySnapshot:
    capacity = assumptions.total_capacity_hours
    hours = required_hours(active_clients, assumptions.hours_per_client)
    max_clients = compute_max_clients(
        capacity, assumptions.hours_per_client, assumptions.target_utilisation_pct
    )
    return CapacitySnapshot(
        bucket=bucket,
        total_capacity_hours=capacity,
        hours=hours,
        utilisation_pct=compute_utilisation_pct(hours, capacity),
        target_utilisation_pct=assumptions.target_utilisation_pct,
        max_clients=max_clients,
        open_capacity=compute_open_capacity(max_clients, active_clients),
        source=SOURCE_ASSUMPTION,
    )


def build_measured_snapshot(bucket: Bucket,
                            assumptions: BucketAssumptions,
                            actual_hours: float,
                            active_clients: int) -> CapacitySnapshot:
    capacity = assumptions.total_capacity_hours
    max_clients = compute_max_clients(
        capacity, assumptions.hours_per_client, assumptions.target_utilisation_pct
    )
    return CapacitySnapshot(
        bucket=bucket,
        total_capacity_hours=capacity,
        hours=actual_hours,
        utilisation_pct=compute_utilisation_pct(actual_hours, capacity),
        target_utilisation_pct=assumptions.target_utilisation_pct,
        max_clients=max_clients,
        open_capacity=compute_open_capacity(max_clients, active_clients),
        source=SOURCE_MEASURED,
    )


def build_assumption_snapshots(buckets: Mapping[Bucket, BucketAssumptions],
                               active_clients: int) -> Dict[Bucket, CapacitySnapshot]:
    return {
        bucket: build_assumption_snapshot(bucket, a, active_clients)
        for bucket, a in buckets.items()
    }


def build_measured_snapshots(buckets: Mapping[Bucket, BucketAssumptions],
                             actual_hours: Mapping[Bucket, float],
                             active_clients: int) -> Dict[Bucket, CapacitySnapshot]:
    return {
        bucket: build_measured_snapshot(bucket, a, actual_hours.get(bucket, 0.0), active_clients)
        for bucket, a in buckets.items()
    }


def firm_max_clients(snapshots: Iterable[CapacitySnapshot]) -> Optional[int]:
    """Client limit of the firm: the tightest bucket's max clients."""
    defined = [s.max_clients for s in snapshots if s.max_clients is not None]
    if not defined:
        return None
    return min(defined)


def safe_to_onboard(max_clients: Optional[int], active_clients: int) -> Optional[int]:
    return compute_open_capacity(max_clients, active_clients)


def snapshots_to_frame(snapshots: Iterable[CapacitySnapshot]) -> pd.DataFrame:
    """Tabular view of snapshots for display. Undefined values become NaN here."""
    rows = [{
        "bucket": s.bucket.value,
        "label": s.bucket.label,
        "total_capacity_hours": s.total_capacity_hours,
        "hours": s.hours,
        "utilisation_pct": s.utilisation_pct,
        "target_utilisation_pct": s.target_utilisation_pct,
        "max_clients": s.max_clients,
        "open_capacity": s.open_capacity,
        "source": s.source,
    } for s in snapshots]
    return pd.DataFrame(rows)


# =============================================================================
# RUN RATE
# =============================================================================

@dataclass(frozen=True)
class RunRate:
    """Measured burn against capacity for one bucket."""
    actual_hours: float
    total_capacity_hours: float
    hours_per_client: Optional[float]
    surplus_hours: float
    safe_new_clients: Optional[int]


def compute_run_rate(actual_hours: float,
                     capacity_hours: float,
                     active_clients: int) -> RunRate:
    """
    Actual hours per client and the clients that fit in the remaining hours.

    hours_per_client is None without active clients; safe_new_clients is None
    while the run rate is not positive.
    """
    hours_per_client = actual_hours / active_clients if active_clients > 0 else None
    surplus = capacity_hours - actual_hours

    if hours_per_client is None or not hours_per_client > 0:
        safe_new = None
    else:
        fits = _finite_or_none(surplus / hours_per_client)
        safe_new = None if fits is None else max(0, math.floor(fits))

    return RunRate(
        actual_hours=actual_hours,
        total_capacity_hours=capacity_hours,
        hours_per_client=hours_per_client,
        surplus_hours=surplus,
        safe_new_clients=safe_new,
    )
