"""
Capacity model: turns time entries and staffing assumptions into the
figures behind the live capacity and hiring simulator views.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

import pandas as pd

from capacity_os.config import DEFAULT_ASSUMPTIONS
from capacity_os.data.roles import Bucket, Division, DIVISION_BUCKETS, primary_bucket
from capacity_os.metrics.aggregation import (
    BucketHours,
    Instant,
    aggregate_trailing_hours,
    to_utc,
    utc_now,
)
from capacity_os.metrics.status import (
    Bottleneck,
    CapacityStatus,
    bottleneck_from_snapshots,
    classify_snapshots,
)
from capacity_os.metrics.utilisation import (
    BucketAssumptions,
    CapacitySnapshot,
    RunRate,
    build_assumption_snapshots,
    build_measured_snapshots,
    compute_run_rate,
    firm_max_clients,
    firm_utilisation,
    safe_to_onboard,
)
from capacity_os.modeling.financials import effective_monthly_fee, monthly_revenue
from capacity_os.modeling.projection import ProjectionPoint, project_growth

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FirmAssumptions:
    """Every user-editable input the model reads. Passed explicitly per call."""
    division: Division
    buckets: Mapping[Bucket, BucketAssumptions]
    active_clients: int
    monthly_growth_pct: float = 5.0
    avg_client_fee: float = 0.0
    fee_is_annual: bool = False

    @property
    def monthly_fee(self) -> float:
        return effective_monthly_fee(self.avg_client_fee, self.fee_is_annual)

    @property
    def primary_bucket(self) -> Bucket:
        return primary_bucket(self.division)


def default_assumptions(division: Division = Division.PLANNING) -> FirmAssumptions:
    d = DEFAULT_ASSUMPTIONS
    buckets = {
        b: BucketAssumptions(
            headcount=d["headcount"][b.value],
            capacity_per_head=d["capacity_per_head"],
            hours_per_client=d["hours_per_client"][b.value],
            target_utilisation_pct=d["target_utilisation_pct"],
        )
        for b in DIVISION_BUCKETS[division]
    }
    return FirmAssumptions(
        division=division,
        buckets=buckets,
        active_clients=d["active_clients"],
        monthly_growth_pct=d["monthly_growth_pct"],
        avg_client_fee=d["avg_client_fee"][division.value],
        fee_is_annual=d["fee_is_annual"][division.value],
    )


# =============================================================================
# LIVE CAPACITY (measured)
# =============================================================================

@dataclass(frozen=True)
class LiveCapacityReport:
    as_of: pd.Timestamp
    actual_hours: BucketHours
    snapshots: Dict[Bucket, CapacitySnapshot]
    firm_utilisation_pct: Optional[float]
    status: CapacityStatus
    bottleneck: Bottleneck
    run_rate: RunRate
    monthly_revenue: float
    projection: List[ProjectionPoint] = field(default_factory=list)


def run_live_capacity(entries: pd.DataFrame,
                      assumptions: FirmAssumptions,
                      now: Optional[Instant] = None,
                      window_days: Optional[int] = None) -> LiveCapacityReport:
    """
    Utilisation from hours actually logged over the trailing window.

    Demand in the projection uses the measured hours per client of the
    division's primary bucket.
    """
    as_of = utc_now() if now is None else to_utc(now)
    buckets = tuple(assumptions.buckets)

    actual = aggregate_trailing_hours(entries, now=as_of, days=window_days, buckets=buckets)
    snapshots = build_measured_snapshots(assumptions.buckets, actual.hours, assumptions.active_clients)

    primary = assumptions.primary_bucket
    primary_capacity = assumptions.buckets[primary].total_capacity_hours if primary in assumptions.buckets else 0.0
    run_rate = compute_run_rate(actual.get(primary), primary_capacity, assumptions.active_clients)

    projection = project_growth(
        assumptions.active_clients,
        assumptions.monthly_growth_pct,
        run_rate.hours_per_client or 0.0,
        primary_capacity,
        now=as_of,
        monthly_fee=assumptions.monthly_fee,
    )

    report = LiveCapacityReport(
        as_of=as_of,
        actual_hours=actual,
        snapshots=snapshots,
        firm_utilisation_pct=firm_utilisation(s.utilisation_pct for s in snapshots.values()),
        status=classify_snapshots(snapshots.values()),
        bottleneck=bottleneck_from_snapshots(snapshots.values()),
        run_rate=run_rate,
        monthly_revenue=monthly_revenue(
            assumptions.active_clients, assumptions.avg_client_fee, assumptions.fee_is_annual
        ),
        projection=projection,
    )
    logger.debug("Live capacity %s: %s (%d entries)", as_of, report.status.value, actual.entry_count)
    return report


# =============================================================================
# HIRING SIMULATOR (assumption-based)
# =============================================================================

@dataclass(frozen=True)
class SimulationReport:
    as_of: pd.Timestamp
    snapshots: Dict[Bucket, CapacitySnapshot]
    firm_utilisation_pct: Optional[float]
    status: CapacityStatus
    bottleneck: Bottleneck
    firm_max_clients: Optional[int]
    safe_to_onboard: Optional[int]
    monthly_revenue: float
    projections: Dict[Bucket, List[ProjectionPoint]] = field(default_factory=dict)
    # Trailing actuals, present when entries were supplied
    actual_hours: Optional[BucketHours] = None
    measured_snapshots: Dict[Bucket, CapacitySnapshot] = field(default_factory=dict)
    run_rates: Dict[Bucket, RunRate] = field(default_factory=dict)

    @property
    def has_actuals(self) -> bool:
        return self.actual_hours is not None


def run_hiring_simulation(assumptions: FirmAssumptions,
                          now: Optional[Instant] = None,
                          entries: Optional[pd.DataFrame] = None,
                          window_days: Optional[int] = None) -> SimulationReport:
    """
    Utilisation and growth headroom from staffing assumptions.

    When entries are given, the trailing actuals are measured alongside so
    the estimate can be checked against what was really logged. Status and
    limits always come from the assumptions.
    """
    as_of = utc_now() if now is None else to_utc(now)
    snapshots = build_assumption_snapshots(assumptions.buckets, assumptions.active_clients)
    max_clients = firm_max_clients(snapshots.values())

    projections = {
        bucket: project_growth(
            assumptions.active_clients,
            assumptions.monthly_growth_pct,
            a.hours_per_client,
            a.total_capacity_hours,
            now=as_of,
            monthly_fee=assumptions.monthly_fee,
        )
        for bucket, a in assumptions.buckets.items()
    }

    actual = None
    measured: Dict[Bucket, CapacitySnapshot] = {}
    run_rates: Dict[Bucket, RunRate] = {}
    if entries is not None:
        actual = aggregate_trailing_hours(
            entries, now=as_of, days=window_days, buckets=tuple(assumptions.buckets)
        )
        measured = build_measured_snapshots(assumptions.buckets, actual.hours, assumptions.active_clients)
        run_rates = {
            bucket: compute_run_rate(actual.get(bucket), a.total_capacity_hours, assumptions.active_clients)
            for bucket, a in assumptions.buckets.items()
        }
        logger.debug("Simulation checked against %d logged entries", actual.entry_count)

    return SimulationReport(
        as_of=as_of,
        snapshots=snapshots,
        firm_utilisation_pct=firm_utilisation(s.utilisation_pct for s in snapshots.values()),
        status=classify_snapshots(snapshots.values()),
        bottleneck=bottleneck_from_snapshots(snapshots.values()),
        firm_max_clients=max_clients,
        safe_to_onboard=safe_to_onboard(max_clients, assumptions.active_clients),
        monthly_revenue=monthly_revenue(
            assumptions.active_clients, assumptions.avg_client_fee, assumptions.fee_is_annual
        ),
        projections=projections,
        actual_hours=actual,
        measured_snapshots=measured,
        run_rates=run_rates,
    )


def estimate_vs_actual_frame(report: SimulationReport, assumptions: FirmAssumptions) -> pd.DataFrame:
    """
    Per-bucket estimated vs actual utilisation and hours per client.

    Actual columns are None when the report carries no actuals.
    """
    rows = []
    for bucket, est in report.snapshots.items():
        measured = report.measured_snapshots.get(bucket)
        run_rate = report.run_rates.get(bucket)
        rows.append({
            "bucket": bucket.value,
            "label": bucket.label,
            "est_utilisation_pct": est.utilisation_pct,
            "actual_utilisation_pct": measured.utilisation_pct if measured else None,
            "actual_hours": measured.hours if measured else None,
            "hours_per_client": assumptions.buckets[bucket].hours_per_client,
            "actual_hours_per_client": run_rate.hours_per_client if run_rate else None,
        })
    return pd.DataFrame(rows)
