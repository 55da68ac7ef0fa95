"""
Client growth projection against flat capacity.

Answers "if staffing stays as it is, when do we run out of hours".
Headcount is not projected.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

import pandas as pd

from capacity_os.config import config
from capacity_os.metrics.aggregation import Instant, to_utc, utc_now
from capacity_os.metrics.utilisation import compute_utilisation_pct


@dataclass(frozen=True)
class ProjectionPoint:
    period_index: int
    projected_client_count: int
    projected_required_hours: float
    total_capacity_hours: float
    month: Optional[pd.Timestamp] = None
    utilisation_pct: Optional[float] = None
    projected_revenue: Optional[float] = None

    @property
    def exceeds_capacity(self) -> bool:
        return self.projected_required_hours > self.total_capacity_hours


def compound_client_count(current_clients: float, monthly_growth_pct: float, period: int) -> int:
    """
    Client count after `period` months of compounded growth.

    Floored per period from the closed form, never from the previous
    period's floored count.
    """
    value = current_clients * (1 + monthly_growth_pct / 100) ** period
    if not math.isfinite(value):
        return 0
    return math.floor(value)


def _month_start(reference: pd.Timestamp, offset: int) -> pd.Timestamp:
    first = reference.normalize().replace(day=1)
    return first + pd.DateOffset(months=offset)


def project_growth(current_clients: float,
                   monthly_growth_pct: float,
                   hours_per_client: float,
                   total_capacity_hours: float,
                   horizon: Optional[int] = None,
                   now: Optional[Instant] = None,
                   monthly_fee: Optional[float] = None) -> List[ProjectionPoint]:
    """
    Project demand for periods 1..horizon.

    Capacity is held at its current value in every period.
    """
    if horizon is None:
        horizon = config.projection_months
    reference = utc_now() if now is None else to_utc(now)

    points = []
    for i in range(1, horizon + 1):
        clients = compound_client_count(current_clients, monthly_growth_pct, i)
        hours = clients * hours_per_client
        points.append(ProjectionPoint(
            period_index=i,
            projected_client_count=clients,
            projected_required_hours=hours,
            total_capacity_hours=total_capacity_hours,
            month=_month_start(reference, i),
            utilisation_pct=compute_utilisation_pct(hours, total_capacity_hours),
            projected_revenue=None if monthly_fee is None else clients * monthly_fee,
        ))
    return points


def first_breach_period(points: Sequence[ProjectionPoint]) -> Optional[ProjectionPoint]:
    """First projected period whose demand exceeds capacity."""
    for point in points:
        if point.exceeds_capacity:
            return point
    return None


def projection_to_frame(points: Sequence[ProjectionPoint]) -> pd.DataFrame:
    rows = [{
        "period_index": p.period_index,
        "month": p.month,
        "month_label": p.month.strftime("%b") if p.month is not None else str(p.period_index),
        "projected_client_count": p.projected_client_count,
        "projected_required_hours": p.projected_required_hours,
        "total_capacity_hours": p.total_capacity_hours,
        "utilisation_pct": p.utilisation_pct,
        "projected_revenue": p.projected_revenue,
    } for p in points]
    return pd.DataFrame(rows)
