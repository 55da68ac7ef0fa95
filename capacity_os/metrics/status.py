"""
Capacity status and bottleneck classification.

Recomputed from current utilisation on every call; nothing is remembered
between calls.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Tuple

from capacity_os.config import config
from capacity_os.data.roles import Bucket
from capacity_os.metrics.utilisation import CapacitySnapshot

OVER_CAPACITY_PCT = 100.0


class CapacityStatus(str, Enum):
    HEALTHY = "HEALTHY"
    APPROACHING_CAPACITY = "APPROACHING_CAPACITY"
    OVER_CAPACITY = "OVER_CAPACITY"

    @property
    def severity(self) -> int:
        return _SEVERITY[self]

    @property
    def label(self) -> str:
        return _LABELS[self]


_SEVERITY = {
    CapacityStatus.HEALTHY: 0,
    CapacityStatus.APPROACHING_CAPACITY: 1,
    CapacityStatus.OVER_CAPACITY: 2,
}

_LABELS = {
    CapacityStatus.HEALTHY: "Teams Healthy",
    CapacityStatus.APPROACHING_CAPACITY: "Approaching Capacity Limit",
    CapacityStatus.OVER_CAPACITY: "Teams Over Capacity",
}


def classify_bucket(utilisation_pct: Optional[float],
                    target_utilisation_pct: float,
                    margin_pct: Optional[float] = None) -> CapacityStatus:
    """
    Status of a single bucket.

    Over capacity strictly above 100%; approaching strictly above
    target - margin. Undefined utilisation is healthy.
    """
    if margin_pct is None:
        margin_pct = config.approaching_margin_pct
    if utilisation_pct is None:
        return CapacityStatus.HEALTHY
    if utilisation_pct > OVER_CAPACITY_PCT:
        return CapacityStatus.OVER_CAPACITY
    if utilisation_pct > target_utilisation_pct - margin_pct:
        return CapacityStatus.APPROACHING_CAPACITY
    return CapacityStatus.HEALTHY


def classify_firm(readings: Iterable[Tuple[Optional[float], float]],
                  margin_pct: Optional[float] = None) -> CapacityStatus:
    """
    Firm status from (utilisation_pct, target_utilisation_pct) pairs.

    The most severe bucket status wins.
    """
    statuses = [classify_bucket(u, target, margin_pct) for u, target in readings]
    return max(statuses, key=lambda s: s.severity, default=CapacityStatus.HEALTHY)


def classify_snapshots(snapshots: Iterable[CapacitySnapshot],
                       margin_pct: Optional[float] = None) -> CapacityStatus:
    return classify_firm(
        ((s.utilisation_pct, s.target_utilisation_pct) for s in snapshots),
        margin_pct,
    )


@dataclass(frozen=True)
class Bottleneck:
    """Bucket(s) at the highest utilisation. Ties keep every tied bucket."""
    buckets: Tuple[Bucket, ...]
    utilisation_pct: Optional[float]

    @property
    def is_tie(self) -> bool:
        return len(self.buckets) > 1

    @property
    def label(self) -> Optional[str]:
        if not self.buckets:
            return None
        if len(self.buckets) == 1:
            return self.buckets[0].label
        if len(self.buckets) == 2:
            return "Both"
        return "All"


def identify_bottleneck(utilisations: Iterable[Tuple[Bucket, Optional[float]]]) -> Bottleneck:
    """Bucket(s) with the highest defined utilisation, in input order."""
    defined = [(b, u) for b, u in utilisations if u is not None]
    if not defined:
        return Bottleneck(buckets=(), utilisation_pct=None)
    top = max(u for _, u in defined)
    return Bottleneck(
        buckets=tuple(b for b, u in defined if u == top),
        utilisation_pct=top,
    )


def bottleneck_from_snapshots(snapshots: Iterable[CapacitySnapshot]) -> Bottleneck:
    return identify_bottleneck((s.bucket, s.utilisation_pct) for s in snapshots)
