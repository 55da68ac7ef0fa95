"""
Tests for utilisation, max clients, open capacity, and run rate.
"""
import math
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from capacity_os.data.roles import Bucket
from capacity_os.metrics.utilisation import (
    BucketAssumptions,
    build_assumption_snapshot,
    build_assumption_snapshots,
    build_measured_snapshot,
    compute_max_clients,
    compute_open_capacity,
    compute_run_rate,
    compute_utilisation_pct,
    firm_max_clients,
    firm_utilisation,
    snapshots_to_frame,
    total_capacity_hours,
)


ADVISORS = BucketAssumptions(headcount=4, capacity_per_head=140, hours_per_client=5.5, target_utilisation_pct=85)
SUPPORT = BucketAssumptions(headcount=2, capacity_per_head=140, hours_per_client=2.0, target_utilisation_pct=85)


class TestUtilisation:
    """Tests for the utilisation ratio."""

    def test_basic_ratio(self):
        assert total_capacity_hours(4, 140) == 560
        assert compute_utilisation_pct(280, 560) == 50.0

    def test_not_clamped_above_100(self):
        assert compute_utilisation_pct(700, 560) == 125.0

    def test_zero_capacity_is_undefined(self):
        """Zero capacity yields None, never NaN or inf."""
        result = compute_utilisation_pct(120, 0)

        assert result is None

    def test_negative_capacity_is_undefined(self):
        assert compute_utilisation_pct(120, -10) is None

    def test_non_finite_inputs_do_not_crash(self):
        assert compute_utilisation_pct(float("nan"), 560) is None
        assert compute_utilisation_pct(100, float("nan")) is None

    def test_monotonic_in_hours(self):
        """More required hours never lowers utilisation."""
        values = [compute_utilisation_pct(h, 560) for h in [0, 10, 55.5, 280, 560, 900]]

        assert values == sorted(values)

    def test_repeatable(self):
        assert compute_utilisation_pct(333, 560) == compute_utilisation_pct(333, 560)

    def test_firm_utilisation_is_max(self):
        assert firm_utilisation([42.0, 91.5, 60.0]) == 91.5

    def test_firm_utilisation_skips_undefined(self):
        assert firm_utilisation([None, 30.0]) == 30.0
        assert firm_utilisation([None, None]) is None


class TestMaxClients:
    """Tests for max-clients sizing."""

    def test_floors_partial_slots(self):
        """floor((160 * 0.85) / 5.5) = floor(24.727...) = 24"""
        assert compute_max_clients(160, 5.5, 85) == 24

    def test_uncapped_target_defaults_to_100(self):
        assert compute_max_clients(160, 5.5) == 29

    def test_zero_hours_per_client_is_undefined(self):
        assert compute_max_clients(160, 0, 85) is None
        assert compute_max_clients(160, -2, 85) is None

    def test_nan_hours_per_client_is_undefined(self):
        assert compute_max_clients(160, float("nan"), 85) is None

    def test_open_capacity_never_negative(self):
        assert compute_open_capacity(24, 30) == 0

    def test_open_capacity(self):
        assert compute_open_capacity(24, 20) == 4

    def test_open_capacity_undefined(self):
        assert compute_open_capacity(None, 20) is None


class TestSnapshots:
    """Tests for assumption-based and measured snapshots."""

    def test_assumption_snapshot(self):
        snap = build_assumption_snapshot(Bucket.ADVISORS, ADVISORS, active_clients=120)

        assert snap.total_capacity_hours == 560
        assert snap.hours == 660
        assert snap.utilisation_pct == pytest.approx(117.857, rel=1e-4)
        assert snap.max_clients == 86
        assert snap.open_capacity == 0
        assert snap.source == "assumption"

    def test_measured_snapshot(self):
        snap = build_measured_snapshot(Bucket.ADVISORS, ADVISORS, actual_hours=280, active_clients=80)

        assert snap.utilisation_pct == 50.0
        assert snap.hours == 280
        assert snap.open_capacity == 6
        assert snap.source == "measured"

    def test_zero_headcount_snapshot(self):
        empty = BucketAssumptions(headcount=0, capacity_per_head=140, hours_per_client=2.0)

        snap = build_assumption_snapshot(Bucket.SUPPORT, empty, active_clients=50)

        assert snap.utilisation_pct is None
        assert not snap.is_defined
        assert snap.max_clients == 0

    def test_firm_max_clients_is_tightest_bucket(self):
        snaps = build_assumption_snapshots({Bucket.ADVISORS: ADVISORS, Bucket.SUPPORT: SUPPORT}, 120)

        assert snaps[Bucket.SUPPORT].max_clients == 119
        assert firm_max_clients(snaps.values()) == 86

    def test_firm_max_clients_undefined(self):
        broken = BucketAssumptions(headcount=2, capacity_per_head=140, hours_per_client=0)
        snaps = build_assumption_snapshots({Bucket.SUPPORT: broken}, 10)

        assert firm_max_clients(snaps.values()) is None

    def test_snapshots_to_frame(self):
        snaps = build_assumption_snapshots({Bucket.ADVISORS: ADVISORS, Bucket.SUPPORT: SUPPORT}, 120)

        frame = snapshots_to_frame(snaps.values())

        assert frame["bucket"].tolist() == ["advisors", "support"]
        assert frame["label"].tolist() == ["Advisors", "Support"]


class TestRunRate:
    """Tests for measured run rate."""

    def test_run_rate(self):
        rate = compute_run_rate(actual_hours=240, capacity_hours=560, active_clients=120)

        assert rate.hours_per_client == 2.0
        assert rate.surplus_hours == 320
        assert rate.safe_new_clients == 160

    def test_no_clients(self):
        rate = compute_run_rate(actual_hours=240, capacity_hours=560, active_clients=0)

        assert rate.hours_per_client is None
        assert rate.safe_new_clients is None

    def test_no_logged_hours(self):
        rate = compute_run_rate(actual_hours=0, capacity_hours=560, active_clients=120)

        assert rate.hours_per_client == 0
        assert rate.safe_new_clients is None

    def test_over_capacity_clamps_to_zero(self):
        rate = compute_run_rate(actual_hours=700, capacity_hours=560, active_clients=100)

        assert rate.surplus_hours == -140
        assert rate.safe_new_clients == 0
        assert not math.isnan(rate.hours_per_client)
