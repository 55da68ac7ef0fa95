"""
Tests for capacity status and bottleneck classification.
"""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from capacity_os.data.roles import Bucket
from capacity_os.metrics.status import (
    CapacityStatus,
    bottleneck_from_snapshots,
    classify_bucket,
    classify_firm,
    classify_snapshots,
    identify_bottleneck,
)
from capacity_os.metrics.utilisation import BucketAssumptions, build_measured_snapshots


class TestClassifyBucket:
    """Tests for threshold boundaries."""

    def test_exactly_100_is_not_over(self):
        assert classify_bucket(100.0, 85) != CapacityStatus.OVER_CAPACITY

    def test_just_above_100_is_over(self):
        assert classify_bucket(100.01, 85) == CapacityStatus.OVER_CAPACITY

    def test_margin_boundary_is_healthy(self):
        """Target 85 with a 5 point margin: 80.0 is still healthy."""
        assert classify_bucket(80.0, 85) == CapacityStatus.HEALTHY

    def test_just_inside_margin_is_approaching(self):
        assert classify_bucket(80.01, 85) == CapacityStatus.APPROACHING_CAPACITY

    def test_undefined_is_healthy(self):
        assert classify_bucket(None, 85) == CapacityStatus.HEALTHY

    def test_custom_margin(self):
        assert classify_bucket(78.0, 85, margin_pct=10) == CapacityStatus.APPROACHING_CAPACITY


class TestClassifyFirm:
    """Tests for firm-level status."""

    def test_most_severe_wins(self):
        assert classify_firm([(50.0, 85), (101.0, 85)]) == CapacityStatus.OVER_CAPACITY
        assert classify_firm([(50.0, 85), (82.0, 85)]) == CapacityStatus.APPROACHING_CAPACITY

    def test_uses_each_bucket_target(self):
        assert classify_firm([(70.0, 95), (70.0, 70)]) == CapacityStatus.APPROACHING_CAPACITY

    def test_all_undefined_is_healthy(self):
        assert classify_firm([(None, 85), (None, 85)]) == CapacityStatus.HEALTHY

    def test_no_buckets_is_healthy(self):
        assert classify_firm([]) == CapacityStatus.HEALTHY

    def test_severity_order(self):
        assert (CapacityStatus.OVER_CAPACITY.severity
                > CapacityStatus.APPROACHING_CAPACITY.severity
                > CapacityStatus.HEALTHY.severity)

    def test_zero_capacity_bucket_never_over(self):
        """A bucket with no staff but logged hours is unknown, not over capacity."""
        buckets = {
            Bucket.ADVISORS: BucketAssumptions(headcount=4, capacity_per_head=140, hours_per_client=5.5),
            Bucket.SUPPORT: BucketAssumptions(headcount=0, capacity_per_head=140, hours_per_client=2.0),
        }
        snapshots = build_measured_snapshots(
            buckets, {Bucket.ADVISORS: 100.0, Bucket.SUPPORT: 500.0}, active_clients=50
        )

        assert snapshots[Bucket.SUPPORT].utilisation_pct is None
        assert classify_snapshots(snapshots.values()) == CapacityStatus.HEALTHY


class TestBottleneck:
    """Tests for bottleneck identification."""

    def test_single_highest(self):
        result = identify_bottleneck([(Bucket.ADVISORS, 92.0), (Bucket.SUPPORT, 60.0)])

        assert result.buckets == (Bucket.ADVISORS,)
        assert result.label == "Advisors"
        assert not result.is_tie

    def test_tie_reports_both(self):
        """Two buckets at exactly 92% are both the bottleneck."""
        readings = [(Bucket.ADVISORS, 92.0), (Bucket.SUPPORT, 92.0)]

        result = identify_bottleneck(readings)

        assert result.buckets == (Bucket.ADVISORS, Bucket.SUPPORT)
        assert result.is_tie
        assert result.label == "Both"
        assert classify_firm([(92.0, 85), (92.0, 85)]) == CapacityStatus.APPROACHING_CAPACITY

    def test_three_way_tie(self):
        result = identify_bottleneck([
            (Bucket.PREPARERS, 70.0), (Bucket.REVIEWERS, 70.0), (Bucket.ADVISORS, 70.0),
        ])

        assert len(result.buckets) == 3
        assert result.label == "All"

    def test_undefined_skipped(self):
        result = identify_bottleneck([(Bucket.ADVISORS, None), (Bucket.SUPPORT, 12.0)])

        assert result.buckets == (Bucket.SUPPORT,)
        assert result.utilisation_pct == 12.0

    def test_nothing_defined(self):
        result = identify_bottleneck([(Bucket.ADVISORS, None)])

        assert result.buckets == ()
        assert result.label is None

    def test_from_snapshots(self):
        buckets = {
            Bucket.ADVISORS: BucketAssumptions(headcount=4, capacity_per_head=140, hours_per_client=5.5),
            Bucket.SUPPORT: BucketAssumptions(headcount=2, capacity_per_head=140, hours_per_client=2.0),
        }
        snapshots = build_measured_snapshots(
            buckets, {Bucket.ADVISORS: 280.0, Bucket.SUPPORT: 210.0}, active_clients=50
        )

        assert bottleneck_from_snapshots(snapshots.values()).buckets == (Bucket.SUPPORT,)
