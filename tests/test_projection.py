"""
Tests for compounded growth projection and revenue assumptions.
"""
import sys
from pathlib import Path

import pandas as pd
import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from capacity_os.modeling.financials import effective_monthly_fee, monthly_revenue
from capacity_os.modeling.projection import (
    compound_client_count,
    first_breach_period,
    project_growth,
    projection_to_frame,
)


NOW = pd.Timestamp("2026-01-15 09:00", tz="UTC")


class TestCompounding:
    """Tests for client count compounding."""

    def test_period_three(self):
        """floor(100 * 1.05^3) = floor(115.7625) = 115"""
        assert compound_client_count(100, 5, 3) == 115

    def test_six_periods(self):
        points = project_growth(100, 5, 5.5, 560, now=NOW)

        assert [p.projected_client_count for p in points] == [105, 110, 115, 121, 127, 134]
        assert [p.period_index for p in points] == [1, 2, 3, 4, 5, 6]

    def test_floor_from_closed_form_not_iterated(self):
        """
        Flooring each period from the closed form lets small firms grow;
        flooring and re-applying would keep 10 clients at 10 forever.
        """
        points = project_growth(10, 5, 1.0, 100, now=NOW)
        counts = [p.projected_client_count for p in points]

        assert counts == [10, 11, 11, 12, 12, 13]

        iterated, current = [], 10
        for _ in range(6):
            current = int(current * 1.05)
            iterated.append(current)
        assert counts != iterated

    def test_zero_growth(self):
        points = project_growth(100, 0, 5.5, 560, now=NOW)

        assert all(p.projected_client_count == 100 for p in points)

    def test_negative_growth_shrinks(self):
        counts = [p.projected_client_count for p in project_growth(100, -10, 5.5, 560, now=NOW)]

        assert counts == sorted(counts, reverse=True)
        assert counts[-1] < 100


class TestProjectionPoints:
    """Tests for demand and capacity per projected period."""

    def test_required_hours(self):
        points = project_growth(100, 5, 5.5, 560, now=NOW)

        assert points[2].projected_required_hours == pytest.approx(115 * 5.5)

    def test_capacity_held_constant(self):
        """Every period compares against today's capacity."""
        points = project_growth(100, 5, 5.5, 560, now=NOW)

        assert len(points) == 6
        assert all(p.total_capacity_hours == 560 for p in points)

    def test_months_follow_reference(self):
        points = project_growth(100, 5, 5.5, 560, now=NOW)

        assert points[0].month == pd.Timestamp("2026-02-01", tz="UTC")
        assert points[5].month == pd.Timestamp("2026-07-01", tz="UTC")

    def test_custom_horizon(self):
        assert len(project_growth(100, 5, 5.5, 560, horizon=12, now=NOW)) == 12

    def test_zero_capacity_utilisation_undefined(self):
        points = project_growth(100, 5, 5.5, 0, now=NOW)

        assert all(p.utilisation_pct is None for p in points)

    def test_revenue(self):
        points = project_growth(100, 5, 5.5, 560, now=NOW, monthly_fee=350)

        assert points[0].projected_revenue == 105 * 350

    def test_first_breach(self):
        points = project_growth(100, 5, 5.5, 650, now=NOW)

        breach = first_breach_period(points)

        assert breach.period_index == 4
        assert breach.projected_required_hours == pytest.approx(121 * 5.5)

    def test_no_breach(self):
        assert first_breach_period(project_growth(100, 5, 5.5, 10_000, now=NOW)) is None

    def test_projection_frame(self):
        frame = projection_to_frame(project_growth(100, 5, 5.5, 560, now=NOW))

        assert frame["month_label"].tolist()[:2] == ["Feb", "Mar"]
        assert frame["total_capacity_hours"].nunique() == 1


class TestFinancials:
    """Tests for revenue assumptions."""

    def test_monthly_fee(self):
        assert effective_monthly_fee(350) == 350

    def test_annual_fee_spread(self):
        assert effective_monthly_fee(333, fee_is_annual=True) == pytest.approx(27.75)

    def test_monthly_revenue(self):
        assert monthly_revenue(120, 350) == 42000
        assert monthly_revenue(120, 333, fee_is_annual=True) == pytest.approx(3330)
