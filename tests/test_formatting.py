"""
Tests for display formatting of undefined and defined metrics.
"""
import sys
from pathlib import Path

import numpy as np
import pandas as pd
import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from capacity_os.data.entries import TimeEntry
from capacity_os.ui.formatting import (
    clamp_percent,
    fmt_count,
    fmt_currency,
    fmt_hours,
    fmt_percent,
    fmt_rate,
    format_metric_df,
)


class TestFormatters:
    """Tests for number formatters."""

    @pytest.mark.parametrize("fmt", [fmt_currency, fmt_hours, fmt_rate, fmt_percent, fmt_count])
    def test_undefined_renders_na(self, fmt):
        assert fmt(None) == "N/A"
        assert fmt(np.nan) == "N/A"

    def test_values(self):
        assert fmt_currency(42000) == "$42,000"
        assert fmt_currency(27.75, decimals=2) == "$27.75"
        assert fmt_hours(1234.56) == "1,234.6"
        assert fmt_rate(5.5) == "5.5 hr/c"
        assert fmt_percent(117.857) == "117.9%"
        assert fmt_percent(42.857, 0) == "43%"
        assert fmt_count(1234) == "1,234"

    def test_clamp_percent_is_display_only(self):
        assert clamp_percent(125.0) == 100.0
        assert clamp_percent(-3) == 0.0
        assert clamp_percent(None) == 0.0


class TestFormatMetricDf:
    """Tests for table formatting."""

    def test_known_columns(self):
        df = pd.DataFrame({
            "bucket": ["support"],
            "utilisation_pct": [None],
            "max_clients": [119],
            "hours": [240.0],
        })

        result = format_metric_df(df)

        assert result["utilisation_pct"].iloc[0] == "N/A"
        assert result["max_clients"].iloc[0] == "119"
        assert result["hours"].iloc[0] == "240.0"
        assert df["hours"].iloc[0] == 240.0


class TestTimeEntry:
    """Tests for the entry record."""

    def test_hours(self):
        entry = TimeEntry(id="e1", charge_code="Review", category="reviewer",
                          duration_minutes=45, timestamp=pd.Timestamp("2026-03-30", tz="UTC"))

        assert entry.hours == 0.75
