"""
Firm Capacity OS

Main entry point for Streamlit app.
"""
import logging

import streamlit as st
from pathlib import Path
from datetime import datetime, timezone

# Page config must be first Streamlit command
st.set_page_config(
    page_title="Firm Capacity OS",
    page_icon="📊",
    layout="wide",
    initial_sidebar_state="expanded",
)

# Add package root to path
import sys
sys.path.insert(0, str(Path(__file__).parent))

from capacity_os.ui.state import init_state
from capacity_os.ui.layout import render_division_selector
from capacity_os.data.loader import load_time_entries, get_data_status
from capacity_os.data.schema import SchemaValidationError
from capacity_os.metrics.aggregation import aggregate_trailing_hours
from capacity_os.ui.formatting import fmt_hours
from capacity_os.config import config, TABLE_FILES

logging.basicConfig(level=config.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def main():
    """Main app entry point."""

    init_state()
    render_division_selector()

    st.title("Firm Capacity Operating System")
    st.caption("Logged time → Utilisation → Bottlenecks → Growth headroom")

    status = get_data_status()

    entries_available = (
        status["processed"]["time_entries"]["parquet_exists"] or
        status["processed"]["time_entries"]["csv_exists"]
    )

    if not entries_available:
        st.error("No time entries found!")
        st.markdown(f"""
        ### Setup Required

        Export the time-entry store to: `{config.processed_dir}`

        Required file:
        - `{TABLE_FILES['time_entries']}.parquet` (or .csv) with columns
          `id`, `charge_code`, `category`, `duration_minutes`, `timestamp`

        The Hiring Simulator works without an export.
        """)
        st.page_link("pages/2_Hiring_Simulator.py", label="Hiring Simulator", icon="🧮")
        return

    with st.expander("Data fingerprint", expanded=not config.is_prod):
        rows = []
        for filename in TABLE_FILES.values():
            for ext in ("parquet", "csv"):
                path = config.processed_dir / f"{filename}.{ext}"
                if path.exists():
                    mtime = datetime.fromtimestamp(path.stat().st_mtime, tz=timezone.utc)
                    rows.append({
                        "file": path.name,
                        "size_mb": round(path.stat().st_size / (1024 * 1024), 2),
                        "modified_utc": mtime.strftime("%Y-%m-%d %H:%M"),
                    })
        st.dataframe(rows, use_container_width=True)

    with st.spinner("Loading time entries..."):
        try:
            df = load_time_entries()
        except SchemaValidationError as e:
            st.error(f"Time-entry export is invalid: {e}")
            return

    st.markdown("---")

    col1, col2 = st.columns([1, 4])

    with col1:
        st.markdown("### Quick Links")
        st.page_link("pages/1_Live_Capacity.py", label="Live Capacity", icon="📡")
        st.page_link("pages/2_Hiring_Simulator.py", label="Hiring Simulator", icon="🧮")
        st.page_link("pages/3_Actuals_Analytics.py", label="Actuals Analytics", icon="📈")

    with col2:
        st.markdown("### Data Overview")

        trailing = aggregate_trailing_hours(df)

        c1, c2, c3 = st.columns(3)

        with c1:
            st.metric("Entries", f"{len(df):,}")

        with c2:
            st.metric(f"Hours (last {config.trailing_window_days}d)", fmt_hours(trailing.total_hours))

        with c3:
            if df["timestamp"].notna().any():
                min_date = df["timestamp"].min()
                max_date = df["timestamp"].max()
                st.metric("Date Range", f"{min_date.strftime('%b %Y')} - {max_date.strftime('%b %Y')}")


if __name__ == "__main__":
    main()
