"""
Hiring Simulator Page

What-if staffing model driven by assumptions, checked against the
trailing actuals when a time-entry export is available.
"""
import logging

import streamlit as st
import pandas as pd
from pathlib import Path
from typing import Optional
import sys

sys.path.insert(0, str(Path(__file__).parent.parent))

from capacity_os.config import config
from capacity_os.data.loader import load_time_entries, get_data_status
from capacity_os.data.schema import SchemaValidationError
from capacity_os.metrics.utilisation import snapshots_to_frame
from capacity_os.modeling.capacity_model import run_hiring_simulation, estimate_vs_actual_frame
from capacity_os.modeling.projection import projection_to_frame
from capacity_os.ui.state import init_state, get_assumptions, reset_state
from capacity_os.ui.layout import (
    section_header, status_banner, render_kpi_strip,
    render_division_selector, render_assumption_inputs,
)
from capacity_os.ui.formatting import (
    fmt_count, fmt_currency, fmt_hours, fmt_percent, fmt_rate, format_metric_df,
)
from capacity_os.ui.charts import utilisation_bars, clients_vs_limit, demand_vs_capacity

logger = logging.getLogger(__name__)


st.set_page_config(page_title="Hiring Simulator", page_icon="🧮", layout="wide")

init_state()


def _load_actuals() -> Optional[pd.DataFrame]:
    """Time entries for the reality check, or None when no usable export exists."""
    export = get_data_status()["processed"]["time_entries"]
    if not (export["parquet_exists"] or export["csv_exists"]):
        return None
    try:
        return load_time_entries()
    except SchemaValidationError as e:
        logger.warning("Skipping actuals: %s", e)
        st.warning(f"Time-entry export is invalid, showing estimates only: {e}")
        return None


def main():
    st.title("Hiring Simulator")

    # Before the inputs: widget-bound keys cannot change once rendered
    if st.sidebar.button("Reset assumptions"):
        reset_state()

    render_division_selector()
    render_assumption_inputs()

    assumptions = get_assumptions()
    report = run_hiring_simulation(assumptions, entries=_load_actuals())

    status_banner(report.status, report.firm_utilisation_pct, "Based on current assumptions")

    render_kpi_strip({
        "Active Clients": fmt_count(assumptions.active_clients),
        "Firm Client Limit": fmt_count(report.firm_max_clients),
        "Safe To Onboard": fmt_count(report.safe_to_onboard),
        "Monthly Revenue": fmt_currency(report.monthly_revenue),
    })

    if report.bottleneck.label:
        st.caption(
            f"Bottleneck: {report.bottleneck.label} at {fmt_percent(report.bottleneck.utilisation_pct)}"
        )

    primary = assumptions.primary_bucket
    comparison = estimate_vs_actual_frame(report, assumptions)

    if report.has_actuals:
        section_header(
            f"Reality Check (Last {config.trailing_window_days} Days)",
            "Estimated utilisation against hours actually logged",
        )
        primary_rate = report.run_rates[primary]
        assumed_rate = assumptions.buckets[primary].hours_per_client
        c1, c2, c3 = st.columns(3)
        with c1:
            st.metric("Total Logged", f"{fmt_hours(report.actual_hours.total_hours)} hrs")
        with c2:
            st.metric(f"Implied {primary.label} Ratio", fmt_rate(primary_rate.hours_per_client))
        with c3:
            st.metric(f"Assumed {primary.label} Ratio", fmt_rate(assumed_rate))
        if primary_rate.hours_per_client is not None and primary_rate.hours_per_client > assumed_rate:
            st.warning(f"{primary.label} are spending more time per client than assumed.")

    st.markdown("---")

    snapshots = snapshots_to_frame(report.snapshots.values())
    projection = projection_to_frame(report.projections.get(primary, []))
    actual_pct = comparison["actual_utilisation_pct"].tolist() if report.has_actuals else None

    col1, col2 = st.columns(2)

    with col1:
        section_header("Utilisation at Current Load", "Required hours / total capacity")
        st.plotly_chart(utilisation_bars(snapshots, actual_pct=actual_pct), use_container_width=True)
        if report.has_actuals:
            for _, row in comparison.iterrows():
                st.caption(
                    f"{row['label']}: Est {fmt_percent(row['est_utilisation_pct'], 0)} · "
                    f"Actual {fmt_percent(row['actual_utilisation_pct'], 0)}"
                )

    with col2:
        section_header("6-Month Growth", f"{assumptions.monthly_growth_pct:g}% compounded monthly")
        st.plotly_chart(clients_vs_limit(projection, report.firm_max_clients), use_container_width=True)

    section_header(f"{primary.label} Demand vs Capacity")
    st.plotly_chart(demand_vs_capacity(projection), use_container_width=True)

    with st.expander("Bucket detail"):
        st.dataframe(format_metric_df(snapshots), use_container_width=True, hide_index=True)
        if report.has_actuals:
            st.dataframe(format_metric_df(comparison), use_container_width=True, hide_index=True)


if __name__ == "__main__":
    main()
