"""
Live Capacity Page

Utilisation from hours actually logged over the trailing window.
"""
import streamlit as st
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).parent.parent))

from capacity_os.config import config
from capacity_os.data.loader import load_time_entries
from capacity_os.metrics.utilisation import snapshots_to_frame
from capacity_os.modeling.capacity_model import run_live_capacity
from capacity_os.modeling.projection import first_breach_period, projection_to_frame
from capacity_os.ui.state import init_state, get_assumptions
from capacity_os.ui.layout import (
    section_header, status_banner, render_kpi_strip,
    render_division_selector, render_assumption_inputs,
)
from capacity_os.ui.formatting import fmt_count, fmt_currency, fmt_hours, fmt_rate, format_metric_df
from capacity_os.ui.charts import utilisation_bars, demand_vs_capacity


st.set_page_config(page_title="Live Capacity", page_icon="📡", layout="wide")

init_state()


def main():
    st.title("Live Capacity")

    render_division_selector()
    render_assumption_inputs(include_hours_per_client=False)

    if st.sidebar.button("Refresh actuals"):
        load_time_entries.clear()

    df = load_time_entries()
    assumptions = get_assumptions()
    report = run_live_capacity(df, assumptions)

    status_banner(
        report.status,
        report.firm_utilisation_pct,
        f"Based on real logged hours over the last {config.trailing_window_days} days",
    )

    run_rate = report.run_rate
    render_kpi_strip({
        "Live Clients": fmt_count(assumptions.active_clients),
        "Safe To Onboard": fmt_count(run_rate.safe_new_clients),
        "Live Run-Rate": fmt_rate(run_rate.hours_per_client),
        "Monthly Revenue": fmt_currency(report.monthly_revenue),
    })
    st.caption(
        f"{fmt_hours(run_rate.surplus_hours)} free {assumptions.primary_bucket.label.lower()} hours "
        f"at {fmt_rate(run_rate.hours_per_client)}."
    )

    st.markdown("---")

    col1, col2 = st.columns(2)

    snapshots = snapshots_to_frame(report.snapshots.values())

    with col1:
        section_header("True Utilisation %", f"Last {config.trailing_window_days} days logging")
        st.plotly_chart(utilisation_bars(snapshots), use_container_width=True)
        if report.bottleneck.label:
            st.caption(f"Bottleneck: {report.bottleneck.label}")

    with col2:
        section_header("Run-Rate Projection", f"{assumptions.monthly_growth_pct:g}% monthly growth, flat capacity")
        projection = projection_to_frame(report.projection)
        st.plotly_chart(demand_vs_capacity(projection), use_container_width=True)
        breach = first_breach_period(report.projection)
        if breach is not None:
            st.warning(f"Demand exceeds capacity in {breach.month:%b %Y} ({breach.projected_client_count:,} clients).")

    with st.expander("Bucket detail"):
        st.dataframe(format_metric_df(snapshots), use_container_width=True, hide_index=True)


if __name__ == "__main__":
    main()
