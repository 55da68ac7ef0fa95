"""
Layout components: headers, status banner, sidebar assumptions.
"""
import streamlit as st
from typing import Optional

from capacity_os.data.roles import Division, DIVISION_BUCKETS
from capacity_os.metrics.status import CapacityStatus
from capacity_os.ui.formatting import fmt_percent
from capacity_os.ui.state import get_state, set_state


def section_header(title: str, description: Optional[str] = None):
    """Render section header with optional description."""
    st.subheader(title)
    if description:
        st.caption(description)


def status_banner(status: CapacityStatus, utilisation_pct: Optional[float], basis: str):
    """Render the firm status banner."""
    message = f"**{status.label}**: {basis}, your firm is operating at {fmt_percent(utilisation_pct, 0)} of its maximum capacity."
    if status is CapacityStatus.OVER_CAPACITY:
        st.error(message)
    elif status is CapacityStatus.APPROACHING_CAPACITY:
        st.warning(message)
    else:
        st.info(message)


def render_kpi_strip(metrics: dict):
    """Render horizontal strip of KPI cards from label -> formatted value."""
    cols = st.columns(len(metrics))
    for col, (label, value) in zip(cols, metrics.items()):
        with col:
            st.metric(label=label, value=value)


def render_division_selector():
    """Sidebar division switch."""
    options = [d.value for d in Division]
    current = get_state("division")
    choice = st.sidebar.radio(
        "Division",
        options=options,
        index=options.index(current),
        format_func=lambda x: x.title(),
    )
    if choice != current:
        set_state("division", choice)


def render_assumption_inputs(include_hours_per_client: bool = True, include_targets: bool = True):
    """
    Sidebar number inputs bound to session state.

    Keys match ui.state.DEFAULTS so the values survive page switches.
    """
    division = Division(get_state("division"))

    st.sidebar.number_input("Active clients", min_value=0, step=1, key="active_clients")
    st.sidebar.number_input("Monthly growth (%)", step=0.5, key="monthly_growth_pct")

    for bucket in DIVISION_BUCKETS[division]:
        st.sidebar.markdown(f"**{bucket.label}**")
        st.sidebar.number_input("Headcount", min_value=0, step=1, key=f"{bucket.value}_headcount")
        st.sidebar.number_input("Capacity (hrs/mo per head)", min_value=0.0, step=5.0,
                                key=f"{bucket.value}_capacity")
        if include_hours_per_client:
            st.sidebar.number_input("Hours / client", min_value=0.0, step=0.5,
                                    key=f"{bucket.value}_hours_per_client")
        if include_targets:
            st.sidebar.number_input("Target utilisation (%)", min_value=0.0, max_value=100.0,
                                    step=1.0, key=f"{bucket.value}_target")

    st.sidebar.markdown("**Financials**")
    st.sidebar.number_input("Avg fee / client ($)", min_value=0.0, step=10.0,
                            key=f"{division.value}_avg_fee")
    st.sidebar.checkbox("Fee is annual", key=f"{division.value}_fee_is_annual")
