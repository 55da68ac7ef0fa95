"""
Standard chart wrappers using Plotly.
"""
import plotly.express as px
import plotly.graph_objects as go
import pandas as pd
from typing import List, Optional

from capacity_os.ui.formatting import clamp_percent


# =============================================================================
# CHART THEME
# =============================================================================

CHART_COLORS = {
    "primary": "#1f77b4",
    "secondary": "#a855f7",
    "success": "#28a745",
    "warning": "#ffc107",
    "danger": "#dc3545",
    "neutral": "#6c757d",
    "light": "#f8f9fa",
}

BUCKET_COLORS = {
    "advisors": "#3b82f6",
    "support": "#a855f7",
    "preparers": "#10b981",
    "reviewers": "#f59e0b",
}

CHART_TEMPLATE = "plotly_white"

DEFAULT_LAYOUT = {
    "template": CHART_TEMPLATE,
    "font": {"family": "Arial, sans-serif", "size": 12},
    "margin": {"l": 50, "r": 30, "t": 40, "b": 50},
    "hoverlabel": {"bgcolor": "white"},
}


def apply_layout(fig: go.Figure, **kwargs) -> go.Figure:
    """Apply standard layout to figure."""
    layout = {**DEFAULT_LAYOUT, **kwargs}
    fig.update_layout(**layout)
    return fig


# =============================================================================
# UTILISATION
# =============================================================================

def utilisation_bars(snapshots: pd.DataFrame, title: str = "Utilisation %",
                     actual_pct: Optional[List[Optional[float]]] = None) -> go.Figure:
    """
    Horizontal utilisation bar per bucket with its target marked.

    Bars are clamped to 0-100; the hover text carries the raw value.
    actual_pct, when given, adds a marker per bucket for measured utilisation.
    """
    fig = go.Figure()

    raw = snapshots["utilisation_pct"]
    fig.add_trace(go.Bar(
        x=[clamp_percent(v) for v in raw],
        y=snapshots["label"],
        orientation="h",
        marker_color=[BUCKET_COLORS.get(b, CHART_COLORS["primary"]) for b in snapshots["bucket"]],
        text=["N/A" if pd.isna(v) else f"{v:.0f}%" for v in raw],
        textposition="outside",
        name="Utilisation",
    ))

    fig.add_trace(go.Scatter(
        x=snapshots["target_utilisation_pct"],
        y=snapshots["label"],
        mode="markers",
        marker={"symbol": "line-ns-open", "size": 24, "color": CHART_COLORS["danger"]},
        name="Target",
    ))

    if actual_pct is not None:
        fig.add_trace(go.Scatter(
            x=[clamp_percent(v) for v in actual_pct],
            y=snapshots["label"],
            mode="markers",
            marker={"symbol": "diamond", "size": 12, "color": CHART_COLORS["neutral"]},
            text=["N/A" if v is None or pd.isna(v) else f"{v:.0f}%" for v in actual_pct],
            hovertemplate="Actual: %{text}<extra></extra>",
            name="Actual",
        ))

    fig.update_layout(title=title, xaxis={"range": [0, 110], "title": "%"}, showlegend=False)

    return apply_layout(fig, height=80 + 70 * len(snapshots))


# =============================================================================
# PROJECTION
# =============================================================================

def demand_vs_capacity(projection: pd.DataFrame,
                       title: str = "Projected Demand vs Capacity") -> go.Figure:
    """Projected required hours as bars against the flat capacity line."""
    fig = go.Figure()

    fig.add_trace(go.Bar(
        name="Demand",
        x=projection["month_label"],
        y=projection["projected_required_hours"],
        marker_color=CHART_COLORS["warning"],
        customdata=projection[["projected_client_count"]],
        hovertemplate="%{y:,.0f} hrs<br>%{customdata[0]:,} clients<extra></extra>",
    ))

    fig.add_trace(go.Scatter(
        name="Capacity",
        x=projection["month_label"],
        y=projection["total_capacity_hours"],
        mode="lines",
        line={"color": CHART_COLORS["neutral"], "dash": "dash"},
    ))

    fig.update_layout(title=title, yaxis_title="Hours")

    return apply_layout(fig, height=320)


def clients_vs_limit(projection: pd.DataFrame, max_clients: Optional[int],
                     title: str = "Projected Clients vs Firm Limit") -> go.Figure:
    fig = go.Figure()

    fig.add_trace(go.Bar(
        name="Clients",
        x=projection["month_label"],
        y=projection["projected_client_count"],
        marker_color=CHART_COLORS["primary"],
    ))

    if max_clients is not None:
        fig.add_hline(
            y=max_clients,
            line_dash="dash",
            line_color=CHART_COLORS["danger"],
            annotation_text=f"Limit: {max_clients:,}",
        )

    fig.update_layout(title=title, yaxis_title="Clients")

    return apply_layout(fig, height=320)


# =============================================================================
# ACTUALS
# =============================================================================

def weekly_trend_bar(trend: pd.DataFrame, bucket_cols: List[str],
                     title: str = "Weekly Trend (Total Hours)") -> go.Figure:
    """Stacked hours per bucket per week."""
    fig = go.Figure()

    for col in bucket_cols:
        fig.add_trace(go.Bar(
            name=col.title(),
            x=trend["label"],
            y=trend[col],
            marker_color=BUCKET_COLORS.get(col, CHART_COLORS["neutral"]),
        ))

    fig.update_layout(barmode="stack", title=title, yaxis_title="Hours")

    return apply_layout(fig)


def bucket_pie(breakdown: pd.DataFrame, title: str = "Role Breakdown") -> go.Figure:
    fig = px.pie(
        breakdown, names="label", values="hours", title=title,
        color="bucket", color_discrete_map=BUCKET_COLORS, hole=0.5,
    )
    return apply_layout(fig)


def horizontal_bar(df: pd.DataFrame, x: str, y: str,
                   title: str = "", text: Optional[str] = None) -> go.Figure:
    """
    Create horizontal bar chart.
    """
    fig = px.bar(
        df, x=x, y=y, orientation="h",
        title=title,
        text=text,
    )

    fig.update_traces(textposition="outside", marker_color=CHART_COLORS["primary"])
    fig.update_layout(yaxis={"categoryorder": "total ascending"})

    return apply_layout(fig)
