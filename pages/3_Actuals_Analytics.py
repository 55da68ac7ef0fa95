"""
Actuals Analytics Page

Where logged time went: weekly trend, role split, top charge codes.
"""
import streamlit as st
import pandas as pd
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).parent.parent))

from capacity_os.config import config
from capacity_os.data.loader import load_time_entries
from capacity_os.data.roles import Bucket, DIVISION_BUCKETS
from capacity_os.metrics.aggregation import (
    date_range_window,
    filter_entries_by_bucket,
    filter_entries_by_window,
    compute_weekly_trend,
    compute_bucket_breakdown,
    compute_top_charge_codes,
    utc_now,
)
from capacity_os.ui.state import (
    init_state, get_division, get_state, set_state, resolve_view_bucket, view_options,
)
from capacity_os.ui.layout import section_header, render_division_selector
from capacity_os.ui.charts import weekly_trend_bar, bucket_pie, horizontal_bar


st.set_page_config(page_title="Actuals Analytics", page_icon="📈", layout="wide")

init_state()


def main():
    st.title("Actuals Analytics")

    render_division_selector()
    division = get_division()
    buckets = DIVISION_BUCKETS[division]

    now = utc_now()
    today = now.date()

    options = view_options(division)
    set_state("view_bucket", resolve_view_bucket(get_state("view_bucket"), division))
    view = st.sidebar.selectbox(
        "View",
        options=options,
        format_func=lambda x: "All roles" if x == "all" else Bucket(x).label,
        key="view_bucket",
    )
    start_date = st.sidebar.date_input("From", value=today - pd.Timedelta(days=config.trailing_window_days))
    end_date = st.sidebar.date_input("To", value=today)

    df = load_time_entries()
    df = filter_entries_by_bucket(df, None if view == "all" else Bucket(view))
    df = filter_entries_by_window(df, date_range_window(start_date, end_date))

    if len(df) == 0:
        st.info("No time logged in this range.")
        return

    col1, col2 = st.columns(2)

    with col1:
        section_header("Weekly Trend", f"Last {config.trend_weeks} weeks")
        trend = compute_weekly_trend(df, now=now, buckets=buckets)
        st.plotly_chart(weekly_trend_bar(trend, [b.value for b in buckets]), use_container_width=True)

    with col2:
        section_header("Role Breakdown")
        breakdown = compute_bucket_breakdown(df, buckets=buckets)
        st.plotly_chart(bucket_pie(breakdown), use_container_width=True)

    section_header("Top Charge Codes", "Hours logged")
    codes = compute_top_charge_codes(df)
    st.plotly_chart(horizontal_bar(codes, x="hours", y="charge_code", text="hours"), use_container_width=True)


if __name__ == "__main__":
    main()
