"""
Restaurant Sales Dashboard — Interactive Dashboard

Run with:  streamlit run app.py
"""

import io
import sys
from pathlib import Path

import streamlit as st
import plotly.graph_objects as go
import plotly.express as px
import pandas as pd

sys.path.insert(0, str(Path(__file__).resolve().parent))

from restaurant_dashboard.config import DEFAULT_SHEET_URL, DEFAULT_SCRIPT_URL
from restaurant_dashboard.cache import clear_cache
from restaurant_dashboard.dashboard import (
    generate_executive_report,
    get_dashboard_view,
    render_report_markdown,
)
from restaurant_dashboard.errors import (
    EntrySubmitError,
    EntryValidationError,
    MissingScriptUrlError,
    RecordParseError,
)
from restaurant_dashboard.export import export_filename, records_to_csv
from restaurant_dashboard.gateway import build_entry, submit_entry, validate_entry
from restaurant_dashboard.kpis import format_currency, format_percentage
from restaurant_dashboard.loaders import (
    is_valid_sheet_url,
    load_records_from_excel,
    parse_csv_text,
)
from restaurant_dashboard.models import DateRange, FilterState, TimeSlot
from restaurant_dashboard.simulator import generate_orders
from restaurant_dashboard.store import RecordStore
from restaurant_dashboard.transforms import filter_by_date_range

# ---------------------------------------------------------------------------
# Page config
# ---------------------------------------------------------------------------
st.set_page_config(
    page_title="Restaurant Sales Dashboard",
    page_icon="🍽️",
    layout="wide",
    initial_sidebar_state="expanded",
)

STATUS_COLORS = {
    "green": "#2ecc71",
    "yellow": "#f39c12",
    "red": "#e74c3c",
}

ACTION_COLORS = {
    "green": "#2ecc71",
    "amber": "#f39c12",
    "blue": "#3498db",
    "purple": "#8e44ad",
}

DATE_RANGE_LABELS = {
    DateRange.ALL: "All time",
    DateRange.TODAY: "Today",
    DateRange.YESTERDAY: "Yesterday",
    DateRange.LAST_7_DAYS: "Last 7 days",
    DateRange.THIS_MONTH: "This month",
}

TIME_SLOT_LABELS = {
    TimeSlot.ALL: "All day",
    TimeSlot.MORNING: "Morning (6-12)",
    TimeSlot.LUNCH: "Lunch (12-4)",
    TimeSlot.DINNER: "Dinner (7-11)",
}


# ---------------------------------------------------------------------------
# Data loading: cache paint first, network reconcile after the first render
# ---------------------------------------------------------------------------
if "store" not in st.session_state:
    store = RecordStore()
    st.session_state.store = store
    st.session_state.sheet_url = DEFAULT_SHEET_URL
    st.session_state.script_url = DEFAULT_SCRIPT_URL
    if store.warm_start():
        st.session_state.reconciled = False
    else:
        with st.spinner("Loading data from Google Sheets..."):
            store.refresh(DEFAULT_SHEET_URL)
        st.session_state.reconciled = True

store: RecordStore = st.session_state.store

# ---------------------------------------------------------------------------
# Sidebar
# ---------------------------------------------------------------------------
st.sidebar.title("Restaurant Sales")
st.sidebar.markdown("Owner's Dashboard")
st.sidebar.divider()

sheet_url = st.sidebar.text_input("Google Sheet URL or ID", value=st.session_state.sheet_url)
col_a, col_b = st.sidebar.columns(2)
with col_a:
    if st.button("Connect", use_container_width=True):
        if not is_valid_sheet_url(sheet_url):
            st.sidebar.error("That does not look like a Google Sheets URL or ID.")
        else:
            st.session_state.sheet_url = sheet_url
            with st.spinner("Loading data from Google Sheets..."):
                store.refresh(sheet_url)
with col_b:
    if st.button("Refresh", use_container_width=True):
        with st.spinner("Refreshing..."):
            store.refresh(st.session_state.sheet_url)

with st.sidebar.expander("Other sources"):
    uploaded = st.file_uploader("Upload CSV or Excel", type=["csv", "xlsx"])
    if uploaded is not None and st.button("Load file"):
        try:
            if uploaded.name.lower().endswith(".xlsx"):
                records = load_records_from_excel(io.BytesIO(uploaded.getvalue()))
            else:
                records = parse_csv_text(uploaded.getvalue().decode("utf-8-sig", errors="replace"))
            store.load_records(records, source=uploaded.name)
        except RecordParseError as exc:
            st.error(f"Could not read {uploaded.name}: {exc}")
    if st.button("Load demo data"):
        store.load_records(generate_orders(), source="demo")
    if st.button("Clear local cache"):
        clear_cache(store.cache_path)

st.sidebar.divider()
st.sidebar.subheader("Filters")

date_range = st.sidebar.selectbox(
    "Date range",
    list(DATE_RANGE_LABELS),
    format_func=DATE_RANGE_LABELS.get,
)
view_all = get_dashboard_view(store.records, FilterState())
category = st.sidebar.selectbox("Category", ["all", *view_all["category_options"]])
time_slot = st.sidebar.selectbox(
    "Time slot",
    list(TIME_SLOT_LABELS),
    format_func=TIME_SLOT_LABELS.get,
)

page = st.sidebar.radio("Navigate", ["Dashboard", "Executive Report", "Add Entry"])

st.sidebar.divider()
if store.last_updated is not None:
    source = "cached copy" if store.from_cache else store.source
    st.sidebar.caption(f"Last refreshed {store.last_updated:%d %b %Y %H:%M} ({source})")

if store.error:
    st.error(f"Error loading data from Google Sheets: {store.error}. Showing the last loaded data.")


# ---------------------------------------------------------------------------
# Helper: status / highlight card
# ---------------------------------------------------------------------------
def highlight_card(label: str, headline: str, detail: str, color: str):
    st.markdown(
        f"""
        <div style="background: linear-gradient(135deg, {color}22, {color}11);
                    border-left: 4px solid {color};
                    border-radius: 8px; padding: 16px; margin-bottom: 8px;">
            <div style="font-size: 13px; color: #888; font-weight: 600; text-transform: uppercase;">{label}</div>
            <div style="font-size: 24px; font-weight: 700; color: #222; margin: 4px 0;">{headline}</div>
            <div style="font-size: 13px; color: #666;">{detail}</div>
        </div>
        """,
        unsafe_allow_html=True,
    )


def hourly_chart(hourly, height: int = 320) -> go.Figure:
    colors = ["#e74c3c" if h.is_peak else "#3498db" for h in hourly]
    fig = go.Figure(go.Bar(
        x=[h.hour for h in hourly],
        y=[h.sales for h in hourly],
        marker_color=colors,
    ))
    fig.update_layout(
        height=height,
        yaxis_title="Revenue",
        plot_bgcolor="rgba(0,0,0,0)",
        margin=dict(l=10, r=10, t=10, b=40),
    )
    return fig


# ===========================================================================
# PAGE: Dashboard
# ===========================================================================
if page == "Dashboard":
    st.title("Restaurant Sales Dashboard")

    if not store.records:
        st.info("No data loaded yet. Connect a Google Sheet, upload a file, or load demo data.")
    else:
        view = get_dashboard_view(
            store.records,
            FilterState(date_range=date_range, category=category, time_slot=time_slot),
        )
        st.caption(f"{len(view['filtered'])} records match the current filters")

        if view["metrics"] is None:
            st.warning("No records match the selected filters.")
        else:
            m = view["metrics"]
            col1, col2, col3 = st.columns(3)
            with col1:
                st.metric("Total Revenue", format_currency(m.total_revenue), delta=format_percentage(m.revenue_change))
            with col2:
                st.metric("Total Orders", f"{m.total_orders:,}", delta=format_percentage(m.orders_change))
            with col3:
                st.metric("Average Bill", format_currency(m.average_bill_value))

            st.divider()

            # Insights
            st.subheader("Today's Insights")
            for insight in view["insights"]:
                show = {"success": st.success, "warning": st.warning, "info": st.info}[insight.kind.value]
                show(f"{insight.icon} {insight.message}")

            # Trend
            st.subheader("Sales Trend")
            trend_df = pd.DataFrame([{"date": p.date, "revenue": p.revenue} for p in view["trend"]])
            fig = go.Figure(go.Scatter(
                x=trend_df["date"],
                y=trend_df["revenue"],
                mode="lines+markers",
                line=dict(color="#3498db", width=2),
                fill="tozeroy",
                fillcolor="rgba(52, 152, 219, 0.1)",
            ))
            fig.update_layout(
                height=350,
                yaxis_title="Revenue",
                xaxis_title="Date",
                plot_bgcolor="rgba(0,0,0,0)",
            )
            st.plotly_chart(fig, use_container_width=True)

            # Top / bottom items
            col1, col2 = st.columns(2)
            with col1:
                st.subheader("Top Sellers")
                top_df = pd.DataFrame([vars(i) for i in view["top_items"]])
                fig = go.Figure(go.Bar(
                    x=top_df["quantity"], y=top_df["name"], orientation="h", marker_color="#2ecc71",
                ))
                fig.update_layout(height=300, yaxis=dict(autorange="reversed"), plot_bgcolor="rgba(0,0,0,0)")
                st.plotly_chart(fig, use_container_width=True)
            with col2:
                st.subheader("Slow Movers")
                bottom_df = pd.DataFrame([vars(i) for i in view["bottom_items"]])
                fig = go.Figure(go.Bar(
                    x=bottom_df["quantity"], y=bottom_df["name"], orientation="h", marker_color="#e74c3c",
                ))
                fig.update_layout(height=300, yaxis=dict(autorange="reversed"), plot_bgcolor="rgba(0,0,0,0)")
                st.plotly_chart(fig, use_container_width=True)

            # Category + hourly
            col1, col2 = st.columns(2)
            with col1:
                st.subheader("Category Performance")
                cat_df = pd.DataFrame([vars(c) for c in view["categories"]])
                fig = px.pie(cat_df, names="name", values="value", hole=0.4)
                fig.update_layout(height=350, margin=dict(l=10, r=10, t=10, b=10))
                st.plotly_chart(fig, use_container_width=True)
            with col2:
                st.subheader("Peak Hours")
                st.plotly_chart(hourly_chart(view["hourly"]), use_container_width=True)
                st.caption("Red bars mark the lunch (12-2 PM) and dinner (7-9 PM) windows.")

            st.divider()
            st.download_button(
                "Export filtered data (CSV)",
                data=records_to_csv(view["filtered"]),
                file_name=export_filename(),
                mime="text/csv",
            )


# ===========================================================================
# PAGE: Executive Report
# ===========================================================================
elif page == "Executive Report":
    st.title("Executive Snapshot")

    report_range = st.radio(
        "Report period",
        [DateRange.TODAY, DateRange.THIS_MONTH],
        format_func=DATE_RANGE_LABELS.get,
        horizontal=True,
    )

    if not store.records:
        st.info("No data loaded yet.")
    else:
        report = generate_executive_report(filter_by_date_range(store.records, report_range), report_range)

        st.subheader(report.title)
        st.caption(report.date_range)

        col1, col2 = st.columns(2)
        with col1:
            highlight_card(
                "Status", report.status.label, report.status.description,
                STATUS_COLORS[report.status.color.value],
            )
        with col2:
            trend_arrow = {"up": "▲", "down": "▼", "neutral": "●"}[report.revenue.trend.value]
            highlight_card("Revenue", report.revenue.value, f"{trend_arrow} {report.revenue.trend_label}", "#3498db")

        col1, col2, col3, col4 = st.columns(4)
        with col1:
            highlight_card("Hero dish", report.top_item.name, f"{report.top_item.quantity} sold", "#2ecc71")
        with col2:
            highlight_card(
                "Best category", report.best_category.name,
                format_currency(report.best_category.revenue), "#2ecc71",
            )
        with col3:
            highlight_card("Slow dish", report.slow_item.name, f"{report.slow_item.quantity} sold", "#e74c3c")
        with col4:
            highlight_card(
                "Weakest category", report.low_category.name,
                format_currency(report.low_category.revenue), "#e74c3c",
            )

        st.subheader(f"Time story — peak window {report.time_story.peak_window}")
        st.plotly_chart(hourly_chart(report.time_story.hourly_bars, height=260), use_container_width=True)

        st.subheader("Recommended actions")
        for action in report.actions:
            color = ACTION_COLORS[action.color.value]
            st.markdown(
                f"<div style='border-left: 3px solid {color}; padding: 4px 8px; margin: 4px 0;'>"
                f"{action.icon} <b>{action.title}</b></div>",
                unsafe_allow_html=True,
            )

        st.download_button(
            "Download printable report",
            data=render_report_markdown(report),
            file_name=f"report_{report_range.value}.md",
            mime="text/markdown",
        )


# ===========================================================================
# PAGE: Add Entry
# ===========================================================================
elif page == "Add Entry":
    st.title("Add New Entry")
    st.caption("Sync live to your Google Sheet")

    script_url = st.text_input("Apps Script URL", value=st.session_state.script_url)
    st.session_state.script_url = script_url

    # Defaults are fixed per entry so a submit rerun keeps what was typed
    if "entry_defaults" not in st.session_state:
        st.session_state.entry_defaults = build_entry("", "", 1, 0.0)
    defaults = st.session_state.entry_defaults

    categories = view_all["category_options"] or ["Main Dish"]
    with st.form("add_entry"):
        col1, col2, col3 = st.columns(3)
        with col1:
            entry_date = st.text_input("Date (DD-MM-YYYY)", value=defaults["Date"])
        with col2:
            entry_time = st.text_input("Time (HH:MM)", value=defaults["Time"])
        with col3:
            order_id = st.text_input("Order ID", value=defaults["Order_ID"])
        item_name = st.text_input("Item name")
        entry_category = st.selectbox("Category", categories)
        col1, col2 = st.columns(2)
        with col1:
            quantity = st.number_input("Quantity", min_value=1, value=1, step=1)
        with col2:
            unit_price = st.number_input("Unit price", min_value=0.0, value=0.0, step=10.0)
        st.caption(f"Total: {format_currency(quantity * unit_price)}")
        submitted = st.form_submit_button("Save entry")

    if submitted:
        entry = build_entry(
            item_name,
            entry_category,
            int(quantity),
            float(unit_price),
            date=entry_date.strip(),
            time=entry_time.strip(),
            order_id=order_id.strip(),
        )
        try:
            validate_entry(entry)
            with st.spinner("Saving..."):
                message = submit_entry(script_url, entry)
        except MissingScriptUrlError:
            st.error("Please configure your Google Apps Script URL first")
        except (EntryValidationError, EntrySubmitError) as exc:
            st.error(str(exc))
        else:
            st.success(message)
            del st.session_state.entry_defaults
            store.refresh(st.session_state.sheet_url)


# ---------------------------------------------------------------------------
# Phase two of the initial load: reconcile the cached view with the sheet
# ---------------------------------------------------------------------------
if not st.session_state.reconciled:
    st.session_state.reconciled = True
    store.refresh(st.session_state.sheet_url)
    st.rerun()
