# app.py — Green Marketplace seller analytics dashboard
# - Snapshot upload or bundled sample, KPI cards, sales/category charts
# - PDF report export (same report as the API's /reports/seller-analytics)

import json
import logging
import os
from pathlib import Path

import streamlit as st

from frontend.ui.charts import ANALYTICS_CHARTS_ID, build_dashboard_charts
from frontend.ui.export import ReportGenerationError, export_analytics_sync
from frontend.ui.metrics import render_customer_and_inventory, render_insight_callouts, render_overview_metrics
from frontend.ui.rendering import render_report_table
from frontend.ui.report_sections import CATEGORY_COLUMNS, TOP_PRODUCT_COLUMNS
from services.analytics_snapshot import SellerIdentity, snapshot_to_dict
from services.report_config import ReportConfig
from services.report_formatting import TIMEFRAME_LABELS, category_rows, top_product_rows
from utils.io import read_analytics_snapshot

BASE_DIR = Path(__file__).resolve().parent
REPORT_STATE_KEY = "report_pdf"


def report_inputs_key(snapshot, timeframe, seller_name, seller_email, include_charts) -> str:
    """Fingerprint of everything that shapes the PDF; a cached report is only valid for the same key."""
    return json.dumps(
        [snapshot_to_dict(snapshot), timeframe, seller_name.strip(), seller_email.strip(), include_charts],
        sort_keys=True,
    )


def cached_report(state, inputs_key: str):
    """Return ``(filename, content, page_count)`` for ``inputs_key``, dropping a stale entry."""
    entry = state.get(REPORT_STATE_KEY)
    if not entry:
        return None
    if entry[0] != inputs_key:
        state.pop(REPORT_STATE_KEY, None)
        return None
    return entry[1:]


def run_app():
    logging.basicConfig(level=os.getenv("GREENMARKET_LOG_LEVEL", "INFO").upper())
    st.set_page_config(page_title="Green Marketplace Analytics", layout="wide")
    st.title("Seller Analytics")
    config = ReportConfig.from_env()

    with st.sidebar:
        st.header("Data Source")
        default_paths = [str(BASE_DIR / "data" / "sample_analytics.json"), "./data/sample_analytics.json"]
        snapshot_file = st.file_uploader("Analytics snapshot (JSON)", type=["json"])
        try:
            snapshot = read_analytics_snapshot([snapshot_file] if snapshot_file is not None else default_paths)
        except Exception as exc:
            st.error(f"Unable to load analytics snapshot: {exc}")
            st.stop()
        st.caption("If no file is uploaded, the sample snapshot is read from ./data/")

        st.divider()
        st.header("Report")
        timeframe = st.selectbox(
            "Timeframe",
            options=list(TIMEFRAME_LABELS),
            index=1,
            format_func=lambda key: TIMEFRAME_LABELS[key],
        )
        seller_name = st.text_input("Seller name", value="")
        seller_email = st.text_input("Seller email", value="")
        include_charts = st.checkbox("Include charts in PDF", value=True)

    symbol = config.currency_symbol
    st.subheader("Overview")
    render_overview_metrics(snapshot, symbol)
    render_insight_callouts(snapshot)

    charts = build_dashboard_charts(snapshot)
    chart = charts.get(ANALYTICS_CHARTS_ID)
    if chart is not None:
        st.subheader("Visual Analytics")
        st.altair_chart(chart, use_container_width=True)
    else:
        st.info("No sales or category data to chart for this snapshot.")

    st.subheader("Top Performing Products")
    headers, _ = TOP_PRODUCT_COLUMNS
    render_report_table(headers, top_product_rows(snapshot.top_products, symbol), "No product data available.")

    st.subheader("Category Performance")
    headers, _ = CATEGORY_COLUMNS
    render_report_table(headers, category_rows(snapshot.category_performance, symbol), "No category data available.")

    render_customer_and_inventory(snapshot, symbol)

    st.markdown("---")

    # ---------- Downloads ----------
    st.subheader("Downloads")
    st.download_button(
        "Download analytics snapshot (JSON)",
        json.dumps(snapshot_to_dict(snapshot), indent=2).encode("utf-8"),
        file_name="seller_analytics_snapshot.json",
        mime="application/json",
    )

    inputs_key = report_inputs_key(snapshot, timeframe, seller_name, seller_email, include_charts)
    if st.button("Generate PDF report", type="primary"):
        user = SellerIdentity(name=seller_name.strip() or None, email=seller_email.strip() or None)
        with st.spinner("Generating PDF report..."):
            try:
                result = export_analytics_sync(
                    snapshot,
                    user,
                    timeframe,
                    ANALYTICS_CHARTS_ID if include_charts else None,
                    charts=charts,
                    config=config,
                )
            except ReportGenerationError as exc:
                st.error(f"Failed to generate PDF report. {exc.__cause__ or ''}".strip())
                result = None
        if result is not None:
            st.session_state[REPORT_STATE_KEY] = (inputs_key, result.filename, result.content, result.page_count)

    report = cached_report(st.session_state, inputs_key)
    if report:
        filename, content, page_count = report
        st.caption(f"{filename} ({page_count} page{'s' if page_count != 1 else ''})")
        st.download_button("Download PDF report", content, file_name=filename, mime="application/pdf")
    else:
        st.info("Generate the report to enable the PDF download.")


if __name__ == "__main__":
    run_app()
