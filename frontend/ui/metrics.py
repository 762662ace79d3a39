"""KPI card helpers for the seller analytics dashboard."""

from typing import List, Sequence

import streamlit as st

from frontend.ui.rendering import MetricSpec, metric_specs_from_rows, render_metrics
from services.analytics_snapshot import AnalyticsSnapshot
from services.report_formatting import customer_rows, format_percent, inventory_rows, overview_rows
from utils.insights import INSIGHT_DEFINITIONS, triggered_insights


def build_overview_specs(snapshot: AnalyticsSnapshot, symbol: str = "₱") -> List[MetricSpec]:
    """Overview cards in report order, with growth context on the revenue card."""
    specs = metric_specs_from_rows(overview_rows(snapshot.overview, symbol))
    growth = snapshot.overview.monthly_growth
    if specs and growth is not None:
        specs[0] = MetricSpec(
            label=specs[0].label,
            value=specs[0].value,
            help="Revenue for the selected timeframe.",
            caption=f"{format_percent(growth)} month over month",
        )
    return specs


def _render_rows(specs: Sequence[MetricSpec], per_row: int) -> None:
    for start in range(0, len(specs), per_row):
        chunk = specs[start : start + per_row]
        render_metrics(st.columns(per_row), chunk)


def render_overview_metrics(snapshot: AnalyticsSnapshot, symbol: str = "₱") -> None:
    _render_rows(build_overview_specs(snapshot, symbol), per_row=3)


def render_customer_and_inventory(snapshot: AnalyticsSnapshot, symbol: str = "₱") -> None:
    left, right = st.columns(2)
    with left:
        st.markdown("#### Customer Insights")
        for spec in metric_specs_from_rows(customer_rows(snapshot.customer_insights, symbol)):
            st.metric(spec.label, spec.value)
    with right:
        st.markdown("#### Inventory Metrics")
        for spec in metric_specs_from_rows(inventory_rows(snapshot.inventory_metrics, symbol)):
            st.metric(spec.label, spec.value)


def render_insight_callouts(snapshot: AnalyticsSnapshot) -> None:
    """Show rule-based insights as warnings; stay quiet when none fire."""
    for key in triggered_insights(snapshot):
        rule = INSIGHT_DEFINITIONS[key]
        st.warning(f"**{rule['label']}**: {rule['insight']}", icon="⚠️")
