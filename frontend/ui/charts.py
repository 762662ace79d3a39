"""Chart and data prep helpers for the seller analytics dashboard."""

from typing import Sequence

import altair as alt
import numpy as np
import pandas as pd

from frontend.ui.chart_capture import ChartRegistry
from services.analytics_snapshot import AnalyticsSnapshot, CategoryPerformance, SalesPoint

ANALYTICS_CHARTS_ID = "analytics-charts"
BRAND_GREEN_HEX = "#22c55e"
ORDERS_HEX = "#86c5da"


def prepare_sales_trend_df(points: Sequence[SalesPoint]) -> pd.DataFrame:
    """Return one row per sales point with numeric revenue/orders (missing -> 0)."""
    df = pd.DataFrame(
        {
            "label": [p.label or "" for p in points],
            "revenue": [p.revenue for p in points],
            "orders": [p.orders for p in points],
        },
        columns=["label", "revenue", "orders"],
    )
    df["revenue"] = pd.to_numeric(df["revenue"], errors="coerce").fillna(0.0)
    df["orders"] = pd.to_numeric(df["orders"], errors="coerce").fillna(0.0)
    df["order"] = np.arange(len(df), dtype=int)
    return df


def prepare_category_df(categories: Sequence[CategoryPerformance]) -> pd.DataFrame:
    """Category revenue share, sorted by revenue descending."""
    df = pd.DataFrame(
        {
            "category": [c.category or "Uncategorized" for c in categories],
            "revenue": [c.revenue for c in categories],
            "growth": [c.growth for c in categories],
        },
        columns=["category", "revenue", "growth"],
    )
    df["revenue"] = pd.to_numeric(df["revenue"], errors="coerce").fillna(0.0)
    df["growth"] = pd.to_numeric(df["growth"], errors="coerce")
    total = float(df["revenue"].sum())
    df["share_pct"] = df["revenue"] / total * 100.0 if total > 0 else 0.0
    return df.sort_values("revenue", ascending=False).reset_index(drop=True)


def build_sales_trend_chart(trend_df: pd.DataFrame, title: str = "Sales Trend") -> alt.LayerChart:
    """Revenue bars with an orders line on an independent axis."""
    x_label = alt.X("label:N", title=None, sort=alt.SortField("order", order="ascending"))
    base = alt.Chart(trend_df).encode(x=x_label)
    revenue = base.mark_bar(color=BRAND_GREEN_HEX, opacity=0.85).encode(
        y=alt.Y("revenue:Q", title="Revenue"),
        tooltip=[
            alt.Tooltip("label:N", title="Period"),
            alt.Tooltip("revenue:Q", title="Revenue", format=",.0f"),
        ],
    )
    orders = base.mark_line(color=ORDERS_HEX, strokeWidth=2, point=True).encode(
        y=alt.Y("orders:Q", title="Orders"),
        tooltip=[alt.Tooltip("orders:Q", title="Orders", format=",.0f")],
    )
    return alt.layer(revenue, orders).resolve_scale(y="independent").properties(title=title, height=260)


def build_category_chart(category_df: pd.DataFrame) -> alt.Chart:
    return (
        alt.Chart(category_df)
        .mark_bar(color=BRAND_GREEN_HEX)
        .encode(
            x=alt.X("revenue:Q", title="Revenue"),
            y=alt.Y("category:N", title=None, sort="-x"),
            tooltip=[
                alt.Tooltip("category:N", title="Category"),
                alt.Tooltip("revenue:Q", title="Revenue", format=",.0f"),
                alt.Tooltip("share_pct:Q", title="Share (%)", format=".1f"),
                alt.Tooltip("growth:Q", title="Growth (%)", format=".1f"),
            ],
        )
        .properties(title="Category Performance", height=220)
    )


def build_analytics_chart(snapshot: AnalyticsSnapshot) -> alt.VConcatChart:
    """Combined dashboard chart that the PDF export embeds."""
    points = snapshot.sales_data.monthly or snapshot.sales_data.daily
    title = "Monthly Sales" if snapshot.sales_data.monthly else "Daily Sales"
    trend = build_sales_trend_chart(prepare_sales_trend_df(points), title=title)
    category = build_category_chart(prepare_category_df(snapshot.category_performance))
    return alt.vconcat(trend, category).configure_view(strokeWidth=0)


def build_dashboard_charts(snapshot: AnalyticsSnapshot) -> ChartRegistry:
    """Register the dashboard's exportable charts under their element ids."""
    registry = ChartRegistry()
    if snapshot.sales_data.is_empty() and not snapshot.category_performance:
        return registry
    registry.register(ANALYTICS_CHARTS_ID, build_analytics_chart(snapshot))
    return registry
