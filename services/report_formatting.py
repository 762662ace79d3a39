"""Formatting boundary between the analytics snapshot and the PDF renderers.

Every number is turned into a display string here, with missing values
replaced by their default text, so the renderers never branch on data.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np

from services.analytics_snapshot import (
    AnalyticsSnapshot,
    CategoryPerformance,
    CustomerInsights,
    InventoryMetrics,
    Overview,
    ProductPerformance,
    SalesPoint,
)

TIMEFRAME_LABELS = {
    "7d": "Last 7 days",
    "30d": "Last 30 days",
    "90d": "Last 90 days",
    "1y": "Last year",
}

MAX_TEXT_CHARS = 25
ELLIPSIS = "..."
MISSING_TEXT = "N/A"
DAILY_POINTS = 7
TOP_PRODUCT_LIMIT = 10


@dataclass(frozen=True)
class MetricRow:
    label: str
    value: str


def _present(value: Optional[float]) -> bool:
    return value is not None and bool(np.isfinite(value))


def format_timeframe(timeframe: str) -> str:
    return TIMEFRAME_LABELS.get(timeframe, timeframe)


def format_currency(value: Optional[float], symbol: str = "₱") -> str:
    if not _present(value):
        return f"{symbol}0"
    text = f"{value:,.2f}".rstrip("0").rstrip(".")
    return f"{symbol}{text}"


def format_count(value: Optional[float]) -> str:
    """Grouped whole number; a fractional count keeps one decimal instead of being rounded."""
    if not _present(value):
        return "0"
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.1f}"


def format_decimal(value: Optional[float], suffix: str = "") -> str:
    return f"{value:.1f}{suffix}" if _present(value) else f"0.0{suffix}"


def format_percent(value: Optional[float]) -> str:
    return format_decimal(value, "%")


def truncate_text(text: Optional[str], limit: int = MAX_TEXT_CHARS) -> str:
    if not text:
        return MISSING_TEXT
    return text[:limit] + ELLIPSIS if len(text) > limit else text


def overview_rows(overview: Overview, symbol: str = "₱") -> List[MetricRow]:
    return [
        MetricRow("Total Revenue", format_currency(overview.total_revenue, symbol)),
        MetricRow("Total Orders", format_count(overview.total_orders)),
        MetricRow("Total Products", format_count(overview.total_products)),
        MetricRow("Average Rating", format_decimal(overview.average_rating)),
        MetricRow("Monthly Growth", format_percent(overview.monthly_growth)),
        MetricRow("Conversion Rate", format_percent(overview.conversion_rate)),
    ]


def customer_rows(insights: CustomerInsights, symbol: str = "₱") -> List[MetricRow]:
    return [
        MetricRow("Total Customers", format_count(insights.total_customers)),
        MetricRow("Repeat Customers", format_count(insights.repeat_customers)),
        MetricRow("Average Order Value", format_currency(insights.average_order_value, symbol)),
        MetricRow("Customer Satisfaction", format_percent(insights.customer_satisfaction)),
    ]


def inventory_rows(metrics: InventoryMetrics, symbol: str = "₱") -> List[MetricRow]:
    return [
        MetricRow("Low Stock Items", format_count(metrics.low_stock_items)),
        MetricRow("Out of Stock Items", format_count(metrics.out_of_stock_items)),
        MetricRow("Total Inventory Value", format_currency(metrics.total_inventory_value, symbol)),
        MetricRow("Inventory Turnover", format_decimal(metrics.inventory_turnover, "x")),
    ]


def sales_rows(points: Sequence[SalesPoint], symbol: str = "₱") -> List[List[str]]:
    return [[truncate_text(p.label), format_currency(p.revenue, symbol), format_count(p.orders)] for p in points]


def daily_sales_rows(points: Sequence[SalesPoint], symbol: str = "₱") -> List[List[str]]:
    """Most recent week of the daily series."""
    return sales_rows(list(points)[-DAILY_POINTS:], symbol)


def top_product_rows(products: Sequence[ProductPerformance], symbol: str = "₱") -> List[List[str]]:
    return [
        [
            truncate_text(p.name),
            format_currency(p.revenue, symbol),
            format_count(p.orders),
            format_decimal(p.rating),
        ]
        for p in list(products)[:TOP_PRODUCT_LIMIT]
    ]


def category_rows(categories: Sequence[CategoryPerformance], symbol: str = "₱") -> List[List[str]]:
    return [
        [
            truncate_text(c.category),
            format_currency(c.revenue, symbol),
            format_count(c.orders),
            format_percent(c.growth),
        ]
        for c in categories
    ]


def executive_summary(snapshot: AnalyticsSnapshot, symbol: str = "₱") -> str:
    overview = snapshot.overview
    growth = overview.monthly_growth if _present(overview.monthly_growth) else 0.0
    direction = "positive" if growth > 0 else "negative"
    return (
        f"Your business shows {direction} growth of {format_percent(overview.monthly_growth)} "
        f"with a total revenue of {format_currency(overview.total_revenue, symbol)}. "
        f"You have {format_count(overview.total_orders)} orders across "
        f"{format_count(overview.total_products)} products with an average rating of "
        f"{format_decimal(overview.average_rating)} stars. "
        f"Your conversion rate stands at {format_percent(overview.conversion_rate)}."
    )
