"""Rule metadata and recommendation helpers for seller analytics."""

from __future__ import annotations

from typing import Dict, List

from services.analytics_snapshot import AnalyticsSnapshot

INSIGHT_DEFINITIONS: Dict[str, Dict[str, str]] = {
    "strong_growth": {
        "label": "Strong growth",
        "meaning": "Monthly growth above 20%.",
        "insight": "Excellent growth! Consider expanding your product line.",
    },
    "negative_growth": {
        "label": "Negative growth",
        "meaning": "Monthly growth below zero.",
        "insight": "Negative growth detected. Review your marketing strategy.",
    },
    "low_stock": {
        "label": "Low stock",
        "meaning": "More than three items are running low.",
        "insight": "Consider restocking low inventory items to avoid stockouts.",
    },
    "low_rating": {
        "label": "Low rating",
        "meaning": "Average product rating below 4.0.",
        "insight": "Focus on improving product quality and customer service.",
    },
}

DEFAULT_INSIGHTS = [
    "Continue monitoring your analytics for growth opportunities.",
    "Regular analysis helps identify trends and optimization areas.",
]

GROWTH_HIGH_PCT = 20.0
LOW_STOCK_THRESHOLD = 3
RATING_FLOOR = 4.0


def triggered_insights(snapshot: AnalyticsSnapshot) -> List[str]:
    """Return the keys of the rules that fire for ``snapshot``.

    Absent metrics never fire a rule; a seller with no rating yet is not
    told to improve it.
    """
    keys: List[str] = []
    growth = snapshot.overview.monthly_growth
    if growth is not None:
        if growth > GROWTH_HIGH_PCT:
            keys.append("strong_growth")
        elif growth < 0:
            keys.append("negative_growth")

    low_stock = snapshot.inventory_metrics.low_stock_items
    if low_stock is not None and low_stock > LOW_STOCK_THRESHOLD:
        keys.append("low_stock")

    rating = snapshot.overview.average_rating
    if rating is not None and rating < RATING_FLOOR:
        keys.append("low_rating")
    return keys


def build_seller_insights(snapshot: AnalyticsSnapshot) -> List[str]:
    """Translate fired rules into short, actionable recommendations."""
    insights = [INSIGHT_DEFINITIONS[key]["insight"] for key in triggered_insights(snapshot)]
    if not insights:
        insights = list(DEFAULT_INSIGHTS)
    return insights
