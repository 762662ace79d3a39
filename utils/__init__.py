"""Utility helpers shared across the dashboard, API and report modules."""

from utils.insights import INSIGHT_DEFINITIONS, build_seller_insights, triggered_insights
from utils.io import parse_analytics_payload, read_analytics_snapshot

__all__ = [
    "INSIGHT_DEFINITIONS",
    "build_seller_insights",
    "triggered_insights",
    "parse_analytics_payload",
    "read_analytics_snapshot",
]
