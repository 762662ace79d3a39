from services.analytics_snapshot import AnalyticsSnapshot
from utils.insights import DEFAULT_INSIGHTS, INSIGHT_DEFINITIONS, build_seller_insights, triggered_insights


def _snapshot(**overview_and_inventory):
    inventory = {}
    if "lowStockItems" in overview_and_inventory:
        inventory["lowStockItems"] = overview_and_inventory.pop("lowStockItems")
    return AnalyticsSnapshot.from_dict({"overview": overview_and_inventory, "inventoryMetrics": inventory})


def test_strong_growth_and_low_stock_fire_together() -> None:
    snapshot = _snapshot(monthlyGrowth=25.0, averageRating=4.5, lowStockItems=5)

    assert triggered_insights(snapshot) == ["strong_growth", "low_stock"]
    assert build_seller_insights(snapshot) == [
        INSIGHT_DEFINITIONS["strong_growth"]["insight"],
        INSIGHT_DEFINITIONS["low_stock"]["insight"],
    ]


def test_negative_growth_and_low_rating() -> None:
    snapshot = _snapshot(monthlyGrowth=-3.0, averageRating=3.2)

    assert triggered_insights(snapshot) == ["negative_growth", "low_rating"]


def test_thresholds_are_exclusive() -> None:
    snapshot = _snapshot(monthlyGrowth=20.0, averageRating=4.0, lowStockItems=3)

    assert triggered_insights(snapshot) == []


def test_missing_metrics_fall_back_to_default_insights() -> None:
    snapshot = AnalyticsSnapshot()

    assert triggered_insights(snapshot) == []
    assert build_seller_insights(snapshot) == DEFAULT_INSIGHTS
    assert build_seller_insights(snapshot) is not DEFAULT_INSIGHTS
