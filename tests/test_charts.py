import altair as alt
import pandas as pd

from frontend.ui.charts import (
    ANALYTICS_CHARTS_ID,
    build_analytics_chart,
    build_dashboard_charts,
    prepare_category_df,
    prepare_sales_trend_df,
)
from services.analytics_snapshot import AnalyticsSnapshot


SNAPSHOT = AnalyticsSnapshot.from_dict(
    {
        "salesData": {
            "monthly": [
                {"month": "January", "revenue": 25000, "orders": 35},
                {"month": "February", "revenue": None, "orders": 42},
            ]
        },
        "categoryPerformance": [
            {"category": "Kitchenware", "revenue": 20000, "orders": 35, "growth": 8.3},
            {"category": "Beverages", "revenue": 60000, "orders": 40, "growth": 12.5},
        ],
    }
)


def test_prepare_sales_trend_df_fills_missing_values() -> None:
    df = prepare_sales_trend_df(SNAPSHOT.sales_data.monthly)

    assert list(df["label"]) == ["January", "February"]
    assert list(df["revenue"]) == [25000.0, 0.0]
    assert list(df["order"]) == [0, 1]


def test_prepare_sales_trend_df_handles_no_points() -> None:
    df = prepare_sales_trend_df(())

    assert df.empty
    assert {"label", "revenue", "orders", "order"} <= set(df.columns)


def test_prepare_category_df_sorts_and_computes_share() -> None:
    df = prepare_category_df(SNAPSHOT.category_performance)

    assert list(df["category"]) == ["Beverages", "Kitchenware"]
    assert df.loc[0, "share_pct"] == 75.0
    assert pd.api.types.is_float_dtype(df["growth"])


def test_dashboard_registry_exposes_analytics_chart() -> None:
    registry = build_dashboard_charts(SNAPSHOT)

    assert ANALYTICS_CHARTS_ID in registry
    assert isinstance(build_analytics_chart(SNAPSHOT), alt.VConcatChart)


def test_dashboard_registry_is_empty_without_data() -> None:
    assert ANALYTICS_CHARTS_ID not in build_dashboard_charts(AnalyticsSnapshot())
