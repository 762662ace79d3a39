import pytest

from services.analytics_snapshot import AnalyticsSnapshot, ProductPerformance, SalesPoint
from services.report_formatting import (
    category_rows,
    customer_rows,
    daily_sales_rows,
    executive_summary,
    format_count,
    format_currency,
    format_decimal,
    format_percent,
    format_timeframe,
    inventory_rows,
    overview_rows,
    top_product_rows,
    truncate_text,
)


@pytest.mark.parametrize(
    "value, expected",
    [
        (15000, "₱15,000"),
        (2800.5, "₱2,800.5"),
        (1234567.891, "₱1,234,567.89"),
        (0, "₱0"),
        (None, "₱0"),
        (float("nan"), "₱0"),
    ],
)
def test_format_currency(value, expected) -> None:
    assert format_currency(value) == expected


def test_numeric_defaults_for_missing_values() -> None:
    assert format_count(None) == "0"
    assert format_count(1234.0) == "1,234"
    assert format_decimal(None) == "0.0"
    assert format_decimal(4.56) == "4.6"
    assert format_decimal(None, "x") == "0.0x"
    assert format_percent(None) == "0.0%"
    assert format_percent(15.24) == "15.2%"


def test_truncate_text_caps_long_names() -> None:
    long_name = "Sustainable Bamboo Utensils Travel Set"

    assert truncate_text(long_name) == "Sustainable Bamboo Utensi..."
    assert truncate_text("Organic Green Tea") == "Organic Green Tea"
    assert truncate_text("x" * 25) == "x" * 25
    assert truncate_text(None) == "N/A"
    assert truncate_text("") == "N/A"


def test_format_timeframe_known_and_unknown() -> None:
    assert format_timeframe("7d") == "Last 7 days"
    assert format_timeframe("30d") == "Last 30 days"
    assert format_timeframe("90d") == "Last 90 days"
    assert format_timeframe("1y") == "Last year"
    assert format_timeframe("6m") == "6m"


def test_metric_rows_use_defaults_when_sections_are_missing() -> None:
    snapshot = AnalyticsSnapshot()

    assert [(r.label, r.value) for r in overview_rows(snapshot.overview)] == [
        ("Total Revenue", "₱0"),
        ("Total Orders", "0"),
        ("Total Products", "0"),
        ("Average Rating", "0.0"),
        ("Monthly Growth", "0.0%"),
        ("Conversion Rate", "0.0%"),
    ]
    assert [r.value for r in customer_rows(snapshot.customer_insights)] == ["0", "0", "₱0", "0.0%"]
    assert [r.value for r in inventory_rows(snapshot.inventory_metrics)] == ["0", "0", "₱0", "0.0x"]


def test_daily_rows_keep_most_recent_week() -> None:
    points = [SalesPoint(f"2024-01-{day:02d}", 100.0 * day, day) for day in range(1, 11)]

    rows = daily_sales_rows(points)

    assert len(rows) == 7
    assert rows[0] == ["2024-01-04", "₱400", "4"]
    assert rows[-1] == ["2024-01-10", "₱1,000", "10"]


def test_top_product_rows_limit_and_missing_fields() -> None:
    products = [ProductPerformance(name=f"Product {i}", revenue=1000.0, orders=2, rating=4.8) for i in range(12)]
    products.insert(0, ProductPerformance())

    rows = top_product_rows(products)

    assert len(rows) == 10
    assert rows[0] == ["N/A", "₱0", "0", "0.0"]
    assert rows[1] == ["Product 0", "₱1,000", "2", "4.8"]


def test_category_rows_format_growth_as_percent() -> None:
    snapshot = AnalyticsSnapshot.from_dict(
        {"categoryPerformance": [{"category": "Kitchenware", "revenue": 20000, "orders": 35, "growth": 8.3}]}
    )

    assert category_rows(snapshot.category_performance) == [["Kitchenware", "₱20,000", "35", "8.3%"]]


def test_executive_summary_direction_follows_growth_sign() -> None:
    growing = AnalyticsSnapshot.from_dict({"overview": {"totalRevenue": 125000, "monthlyGrowth": 15.2}})
    flat = AnalyticsSnapshot.from_dict({"overview": {"totalRevenue": 15000}})

    assert executive_summary(growing).startswith("Your business shows positive growth of 15.2%")
    assert "₱125,000" in executive_summary(growing)
    assert executive_summary(flat).startswith("Your business shows negative growth of 0.0%")


def test_format_count_keeps_fractional_counts() -> None:
    assert format_count(45.7) == "45.7"
    assert format_count(12345.6) == "12,345.6"
    assert format_count(45.0) == "45"
