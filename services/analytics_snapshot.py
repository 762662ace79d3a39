from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

import numpy as np
import pandas as pd

_UNSAFE_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|\x00-\x1f]+')


def _coerce_number(value: Any) -> Optional[float]:
    """Return a finite float or ``None`` for absent, non-numeric or non-finite input."""
    if value is None or isinstance(value, (bool, Mapping, list, tuple)):
        return None
    try:
        number = float(pd.to_numeric(value, errors="coerce"))
    except (TypeError, ValueError, OverflowError):
        return None
    return number if np.isfinite(number) else None


def _coerce_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _records(value: Any) -> List[Mapping[str, Any]]:
    if not isinstance(value, (list, tuple)):
        return []
    return [item for item in value if isinstance(item, Mapping)]


@dataclass(frozen=True)
class Overview:
    total_revenue: Optional[float] = None
    total_orders: Optional[float] = None
    total_products: Optional[float] = None
    average_rating: Optional[float] = None
    monthly_growth: Optional[float] = None
    conversion_rate: Optional[float] = None

    @classmethod
    def from_dict(cls, payload: Any) -> "Overview":
        data = _mapping(payload)
        return cls(
            total_revenue=_coerce_number(data.get("totalRevenue")),
            total_orders=_coerce_number(data.get("totalOrders")),
            total_products=_coerce_number(data.get("totalProducts")),
            average_rating=_coerce_number(data.get("averageRating")),
            monthly_growth=_coerce_number(data.get("monthlyGrowth")),
            conversion_rate=_coerce_number(data.get("conversionRate")),
        )


@dataclass(frozen=True)
class SalesPoint:
    label: Optional[str]  # ISO date for daily points, month name for monthly points
    revenue: Optional[float] = None
    orders: Optional[float] = None


@dataclass(frozen=True)
class SalesData:
    daily: Tuple[SalesPoint, ...] = ()
    monthly: Tuple[SalesPoint, ...] = ()

    @classmethod
    def from_dict(cls, payload: Any) -> "SalesData":
        data = _mapping(payload)
        daily = tuple(
            SalesPoint(_coerce_text(row.get("date")), _coerce_number(row.get("revenue")), _coerce_number(row.get("orders")))
            for row in _records(data.get("daily"))
        )
        monthly = tuple(
            SalesPoint(_coerce_text(row.get("month")), _coerce_number(row.get("revenue")), _coerce_number(row.get("orders")))
            for row in _records(data.get("monthly"))
        )
        return cls(daily=daily, monthly=monthly)

    def is_empty(self) -> bool:
        return not self.daily and not self.monthly


@dataclass(frozen=True)
class ProductPerformance:
    name: Optional[str] = None
    revenue: Optional[float] = None
    orders: Optional[float] = None
    rating: Optional[float] = None


@dataclass(frozen=True)
class CategoryPerformance:
    category: Optional[str] = None
    revenue: Optional[float] = None
    orders: Optional[float] = None
    growth: Optional[float] = None
    products: Optional[float] = None


@dataclass(frozen=True)
class CustomerInsights:
    total_customers: Optional[float] = None
    repeat_customers: Optional[float] = None
    average_order_value: Optional[float] = None
    customer_satisfaction: Optional[float] = None

    @classmethod
    def from_dict(cls, payload: Any) -> "CustomerInsights":
        data = _mapping(payload)
        return cls(
            total_customers=_coerce_number(data.get("totalCustomers")),
            repeat_customers=_coerce_number(data.get("repeatCustomers")),
            average_order_value=_coerce_number(data.get("averageOrderValue")),
            customer_satisfaction=_coerce_number(data.get("customerSatisfaction")),
        )


@dataclass(frozen=True)
class InventoryMetrics:
    low_stock_items: Optional[float] = None
    out_of_stock_items: Optional[float] = None
    total_inventory_value: Optional[float] = None
    inventory_turnover: Optional[float] = None

    @classmethod
    def from_dict(cls, payload: Any) -> "InventoryMetrics":
        data = _mapping(payload)
        return cls(
            low_stock_items=_coerce_number(data.get("lowStockItems")),
            out_of_stock_items=_coerce_number(data.get("outOfStockItems")),
            total_inventory_value=_coerce_number(data.get("totalInventoryValue")),
            inventory_turnover=_coerce_number(data.get("inventoryTurnover")),
        )


@dataclass(frozen=True)
class AnalyticsSnapshot:
    """Read-only analytics payload supplied for one report export."""

    overview: Overview = field(default_factory=Overview)
    sales_data: SalesData = field(default_factory=SalesData)
    top_products: Tuple[ProductPerformance, ...] = ()
    category_performance: Tuple[CategoryPerformance, ...] = ()
    customer_insights: CustomerInsights = field(default_factory=CustomerInsights)
    inventory_metrics: InventoryMetrics = field(default_factory=InventoryMetrics)

    @classmethod
    def from_dict(cls, payload: Any) -> "AnalyticsSnapshot":
        """Build a snapshot from the analytics API's camelCase JSON shape.

        Unknown keys are ignored and missing sections become empty records,
        so a partial payload never fails here.
        """
        data = _mapping(payload)
        return cls(
            overview=Overview.from_dict(data.get("overview")),
            sales_data=SalesData.from_dict(data.get("salesData")),
            top_products=tuple(
                ProductPerformance(
                    name=_coerce_text(row.get("name")),
                    revenue=_coerce_number(row.get("revenue")),
                    orders=_coerce_number(row.get("orders")),
                    rating=_coerce_number(row.get("rating")),
                )
                for row in _records(data.get("topProducts"))
            ),
            category_performance=tuple(
                CategoryPerformance(
                    category=_coerce_text(row.get("category")),
                    revenue=_coerce_number(row.get("revenue")),
                    orders=_coerce_number(row.get("orders")),
                    growth=_coerce_number(row.get("growth")),
                    products=_coerce_number(row.get("products")),
                )
                for row in _records(data.get("categoryPerformance"))
            ),
            customer_insights=CustomerInsights.from_dict(data.get("customerInsights")),
            inventory_metrics=InventoryMetrics.from_dict(data.get("inventoryMetrics")),
        )


@dataclass(frozen=True)
class SellerIdentity:
    name: Optional[str] = None
    email: Optional[str] = None

    @classmethod
    def from_dict(cls, payload: Any) -> "SellerIdentity":
        data = _mapping(payload)
        return cls(name=_coerce_text(data.get("name")), email=_coerce_text(data.get("email")))

    @property
    def label(self) -> str:
        return self.name or self.email or "Seller"

    @property
    def display_name(self) -> str:
        """Filename-safe identity: the name, else the email's local part."""
        if self.name:
            slug = re.sub(r"\s+", "-", self.name)
        elif self.email:
            slug = self.email.split("@")[0]
        else:
            return "seller"
        return _UNSAFE_FILENAME_CHARS.sub("-", slug).strip("-.") or "seller"


def coerce_snapshot(snapshot: Any) -> AnalyticsSnapshot:
    if isinstance(snapshot, AnalyticsSnapshot):
        return snapshot
    return AnalyticsSnapshot.from_dict(snapshot)


def coerce_identity(user: Any) -> SellerIdentity:
    if isinstance(user, SellerIdentity):
        return user
    return SellerIdentity.from_dict(user)


def snapshot_to_dict(snapshot: AnalyticsSnapshot) -> Dict[str, Any]:
    """Inverse of :meth:`AnalyticsSnapshot.from_dict` for JSON downloads."""
    overview = snapshot.overview
    customers = snapshot.customer_insights
    inventory = snapshot.inventory_metrics
    return {
        "overview": {
            "totalRevenue": overview.total_revenue,
            "totalOrders": overview.total_orders,
            "totalProducts": overview.total_products,
            "averageRating": overview.average_rating,
            "monthlyGrowth": overview.monthly_growth,
            "conversionRate": overview.conversion_rate,
        },
        "salesData": {
            "daily": [{"date": p.label, "revenue": p.revenue, "orders": p.orders} for p in snapshot.sales_data.daily],
            "monthly": [{"month": p.label, "revenue": p.revenue, "orders": p.orders} for p in snapshot.sales_data.monthly],
        },
        "topProducts": [
            {"name": p.name, "revenue": p.revenue, "orders": p.orders, "rating": p.rating} for p in snapshot.top_products
        ],
        "categoryPerformance": [
            {"category": c.category, "revenue": c.revenue, "orders": c.orders, "growth": c.growth, "products": c.products}
            for c in snapshot.category_performance
        ],
        "customerInsights": {
            "totalCustomers": customers.total_customers,
            "repeatCustomers": customers.repeat_customers,
            "averageOrderValue": customers.average_order_value,
            "customerSatisfaction": customers.customer_satisfaction,
        },
        "inventoryMetrics": {
            "lowStockItems": inventory.low_stock_items,
            "outOfStockItems": inventory.out_of_stock_items,
            "totalInventoryValue": inventory.total_inventory_value,
            "inventoryTurnover": inventory.inventory_turnover,
        },
    }
