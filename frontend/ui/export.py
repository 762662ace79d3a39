"""Seller analytics PDF export.

One call to :func:`export_analytics` builds a fresh document, lays out the
report sections in a fixed order, stamps the footer and serializes the file.
Nothing is shared between calls, so concurrent exports are independent.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from pathlib import Path
from typing import Any, Callable, List, Optional, Tuple

from frontend.ui.chart_capture import Captured, ChartRegistry, Rasterizer, capture_chart, rasterize_altair_chart
from frontend.ui.pdf import RenderedPage, ReportContext, ReportDocument, render_pdf, stamp_footer
from frontend.ui.report_sections import (
    CATEGORY_COLUMNS,
    TOP_PRODUCT_COLUMNS,
    draw_chart_section,
    draw_header,
    draw_metric_section,
    draw_paragraph_section,
    draw_sales_trend_section,
    draw_table_section,
)
from services.analytics_snapshot import AnalyticsSnapshot, SellerIdentity, coerce_identity, coerce_snapshot
from services.report_config import ReportConfig
from services.report_formatting import (
    category_rows,
    customer_rows,
    daily_sales_rows,
    executive_summary,
    format_timeframe,
    inventory_rows,
    overview_rows,
    sales_rows,
    top_product_rows,
)
from utils.insights import build_seller_insights

Sink = Callable[[str, bytes], None]

REPORT_FAILED_MESSAGE = "Failed to generate PDF report"


class ReportGenerationError(RuntimeError):
    """Raised once at the export boundary when composition fails."""


class ExportState(Enum):
    INITIALIZED = "initialized"
    COMPOSING = "composing"
    FINALIZING = "finalizing"
    DONE = "done"


_TRANSITIONS = {
    ExportState.INITIALIZED: ExportState.COMPOSING,
    ExportState.COMPOSING: ExportState.FINALIZING,
    ExportState.FINALIZING: ExportState.DONE,
}


@dataclass
class ExportResult:
    success: bool
    filename: str
    content: bytes = b""
    page_count: int = 0
    pages: List[RenderedPage] = field(default_factory=list)


def format_generated_on(day: date) -> str:
    return f"{day:%B} {day.day}, {day.year}"


def build_report_filename(user: Any, timeframe: str, today: Optional[date] = None) -> str:
    identity = coerce_identity(user)
    day = today or date.today()
    return f"seller-analytics-{identity.display_name}-{timeframe}-{day.isoformat()}.pdf"


def save_to_directory(directory: Path) -> Sink:
    """Return a sink that writes the finished report into ``directory``."""
    target = Path(directory)

    def _save(filename: str, content: bytes) -> None:
        target.mkdir(parents=True, exist_ok=True)
        (target / filename).write_bytes(content)

    return _save


class ReportExport:
    """A single export run: INITIALIZED -> COMPOSING -> FINALIZING -> DONE."""

    def __init__(
        self,
        snapshot: AnalyticsSnapshot,
        user: SellerIdentity,
        timeframe: str,
        config: ReportConfig,
        today: Optional[date] = None,
    ) -> None:
        self.snapshot = snapshot
        self.user = user
        self.timeframe = timeframe
        self.config = config
        self.today = today or date.today()
        self.state = ExportState.INITIALIZED
        self.document = ReportDocument(config)
        self.ctx: Optional[ReportContext] = None
        self.skipped_chart: Optional[str] = None

    def _advance_state(self, target: ExportState) -> None:
        if _TRANSITIONS.get(self.state) is not target:
            raise RuntimeError(f"Cannot move export from {self.state.value} to {target.value}.")
        self.state = target

    @property
    def filename(self) -> str:
        return build_report_filename(self.user, self.timeframe, self.today)

    def begin(self) -> ReportContext:
        self._advance_state(ExportState.COMPOSING)
        self.ctx = ReportContext.start(self.document)
        symbol = self.config.currency_symbol
        draw_header(self.ctx, self.user.label, format_timeframe(self.timeframe), format_generated_on(self.today))
        draw_paragraph_section(self.ctx, "Executive Summary", [executive_summary(self.snapshot, symbol)])
        draw_metric_section(self.ctx, "Overview Metrics", overview_rows(self.snapshot.overview, symbol))
        return self.ctx

    def add_chart(self, captured: Captured) -> None:
        draw_chart_section(self._require_ctx(), captured.image, captured.width_px, captured.height_px)

    def compose_remaining(self) -> None:
        ctx = self._require_ctx()
        snap = self.snapshot
        symbol = self.config.currency_symbol
        draw_sales_trend_section(
            ctx,
            daily_sales_rows(snap.sales_data.daily, symbol),
            sales_rows(snap.sales_data.monthly, symbol),
        )
        headers, widths = TOP_PRODUCT_COLUMNS
        draw_table_section(ctx, "Top Performing Products", headers, widths, top_product_rows(snap.top_products, symbol))
        headers, widths = CATEGORY_COLUMNS
        draw_table_section(ctx, "Category Performance", headers, widths, category_rows(snap.category_performance, symbol))
        draw_metric_section(ctx, "Customer Insights", customer_rows(snap.customer_insights, symbol))
        draw_metric_section(ctx, "Inventory Metrics", inventory_rows(snap.inventory_metrics, symbol))
        draw_paragraph_section(ctx, "Insights & Recommendations", build_seller_insights(snap), bullet="• ")

    def finalize(self) -> Tuple[str, bytes]:
        self._advance_state(ExportState.FINALIZING)
        stamp_footer(self.document)
        content = render_pdf(self.document)
        self._advance_state(ExportState.DONE)
        return self.filename, content

    def _require_ctx(self) -> ReportContext:
        if self.state is not ExportState.COMPOSING or self.ctx is None:
            raise RuntimeError("Report sections can only be drawn while composing.")
        return self.ctx


async def export_analytics(
    snapshot: Any,
    user: Any,
    timeframe: str,
    element_id: Optional[str] = None,
    *,
    charts: Optional[ChartRegistry] = None,
    config: Optional[ReportConfig] = None,
    sink: Optional[Sink] = None,
    today: Optional[date] = None,
    rasterizer: Rasterizer = rasterize_altair_chart,
) -> ExportResult:
    """Generate the seller analytics PDF and hand it to ``sink``.

    Args:
        snapshot: :class:`AnalyticsSnapshot` or the analytics API's JSON dict.
        user: :class:`SellerIdentity` or a dict with ``name``/``email``.
        timeframe: ``7d``, ``30d``, ``90d`` or ``1y``; other values are shown verbatim.
        element_id: Dashboard chart to embed; missing or failing charts are skipped.
        sink: Called with ``(filename, content)`` once the file is complete.

    Raises:
        ReportGenerationError: If any step other than chart capture fails.
    """
    logger = logging.getLogger(__name__)
    cfg = config or ReportConfig.from_env()
    try:
        run = ReportExport(coerce_snapshot(snapshot), coerce_identity(user), timeframe, cfg, today)
        logger.debug("Composing seller analytics report for %s (%s)", run.user.label, timeframe)
        run.begin()

        if element_id:
            result = await capture_chart(charts, element_id, cfg, rasterizer)
            if isinstance(result, Captured):
                run.add_chart(result)
            else:
                run.skipped_chart = result.reason
                logger.warning("Chart capture skipped: %s", result.reason)

        run.compose_remaining()
        filename, content = run.finalize()
        if sink is not None:
            sink(filename, content)
    except Exception as exc:
        logger.exception("Error generating PDF report for timeframe %s", timeframe)
        raise ReportGenerationError(f"{REPORT_FAILED_MESSAGE}: {exc}") from exc

    logger.info("Generated %s (%d pages)", filename, run.document.page_count)
    return ExportResult(
        success=True,
        filename=filename,
        content=content,
        page_count=run.document.page_count,
        pages=run.document.pages,
    )


def export_analytics_sync(*args: Any, **kwargs: Any) -> ExportResult:
    """Blocking wrapper for callers without a running event loop (Streamlit)."""
    return asyncio.run(export_analytics(*args, **kwargs))
