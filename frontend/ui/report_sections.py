"""Section renderers for the seller analytics PDF.

Each renderer draws one titled block through a :class:`ReportContext` and
leaves the cursor below it. Inputs are already formatted strings.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from frontend.ui.pdf import BRAND_GREEN, TEXT_DARK, WHITE, ReportContext
from services.report_formatting import MetricRow

HEADER_BAND_HEIGHT = 28.0
DETAILS_BOX_HEIGHT = 26.0
TITLE_TEXT_HEIGHT = 8.0
TITLE_HEIGHT = 10.0
SUBTITLE_HEIGHT = 8.0
VALUE_COLUMN_OFFSET = 90.0
VALUE_COLUMN_WIDTH = 50.0
DETAILS_FILL = (248, 250, 252)
TABLE_HEADER_FILL = (220, 252, 231)

DAILY_SALES_COLUMNS = (["Date", "Revenue", "Orders"], [40.0, 35.0, 25.0])
MONTHLY_SALES_COLUMNS = (["Month", "Revenue", "Orders"], [35.0, 40.0, 25.0])
TOP_PRODUCT_COLUMNS = (["Product Name", "Revenue", "Orders", "Rating"], [70.0, 30.0, 25.0, 25.0])
CATEGORY_COLUMNS = (["Category", "Revenue", "Orders", "Growth"], [50.0, 35.0, 25.0, 30.0])


def draw_header(ctx: ReportContext, generated_for: str, timeframe_label: str, generated_on: str) -> None:
    doc = ctx.document
    doc.rect(0, 0, ctx.page_width, HEADER_BAND_HEIGHT, fill=BRAND_GREEN)
    doc.text(ctx.margin, 9, ctx.content_width, 10, "SELLER ANALYTICS REPORT", style="B", size=20, color=WHITE)

    ctx.cursor_y = HEADER_BAND_HEIGHT + 6
    top = ctx.cursor_y
    doc.rect(ctx.margin, top, ctx.content_width, DETAILS_BOX_HEIGHT, fill=DETAILS_FILL)
    doc.text(ctx.margin + 5, top + 1, ctx.content_width - 10, 6, "Report Details", style="B", size=12)
    detail_lines = [
        f"Generated for: {generated_for}",
        f"Timeframe: {timeframe_label}",
        f"Generated on: {generated_on}",
    ]
    for idx, line in enumerate(detail_lines):
        doc.text(ctx.margin + 5, top + 7 + idx * 6, ctx.content_width - 10, 6, line, size=10)
    ctx.advance(DETAILS_BOX_HEIGHT + 3)
    doc.line(ctx.margin, ctx.cursor_y, ctx.margin + ctx.content_width, ctx.cursor_y, color=BRAND_GREEN, width=0.5)
    ctx.advance(4)


def draw_section_title(
    ctx: ReportContext,
    title: str,
    block_height: float = 0.0,
    min_block_height: Optional[float] = None,
) -> None:
    """Draw a bold, underlined title, keeping it on the page with what follows.

    When title and block fit on one page they are kept together; otherwise
    the title only reserves room for ``min_block_height`` (one line by
    default) so it is never orphaned at the page bottom.
    """
    needed = TITLE_HEIGHT + block_height
    if not ctx.fits_on_page(needed):
        needed = TITLE_HEIGHT + (min_block_height if min_block_height is not None else ctx.line_height)
    ctx.ensure_space(needed)

    doc = ctx.document
    doc.text(ctx.margin, ctx.cursor_y, ctx.content_width, TITLE_TEXT_HEIGHT, title, style="B", size=14)
    ctx.advance(TITLE_TEXT_HEIGHT)
    doc.line(ctx.margin, ctx.cursor_y, ctx.margin + ctx.content_width, ctx.cursor_y, color=BRAND_GREEN, width=0.5)
    ctx.advance(TITLE_HEIGHT - TITLE_TEXT_HEIGHT)


def draw_metric_section(ctx: ReportContext, title: str, rows: Sequence[MetricRow]) -> None:
    """Label/value list: labels at the margin, values right-aligned in a fixed column."""
    if not rows:
        return
    lh = ctx.line_height
    draw_section_title(ctx, title, len(rows) * lh)
    doc = ctx.document
    for row in rows:
        ctx.ensure_space(lh)
        doc.text(ctx.margin, ctx.cursor_y, VALUE_COLUMN_OFFSET, lh, row.label, size=10)
        doc.text(
            ctx.margin + VALUE_COLUMN_OFFSET,
            ctx.cursor_y,
            VALUE_COLUMN_WIDTH,
            lh,
            row.value,
            style="B",
            size=10,
            align="R",
        )
        ctx.advance(lh)
    ctx.advance(ctx.document.config.section_gap)


def draw_paragraph_section(ctx: ReportContext, title: str, paragraphs: Sequence[str], bullet: str = "") -> None:
    if not paragraphs:
        return
    doc = ctx.document
    lh = doc.config.paragraph_line_height
    lines: List[str] = []
    for paragraph in paragraphs:
        lines.extend(doc.wrap_text(f"{bullet}{paragraph}", ctx.content_width, size=10))
    draw_section_title(ctx, title, len(lines) * lh, min_block_height=lh)
    for line in lines:
        ctx.ensure_space(lh)
        doc.text(ctx.margin, ctx.cursor_y, ctx.content_width, lh, line, size=10)
        ctx.advance(lh)
    ctx.advance(doc.config.section_gap)


def table_height(ctx: ReportContext, row_count: int) -> float:
    cfg = ctx.document.config
    return cfg.table_header_height + row_count * cfg.table_row_height


def _draw_table_header(ctx: ReportContext, headers: Sequence[str], col_widths: Sequence[float]) -> None:
    doc = ctx.document
    height = doc.config.table_header_height
    x = ctx.margin
    for header, width in zip(headers, col_widths):
        doc.rect(x, ctx.cursor_y, width, height, fill=TABLE_HEADER_FILL)
        doc.text(x + 2, ctx.cursor_y, width - 2, height, header, style="B", size=10)
        x += width
    ctx.advance(height)


def draw_table(
    ctx: ReportContext,
    headers: Sequence[str],
    col_widths: Sequence[float],
    rows: Sequence[Sequence[str]],
) -> None:
    """Render a fixed-width table, breaking pages only between rows.

    A table that fits on one page is moved whole; a longer one breaks before
    the row that would overflow and repeats its header on the new page.
    """
    cfg = ctx.document.config
    row_height = cfg.table_row_height
    block = table_height(ctx, len(rows))
    if ctx.fits_on_page(block):
        ctx.ensure_space(block)
    else:
        ctx.ensure_space(cfg.table_header_height + row_height)
    _draw_table_header(ctx, headers, col_widths)

    doc = ctx.document
    for row in rows:
        if ctx.ensure_space(row_height):
            _draw_table_header(ctx, headers, col_widths)
        x = ctx.margin
        for cell, width in zip(row, col_widths):
            doc.text(x + 2, ctx.cursor_y, width - 2, row_height, cell, size=9, color=TEXT_DARK)
            x += width
        ctx.advance(row_height)


def draw_table_section(
    ctx: ReportContext,
    title: str,
    headers: Sequence[str],
    col_widths: Sequence[float],
    rows: Sequence[Sequence[str]],
) -> None:
    """Titled table; an empty table draws nothing, title included."""
    if not rows:
        return
    cfg = ctx.document.config
    draw_section_title(
        ctx,
        title,
        table_height(ctx, len(rows)),
        min_block_height=cfg.table_header_height + cfg.table_row_height,
    )
    draw_table(ctx, headers, col_widths, rows)
    ctx.advance(cfg.section_gap)


def _draw_subtitle(ctx: ReportContext, text: str, first_block: float) -> None:
    ctx.ensure_space(SUBTITLE_HEIGHT + first_block)
    ctx.document.text(ctx.margin, ctx.cursor_y, ctx.content_width, SUBTITLE_HEIGHT, text, style="B", size=11)
    ctx.advance(SUBTITLE_HEIGHT)


def draw_sales_trend_section(
    ctx: ReportContext,
    daily_rows: Sequence[Sequence[str]],
    monthly_rows: Sequence[Sequence[str]],
) -> None:
    if not daily_rows and not monthly_rows:
        return
    cfg = ctx.document.config
    first_row = cfg.table_header_height + cfg.table_row_height
    blocks = []
    if daily_rows:
        blocks.append(("Daily Sales (Last 7 Days)", DAILY_SALES_COLUMNS, daily_rows))
    if monthly_rows:
        blocks.append(("Monthly Sales Summary", MONTHLY_SALES_COLUMNS, monthly_rows))

    total = sum(SUBTITLE_HEIGHT + table_height(ctx, len(rows)) + cfg.section_gap for _, _, rows in blocks)
    draw_section_title(ctx, "Sales Trend", total, min_block_height=SUBTITLE_HEIGHT + first_row)
    for subtitle, (headers, widths), rows in blocks:
        block = table_height(ctx, len(rows))
        _draw_subtitle(ctx, subtitle, block if ctx.fits_on_page(SUBTITLE_HEIGHT + block) else first_row)
        draw_table(ctx, headers, widths, rows)
        ctx.advance(cfg.section_gap)


def chart_image_size(ctx: ReportContext, width_px: int, height_px: int) -> Tuple[float, float]:
    """Fit the image to the content width, shrinking it if it is taller than a page allows."""
    width = ctx.content_width
    height = height_px * width / max(width_px, 1)
    max_height = ctx.usable_height - TITLE_HEIGHT
    if height > max_height:
        width = width * max_height / height
        height = max_height
    return width, height


def draw_chart_section(ctx: ReportContext, image: bytes, width_px: int, height_px: int) -> None:
    width, height = chart_image_size(ctx, width_px, height_px)
    draw_section_title(ctx, "Visual Analytics Charts", height)
    ctx.ensure_space(height)
    ctx.document.image(ctx.margin, ctx.cursor_y, width, height, image)
    ctx.advance(height + ctx.document.config.section_gap)
