import pytest

from frontend.ui.pdf import ReportContext, ReportDocument, render_pdf, stamp_footer
from frontend.ui.report_sections import (
    chart_image_size,
    draw_header,
    draw_metric_section,
    draw_table,
    draw_table_section,
)
from services.report_config import ReportConfig
from services.report_formatting import MetricRow


@pytest.fixture()
def ctx() -> ReportContext:
    return ReportContext.start(ReportDocument(ReportConfig(capture_settle_seconds=0)))


def test_context_geometry_for_a4(ctx: ReportContext) -> None:
    assert ctx.page_width == pytest.approx(210.0, abs=0.1)
    assert ctx.page_height == pytest.approx(297.0, abs=0.1)
    assert ctx.content_width == pytest.approx(170.0, abs=0.1)
    assert ctx.bottom == pytest.approx(277.0, abs=0.1)
    assert ctx.cursor_y == ctx.margin
    assert ctx.document.page_count == 1


def test_ensure_space_breaks_only_when_needed(ctx: ReportContext) -> None:
    ctx.cursor_y = ctx.bottom - 7

    assert ctx.ensure_space(7) is False
    assert ctx.document.page_count == 1

    assert ctx.ensure_space(8) is True
    assert ctx.document.page_count == 2
    assert ctx.cursor_y == ctx.margin


def test_ensure_space_never_breaks_at_top_of_page(ctx: ReportContext) -> None:
    assert ctx.ensure_space(ctx.usable_height + 50) is False
    assert ctx.document.page_count == 1


def test_header_lays_out_report_details(ctx: ReportContext) -> None:
    draw_header(ctx, "John Doe", "Last 30 days", "March 4, 2025")

    texts = ctx.document.current_page.texts()
    assert texts[0] == "SELLER ANALYTICS REPORT"
    assert "Generated for: John Doe" in texts
    assert "Timeframe: Last 30 days" in texts
    assert "Generated on: March 4, 2025" in texts
    assert ctx.cursor_y == pytest.approx(67.0)


def test_metric_section_moves_whole_block_to_next_page(ctx: ReportContext) -> None:
    ctx.cursor_y = ctx.bottom - 20
    rows = [MetricRow(f"Metric {i}", str(i)) for i in range(6)]

    draw_metric_section(ctx, "Overview Metrics", rows)

    first, second = ctx.document.pages
    assert "Overview Metrics" not in first.texts()
    assert second.texts()[0] == "Overview Metrics"
    assert "Metric 5" in second.texts()


def test_long_table_breaks_between_rows_and_repeats_header(ctx: ReportContext) -> None:
    rows = [[f"Row {i}", "₱100", "1"] for i in range(80)]

    draw_table(ctx, ["Month", "Revenue", "Orders"], [35.0, 40.0, 25.0], rows)

    doc = ctx.document
    assert doc.page_count > 1
    for page in doc.pages:
        texts = page.texts()
        assert texts[0] == "Month"
        for cmd in page.commands:
            if cmd.kind == "text":
                assert cmd.y + cmd.h <= ctx.bottom + 1e-6
    drawn_rows = [t for page in doc.pages for t in page.texts() if t.startswith("Row ")]
    assert drawn_rows == [f"Row {i}" for i in range(80)]


def test_empty_table_section_draws_nothing(ctx: ReportContext) -> None:
    draw_table_section(ctx, "Top Performing Products", ["Product Name"], [70.0], [])

    assert ctx.document.current_page.commands == []
    assert ctx.cursor_y == ctx.margin


def test_chart_image_size_fits_width_and_page(ctx: ReportContext) -> None:
    width, height = chart_image_size(ctx, 1600, 800)
    assert width == pytest.approx(ctx.content_width)
    assert height == pytest.approx(ctx.content_width / 2)

    width, height = chart_image_size(ctx, 400, 4000)
    assert height == pytest.approx(ctx.usable_height - 10.0)
    assert width < ctx.content_width


def test_footer_stamps_every_page_once(ctx: ReportContext) -> None:
    ctx.new_page()
    ctx.new_page()

    stamp_footer(ctx.document)

    captions = [page.texts()[-1] for page in ctx.document.pages]
    assert captions == [f"Generated by Green Marketplace Analytics - Page {i} of 3" for i in (1, 2, 3)]
    with pytest.raises(RuntimeError):
        stamp_footer(ctx.document)


def test_render_pdf_returns_pdf_bytes(ctx: ReportContext) -> None:
    draw_header(ctx, "John Doe", "Last 7 days", "January 2, 2025")
    stamp_footer(ctx.document)

    content = render_pdf(ctx.document)

    assert isinstance(content, bytes)
    assert content.startswith(b"%PDF")
