"""PDF document model and layout cursor for the seller analytics report.

Pages are composed as ordered lists of draw commands first and only turned
into a PDF by :func:`render_pdf`, so the footer pass can see the final page
count and tests can inspect exactly what was laid out.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from io import BytesIO
from typing import List, Optional, Tuple

from fpdf import FPDF

from services.report_config import ReportConfig

Color = Tuple[int, int, int]

TEXT_DARK: Color = (20, 20, 20)
TEXT_MUTED: Color = (100, 100, 100)
WHITE: Color = (255, 255, 255)
BRAND_GREEN: Color = (34, 197, 94)
RULE_GREY: Color = (220, 223, 228)
FOOTER_FILL: Color = (233, 249, 239)

FOOTER_BAND_HEIGHT = 15.0
FOOTER_RULE_OFFSET = 12.0
FOOTER_TEXT_OFFSET = 8.0


def page_size_mm(page_format: str) -> Tuple[float, float]:
    probe = FPDF(orientation="P", unit="mm", format=page_format)
    return probe.w, probe.h


@dataclass(frozen=True)
class DrawCommand:
    kind: str  # 'text' | 'line' | 'rect' | 'image'
    x: float
    y: float
    w: float = 0.0
    h: float = 0.0
    x2: float = 0.0
    y2: float = 0.0
    text: str = ""
    style: str = ""
    size: float = 10.0
    color: Color = TEXT_DARK
    fill: Optional[Color] = None
    align: str = "L"
    line_width: float = 0.2
    outline: bool = False
    image: Optional[bytes] = None


@dataclass
class RenderedPage:
    index: int  # 1-based, matches the printed page number
    commands: List[DrawCommand] = field(default_factory=list)

    def texts(self) -> List[str]:
        return [cmd.text for cmd in self.commands if cmd.kind == "text"]


class ReportDocument:
    """Ordered pages of draw commands for one export call."""

    def __init__(self, config: ReportConfig) -> None:
        self.config = config
        self.page_width, self.page_height = page_size_mm(config.page_format)
        self.pages: List[RenderedPage] = []
        self.footer_stamped = False
        self._measure: Optional[FPDF] = None

    @property
    def page_count(self) -> int:
        return len(self.pages)

    @property
    def current_page(self) -> RenderedPage:
        if not self.pages:
            raise RuntimeError("No page has been started.")
        return self.pages[-1]

    def add_page(self) -> RenderedPage:
        page = RenderedPage(index=len(self.pages) + 1)
        self.pages.append(page)
        return page

    def _emit(self, command: DrawCommand, page: Optional[RenderedPage] = None) -> None:
        (page or self.current_page).commands.append(command)

    def text(
        self,
        x: float,
        y: float,
        w: float,
        h: float,
        text: str,
        *,
        style: str = "",
        size: float = 10.0,
        color: Color = TEXT_DARK,
        align: str = "L",
        page: Optional[RenderedPage] = None,
    ) -> None:
        self._emit(
            DrawCommand("text", x, y, w=w, h=h, text=text, style=style, size=size, color=color, align=align),
            page,
        )

    def line(
        self,
        x1: float,
        y1: float,
        x2: float,
        y2: float,
        *,
        color: Color = RULE_GREY,
        width: float = 0.2,
        page: Optional[RenderedPage] = None,
    ) -> None:
        self._emit(DrawCommand("line", x1, y1, x2=x2, y2=y2, color=color, line_width=width), page)

    def rect(
        self,
        x: float,
        y: float,
        w: float,
        h: float,
        *,
        fill: Optional[Color] = None,
        border: Optional[Color] = None,
        page: Optional[RenderedPage] = None,
    ) -> None:
        self._emit(DrawCommand("rect", x, y, w=w, h=h, fill=fill, color=border or RULE_GREY, outline=border is not None), page)

    def image(self, x: float, y: float, w: float, h: float, data: bytes) -> None:
        self._emit(DrawCommand("image", x, y, w=w, h=h, image=data))

    def _measurer(self) -> FPDF:
        if self._measure is None:
            self._measure = FPDF(unit="mm", format=self.config.page_format)
            _register_fonts(self._measure, self.config)
        return self._measure

    def string_width(self, text: str, style: str = "", size: float = 10.0) -> float:
        measure = self._measurer()
        measure.set_font(self.config.font_family, style, size)
        return measure.get_string_width(text)

    def wrap_text(self, text: str, width: float, style: str = "", size: float = 10.0) -> List[str]:
        """Greedy word wrap; a single word wider than ``width`` keeps its own line."""
        lines: List[str] = []
        current = ""
        for word in text.split():
            candidate = f"{current} {word}" if current else word
            if current and self.string_width(candidate, style, size) > width:
                lines.append(current)
                current = word
            else:
                current = candidate
        if current:
            lines.append(current)
        return lines


@dataclass
class ReportContext:
    """Vertical cursor and page-break decisions for one document."""

    document: ReportDocument
    page_width: float
    page_height: float
    margin: float
    cursor_y: float
    line_height: float

    @classmethod
    def start(cls, document: ReportDocument) -> "ReportContext":
        document.add_page()
        cfg = document.config
        return cls(
            document=document,
            page_width=document.page_width,
            page_height=document.page_height,
            margin=cfg.margin,
            cursor_y=cfg.margin,
            line_height=cfg.line_height,
        )

    @property
    def content_width(self) -> float:
        return self.page_width - 2 * self.margin

    @property
    def bottom(self) -> float:
        return self.page_height - self.margin

    @property
    def usable_height(self) -> float:
        return self.bottom - self.margin

    def fits_on_page(self, height: float) -> bool:
        return height <= self.usable_height

    def new_page(self) -> None:
        self.document.add_page()
        self.cursor_y = self.margin

    def ensure_space(self, required_height: float) -> bool:
        """Break to a new page when ``required_height`` would cross the bottom margin.

        Returns True when a page break happened. A cursor already at the top
        margin never breaks again, so oversized blocks cannot loop.
        """
        if self.cursor_y + required_height <= self.bottom:
            return False
        if self.cursor_y <= self.margin:
            return False
        self.new_page()
        return True

    def advance(self, delta: float) -> None:
        self.cursor_y += delta


def stamp_footer(document: ReportDocument) -> None:
    """Draw the separator and 'Page i of N' caption on every finished page."""
    if document.footer_stamped:
        raise RuntimeError("Footer has already been stamped on this document.")
    cfg = document.config
    total = document.page_count
    width = document.page_width
    height = document.page_height
    for page in document.pages:
        document.rect(0, height - FOOTER_BAND_HEIGHT, width, FOOTER_BAND_HEIGHT, fill=FOOTER_FILL, page=page)
        document.line(
            cfg.margin,
            height - FOOTER_RULE_OFFSET,
            width - cfg.margin,
            height - FOOTER_RULE_OFFSET,
            color=BRAND_GREEN,
            page=page,
        )
        document.text(
            cfg.margin,
            height - FOOTER_TEXT_OFFSET - 2,
            width - 2 * cfg.margin,
            4,
            f"Generated by {cfg.brand} - Page {page.index} of {total}",
            size=8,
            color=TEXT_MUTED,
            page=page,
        )
    document.footer_stamped = True


def _register_fonts(pdf: FPDF, cfg: ReportConfig) -> None:
    pdf.add_font(cfg.font_family, "", cfg.font_regular_path)
    pdf.add_font(cfg.font_family, "B", cfg.font_bold_path)


def _replay(pdf: FPDF, cmd: DrawCommand, family: str) -> None:
    if cmd.kind == "text":
        pdf.set_font(family, cmd.style, cmd.size)
        pdf.set_text_color(*cmd.color)
        pdf.set_xy(cmd.x, cmd.y)
        pdf.cell(cmd.w, cmd.h, cmd.text, align=cmd.align)
    elif cmd.kind == "line":
        pdf.set_draw_color(*cmd.color)
        pdf.set_line_width(cmd.line_width)
        pdf.line(cmd.x, cmd.y, cmd.x2, cmd.y2)
    elif cmd.kind == "rect":
        pdf.set_draw_color(*cmd.color)
        style = "D"
        if cmd.fill is not None:
            pdf.set_fill_color(*cmd.fill)
            style = "DF" if cmd.outline else "F"
        pdf.rect(cmd.x, cmd.y, cmd.w, cmd.h, style=style)
    elif cmd.kind == "image":
        pdf.image(BytesIO(cmd.image or b""), x=cmd.x, y=cmd.y, w=cmd.w, h=cmd.h)
    else:
        raise ValueError(f"Unknown draw command '{cmd.kind}'.")


def render_pdf(document: ReportDocument) -> bytes:
    """Serialize the composed pages with fpdf and return the PDF bytes."""
    cfg = document.config
    pdf = FPDF(orientation="P", unit="mm", format=cfg.page_format)
    pdf.set_auto_page_break(auto=False)
    pdf.set_title("Seller Analytics Report")
    pdf.set_author(cfg.brand)
    _register_fonts(pdf, cfg)
    for page in document.pages:
        pdf.add_page()
        for cmd in page.commands:
            _replay(pdf, cmd, cfg.font_family)
    pdf_bytes = pdf.output()
    return pdf_bytes.encode("latin-1") if isinstance(pdf_bytes, str) else bytes(pdf_bytes)
