from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import matplotlib


def _bundled_font(filename: str) -> str:
    # matplotlib ships DejaVu Sans, which covers the peso sign the core PDF fonts lack.
    return str(Path(matplotlib.get_data_path()) / "fonts" / "ttf" / filename)


def _env_float(name: str, default: Optional[float]) -> Optional[float]:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be numeric, got '{raw}'.") from exc


@dataclass
class ReportConfig:
    """Layout and capture settings for the seller analytics PDF."""

    page_format: str = "A4"
    margin: float = 20.0  # mm, all four sides
    line_height: float = 7.0  # mm per metric row
    paragraph_line_height: float = 5.0
    section_gap: float = 5.0
    table_header_height: float = 8.0
    table_row_height: float = 6.0
    currency_symbol: str = "₱"
    brand: str = "Green Marketplace Analytics"
    font_family: str = "DejaVu"
    font_regular_path: Optional[str] = None
    font_bold_path: Optional[str] = None
    capture_scale: float = 2.0
    capture_settle_seconds: float = 1.0
    capture_timeout_seconds: Optional[float] = None  # None waits on the rasterizer indefinitely

    def __post_init__(self) -> None:
        if self.capture_scale < 2:
            raise ValueError("capture_scale must be at least 2 for print fidelity.")
        if self.margin <= 0 or self.line_height <= 0:
            raise ValueError("margin and line_height must be positive.")
        if self.font_regular_path is None:
            self.font_regular_path = _bundled_font("DejaVuSans.ttf")
        if self.font_bold_path is None:
            self.font_bold_path = _bundled_font("DejaVuSans-Bold.ttf")

    @classmethod
    def from_env(cls) -> "ReportConfig":
        """Build a config, overriding defaults with ``GREENMARKET_*`` variables."""
        defaults = cls()
        return cls(
            font_regular_path=os.getenv("GREENMARKET_REPORT_FONT") or defaults.font_regular_path,
            font_bold_path=os.getenv("GREENMARKET_REPORT_FONT_BOLD") or defaults.font_bold_path,
            capture_scale=_env_float("GREENMARKET_CAPTURE_SCALE", defaults.capture_scale),
            capture_settle_seconds=_env_float("GREENMARKET_CAPTURE_SETTLE_SECONDS", defaults.capture_settle_seconds),
            capture_timeout_seconds=_env_float("GREENMARKET_CAPTURE_TIMEOUT", defaults.capture_timeout_seconds),
        )
