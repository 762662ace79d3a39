"""Best-effort rasterization of dashboard charts for the PDF export.

Charts displayed on the analytics dashboard are registered under an element
id. Capturing one yields either :class:`Captured` or :class:`Skipped`;
failures never propagate to the export.
"""

from __future__ import annotations

import asyncio
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from io import BytesIO
from typing import Any, Callable, Dict, Iterator, Optional, Tuple, Union

from PIL import Image

from services.report_config import ReportConfig

Rasterizer = Callable[[Any, float], bytes]


@dataclass(frozen=True)
class Captured:
    image: bytes  # opaque PNG
    width_px: int
    height_px: int


@dataclass(frozen=True)
class Skipped:
    reason: str


CaptureResult = Union[Captured, Skipped]


class ChartRegistry:
    """Charts currently on display, keyed by element id."""

    def __init__(self) -> None:
        self._charts: Dict[str, Any] = {}

    def register(self, element_id: str, chart: Any) -> None:
        self._charts[element_id] = chart

    def get(self, element_id: str) -> Optional[Any]:
        return self._charts.get(element_id)

    def __contains__(self, element_id: object) -> bool:
        return element_id in self._charts

    def __iter__(self) -> Iterator[str]:
        return iter(self._charts)


def rasterize_altair_chart(chart: Any, scale: float) -> bytes:
    """Render an altair chart to PNG through its vl-convert backed ``save``."""
    buffer = BytesIO()
    chart.save(buffer, format="png", scale_factor=scale)
    return buffer.getvalue()


def flatten_onto_white(png_bytes: bytes) -> Tuple[bytes, int, int]:
    """Composite a possibly transparent PNG over opaque white."""
    with Image.open(BytesIO(png_bytes)) as source:
        rgba = source.convert("RGBA")
        background = Image.new("RGB", rgba.size, (255, 255, 255))
        background.paste(rgba, mask=rgba.getchannel("A"))
    out = BytesIO()
    background.save(out, format="PNG")
    return out.getvalue(), background.width, background.height


def _capture_blocking(chart: Any, scale: float, rasterizer: Rasterizer) -> Captured:
    image, width, height = flatten_onto_white(rasterizer(chart, scale))
    if width <= 0 or height <= 0:
        raise ValueError("Rasterized chart is empty.")
    return Captured(image=image, width_px=width, height_px=height)


async def capture_chart(
    registry: Optional[ChartRegistry],
    element_id: str,
    config: ReportConfig,
    rasterizer: Rasterizer = rasterize_altair_chart,
) -> CaptureResult:
    """Snapshot the chart registered as ``element_id``.

    This is the only suspension point of an export: rasterization runs in a
    dedicated worker thread. Without ``config.capture_timeout_seconds`` a hung
    rasterizer hangs the caller.
    """
    chart = registry.get(element_id) if registry is not None else None
    if chart is None:
        return Skipped(f"Element '{element_id}' not found")

    if config.capture_settle_seconds > 0:
        # Give freshly drawn charts time to finish rendering.
        await asyncio.sleep(config.capture_settle_seconds)

    # Never joined: a timed-out worker must not block asyncio.run() shutdown.
    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="chart-capture")
    loop = asyncio.get_running_loop()
    work = loop.run_in_executor(executor, _capture_blocking, chart, config.capture_scale, rasterizer)
    try:
        if config.capture_timeout_seconds is not None:
            return await asyncio.wait_for(work, timeout=config.capture_timeout_seconds)
        return await work
    except asyncio.TimeoutError:
        return Skipped(f"Capture of '{element_id}' timed out after {config.capture_timeout_seconds}s")
    except Exception as exc:  # noqa: BLE001
        return Skipped(f"Capture of '{element_id}' failed: {exc}")
    finally:
        executor.shutdown(wait=False)
