"""Input parsing utilities for analytics snapshots."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, List

from services.analytics_snapshot import AnalyticsSnapshot


def parse_analytics_payload(raw: Any) -> AnalyticsSnapshot:
    """Parse JSON text/bytes (or an already-decoded mapping) into a snapshot.

    The analytics API sometimes wraps the payload as ``{"analytics": {...}}``;
    both shapes are accepted.
    """
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8")
    data = json.loads(raw) if isinstance(raw, str) else raw
    if not isinstance(data, dict):
        raise ValueError("Analytics payload must be a JSON object.")
    if "analytics" in data and isinstance(data["analytics"], dict):
        data = data["analytics"]
    if "overview" not in data:
        logging.getLogger(__name__).warning("Analytics payload has no 'overview'; metrics will show defaults.")
    return AnalyticsSnapshot.from_dict(data)


def read_analytics_snapshot(path_candidates: List[Any]) -> AnalyticsSnapshot:
    """Read the first readable snapshot JSON among ``path_candidates``."""
    last_err = None
    for candidate in path_candidates:
        try:
            if hasattr(candidate, "read"):
                return parse_analytics_payload(candidate.read())
            return parse_analytics_payload(Path(candidate).read_text(encoding="utf-8"))
        except Exception as e:  # pragma: no cover - errors handled via last_err
            last_err = e
    raise RuntimeError(
        "Failed to read analytics snapshot. "
        f"Looked for: {path_candidates}. Last error: {last_err}"
    )
