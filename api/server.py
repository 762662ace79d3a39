from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional
from urllib.parse import quote

from fastapi import FastAPI, HTTPException, Response
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, root_validator, validator

from frontend.ui.charts import ANALYTICS_CHARTS_ID, build_dashboard_charts
from frontend.ui.export import ReportGenerationError, export_analytics
from services.analytics_snapshot import AnalyticsSnapshot, SellerIdentity
from services.report_config import ReportConfig
from services.report_formatting import TIMEFRAME_LABELS
from utils.io import parse_analytics_payload, read_analytics_snapshot

_DATA_DIR = Path(__file__).resolve().parent.parent / "data"


class UserPayload(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None

    @root_validator(skip_on_failure=True)
    def _name_or_email(cls, values: Dict[str, Any]) -> Dict[str, Any]:
        if not (values.get("name") or "").strip() and not (values.get("email") or "").strip():
            raise ValueError("Provide at least one of user.name or user.email.")
        return values

    def to_identity(self) -> SellerIdentity:
        return SellerIdentity(name=(self.name or "").strip() or None, email=(self.email or "").strip() or None)


class ExportRequest(BaseModel):
    user: UserPayload
    timeframe: str = "30d"
    analytics: Optional[Dict[str, Any]] = None
    use_sample: bool = False
    include_charts: bool = False

    @validator("timeframe")
    def _validate_timeframe(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("timeframe cannot be empty.")
        if value not in TIMEFRAME_LABELS:
            logging.getLogger(__name__).info("Unknown timeframe '%s' will be printed verbatim.", value)
        return value

    @root_validator(skip_on_failure=True)
    def _analytics_source(cls, values: Dict[str, Any]) -> Dict[str, Any]:
        if values.get("analytics") is None and not values.get("use_sample"):
            raise ValueError("Provide 'analytics' or set use_sample=true.")
        return values


@lru_cache(maxsize=1)
def _sample_snapshot() -> AnalyticsSnapshot:
    return read_analytics_snapshot([_DATA_DIR / "sample_analytics.json", "./data/sample_analytics.json"])


def _resolve_snapshot(request: ExportRequest) -> AnalyticsSnapshot:
    if request.analytics is None:
        return _sample_snapshot()
    try:
        return parse_analytics_payload(request.analytics)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


def content_disposition(filename: str) -> str:
    """Attachment header with an ASCII fallback and the RFC 5987 UTF-8 name."""
    fallback = "".join(ch if 32 <= ord(ch) < 127 and ch not in "\"\\" else "_" for ch in filename)
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename)}"


app = FastAPI(
    title="Green Marketplace Analytics API",
    description="Generate seller analytics PDF reports outside the Streamlit dashboard.",
    version="0.1.0",
)


_default_cors_origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
_allowed_origins_env = os.getenv("GREENMARKET_CORS_ORIGINS", "")
_allowed_origins = [
    origin.strip()
    for origin in _allowed_origins_env.split(",")
    if origin.strip()
] or _default_cors_origins

# Browser clients download the report directly from this API.
app.add_middleware(
    CORSMiddleware,
    allow_origins=_allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition"],
)


@app.get("/health")
def health() -> Dict[str, str]:
    """Simple liveness probe for container orchestrators."""
    return {"status": "ok"}


@app.post("/reports/seller-analytics")
async def export_seller_report(request: ExportRequest) -> Response:
    """Build the seller analytics PDF and return it as an attachment."""

    snapshot = _resolve_snapshot(request)
    charts = build_dashboard_charts(snapshot) if request.include_charts else None
    try:
        result = await export_analytics(
            snapshot,
            request.user.to_identity(),
            request.timeframe,
            ANALYTICS_CHARTS_ID if request.include_charts else None,
            charts=charts,
            config=ReportConfig.from_env(),
        )
    except ReportGenerationError as exc:
        raise HTTPException(status_code=500, detail="Failed to generate PDF report") from exc

    return Response(
        content=result.content,
        media_type="application/pdf",
        headers={
            "Content-Disposition": content_disposition(result.filename),
            "X-Report-Pages": str(result.page_count),
        },
    )


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=os.getenv("GREENMARKET_LOG_LEVEL", "INFO").upper())
    uvicorn.run("api.server:app", host="0.0.0.0", port=8000, reload=False)
