import io
import json
from pathlib import Path

import pytest

from utils.io import parse_analytics_payload, read_analytics_snapshot

SAMPLE_PATH = Path(__file__).resolve().parents[1] / "data" / "sample_analytics.json"


def test_parse_accepts_text_bytes_and_wrapped_payloads() -> None:
    payload = {"overview": {"totalRevenue": 15000}}

    from_text = parse_analytics_payload(json.dumps(payload))
    from_bytes = parse_analytics_payload(json.dumps(payload).encode("utf-8"))
    wrapped = parse_analytics_payload({"analytics": payload})

    assert from_text == from_bytes == wrapped
    assert wrapped.overview.total_revenue == 15000.0


def test_parse_rejects_non_object_payloads() -> None:
    with pytest.raises(ValueError):
        parse_analytics_payload("[1, 2, 3]")


def test_parse_warns_when_overview_missing(caplog) -> None:
    with caplog.at_level("WARNING"):
        snapshot = parse_analytics_payload({"topProducts": []})

    assert snapshot.overview.total_revenue is None
    assert "overview" in caplog.text


def test_read_snapshot_tries_candidates_in_order(tmp_path) -> None:
    missing = tmp_path / "missing.json"

    snapshot = read_analytics_snapshot([missing, SAMPLE_PATH])

    assert snapshot.overview.total_revenue == 125000.0
    assert snapshot.top_products[0].name == "Organic Green Tea"


def test_read_snapshot_accepts_uploaded_file_objects() -> None:
    upload = io.BytesIO(b'{"overview": {"totalOrders": 45}}')

    assert read_analytics_snapshot([upload]).overview.total_orders == 45.0


def test_read_snapshot_reports_all_candidates(tmp_path) -> None:
    bad = tmp_path / "bad.json"
    bad.write_text("not json", encoding="utf-8")

    with pytest.raises(RuntimeError, match="Failed to read analytics snapshot"):
        read_analytics_snapshot([tmp_path / "missing.json", bad])
