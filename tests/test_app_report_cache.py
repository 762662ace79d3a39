from app import REPORT_STATE_KEY, cached_report, report_inputs_key
from services.analytics_snapshot import AnalyticsSnapshot

SNAPSHOT = AnalyticsSnapshot.from_dict({"overview": {"totalRevenue": 15000}})


def test_inputs_key_changes_with_any_report_input() -> None:
    base = report_inputs_key(SNAPSHOT, "30d", "Jane", "", True)

    assert report_inputs_key(SNAPSHOT, "30d", " Jane ", "", True) == base
    assert report_inputs_key(SNAPSHOT, "7d", "Jane", "", True) != base
    assert report_inputs_key(SNAPSHOT, "30d", "John", "", True) != base
    assert report_inputs_key(SNAPSHOT, "30d", "Jane", "", False) != base
    other = AnalyticsSnapshot.from_dict({"overview": {"totalRevenue": 16000}})
    assert report_inputs_key(other, "30d", "Jane", "", True) != base


def test_cached_report_served_only_for_matching_inputs() -> None:
    key = report_inputs_key(SNAPSHOT, "30d", "Jane", "", True)
    state = {REPORT_STATE_KEY: (key, "seller-analytics-Jane-30d-2025-03-04.pdf", b"%PDF", 1)}

    assert cached_report(state, key) == ("seller-analytics-Jane-30d-2025-03-04.pdf", b"%PDF", 1)
    assert REPORT_STATE_KEY in state


def test_stale_cached_report_is_dropped() -> None:
    old_key = report_inputs_key(SNAPSHOT, "30d", "Jane", "", True)
    new_key = report_inputs_key(SNAPSHOT, "90d", "Jane", "", True)
    state = {REPORT_STATE_KEY: (old_key, "seller-analytics-Jane-30d-2025-03-04.pdf", b"%PDF", 1)}

    assert cached_report(state, new_key) is None
    assert REPORT_STATE_KEY not in state
    assert cached_report({}, new_key) is None
