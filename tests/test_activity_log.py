"""Tests for the bounded suspicious-activity log."""

from smartconnect.security.activity_log import ActivityLog
from smartconnect.security.models import Severity


def test_capacity_evicts_oldest():
    log = ActivityLog(capacity=3, clock=lambda: 100.0)
    for i in range(5):
        log.record(f"user:{i}", "1.1.1.1", f"action {i}", Severity.low)

    assert len(log) == 3
    assert [a["action"] for a in log.recent()] == ["action 4", "action 3", "action 2"]


def test_recent_newest_first_and_limited():
    log = ActivityLog()
    for i in range(10):
        log.record("ip:2.2.2.2", "2.2.2.2", f"a{i}", Severity.medium, timestamp=float(i))

    recent = log.recent(limit=2)
    assert [a["action"] for a in recent] == ["a9", "a8"]
    assert recent[0]["timestamp"] == "1970-01-01T00:00:09+00:00"
    assert recent[0]["severity"] == "medium"
    assert log.recent(limit=0) == []


def test_missing_subject_recorded_as_anonymous():
    log = ActivityLog()
    entry = log.record(None, "3.3.3.3", "Spam comment blocked", Severity.medium)
    assert entry.subject == "anonymous"


def test_severity_counts_in_window():
    now = 200_000.0
    log = ActivityLog()
    log.record("a", "ip", "old", Severity.critical, timestamp=now - 86_400)
    log.record("b", "ip", "x", Severity.medium, timestamp=now - 10)
    log.record("c", "ip", "y", Severity.medium, timestamp=now - 5)
    log.record("d", "ip", "z", Severity.high, timestamp=now)

    counts = log.severity_counts(now, 86_400)
    assert counts == {"low": 0, "medium": 2, "high": 1, "critical": 0, "total": 3}
