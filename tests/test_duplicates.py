"""Tests for duplicate-submission detection."""

from smartconnect.security.duplicates import DuplicateDetector, normalize_content


class FakeClock:
    def __init__(self, now: float = 5_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def test_normalize_content():
    assert normalize_content("  Broken STREETLIGHT \n") == "broken streetlight"
    assert normalize_content(None) == ""


def test_same_text_within_window_is_duplicate():
    detector = DuplicateDetector(window_seconds=300, clock=FakeClock())
    assert not detector.check_and_record("complaint", "u1", "Water leak on 5th road").is_duplicate

    verdict = detector.check_and_record("complaint", "u1", "  water LEAK on 5th road ")
    assert verdict.is_duplicate
    assert verdict.submission_type == "complaint"


def test_different_user_or_type_is_not_duplicate():
    detector = DuplicateDetector(clock=FakeClock())
    detector.check_and_record("complaint", "u1", "same text")
    assert not detector.check_and_record("complaint", "u2", "same text").is_duplicate
    assert not detector.check_and_record("comment", "u1", "same text").is_duplicate


def test_anonymous_submissions_are_never_duplicates():
    detector = DuplicateDetector(clock=FakeClock())
    detector.check_and_record("comment", None, "hello")
    assert not detector.check_and_record("comment", None, "hello").is_duplicate
    assert len(detector) == 0


def test_window_expiry():
    clock = FakeClock()
    detector = DuplicateDetector(window_seconds=300, clock=clock)
    detector.check_and_record("comment", "u1", "thanks for fixing")

    clock.now += 299
    assert detector.check_and_record("comment", "u1", "thanks for fixing").is_duplicate

    clock.now += 1
    assert not detector.check_and_record("comment", "u1", "thanks for fixing").is_duplicate


def test_duplicate_does_not_extend_window():
    clock = FakeClock()
    detector = DuplicateDetector(window_seconds=300, clock=clock)
    detector.check_and_record("comment", "u1", "again")
    clock.now += 200
    assert detector.check_and_record("comment", "u1", "again").is_duplicate
    clock.now += 100
    # measured from the first accepted submission
    assert not detector.check_and_record("comment", "u1", "again").is_duplicate


def test_sweep_removes_expired_keys():
    clock = FakeClock()
    detector = DuplicateDetector(window_seconds=300, clock=clock)
    detector.check_and_record("comment", "u1", "one")
    clock.now += 200
    detector.check_and_record("comment", "u2", "two")

    clock.now += 150
    assert detector.sweep() == 1
    assert len(detector) == 1
