"""Short-term memory of recent submissions for duplicate rejection."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Optional

from smartconnect.security.models import DuplicateVerdict


@dataclass
class RecentSubmission:
    content: str  # trimmed, case-folded
    timestamp: float


def normalize_content(content: str) -> str:
    return (content or "").strip().casefold()


class DuplicateDetector:
    """Rejects identical text resubmitted by one user within a time window.

    Memory is keyed by ``(submission_type, user_id)`` and pruned on every
    check, so each list only ever holds the last ``window_seconds`` of a
    user's submissions of that type.
    """

    def __init__(self, window_seconds: float = 300, clock=time.time) -> None:
        self.window_seconds = window_seconds
        self._clock = clock
        self._recent: dict[tuple[str, str], list[RecentSubmission]] = {}
        self._lock = threading.Lock()

    def check_and_record(
        self, submission_type: str, user_id: Optional[str], content: str
    ) -> DuplicateVerdict:
        """Return a duplicate verdict; records *content* when it is new."""
        if not user_id:
            return DuplicateVerdict(is_duplicate=False, submission_type=submission_type)

        now = self._clock()
        normalized = normalize_content(content)
        key = (submission_type, user_id)

        with self._lock:
            recent = [
                s for s in self._recent.get(key, []) if now - s.timestamp < self.window_seconds
            ]
            if any(s.content == normalized for s in recent):
                self._recent[key] = recent
                return DuplicateVerdict(is_duplicate=True, submission_type=submission_type)
            recent.append(RecentSubmission(content=normalized, timestamp=now))
            self._recent[key] = recent

        return DuplicateVerdict(is_duplicate=False, submission_type=submission_type)

    def sweep(self, now: Optional[float] = None) -> int:
        """Drop expired submissions; returns the number of keys removed."""
        now = self._clock() if now is None else now
        removed = 0
        with self._lock:
            for key in list(self._recent):
                kept = [s for s in self._recent[key] if now - s.timestamp < self.window_seconds]
                if kept:
                    self._recent[key] = kept
                else:
                    del self._recent[key]
                    removed += 1
        return removed

    def __len__(self) -> int:
        with self._lock:
            return len(self._recent)
