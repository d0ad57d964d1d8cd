"""Bounded in-memory log of suspicious activity.

Keeps the most recent records (1000 by default, oldest evicted first) for
the officials' security dashboard.  Nothing here feeds back into
rate-limit decisions.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import deque
from datetime import datetime, timezone
from typing import Any, Optional

from smartconnect.security.models import Severity, SuspiciousActivity

logger = logging.getLogger(__name__)


class ActivityLog:
    """Append-only ring of ``SuspiciousActivity`` records."""

    def __init__(self, capacity: int = 1000, clock=time.time) -> None:
        self._capacity = capacity
        self._entries: deque[SuspiciousActivity] = deque(maxlen=capacity)
        self._lock = threading.Lock()
        self._clock = clock

    @property
    def capacity(self) -> int:
        return self._capacity

    def record(
        self,
        subject: Optional[str],
        ip: str,
        action: str,
        severity: Severity,
        timestamp: Optional[float] = None,
    ) -> SuspiciousActivity:
        """Append an event and return it."""
        entry = SuspiciousActivity(
            subject=subject or "anonymous",
            ip=ip,
            action=action,
            timestamp=self._clock() if timestamp is None else timestamp,
            severity=Severity(severity),
        )
        with self._lock:
            self._entries.append(entry)
        logger.warning(
            "[SECURITY] %s - %s by %s",
            entry.severity.value.upper(),
            action,
            subject or ip,
        )
        return entry

    def recent(self, limit: int = 50) -> list[dict[str, Any]]:
        """Return up to *limit* records, newest first, with ISO timestamps."""
        if limit <= 0:
            return []
        with self._lock:
            tail = list(self._entries)[-limit:]
        tail.reverse()
        return [
            {
                "subject": e.subject,
                "ip": e.ip,
                "action": e.action,
                "timestamp": datetime.fromtimestamp(e.timestamp, tz=timezone.utc).isoformat(),
                "severity": e.severity.value,
            }
            for e in tail
        ]

    def severity_counts(self, now: float, window_seconds: float) -> dict[str, int]:
        """Count records per severity newer than ``now - window_seconds``."""
        counts = {s.value: 0 for s in Severity}
        with self._lock:
            window = [e for e in self._entries if now - e.timestamp < window_seconds]
        for e in window:
            counts[e.severity.value] += 1
        counts["total"] = len(window)
        return counts

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
