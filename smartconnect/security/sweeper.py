"""Background maintenance for the abuse guard's in-memory state."""

from __future__ import annotations

import logging
import threading
from typing import Optional

from smartconnect.security.guard import AbuseGuard

logger = logging.getLogger(__name__)


class Sweeper:
    """Runs ``AbuseGuard.sweep`` on a daemon thread until stopped."""

    def __init__(self, guard: AbuseGuard, interval_seconds: Optional[float] = None) -> None:
        self._guard = guard
        self.interval_seconds = (
            interval_seconds
            if interval_seconds is not None
            else guard.config.sweep_interval_seconds
        )
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._run, name="security-sweeper", daemon=True
        )
        self._thread.start()

    def stop(self, timeout: float = 5.0) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def run_once(self) -> dict[str, int]:
        return self._guard.sweep()

    def _run(self) -> None:
        while not self._stop.wait(self.interval_seconds):
            try:
                self.run_once()
            except Exception:
                logger.exception("Security sweep failed")
