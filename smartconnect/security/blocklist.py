"""Permanent IP blocklist.

Addresses stay listed until an operator removes them.
"""

from __future__ import annotations

import logging
import threading

logger = logging.getLogger(__name__)


class IPBlocklist:
    """Thread-safe set of blocked IP addresses."""

    def __init__(self) -> None:
        self._blocked: set[str] = set()
        self._lock = threading.Lock()

    def is_blocked(self, ip: str) -> bool:
        with self._lock:
            return ip in self._blocked

    def block(self, ip: str) -> None:
        with self._lock:
            if ip in self._blocked:
                return
            self._blocked.add(ip)
        logger.warning("IP %s added to the permanent blocklist", ip)

    def unblock(self, ip: str) -> bool:
        """Remove *ip*; returns whether it was listed."""
        with self._lock:
            if ip not in self._blocked:
                return False
            self._blocked.remove(ip)
        logger.info("IP %s removed from the blocklist", ip)
        return True

    def blocked_ips(self) -> set[str]:
        with self._lock:
            return set(self._blocked)

    def __len__(self) -> int:
        with self._lock:
            return len(self._blocked)
