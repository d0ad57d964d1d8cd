"""Fixed-window rate limiter with escalating warnings.

Each identity gets one request counter per action category.  Exceeding a
category's budget issues a warning; warnings accumulate per identity
(across windows and categories) until the threshold converts them into a
temporary block and the requester's IP joins the permanent blocklist.

Decision order for every request:

1. IP on the permanent blocklist -> reject (403)
2. identity under an active block -> reject (429)
3. block expired -> clear all state for the identity, continue fresh
4. no counter yet -> start one, allow
5. window elapsed -> restart the window, allow
6. within budget -> allow
7. over budget -> warn, escalate, maybe block (429)
"""

from __future__ import annotations

import logging
import math
import threading
import time
from dataclasses import replace
from typing import Optional

from smartconnect.auth.identity import AuthenticatedIdentity
from smartconnect.security.blocklist import IPBlocklist
from smartconnect.security.config import SecurityConfig
from smartconnect.security.errors import SecurityStateError
from smartconnect.security.models import (
    IdentityStanding,
    RateLimitDecision,
    RateLimitEntry,
    Severity,
    Verdict,
)

logger = logging.getLogger(__name__)

IP_BLOCKED_MESSAGE = (
    "Your IP has been blocked due to repeated violations. "
    "Contact support if you believe this is an error."
)

_SHARED_CATEGORY = "*"


class RateLimiter:
    """In-memory, thread-safe rate limiter.

    Parameters
    ----------
    config:
        Category budgets and escalation policy.
    blocklist:
        Permanent IP blocklist, consulted first and extended on blocks.
    clock:
        Returns the current time in seconds.  Injected for tests.
    """

    def __init__(
        self,
        config: Optional[SecurityConfig] = None,
        blocklist: Optional[IPBlocklist] = None,
        clock=time.time,
    ) -> None:
        self.config = config or SecurityConfig()
        self.blocklist = blocklist if blocklist is not None else IPBlocklist()
        self._clock = clock
        self._entries: dict[tuple[str, str], RateLimitEntry] = {}
        self._standings: dict[str, IdentityStanding] = {}
        self._lock = threading.Lock()

    # -- keys ----------------------------------------------------------------

    def _window_key(self, identity_key: str, category: str) -> tuple[str, str]:
        if self.config.shared_counters:
            return identity_key, _SHARED_CATEGORY
        return identity_key, category

    def _drop_identity(self, identity_key: str) -> None:
        self._standings.pop(identity_key, None)
        for key in [k for k in self._entries if k[0] == identity_key]:
            del self._entries[key]

    # -- decision ------------------------------------------------------------

    def check(self, identity: AuthenticatedIdentity, category: str) -> RateLimitDecision:
        """Count one request for *identity* in *category* and decide on it."""
        limit = self.config.limit_for(category)
        now = self._clock()

        if self.blocklist.is_blocked(identity.ip):
            return RateLimitDecision(
                verdict=Verdict.reject,
                status_code=403,
                message=IP_BLOCKED_MESSAGE,
                blocked=True,
                severity=Severity.critical,
                action=f"Blocked IP attempted {category} request",
            )

        identity_key = identity.key
        window_key = self._window_key(identity_key, category)

        with self._lock:
            standing = self._standings.get(identity_key)
            if standing is not None and standing.blocked:
                if standing.blocked_until is None:
                    raise SecurityStateError(f"{identity_key} is blocked without an expiry")
                if now < standing.blocked_until:
                    remaining = standing.blocked_until - now
                    minutes = math.ceil(remaining / 60)
                    return RateLimitDecision(
                        verdict=Verdict.reject,
                        status_code=429,
                        message=(
                            "You have been temporarily blocked. "
                            f"Please try again in {minutes} minutes."
                        ),
                        blocked=True,
                        remaining_minutes=minutes,
                        remaining_block_seconds=math.ceil(remaining),
                    )
                self._drop_identity(identity_key)
                logger.info("Block expired for %s", identity_key)

            entry = self._entries.get(window_key)
            if entry is None:
                self._entries[window_key] = RateLimitEntry(count=1, window_start=now)
                return RateLimitDecision(verdict=Verdict.allow)

            if now - entry.window_start > limit.window_seconds:
                entry.count = 1
                entry.window_start = now
                return RateLimitDecision(verdict=Verdict.allow)

            entry.count += 1
            if entry.count <= limit.max_requests:
                return RateLimitDecision(verdict=Verdict.allow)

            return self._escalate(identity, category, entry, now)

    def _escalate(
        self,
        identity: AuthenticatedIdentity,
        category: str,
        entry: RateLimitEntry,
        now: float,
    ) -> RateLimitDecision:
        # Caller holds self._lock.
        limit = self.config.limit_for(category)
        threshold = self.config.warning_threshold
        standing = self._standings.setdefault(identity.key, IdentityStanding())
        standing.warning_count += 1
        standing.last_violation = now
        burst = f"({entry.count} requests in {limit.window_seconds}s)"

        if standing.warning_count >= threshold:
            severity = Severity.critical
            standing.blocked = True
            standing.blocked_until = now + self.config.block_duration_seconds
            action = f"User blocked for {category} spam {burst}"
            self.blocklist.block(identity.ip)
        elif standing.warning_count == threshold - 1:
            severity = Severity.high
            action = f"Final warning: {category} rate limit exceeded {burst}"
        elif standing.warning_count == 1:
            severity = Severity.medium
            action = f"{category} rate limit exceeded {burst}"
        else:
            severity = Severity.low
            action = f"{category} rate limit warning {burst}"

        if standing.blocked:
            block_minutes = self.config.block_duration_seconds // 60
            message = f"Too many requests. You have been blocked for {block_minutes} minutes."
        else:
            message = (
                f"Rate limit exceeded. Warning {standing.warning_count}/{threshold}. "
                "Please slow down."
            )

        return RateLimitDecision(
            verdict=Verdict.warn,
            status_code=429,
            message=message,
            blocked=standing.blocked,
            severity=severity,
            warnings=standing.warning_count,
            max_warnings=threshold,
            retry_after=limit.window_seconds,
            remaining_block_seconds=(
                self.config.block_duration_seconds if standing.blocked else None
            ),
            action=action,
        )

    # -- administration ------------------------------------------------------

    def is_identity_blocked(self, identity_key: str) -> tuple[bool, int]:
        """Return ``(blocked, remaining_seconds)`` for *identity_key*."""
        now = self._clock()
        with self._lock:
            standing = self._standings.get(identity_key)
            if standing is None or not standing.block_active(now):
                return False, 0
            return True, max(math.ceil(standing.blocked_until - now), 1)

    def unblock_identity(self, identity_key: str) -> bool:
        """Clear the block, warnings and counters of a blocked identity.

        Returns ``False`` (and changes nothing) when the identity is unknown
        or not blocked.
        """
        with self._lock:
            standing = self._standings.get(identity_key)
            if standing is None or not standing.blocked:
                return False
            del self._standings[identity_key]
            for key, entry in self._entries.items():
                if key[0] == identity_key:
                    entry.count = 0
        logger.info("Identity %s unblocked", identity_key)
        return True

    def entry(self, identity_key: str, category: str) -> Optional[RateLimitEntry]:
        """Return a copy of the counter for ``(identity_key, category)``."""
        with self._lock:
            entry = self._entries.get(self._window_key(identity_key, category))
            return replace(entry) if entry is not None else None

    def standing(self, identity_key: str) -> Optional[IdentityStanding]:
        """Return a copy of the escalation state for *identity_key*."""
        with self._lock:
            standing = self._standings.get(identity_key)
            return replace(standing) if standing is not None else None

    def active_entries(self) -> int:
        with self._lock:
            return len(self._entries)

    def blocked_count(self) -> int:
        with self._lock:
            return sum(1 for s in self._standings.values() if s.blocked)

    # -- maintenance ---------------------------------------------------------

    def sweep(self, now: Optional[float] = None) -> tuple[int, int]:
        """Drop idle counters and lapsed standings.

        Returns ``(entries_removed, standings_removed)``.  Identities under a
        live block are kept.
        """
        now = self._clock() if now is None else now
        idle = self.config.idle_entry_seconds
        with self._lock:
            stale_entries = [
                k for k, e in self._entries.items() if now - e.window_start > idle
            ]
            for key in stale_entries:
                del self._entries[key]
            stale_standings = [
                k
                for k, s in self._standings.items()
                if not s.block_active(now) and now - s.last_violation > idle
            ]
            for key in stale_standings:
                del self._standings[key]
        return len(stale_entries), len(stale_standings)
