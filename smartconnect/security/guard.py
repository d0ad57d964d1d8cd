"""AbuseGuard -- the single entry point the HTTP layer talks to.

Owns every piece of abuse-mitigation state (counters, blocklist, activity
log, duplicate memory) so that one instance can be built at startup and
injected into request handlers.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Optional

from smartconnect.auth.identity import AuthenticatedIdentity
from smartconnect.security.activity_log import ActivityLog
from smartconnect.security.blocklist import IPBlocklist
from smartconnect.security.config import SecurityConfig
from smartconnect.security.content_validator import validate_content
from smartconnect.security.duplicates import DuplicateDetector
from smartconnect.security.models import RateLimitDecision, Rejection, Severity, Verdict
from smartconnect.security.notifier import Notifier
from smartconnect.security.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)

# Escalations below this severity are logged but not sent to the user.
_NOTIFY_SEVERITIES = {Severity.medium, Severity.high, Severity.critical}


class AbuseGuard:
    """Rate limiting, blocking and content checks behind one object."""

    def __init__(
        self,
        config: Optional[SecurityConfig] = None,
        notifier: Optional[Notifier] = None,
        clock=time.time,
    ) -> None:
        self.config = config or SecurityConfig()
        self.notifier = notifier
        self._clock = clock
        self.blocklist = IPBlocklist()
        self.rate_limiter = RateLimiter(self.config, self.blocklist, clock=clock)
        self.activity = ActivityLog(self.config.activity_log_capacity, clock=clock)
        self.duplicates = DuplicateDetector(self.config.duplicate_window_seconds, clock=clock)

    # ------------------------------------------------------------------
    # Request checks
    # ------------------------------------------------------------------

    def check_rate_limit(
        self, identity: AuthenticatedIdentity, category: str
    ) -> RateLimitDecision:
        """Count a request and apply the escalation policy."""
        decision = self.rate_limiter.check(identity, category)
        if decision.action and decision.severity is not None:
            self.activity.record(identity.key, identity.ip, decision.action, decision.severity)
            if decision.verdict == Verdict.warn and decision.severity in _NOTIFY_SEVERITIES:
                self._warn(identity, decision.action, decision.severity)
        return decision

    def validate_submission(
        self, identity: AuthenticatedIdentity, text: str, label: str = "comment"
    ) -> Optional[Rejection]:
        """Run the static content checks; returns a 400 rejection on spam."""
        verdict = validate_content(text)
        if verdict.is_valid:
            return None
        self.activity.record(
            identity.key, identity.ip, f"Spam {label} blocked: {verdict.reason}", Severity.medium
        )
        self._warn(identity, f"Your {label} was blocked: {verdict.reason}", Severity.medium)
        return Rejection(
            status_code=400,
            body={
                "message": f"Your {label} contains inappropriate content and has been blocked.",
                "reason": verdict.reason,
            },
        )

    def check_duplicate(
        self, submission_type: str, identity: AuthenticatedIdentity, content: str
    ) -> Optional[Rejection]:
        """Reject a repeat of recently submitted text by the same user."""
        verdict = self.duplicates.check_and_record(submission_type, identity.user_id, content)
        if not verdict.is_duplicate:
            return None
        self.activity.record(
            identity.key, identity.ip, f"Duplicate {submission_type} submission detected", Severity.high
        )
        reason = (
            f"Duplicate {submission_type} detected. "
            "You have already submitted this content recently."
        )
        self._warn(identity, reason, Severity.high)
        return Rejection(
            status_code=400,
            body={
                "message": "Duplicate submission detected. You have already submitted this content.",
                "reason": reason,
            },
        )

    def _warn(self, identity: AuthenticatedIdentity, reason: str, severity: Severity) -> None:
        if self.notifier is None:
            return
        self.notifier.warn(identity.user_id, identity.ip, reason, severity)

    # ------------------------------------------------------------------
    # Administration
    # ------------------------------------------------------------------

    def is_ip_blocked(self, ip: str) -> bool:
        return self.blocklist.is_blocked(ip)

    def block_ip(self, ip: str) -> None:
        self.blocklist.block(ip)

    def unblock_ip(self, ip: str) -> bool:
        return self.blocklist.unblock(ip)

    def is_identity_blocked(self, identity_key: str) -> tuple[bool, int]:
        return self.rate_limiter.is_identity_blocked(identity_key)

    def unblock_user(self, identity_key: str) -> bool:
        """Lift a temporary block by identity key (``user:<id>`` / ``ip:<addr>``)."""
        return self.rate_limiter.unblock_identity(identity_key)

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    def security_stats(self) -> dict[str, Any]:
        """Aggregate counts for the officials' dashboard."""
        counts = self.activity.severity_counts(
            self._clock(), self.config.activity_stats_window_seconds
        )
        return {
            "total_suspicious_activities": len(self.activity),
            "last_24_hours": counts,
            "blocked_ips": len(self.blocklist),
            "active_rate_limits": self.rate_limiter.active_entries(),
            "currently_blocked": self.rate_limiter.blocked_count(),
        }

    def recent_activities(self, limit: int = 50) -> list[dict[str, Any]]:
        return self.activity.recent(limit)

    # ------------------------------------------------------------------
    # Maintenance
    # ------------------------------------------------------------------

    def sweep(self) -> dict[str, int]:
        """One maintenance pass over all in-memory state."""
        now = self._clock()
        entries, standings = self.rate_limiter.sweep(now)
        submissions = self.duplicates.sweep(now)
        summary = {
            "rate_limit_entries": entries,
            "identity_standings": standings,
            "submission_keys": submissions,
        }
        logger.debug("Security sweep removed %s", summary)
        return summary
