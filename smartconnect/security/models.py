"""Data models for the abuse-mitigation layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class Severity(str, Enum):
    """Severity attached to every suspicious-activity record."""

    low = "low"
    medium = "medium"
    high = "high"
    critical = "critical"


class Verdict(str, Enum):
    """Outcome of a rate-limit check."""

    allow = "allow"
    warn = "warn"  # threshold exceeded, escalation applied
    reject = "reject"  # IP blocklisted or identity under an active block


@dataclass
class RateLimitEntry:
    """Request counter for one identity within one category window."""

    count: int
    window_start: float


@dataclass
class IdentityStanding:
    """Escalation state for one identity, shared across categories."""

    warning_count: int = 0
    blocked: bool = False
    blocked_until: Optional[float] = None
    last_violation: float = 0.0

    def block_active(self, now: float) -> bool:
        return self.blocked and self.blocked_until is not None and now < self.blocked_until


@dataclass
class RateLimitDecision:
    """Result of ``RateLimiter.check``.

    ``payload()`` yields the JSON body the HTTP layer returns for a
    non-allowed decision.
    """

    verdict: Verdict
    status_code: int = 200
    message: str = ""
    blocked: bool = False
    severity: Optional[Severity] = None
    warnings: int = 0
    max_warnings: int = 0
    retry_after: Optional[int] = None
    remaining_minutes: Optional[int] = None
    remaining_block_seconds: Optional[int] = None
    action: Optional[str] = None  # activity-log description, set when an event occurred

    @property
    def allowed(self) -> bool:
        return self.verdict == Verdict.allow

    def payload(self) -> dict[str, Any]:
        if self.allowed:
            return {}
        if self.verdict == Verdict.warn:
            return {
                "message": self.message,
                "warnings": self.warnings,
                "maxWarnings": self.max_warnings,
                "retryAfter": self.retry_after,
                "blocked": self.blocked,
            }
        body: dict[str, Any] = {"message": self.message, "blocked": True}
        if self.remaining_minutes is not None:
            body["remainingMinutes"] = self.remaining_minutes
        return body


@dataclass
class ContentVerdict:
    """Result of the static content validator."""

    is_valid: bool
    reason: str = ""


@dataclass
class DuplicateVerdict:
    """Result of duplicate-submission detection."""

    is_duplicate: bool
    submission_type: str = ""


@dataclass
class Rejection:
    """A user-facing rejection with its HTTP status and body."""

    status_code: int
    body: dict[str, Any] = field(default_factory=dict)


@dataclass
class SuspiciousActivity:
    """A single warning/block event, kept for operator inspection."""

    subject: str  # identity key, or "anonymous"
    ip: str
    action: str
    timestamp: float
    severity: Severity
