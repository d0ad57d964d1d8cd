"""Abuse-mitigation layer.

The security package provides:
- Rate limiting: per-category fixed windows with escalating warnings
- Blocking: time-boxed identity blocks and a permanent IP blocklist
- Content checks: spam keyword/pattern heuristics and duplicate detection
- Reporting: a bounded suspicious-activity log and user notifications
"""

from smartconnect.security.config import CategoryLimit, SecurityConfig, load_config
from smartconnect.security.guard import AbuseGuard
from smartconnect.security.models import RateLimitDecision, Rejection, Severity, Verdict

__all__ = [
    "AbuseGuard",
    "CategoryLimit",
    "RateLimitDecision",
    "Rejection",
    "SecurityConfig",
    "Severity",
    "Verdict",
    "load_config",
]
