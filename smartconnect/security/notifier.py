"""User-facing warning notifications for abuse events.

Delivery goes through a ``NotificationSink`` (the notification store in
production).  Failures are logged and swallowed: a broken notification
path must never change or delay a rate-limit verdict.
"""

from __future__ import annotations

import logging
from concurrent.futures import Executor
from datetime import datetime, timezone
from typing import Any, Optional, Protocol

from smartconnect.security.models import Severity

logger = logging.getLogger(__name__)


class NotificationSink(Protocol):
    def create_notification(
        self,
        user_id: str,
        title: str,
        message: str,
        type: str = "alert",
        related_id: Optional[str] = None,
    ) -> Any: ...


WARNING_TITLES: dict[Severity, str] = {
    Severity.low: "Activity Warning",
    Severity.medium: "Security Alert",
    Severity.high: "Final Warning",
    Severity.critical: "Account Blocked",
}

WARNING_MESSAGES: dict[Severity, str] = {
    Severity.low: (
        "⚠️ Warning: Unusual activity detected on your account. "
        "Please ensure you are following community guidelines."
    ),
    Severity.medium: (
        "⚠️ Security Alert: Multiple suspicious requests detected. "
        "Continued violations may result in temporary suspension."
    ),
    Severity.high: (
        "\U0001f6a8 Final Warning: Your account has been flagged for spam/abuse. "
        "Next violation will result in a {minutes}-minute block."
    ),
    Severity.critical: (
        "\U0001f512 Account Blocked: Your account has been temporarily blocked "
        "for {minutes} minutes due to spam/abuse detection."
    ),
}


def format_warning(
    severity: Severity,
    reason: str,
    ip: str,
    when: datetime,
    block_minutes: int = 30,
) -> tuple[str, str]:
    """Return the ``(title, message)`` pair for a warning."""
    severity = Severity(severity)
    body = WARNING_MESSAGES[severity].format(minutes=block_minutes)
    message = (
        f"{body}\n\n"
        f"Reason: {reason}\n"
        f"IP Address: {ip}\n"
        f"Timestamp: {when.strftime('%Y-%m-%d %H:%M:%S %Z')}"
    )
    return WARNING_TITLES[severity], message


class Notifier:
    """Sends severity-tiered warnings to users.

    Parameters
    ----------
    sink:
        Receives ``create_notification`` calls.
    executor:
        When given, deliveries are submitted to it and ``warn`` returns
        immediately.  Otherwise delivery happens inline.
    block_duration_seconds:
        Block length quoted in the high and critical warnings.
    """

    def __init__(
        self,
        sink: NotificationSink,
        executor: Optional[Executor] = None,
        block_duration_seconds: int = 30 * 60,
    ) -> None:
        self._sink = sink
        self._executor = executor
        self._block_minutes = block_duration_seconds // 60

    def warn(self, user_id: Optional[str], ip: str, reason: str, severity: Severity) -> None:
        """Notify *user_id* about an abuse event; no-op for anonymous requests."""
        if not user_id:
            return
        title, message = format_warning(
            severity, reason, ip, datetime.now(timezone.utc), self._block_minutes
        )
        self._dispatch(user_id, title, message)
        logger.info("[SECURITY] Warning sent to user %s (%s): %s", user_id, Severity(severity).value, reason)

    def notify_rejection(self, user_id: Optional[str], title: str, message: str) -> None:
        """Deliver a free-form rejection notice (e.g. classifier verdicts)."""
        if not user_id:
            return
        self._dispatch(user_id, title, message)

    def _dispatch(self, user_id: str, title: str, message: str) -> None:
        if self._executor is None:
            self._deliver(user_id, title, message)
            return
        try:
            self._executor.submit(self._deliver, user_id, title, message)
        except RuntimeError:
            # Executor already shut down.
            logger.exception("Could not queue notification for user %s", user_id)

    def _deliver(self, user_id: str, title: str, message: str) -> None:
        try:
            self._sink.create_notification(
                user_id=user_id,
                title=title,
                message=message,
                type="alert",
                related_id=None,
            )
        except Exception:
            logger.exception("Failed to deliver notification to user %s", user_id)
