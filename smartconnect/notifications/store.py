"""File-based notification store.

Notifications are persisted as newline-delimited JSON in one file per user
under ``~/.smartconnect/notifications/``.  Satisfies the
``NotificationSink`` protocol used by the security notifier.
"""

from __future__ import annotations

import hashlib
import json
import threading
import uuid
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional


@dataclass
class Notification:
    """A message shown in a user's notification feed."""

    id: str
    user_id: str
    title: str
    message: str
    type: str = "alert"  # complaint_update | status_change | alert
    related_id: Optional[str] = None
    is_read: bool = False
    created_at: str = ""


class NotificationStore:
    """Append-only JSONL store of user notifications."""

    def __init__(self, base_dir: Optional[Path] = None) -> None:
        self._base_dir = Path(base_dir) if base_dir else Path.home() / ".smartconnect" / "notifications"
        self._base_dir.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _file_for(self, user_id: str) -> Path:
        digest = hashlib.sha256(user_id.encode("utf-8")).hexdigest()
        return self._base_dir / f"{digest}.jsonl"

    def _read(self, path: Path) -> list[Notification]:
        if not path.exists():
            return []
        items: list[Notification] = []
        for line in path.read_text(encoding="utf-8").splitlines():
            if not line.strip():
                continue
            try:
                items.append(Notification(**json.loads(line)))
            except (json.JSONDecodeError, TypeError):
                continue
        return items

    def _write(self, path: Path, items: list[Notification]) -> None:
        path.write_text(
            "".join(json.dumps(asdict(n)) + "\n" for n in items), encoding="utf-8"
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def create_notification(
        self,
        user_id: str,
        title: str,
        message: str,
        type: str = "alert",
        related_id: Optional[str] = None,
    ) -> Notification:
        """Persist a notification and return it."""
        notification = Notification(
            id=uuid.uuid4().hex[:16],
            user_id=user_id,
            title=title,
            message=message,
            type=type,
            related_id=related_id,
            created_at=datetime.now(timezone.utc).isoformat(),
        )
        with self._lock:
            with self._file_for(user_id).open("a", encoding="utf-8") as fh:
                fh.write(json.dumps(asdict(notification)) + "\n")
        return notification

    def list_for_user(self, user_id: str, limit: int = 100) -> list[Notification]:
        """Return a user's notifications, newest first."""
        with self._lock:
            items = self._read(self._file_for(user_id))
        items = [n for n in items if n.user_id == user_id]
        items.reverse()
        return items[:limit]

    def mark_read(self, user_id: str, notification_id: str) -> bool:
        """Mark one notification read; returns whether it was found."""
        path = self._file_for(user_id)
        with self._lock:
            items = self._read(path)
            found = False
            for n in items:
                if n.id == notification_id and n.user_id == user_id:
                    n.is_read = True
                    found = True
            if found:
                self._write(path, items)
        return found
