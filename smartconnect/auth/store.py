"""File-based JSON storage for users and sessions.

Stands in for the OAuth-backed user directory; files live under
``~/.smartconnect/auth/``.
"""

from __future__ import annotations

import json
import secrets
import uuid
from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional

from smartconnect.auth.models import Role, Session, User

SESSION_LIFETIME = timedelta(days=7)


class UserStore:
    """File-based storage for users and session tokens.

    Storage path: ``~/.smartconnect/auth/`` with:
    - ``users.json`` -- list of user dicts
    - ``sessions.json`` -- list of session dicts
    """

    def __init__(self, base_dir: Optional[str] = None) -> None:
        if base_dir is None:
            self._base = Path.home() / ".smartconnect" / "auth"
        else:
            self._base = Path(base_dir)
        self._base.mkdir(parents=True, exist_ok=True)
        self._users_path = self._base / "users.json"
        self._sessions_path = self._base / "sessions.json"

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _read_json(self, path: Path) -> list[dict]:
        if not path.exists():
            return []
        try:
            data = json.loads(path.read_text())
            return data if isinstance(data, list) else []
        except (json.JSONDecodeError, OSError):
            return []

    def _write_json(self, path: Path, data: list[dict]) -> None:
        path.write_text(json.dumps(data, indent=2, default=str))

    @staticmethod
    def _user_from_dict(d: dict) -> User:
        role_val = d.get("role", "citizen")
        try:
            role = Role(role_val)
        except ValueError:
            role = Role.citizen
        return User(
            id=d["id"],
            email=d["email"],
            display_name=d.get("display_name", ""),
            role=role,
            phone_number=d.get("phone_number", ""),
            created_at=d.get("created_at", ""),
        )

    @staticmethod
    def _user_to_dict(u: User) -> dict:
        return {
            "id": u.id,
            "email": u.email,
            "display_name": u.display_name,
            "role": u.role.value,
            "phone_number": u.phone_number,
            "created_at": u.created_at,
        }

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def create_user(self, user: User) -> User:
        """Persist a new user. Returns the user."""
        users = self._read_json(self._users_path)
        users.append(self._user_to_dict(user))
        self._write_json(self._users_path, users)
        return user

    def get_user(self, user_id: str) -> Optional[User]:
        for d in self._read_json(self._users_path):
            if d["id"] == user_id:
                return self._user_from_dict(d)
        return None

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    def create_session(self, user_id: str) -> Session:
        """Issue a new session token for *user_id*."""
        session = Session(
            id=uuid.uuid4().hex,
            user_id=user_id,
            token=secrets.token_urlsafe(32),
            expires_at=(datetime.utcnow() + SESSION_LIFETIME).isoformat(),
        )
        sessions = self._read_json(self._sessions_path)
        sessions.append(
            {
                "id": session.id,
                "user_id": session.user_id,
                "token": session.token,
                "created_at": session.created_at,
                "expires_at": session.expires_at,
            }
        )
        self._write_json(self._sessions_path, sessions)
        return session

    def validate_session(self, token: str) -> Optional[User]:
        """Return the user for a live session *token*, else None."""
        now = datetime.utcnow().isoformat()
        for d in self._read_json(self._sessions_path):
            if d.get("token") == token:
                if d.get("expires_at") and d["expires_at"] < now:
                    return None
                return self.get_user(d["user_id"])
        return None
