"""Auth domain models for citizens, officials, and sessions."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class Role(str, Enum):
    """Platform roles. Officials triage complaints and manage security."""

    official = "official"
    citizen = "citizen"


@dataclass
class User:
    """Represents an authenticated user."""

    id: str
    email: str
    display_name: str = ""
    role: Role = Role.citizen
    phone_number: str = ""
    created_at: str = ""

    def __post_init__(self) -> None:
        if not self.created_at:
            self.created_at = datetime.utcnow().isoformat()
        if isinstance(self.role, str):
            self.role = Role(self.role)

    @property
    def is_official(self) -> bool:
        return self.role == Role.official


@dataclass
class Session:
    """Represents an active user session."""

    id: str
    user_id: str
    token: str
    created_at: str = ""
    expires_at: str = ""

    def __post_init__(self) -> None:
        if not self.created_at:
            self.created_at = datetime.utcnow().isoformat()
