"""Rate-limit subjects produced by the authentication layer.

An ``AuthenticatedIdentity`` is either a signed-in user or an anonymous
client known only by IP address.  Both carry the request IP because the
permanent blocklist is keyed by address regardless of who is signed in.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class UserIdentity:
    """A request made by an authenticated user."""

    user_id: str
    ip: str = "unknown"

    @property
    def key(self) -> str:
        return f"user:{self.user_id}"


@dataclass(frozen=True)
class AnonymousIdentity:
    """A request with no authenticated user."""

    ip: str = "unknown"

    @property
    def user_id(self) -> Optional[str]:
        return None

    @property
    def key(self) -> str:
        return f"ip:{self.ip}"


AuthenticatedIdentity = Union[UserIdentity, AnonymousIdentity]


def identity_for(user_id: Optional[str], ip: str) -> AuthenticatedIdentity:
    """Return a ``UserIdentity`` when *user_id* is set, else ``AnonymousIdentity``."""
    if user_id:
        return UserIdentity(user_id=user_id, ip=ip or "unknown")
    return AnonymousIdentity(ip=ip or "unknown")
