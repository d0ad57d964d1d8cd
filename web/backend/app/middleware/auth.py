"""Auth middleware -- FastAPI dependencies for the current user and identity.

Sessions are presented as ``Authorization: Bearer <session_token>``.  The
rate-limit identity is built here, once per request, so the security core
never looks at request objects.
"""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, Header, HTTPException, Request, status

from smartconnect.auth.identity import AuthenticatedIdentity, identity_for
from smartconnect.auth.models import User
from smartconnect.auth.permissions import require_official
from smartconnect.auth.store import UserStore


def get_user_store(request: Request) -> UserStore:
    """Return the UserStore created at startup."""
    return request.app.state.user_store


def client_ip(request: Request) -> str:
    """Peer address of the connection.

    Forwarding headers are never read here.  Behind a reverse proxy, run
    uvicorn with ``--proxy-headers --forwarded-allow-ips=<proxy>`` so that
    ``request.client`` is rewritten for trusted proxies only.
    """
    if request.client is not None and request.client.host:
        return request.client.host
    return "unknown"


async def get_optional_user(
    authorization: Optional[str] = Header(None),
    store: UserStore = Depends(get_user_store),
) -> Optional[User]:
    """Return the session's user, or ``None`` for anonymous requests."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return None
    return store.validate_session(token)


async def get_current_user(user: Optional[User] = Depends(get_optional_user)) -> User:
    """Same as ``get_optional_user`` but raises 401 when anonymous."""
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


async def get_official(user: User = Depends(get_current_user)) -> User:
    """Dependency for officials-only endpoints."""
    require_official(user)
    return user


async def get_identity(
    request: Request,
    user: Optional[User] = Depends(get_optional_user),
) -> AuthenticatedIdentity:
    """Rate-limit subject for the current request."""
    return identity_for(user.id if user else None, client_ip(request))
