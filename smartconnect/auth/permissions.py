"""Role checks for officials-only endpoints."""

from __future__ import annotations

from fastapi import HTTPException, status

from smartconnect.auth.models import User


def require_official(user: User) -> None:
    """Raise ``HTTPException(403)`` unless *user* is an official.

    Usage in a router::

        @router.get("/officials-only")
        async def officials_only(user: User = Depends(get_current_user)):
            require_official(user)
            ...
    """
    if not user.is_official:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied. Officials only.",
        )
