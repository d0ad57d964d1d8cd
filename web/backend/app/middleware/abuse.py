"""Abuse-mitigation dependencies for the civic endpoints.

The guard returns decisions as values; this module turns non-allowed
decisions into ``AbuseRejection`` so FastAPI can short-circuit the request.
The registered handler renders the decision body at the top level of the
JSON response (no ``detail`` wrapper) to keep the client contract.
"""

from __future__ import annotations

from typing import Any, Callable

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from smartconnect.auth.identity import AuthenticatedIdentity
from smartconnect.security.guard import AbuseGuard
from smartconnect.security.models import Rejection
from web.backend.app.middleware.auth import get_identity


class AbuseRejection(Exception):
    """A request refused by the abuse guard."""

    def __init__(self, status_code: int, body: dict[str, Any]) -> None:
        super().__init__(body.get("message", ""))
        self.status_code = status_code
        self.body = body

    @classmethod
    def from_rejection(cls, rejection: Rejection) -> "AbuseRejection":
        return cls(rejection.status_code, rejection.body)


def install_abuse_handler(app: FastAPI) -> None:
    @app.exception_handler(AbuseRejection)
    async def abuse_rejection_handler(request: Request, exc: AbuseRejection):
        headers = {}
        retry_after = exc.body.get("retryAfter")
        if exc.status_code == 429 and retry_after:
            headers["Retry-After"] = str(retry_after)
        return JSONResponse(status_code=exc.status_code, content=exc.body, headers=headers)


def get_guard(request: Request) -> AbuseGuard:
    """Return the AbuseGuard created at startup."""
    return request.app.state.guard


def rate_limit(category: str) -> Callable[..., AuthenticatedIdentity]:
    """Dependency factory: count the request against *category*.

    Usage::

        @router.post("/api/chat")
        async def chat(identity = Depends(rate_limit("chat"))):
            ...
    """

    async def dependency(
        identity: AuthenticatedIdentity = Depends(get_identity),
        guard: AbuseGuard = Depends(get_guard),
    ) -> AuthenticatedIdentity:
        decision = guard.check_rate_limit(identity, category)
        if not decision.allowed:
            raise AbuseRejection(decision.status_code, decision.payload())
        return identity

    return dependency


def enforce_clean_content(
    guard: AbuseGuard, identity: AuthenticatedIdentity, text: str, label: str = "comment"
) -> None:
    rejection = guard.validate_submission(identity, text, label=label)
    if rejection is not None:
        raise AbuseRejection.from_rejection(rejection)


def enforce_not_duplicate(
    guard: AbuseGuard, submission_type: str, identity: AuthenticatedIdentity, content: str
) -> None:
    rejection = guard.check_duplicate(submission_type, identity, content)
    if rejection is not None:
        raise AbuseRejection.from_rejection(rejection)
