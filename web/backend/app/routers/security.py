"""Security administration router (officials only).

Prefix: ``/api/officials/security``
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from smartconnect.auth.models import User
from smartconnect.security.guard import AbuseGuard
from web.backend.app.middleware.abuse import get_guard
from web.backend.app.middleware.auth import get_official
from web.backend.app.models.api import (
    SecurityStatsResponse,
    SeverityCounts,
    SuspiciousActivityResponse,
    UnblockIpRequest,
    UnblockResponse,
    UnblockUserRequest,
)

router = APIRouter(prefix="/api/officials/security", tags=["security"])


@router.get("/stats", response_model=SecurityStatsResponse)
async def security_stats(
    official: User = Depends(get_official),
    guard: AbuseGuard = Depends(get_guard),
):
    """Aggregate counts of suspicious activity, blocks and live counters."""
    stats = guard.security_stats()
    return SecurityStatsResponse(
        total_suspicious_activities=stats["total_suspicious_activities"],
        last_24_hours=SeverityCounts(**stats["last_24_hours"]),
        blocked_ips=stats["blocked_ips"],
        active_rate_limits=stats["active_rate_limits"],
        currently_blocked=stats["currently_blocked"],
    )


@router.get("/activities", response_model=list[SuspiciousActivityResponse])
async def recent_activities(
    limit: int = Query(50, ge=1, le=1000),
    official: User = Depends(get_official),
    guard: AbuseGuard = Depends(get_guard),
):
    """Most recent suspicious-activity records, newest first."""
    return [SuspiciousActivityResponse(**a) for a in guard.recent_activities(limit)]


@router.post("/unblock-user", response_model=UnblockResponse)
async def unblock_user(
    req: UnblockUserRequest,
    official: User = Depends(get_official),
    guard: AbuseGuard = Depends(get_guard),
):
    """Lift a temporary block by identity key (``user:<id>`` or ``ip:<addr>``)."""
    if not req.identifier:
        raise HTTPException(status_code=400, detail="User identifier is required")
    success = guard.unblock_user(req.identifier)
    return UnblockResponse(
        message="User unblocked successfully" if success else "User not found or not blocked",
        success=success,
    )


@router.post("/unblock-ip", response_model=UnblockResponse)
async def unblock_ip(
    req: UnblockIpRequest,
    official: User = Depends(get_official),
    guard: AbuseGuard = Depends(get_guard),
):
    """Remove an address from the permanent blocklist."""
    if not req.ip:
        raise HTTPException(status_code=400, detail="IP address is required")
    success = guard.unblock_ip(req.ip)
    return UnblockResponse(
        message="IP unblocked successfully" if success else "IP not found in blocklist",
        success=success,
    )
