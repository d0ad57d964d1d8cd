"""Pydantic models for API request/response serialization.

These models mirror the smartconnect dataclasses and provide JSON
serialization for the FastAPI endpoints.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Civic submissions
# ---------------------------------------------------------------------------


class ComplaintRequest(BaseModel):
    """Request body for filing a complaint."""

    title: str = ""
    description: str
    category: str
    location: str = ""
    latitude: Optional[str] = None
    longitude: Optional[str] = None
    phone_number: str = Field("", alias="phoneNumber")

    model_config = {"populate_by_name": True}


class CommunityIssueRequest(BaseModel):
    """Request body for posting a community issue."""

    title: str = ""
    description: str
    category: str


class CommentRequest(BaseModel):
    """Request body for commenting on a complaint or community issue."""

    content: str = ""
    complaint_id: Optional[str] = Field(None, alias="complaintId")
    community_issue_id: Optional[str] = Field(None, alias="communityIssueId")

    model_config = {"populate_by_name": True}


class ChatRequest(BaseModel):
    """Request body for a chat-assistant message."""

    message: str = ""
    language: str = "en"


class UpvoteRequest(BaseModel):
    """Request body for upvoting a complaint or community issue."""

    complaint_id: Optional[str] = Field(None, alias="complaintId")
    community_issue_id: Optional[str] = Field(None, alias="communityIssueId")

    model_config = {"populate_by_name": True}


class SubmissionAccepted(BaseModel):
    """Acknowledgement that a request passed the abuse checks."""

    id: str
    kind: str
    status: str = "accepted"


class NotificationResponse(BaseModel):
    """Mirrors smartconnect.notifications.store.Notification."""

    id: str
    user_id: str
    title: str
    message: str
    type: str = "alert"
    related_id: Optional[str] = None
    is_read: bool = False
    created_at: str = ""


# ---------------------------------------------------------------------------
# Security administration
# ---------------------------------------------------------------------------


class SeverityCounts(BaseModel):
    """Suspicious-activity counts for the last 24 hours."""

    total: int = 0
    low: int = 0
    medium: int = 0
    high: int = 0
    critical: int = 0


class SecurityStatsResponse(BaseModel):
    """Aggregate abuse-mitigation statistics."""

    total_suspicious_activities: int = 0
    last_24_hours: SeverityCounts = Field(default_factory=SeverityCounts)
    blocked_ips: int = 0
    active_rate_limits: int = 0
    currently_blocked: int = 0


class SuspiciousActivityResponse(BaseModel):
    """Mirrors smartconnect.security.models.SuspiciousActivity."""

    subject: str
    ip: str
    action: str
    timestamp: str
    severity: str


class UnblockUserRequest(BaseModel):
    """Request body for lifting an identity block."""

    identifier: str = ""


class UnblockIpRequest(BaseModel):
    """Request body for removing an IP from the blocklist."""

    ip: str = ""


class UnblockResponse(BaseModel):
    """Outcome of an unblock action."""

    message: str
    success: bool
