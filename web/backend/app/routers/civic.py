"""Civic submission router -- complaints, community issues, comments, chat, votes.

Every endpoint runs the abuse checks first.  Persistence of accepted
submissions belongs to the complaint service; these handlers acknowledge
the request once it has passed every check.
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from smartconnect.auth.identity import AuthenticatedIdentity
from smartconnect.auth.models import User
from smartconnect.notifications.store import NotificationStore
from smartconnect.security.guard import AbuseGuard
from smartconnect.spam.classifier import SpamClassifier, SpamVerdict
from web.backend.app.middleware.abuse import (
    AbuseRejection,
    enforce_clean_content,
    enforce_not_duplicate,
    get_guard,
    rate_limit,
)
from web.backend.app.middleware.auth import get_current_user
from web.backend.app.models.api import (
    ChatRequest,
    CommentRequest,
    CommunityIssueRequest,
    ComplaintRequest,
    NotificationResponse,
    SubmissionAccepted,
    UpvoteRequest,
)

router = APIRouter(prefix="/api", tags=["civic"])


def get_classifier(request: Request) -> SpamClassifier:
    return request.app.state.classifier


def get_notification_store(request: Request) -> NotificationStore:
    return request.app.state.notification_store


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _accepted(kind: str) -> SubmissionAccepted:
    return SubmissionAccepted(id=uuid.uuid4().hex, kind=kind)


def _reject_spam(
    guard: AbuseGuard,
    identity: AuthenticatedIdentity,
    verdict: SpamVerdict,
    label: str,
) -> None:
    """Notify the author and abort when the classifier is confident it is spam."""
    if not verdict.should_reject():
        return
    if guard.notifier is not None:
        guard.notifier.notify_rejection(
            identity.user_id,
            title=f"⚠️ {label.title()} Rejected - Spam Detected",
            message=(
                f"Your {label} was automatically rejected by our AI system. "
                f"Reason: {verdict.reason}. Category: {verdict.category}. "
                "If you believe this is an error, please contact support."
            ),
        )
    raise AbuseRejection(
        400,
        {
            "message": f"{label.title()} rejected due to spam detection",
            "reason": verdict.reason,
            "category": verdict.category,
        },
    )


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.post(
    "/complaints",
    response_model=SubmissionAccepted,
    status_code=status.HTTP_202_ACCEPTED,
    summary="File a complaint",
)
def create_complaint(
    req: ComplaintRequest,
    identity: AuthenticatedIdentity = Depends(rate_limit("complaints")),
    guard: AbuseGuard = Depends(get_guard),
    classifier: SpamClassifier = Depends(get_classifier),
):
    """Rate limit, duplicate check, then AI spam screening."""
    enforce_not_duplicate(guard, "complaint", identity, req.description)

    title = req.title or f"{req.category} Issue"
    verdict = classifier.classify_complaint(title, req.description, req.category, req.location)
    _reject_spam(guard, identity, verdict, "complaint")

    return _accepted("complaint")


@router.post(
    "/community-issues",
    response_model=SubmissionAccepted,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Post a community issue",
)
def create_community_issue(
    req: CommunityIssueRequest,
    identity: AuthenticatedIdentity = Depends(rate_limit("complaints")),
    guard: AbuseGuard = Depends(get_guard),
    classifier: SpamClassifier = Depends(get_classifier),
):
    enforce_not_duplicate(guard, "issue", identity, req.description)

    title = req.title or f"{req.category} Issue"
    verdict = classifier.classify_community_issue(title, req.description, req.category)
    _reject_spam(guard, identity, verdict, "community post")

    return _accepted("community_issue")


@router.post(
    "/comments",
    response_model=SubmissionAccepted,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Comment on a complaint or community issue",
)
async def create_comment(
    req: CommentRequest,
    identity: AuthenticatedIdentity = Depends(rate_limit("comments")),
    guard: AbuseGuard = Depends(get_guard),
):
    if not req.content:
        raise HTTPException(status_code=400, detail="Comment content is required")
    enforce_clean_content(guard, identity, req.content, label="comment")
    enforce_not_duplicate(guard, "comment", identity, req.content)
    return _accepted("comment")


@router.post(
    "/chat",
    response_model=SubmissionAccepted,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Send a message to the civic assistant",
)
async def send_chat_message(
    req: ChatRequest,
    identity: AuthenticatedIdentity = Depends(rate_limit("chat")),
):
    if not req.message:
        raise HTTPException(status_code=400, detail="Message is required")
    return _accepted("chat")


@router.post(
    "/upvote",
    response_model=SubmissionAccepted,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Upvote a complaint or community issue",
)
async def upvote(
    req: UpvoteRequest,
    identity: AuthenticatedIdentity = Depends(rate_limit("upvotes")),
):
    if not req.complaint_id and not req.community_issue_id:
        raise HTTPException(
            status_code=400, detail="complaintId or communityIssueId is required"
        )
    return _accepted("upvote")


@router.get(
    "/notifications",
    response_model=list[NotificationResponse],
    summary="List the current user's notifications",
)
async def list_notifications(
    limit: int = Query(100, ge=1, le=500),
    identity: AuthenticatedIdentity = Depends(rate_limit("general")),
    user: User = Depends(get_current_user),
    store: NotificationStore = Depends(get_notification_store),
):
    return [
        NotificationResponse(
            id=n.id,
            user_id=n.user_id,
            title=n.title,
            message=n.message,
            type=n.type,
            related_id=n.related_id,
            is_read=n.is_read,
            created_at=n.created_at,
        )
        for n in store.list_for_user(user.id, limit=limit)
    ]


@router.post("/notifications/{notification_id}/read", summary="Mark a notification read")
async def mark_notification_read(
    notification_id: str,
    identity: AuthenticatedIdentity = Depends(rate_limit("general")),
    user: User = Depends(get_current_user),
    store: NotificationStore = Depends(get_notification_store),
):
    if not store.mark_read(user.id, notification_id):
        raise HTTPException(status_code=404, detail="Notification not found")
    return {"detail": "Notification marked as read"}
