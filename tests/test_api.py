"""HTTP tests for the civic and security routers."""

import tempfile

from fastapi import Request
from fastapi.testclient import TestClient

from smartconnect.auth.models import Role, User
from smartconnect.auth.store import UserStore
from smartconnect.notifications.store import NotificationStore
from smartconnect.security.guard import AbuseGuard
from smartconnect.security.notifier import Notifier
from smartconnect.spam.classifier import SpamVerdict
from web.backend.app.main import create_app
from web.backend.app.middleware.auth import client_ip

# peer address Starlette's TestClient reports for every request
PEER = "testclient"


class FakeClassifier:
    def __init__(self, verdict=None):
        self.verdict = verdict or SpamVerdict(False, 0.05, "Looks legitimate", "legitimate")

    @property
    def configured(self):
        return True

    def classify_complaint(self, title, description, category, location=""):
        return self.verdict

    def classify_community_issue(self, title, description, category):
        return self.verdict


def _setup(tmp, classifier=None):
    notifications = NotificationStore(base_dir=f"{tmp}/notifications")
    users = UserStore(base_dir=f"{tmp}/auth")
    guard = AbuseGuard(notifier=Notifier(notifications))
    app = create_app(
        guard=guard,
        user_store=users,
        notification_store=notifications,
        classifier=classifier or FakeClassifier(),
        start_sweeper=False,
    )
    return TestClient(app), guard, users, notifications


def _login(users, user_id, role=Role.citizen):
    users.create_user(User(id=user_id, email=f"{user_id}@example.com", role=role))
    token = users.create_session(user_id).token
    return {"Authorization": f"Bearer {token}"}


def _complaint(n=0):
    return {
        "title": "Broken streetlight",
        "description": f"Streetlight number {n} on Station Road is out",
        "category": "Electricity",
        "location": "Station Road",
    }


def test_health():
    with tempfile.TemporaryDirectory() as tmp:
        client, *_ = _setup(tmp)
        assert client.get("/health").json() == {"status": "healthy"}


def test_sixth_anonymous_complaint_is_rate_limited():
    with tempfile.TemporaryDirectory() as tmp:
        client, *_ = _setup(tmp)
        for i in range(5):
            resp = client.post("/api/complaints", json=_complaint(i))
            assert resp.status_code == 202
            assert resp.json()["kind"] == "complaint"

        resp = client.post("/api/complaints", json=_complaint(6))
        assert resp.status_code == 429
        assert resp.headers["Retry-After"] == "60"
        assert resp.json() == {
            "message": "Rate limit exceeded. Warning 1/3. Please slow down.",
            "warnings": 1,
            "maxWarnings": 3,
            "retryAfter": 60,
            "blocked": False,
        }


def test_forwarded_header_does_not_change_identity():
    with tempfile.TemporaryDirectory() as tmp:
        client, guard, *_ = _setup(tmp)
        statuses = [
            client.post(
                "/api/complaints",
                json=_complaint(i),
                headers={"X-Forwarded-For": f"10.0.0.{i}"},
            ).status_code
            for i in range(6)
        ]
        assert statuses == [202] * 5 + [429]

        spoofed = {"X-Forwarded-For": "203.0.113.7"}
        for i in range(6, 10):
            client.post("/api/complaints", json=_complaint(i), headers=spoofed)

        assert not guard.is_ip_blocked("203.0.113.7")
        assert guard.is_ip_blocked(PEER)


def test_client_ip_uses_peer_address():
    scope = {
        "type": "http",
        "headers": [(b"x-forwarded-for", b"198.51.100.1")],
        "client": ("192.0.2.10", 51000),
    }
    assert client_ip(Request(scope)) == "192.0.2.10"
    assert client_ip(Request({"type": "http", "headers": [], "client": None})) == "unknown"


def test_blocked_ip_gets_403():
    with tempfile.TemporaryDirectory() as tmp:
        client, guard, *_ = _setup(tmp)
        guard.block_ip(PEER)
        resp = client.post("/api/chat", json={"message": "hello"})
        assert resp.status_code == 403
        assert resp.json()["blocked"] is True


def test_duplicate_complaint_rejected():
    with tempfile.TemporaryDirectory() as tmp:
        client, _, users, _ = _setup(tmp)
        auth = _login(users, "c1")
        assert client.post("/api/complaints", json=_complaint(), headers=auth).status_code == 202

        resp = client.post("/api/complaints", json=_complaint(), headers=auth)
        assert resp.status_code == 400
        assert resp.json()["message"] == (
            "Duplicate submission detected. You have already submitted this content."
        )


def test_spam_complaint_rejected_and_author_notified():
    with tempfile.TemporaryDirectory() as tmp:
        classifier = FakeClassifier(SpamVerdict(True, 0.93, "Promotional content", "spam"))
        client, _, users, notifications = _setup(tmp, classifier)
        auth = _login(users, "c2")

        resp = client.post("/api/complaints", json=_complaint(), headers=auth)
        assert resp.status_code == 400
        assert resp.json() == {
            "message": "Complaint rejected due to spam detection",
            "reason": "Promotional content",
            "category": "spam",
        }
        [notice] = notifications.list_for_user("c2")
        assert notice.title == "⚠️ Complaint Rejected - Spam Detected"


def test_low_confidence_spam_is_accepted():
    with tempfile.TemporaryDirectory() as tmp:
        classifier = FakeClassifier(SpamVerdict(True, 0.6, "Unsure", "irrelevant"))
        client, *_ = _setup(tmp, classifier)
        resp = client.post(
            "/api/community-issues",
            json={"title": "Park", "description": "Swings are broken", "category": "Parks"},
        )
        assert resp.status_code == 202
        assert resp.json()["kind"] == "community_issue"


def test_comment_checks():
    with tempfile.TemporaryDirectory() as tmp:
        client, *_ = _setup(tmp)
        resp = client.post("/api/comments", json={"content": "", "complaintId": "x1"})
        assert resp.status_code == 400
        assert resp.json() == {"detail": "Comment content is required"}

        resp = client.post("/api/comments", json={"content": "Win the lottery today", "complaintId": "x1"})
        assert resp.status_code == 400
        assert resp.json()["reason"] == "Spam keyword detected: lottery"

        resp = client.post("/api/comments", json={"content": "Thanks for the quick fix", "complaintId": "x1"})
        assert resp.status_code == 202


def test_upvote_requires_target():
    with tempfile.TemporaryDirectory() as tmp:
        client, *_ = _setup(tmp)
        assert client.post("/api/upvote", json={}).status_code == 400
        assert client.post("/api/upvote", json={"complaintId": "x1"}).status_code == 202


def test_security_endpoints_require_official():
    with tempfile.TemporaryDirectory() as tmp:
        client, _, users, _ = _setup(tmp)
        assert client.get("/api/officials/security/stats").status_code == 401

        citizen = _login(users, "c3")
        resp = client.get("/api/officials/security/stats", headers=citizen)
        assert resp.status_code == 403
        assert resp.json() == {"detail": "Access denied. Officials only."}


def test_stats_activities_and_unblock_flow():
    with tempfile.TemporaryDirectory() as tmp:
        client, _, users, notifications = _setup(tmp)
        offender = _login(users, "c4")
        official = _login(users, "o1", role=Role.official)

        statuses = [
            client.post("/api/chat", json={"message": f"m{i}"}, headers=offender).status_code
            for i in range(24)
        ]
        assert statuses[:20] == [202] * 20
        assert statuses[20:23] == [429] * 3
        # the IP was blocklisted on the third warning
        assert statuses[23] == 403

        stats = client.get("/api/officials/security/stats", headers=official).json()
        assert stats["blocked_ips"] == 1
        assert stats["currently_blocked"] == 1
        assert stats["last_24_hours"]["total"] == 4
        assert stats["last_24_hours"]["critical"] == 2

        activities = client.get(
            "/api/officials/security/activities?limit=2", headers=official
        ).json()
        assert len(activities) == 2
        assert activities[0]["action"] == "Blocked IP attempted chat request"
        assert activities[1]["subject"] == "user:c4"

        resp = client.post(
            "/api/officials/security/unblock-user", json={"identifier": "user:c4"}, headers=official
        )
        assert resp.json() == {"message": "User unblocked successfully", "success": True}
        resp = client.post(
            "/api/officials/security/unblock-user", json={"identifier": "user:c4"}, headers=official
        )
        assert resp.json() == {"message": "User not found or not blocked", "success": False}

        resp = client.post(
            "/api/officials/security/unblock-ip", json={"ip": PEER}, headers=official
        )
        assert resp.json() == {"message": "IP unblocked successfully", "success": True}

        resp = client.post("/api/chat", json={"message": "back again"}, headers=offender)
        assert resp.status_code == 202

        titles = [n.title for n in notifications.list_for_user("c4")]
        assert titles == ["Account Blocked", "Final Warning", "Security Alert"]


def test_unblock_requires_identifier():
    with tempfile.TemporaryDirectory() as tmp:
        client, _, users, _ = _setup(tmp)
        official = _login(users, "o2", role=Role.official)
        resp = client.post("/api/officials/security/unblock-user", json={}, headers=official)
        assert resp.status_code == 400
        assert resp.json() == {"detail": "User identifier is required"}
        resp = client.post("/api/officials/security/unblock-ip", json={"ip": ""}, headers=official)
        assert resp.status_code == 400
        resp = client.post(
            "/api/officials/security/unblock-ip", json={"ip": "10.9.9.9"}, headers=official
        )
        assert resp.json() == {"message": "IP not found in blocklist", "success": False}


def test_notifications_listing_and_mark_read():
    with tempfile.TemporaryDirectory() as tmp:
        client, _, users, notifications = _setup(tmp)
        auth = _login(users, "c5")
        notice = notifications.create_notification("c5", "Security Alert", "slow down")

        assert client.get("/api/notifications").status_code == 401

        items = client.get("/api/notifications", headers=auth).json()
        assert [n["id"] for n in items] == [notice.id]
        assert items[0]["is_read"] is False

        resp = client.post(f"/api/notifications/{notice.id}/read", headers=auth)
        assert resp.status_code == 200
        assert client.get("/api/notifications", headers=auth).json()[0]["is_read"] is True

        assert client.post("/api/notifications/missing/read", headers=auth).status_code == 404
