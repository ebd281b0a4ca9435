"""
Tests for the activity log and the admin dashboard
"""
from datetime import datetime, timedelta, timezone

from fastapi import status
from sqlalchemy.orm import Session
from app.models.activity_log import ActivityLog
from app.models.log_entry import LogEntry
from app.services import activity_service
from app.services.activity_service import list_activities, log_activity


def submit_entry(client, **overrides):
    """Helper to submit a log entry through the public form"""
    payload = {
        "name": "Alice",
        "position": "Guide",
        "startDate": "2024-01-01T09:00:00Z",
    }
    payload.update(overrides)
    response = client.post("/api/submit", json=payload)
    assert response.status_code == status.HTTP_201_CREATED, response.json()
    return response.json()["data"]


def _broken_sanitizer(value):
    raise RuntimeError("activity store unavailable")


def test_log_activity_persists_details(db: Session):
    entry = log_activity(
        db,
        action="export",
        admin_user="admin",
        details={"when": datetime(2024, 1, 1, tzinfo=timezone.utc)},
        ip_address="127.0.0.1"
    )
    assert entry is not None
    assert entry.id is not None
    assert entry.details == {"when": "2024-01-01T00:00:00Z"}
    assert entry.timestamp is not None


def test_log_activity_defaults(db: Session):
    """Test that missing details and actor are stored as placeholders"""
    entry = log_activity(db, action="logout", admin_user=None)
    assert entry.details == {}
    assert entry.admin_user == "unknown"


def test_log_activity_failure_returns_none(db: Session, monkeypatch):
    """Test that an audit write failure never raises"""
    monkeypatch.setattr(activity_service, "sanitize_for_json", _broken_sanitizer)

    assert log_activity(db, action="update", admin_user="admin", details={"a": 1}) is None
    assert db.query(ActivityLog).count() == 0


def test_mutation_survives_audit_failure(admin_client, db: Session, monkeypatch):
    """Test that a delete still succeeds when its activity entry cannot be written"""
    entry = submit_entry(admin_client)
    monkeypatch.setattr(activity_service, "sanitize_for_json", _broken_sanitizer)

    response = admin_client.delete(f"/admin/logs/{entry['id']}")

    assert response.status_code == status.HTTP_200_OK
    assert db.query(LogEntry).filter(LogEntry.id == entry["id"]).first() is None
    assert db.query(ActivityLog).filter(ActivityLog.action == "delete").count() == 0


def test_list_activities_newest_first(db: Session):
    """Test ordering by timestamp, descending"""
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    for offset, action in [(2, "export"), (0, "login"), (1, "update")]:
        db.add(ActivityLog(
            action=action,
            admin_user="admin",
            details={},
            timestamp=base + timedelta(hours=offset)
        ))
    db.commit()

    entries, total = list_activities(db, page=1, limit=10)
    assert total == 3
    assert [e.action for e in entries] == ["export", "update", "login"]


def test_activity_endpoint_paginates_and_filters(admin_client, db: Session):
    """Test the activity endpoint and its legacy path"""
    for i in range(3):
        entry = submit_entry(admin_client, name=f"User {i}")
        admin_client.delete(f"/admin/logs/{entry['id']}")

    response = admin_client.get("/admin/activity", params={"page": 1, "limit": 2})
    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert len(body["activities"]) == 2
    # One login plus three deletes
    assert body["pagination"]["total"] == 4
    assert body["activities"][0]["action"] == "delete"
    assert body["activities"][0]["timestamp"].endswith("Z")

    response = admin_client.get("/admin/activity-log", params={"action": "login"})
    assert response.status_code == status.HTTP_200_OK
    activities = response.json()["activities"]
    assert len(activities) == 1
    assert activities[0]["details"]["success"] is True


def test_dashboard_stats(admin_client):
    """Test counts per position, point sums and recent activity"""
    submit_entry(admin_client, position="Guide", recruits=1)
    submit_entry(admin_client, position="Guide", gameHandled=1)
    submit_entry(admin_client, position="Host", attendeesBatch1=2)

    response = admin_client.get("/admin/dashboard-stats")
    assert response.status_code == status.HTTP_200_OK
    stats = response.json()["stats"]
    assert stats["total_logs"] == 3
    assert stats["position_distribution"] == {"Guide": 2, "Host": 1}
    assert stats["points"]["recruits_total"] == 500
    assert stats["points"]["game_handled_total"] == 1000
    assert stats["points"]["attendees_total"] == 300
    assert stats["points"]["grand_total"] == 1800
    assert [a["action"] for a in stats["recent_activity"]] == ["login"]


def test_activity_filter_rejects_unknown_action(admin_client):
    response = admin_client.get("/admin/activity", params={"action": "teleport"})
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
