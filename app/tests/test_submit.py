"""
Tests for the public submission and calculation endpoints
"""
from fastapi import status
from sqlalchemy.orm import Session
from app.constants import MAX_COUNTER
from app.models.log_entry import LogEntry
from app.models.activity_log import ActivityLog


def test_submit_scenario_recruits_only(client, db: Session):
    """Test that two recruits are worth 1000 points and nothing else scores"""
    response = client.post(
        "/api/submit",
        json={
            "name": "Alice",
            "position": "Guide",
            "startDate": "2024-01-01",
            "recruits": 2
        }
    )

    assert response.status_code == status.HTTP_201_CREATED
    body = response.json()
    assert body["success"] is True
    data = body["data"]
    assert data["recruits_total"] == 1000
    assert data["attendees_total"] == 0
    assert data["dropped_links_total"] == 0
    assert data["nicknames_set_total"] == 0
    assert data["game_handled_total"] == 0
    assert data["grand_total"] == 1000
    assert data["start_date"] == "2024-01-01T00:00:00Z"
    assert data["end_date"] is None

    stored = db.query(LogEntry).filter(LogEntry.id == data["id"]).first()
    assert stored is not None
    assert stored.recruits == 2
    assert stored.recruits_total == 1000


def test_submit_accepts_snake_case_fields(client):
    """Test that snake_case keys are accepted as well as the form's camelCase"""
    response = client.post(
        "/api/submit",
        json={
            "name": "Bob",
            "position": "Host",
            "start_date": "2024-02-01T10:00:00Z",
            "end_date": "2024-02-01T12:00:00Z",
            "attendees_batch1": 2,
            "attendeesBatch2": 3,
            "game_handled": 1
        }
    )

    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()["data"]
    assert data["attendees_total"] == 750
    assert data["game_handled_total"] == 1000
    assert data["end_date"] == "2024-02-01T12:00:00Z"


def test_submit_missing_required_fields_rejected(client, db: Session):
    """Test that name, position and start date are required"""
    for missing in ("name", "position", "startDate"):
        payload = {"name": "Alice", "position": "Guide", "startDate": "2024-01-01"}
        payload.pop(missing)
        response = client.post("/api/submit", json=payload)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "required" in response.json()["detail"].lower()

    assert db.query(LogEntry).count() == 0


def test_submit_blank_name_rejected(client):
    """Test that whitespace-only text counts as missing"""
    response = client.post(
        "/api/submit",
        json={"name": "   ", "position": "Guide", "startDate": "2024-01-01"}
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_submit_end_before_start_rejected(client):
    """Test that an end date before the start date is rejected"""
    response = client.post(
        "/api/submit",
        json={
            "name": "Alice",
            "position": "Guide",
            "startDate": "2024-01-05",
            "endDate": "2024-01-01"
        }
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "end date" in response.json()["detail"].lower()


def test_submit_clamps_negative_and_non_numeric_counters(client):
    """Test that the server clamps counters independently of the client"""
    response = client.post(
        "/api/submit",
        json={
            "name": "Alice",
            "position": "Guide",
            "startDate": "2024-01-01",
            "recruits": -5,
            "droppedLinks": "abc",
            "nicknamesSet": "4"
        }
    )

    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()["data"]
    assert data["recruits"] == 0
    assert data["recruits_total"] == 0
    assert data["dropped_links"] == 0
    assert data["nicknames_set"] == 4
    assert data["nicknames_set_total"] == 400


def test_submit_unknown_field_rejected(client):
    """Test that unexpected body fields are rejected before reaching the store"""
    response = client.post(
        "/api/submit",
        json={
            "name": "Alice",
            "position": "Guide",
            "startDate": "2024-01-01",
            "recruitsTotal": 999999
        }
    )
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_submit_invalid_date_rejected(client):
    """Test that an unparseable start date is a validation error"""
    response = client.post(
        "/api/submit",
        json={"name": "Alice", "position": "Guide", "startDate": "not-a-date"}
    )
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_submit_captures_tracking_data(client, db: Session):
    """Test that IP, MAC and user agent are captured at submission"""
    response = client.post(
        "/api/submit",
        json={"name": "Alice", "position": "Guide", "startDate": "2024-01-01"},
        headers={
            "X-Forwarded-For": "203.0.113.7, 10.0.0.1",
            "X-MAC-Address": "aa:bb:cc:dd:ee:ff",
            "User-Agent": "pytest-agent"
        }
    )
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()["data"]

    # Tracking data is not part of the public projection
    assert "ip_address" not in data

    stored = db.query(LogEntry).filter(LogEntry.id == data["id"]).first()
    assert stored.ip_address == "203.0.113.7"
    assert stored.mac_address == "aa:bb:cc:dd:ee:ff"
    assert stored.user_agent == "pytest-agent"


def test_submit_without_mac_header_records_unavailable(client, db: Session):
    """Test the MAC placeholder when the client does not report one"""
    data = client.post(
        "/api/submit",
        json={"name": "Alice", "position": "Guide", "startDate": "2024-01-01"}
    ).json()["data"]

    stored = db.query(LogEntry).filter(LogEntry.id == data["id"]).first()
    assert stored.mac_address == "unavailable"


def test_public_submission_is_not_audited(client, db: Session):
    """Test that the activity log only records admin actions"""
    client.post(
        "/api/submit",
        json={"name": "Alice", "position": "Guide", "startDate": "2024-01-01"}
    )
    assert db.query(ActivityLog).count() == 0


def test_calculate_preview(client, db: Session):
    """Test the totals preview endpoint"""
    response = client.post(
        "/api/calculate",
        json={
            "attendeesBatch1": 2,
            "attendeesBatch2": 3,
            "droppedLinks": 1,
            "recruits": 1,
            "nicknamesSet": 2,
            "gameHandled": 1
        }
    )

    assert response.status_code == status.HTTP_200_OK
    totals = response.json()["totals"]
    assert totals == {
        "attendees_total": 750,
        "dropped_links_total": 100,
        "recruits_total": 500,
        "nicknames_set_total": 200,
        "game_handled_total": 1000,
        "grand_total": 2550,
    }
    # Preview never writes
    assert db.query(LogEntry).count() == 0


def test_calculate_empty_body_is_all_zero(client):
    """Test that omitted counters preview as zero"""
    response = client.post("/api/calculate", json={})
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["totals"]["grand_total"] == 0


def test_submit_counter_at_limit_accepted(client):
    """Test the largest accepted counter still fits its total column"""
    response = client.post(
        "/api/submit",
        json={
            "name": "Alice",
            "position": "Guide",
            "startDate": "2024-01-01",
            "gameHandled": MAX_COUNTER
        }
    )
    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["data"]["game_handled_total"] == MAX_COUNTER * 1000


def test_submit_counter_over_limit_rejected(client, db: Session):
    """Test that a counter whose total would overflow the column is rejected"""
    for value in (MAX_COUNTER + 1, 10**17, "100000000000000000000"):
        response = client.post(
            "/api/submit",
            json={"name": "A", "position": "G", "startDate": "2024-01-01", "recruits": value}
        )
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    assert db.query(LogEntry).count() == 0


def test_calculate_counter_over_limit_rejected(client):
    response = client.post("/api/calculate", json={"attendeesBatch1": MAX_COUNTER + 1})
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
