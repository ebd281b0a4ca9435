"""
Tests for admin login, logout and session status
"""
import os
from datetime import timedelta

from fastapi import status
from sqlalchemy.orm import Session
from app.core.config import settings
from app.core.security import create_session_token, hash_password, verify_password
from app.models.activity_log import ActivityLog
from app.models.admin_session import AdminSession
from app.services.session_service import create_session, get_active_session
from app.utils.datetime_utils import now_utc

ADMIN_USERNAME = os.environ["ADMIN_USERNAME"]
ADMIN_PASSWORD = os.environ["ADMIN_PASSWORD"]
COOKIE_NAME = "arcanum_admin_session"


def login(client, username=ADMIN_USERNAME, password=ADMIN_PASSWORD):
    return client.post("/admin/login", json={"username": username, "password": password})


def test_login_success_sets_cookie_and_audits(client, db: Session):
    """Test successful login"""
    response = login(client)

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["success"] is True
    assert data["username"] == ADMIN_USERNAME
    assert COOKIE_NAME in response.cookies

    set_cookie = response.headers["set-cookie"].lower()
    assert "httponly" in set_cookie
    assert "samesite=lax" in set_cookie

    session = db.query(AdminSession).one()
    assert session.username == ADMIN_USERNAME
    assert session.is_active is True

    entry = db.query(ActivityLog).filter(ActivityLog.action == "login").one()
    assert entry.admin_user == ADMIN_USERNAME
    assert entry.details["success"] is True


def test_login_wrong_password_audits_failure(client, db: Session):
    """Test login with an invalid password"""
    response = login(client, password="wrongpassword")

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["detail"] == "Invalid username or password"
    assert COOKIE_NAME not in response.cookies
    assert db.query(AdminSession).count() == 0

    entry = db.query(ActivityLog).filter(ActivityLog.action == "login").one()
    assert entry.details["success"] is False
    assert entry.details["reason"] == "Invalid credentials"


def test_login_wrong_username(client):
    response = login(client, username="root")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_login_missing_credentials(client, db: Session):
    """Test that an empty body is a failed attempt, not a crash"""
    response = client.post("/admin/login", json={})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED

    entry = db.query(ActivityLog).filter(ActivityLog.action == "login").one()
    assert entry.admin_user == "unknown"


def test_auth_status(client):
    """Test auth-status before and after login"""
    response = client.get("/admin/auth-status")
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"is_authenticated": False, "user": None}

    login(client)
    response = client.get("/admin/auth-status")
    assert response.json() == {"is_authenticated": True, "user": ADMIN_USERNAME}


def test_logout_audits_and_invalidates_session(client, db: Session):
    """Test that logout ends the session server-side"""
    response = login(client)
    token = response.cookies[COOKIE_NAME]

    response = client.post("/admin/logout")
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["success"] is True

    entry = db.query(ActivityLog).filter(ActivityLog.action == "logout").one()
    assert entry.admin_user == ADMIN_USERNAME
    assert db.query(AdminSession).one().is_active is False

    # The old cookie no longer works even if the browser kept it
    client.cookies.clear()
    response = client.get("/admin/logs", headers={"Cookie": f"{COOKIE_NAME}={token}"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_logout_requires_session(client):
    response = client.post("/admin/logout")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_expired_session_token_rejected(client, db: Session):
    """Test that an expired token is refused even if the session row is active"""
    login(client)
    session = db.query(AdminSession).one()
    expired = create_session_token(session.username, session.session_id, expires_minutes=-1)

    client.cookies.clear()
    response = client.get("/admin/logs", headers={"Cookie": f"{COOKIE_NAME}={expired}"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_verify_password_accepts_plain_and_bcrypt():
    """Test both accepted forms of the configured admin password"""
    assert verify_password("secret", "secret") is True
    assert verify_password("nope", "secret") is False

    hashed = hash_password("secret")
    assert hashed.startswith("$2")
    assert verify_password("secret", hashed) is True
    assert verify_password("nope", hashed) is False


def test_malformed_login_body_is_audited_as_failure(client, db: Session):
    """Test that odd login payloads are still recorded as failed attempts"""
    response = client.post(
        "/admin/login",
        json={"username": 123, "password": ["x"], "remember": True}
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED

    entry = db.query(ActivityLog).filter(ActivityLog.action == "login").one()
    assert entry.admin_user == "unknown"
    assert entry.details["success"] is False


def test_login_with_extra_keys_succeeds(client):
    response = client.post(
        "/admin/login",
        json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD, "remember": True}
    )
    assert response.status_code == status.HTTP_200_OK


def test_session_past_lifetime_is_deactivated(client, db: Session):
    """Test that a stale session row stops authenticating and is deactivated"""
    login(client)
    session = db.query(AdminSession).one()
    session.login_time = now_utc() - timedelta(minutes=settings.SESSION_EXPIRE_MINUTES + 1)
    db.commit()

    response = client.get("/admin/logs")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    db.refresh(session)
    assert session.is_active is False


def test_login_prunes_expired_sessions(db: Session):
    """Test that opening a session deactivates stale ones"""
    stale = create_session(db, username=ADMIN_USERNAME)
    stale.login_time = now_utc() - timedelta(minutes=settings.SESSION_EXPIRE_MINUTES + 5)
    db.commit()

    fresh = create_session(db, username=ADMIN_USERNAME)

    db.refresh(stale)
    assert stale.is_active is False
    assert fresh.is_active is True
    assert get_active_session(db, stale.session_id) is None
    assert get_active_session(db, fresh.session_id).id == fresh.id
