"""
Dependencies and guards for FastAPI endpoints
"""
from typing import Generator, Optional
from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session
from app.db.session import SessionLocal
from app.core.config import settings
from app.core.security import decode_session_token
from app.models.admin_session import AdminSession
from app.services.session_service import get_active_session, touch_session


def get_db() -> Generator:
    """Dependency for getting database session"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_client_ip(request: Request) -> Optional[str]:
    """Client IP, preferring the first X-Forwarded-For hop set by a proxy"""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    return request.client.host if request.client else None


def get_mac_address(request: Request) -> Optional[str]:
    """MAC address is not visible over HTTP; only a client-reported header is recorded"""
    return request.headers.get("x-mac-address")


def _unauthorized() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Unauthorized. Admin access required."
    )


def get_optional_admin(request: Request, db: Session = Depends(get_db)) -> Optional[AdminSession]:
    """
    Resolve the admin session from the session cookie, or None if anonymous
    """
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not token:
        return None
    try:
        payload = decode_session_token(token)
    except ValueError:
        return None

    session = get_active_session(db, payload["sid"])
    if session is None or session.username != payload["sub"]:
        return None
    return session


def get_current_admin(
    session: Optional[AdminSession] = Depends(get_optional_admin),
    db: Session = Depends(get_db)
) -> AdminSession:
    """
    Require an authenticated admin session

    Raises:
        HTTPException: 401 if the cookie is missing, invalid, expired, or logged out
    """
    if session is None:
        raise _unauthorized()
    return touch_session(db, session)
