"""
Admin session service - server-side session state
"""
import logging
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.security import new_session_id
from app.models.admin_session import AdminSession
from app.utils.datetime_utils import ensure_utc, now_utc

logger = logging.getLogger(__name__)


def session_cutoff() -> datetime:
    """Sessions opened before this instant have outlived their cookie"""
    return now_utc() - timedelta(minutes=settings.SESSION_EXPIRE_MINUTES)


def prune_expired_sessions(db: Session) -> int:
    """
    Deactivate every active session older than SESSION_EXPIRE_MINUTES

    Returns:
        Number of sessions deactivated
    """
    stale = db.query(AdminSession).filter(
        AdminSession.is_active == True,  # noqa: E712
        AdminSession.login_time <= session_cutoff()
    ).all()
    for session in stale:
        session.is_active = False
    if stale:
        db.commit()
        logger.info("Deactivated %d expired admin sessions", len(stale))
    return len(stale)


def create_session(
    db: Session,
    username: str,
    ip_address: Optional[str] = None,
    user_agent: Optional[str] = None
) -> AdminSession:
    """Open an authenticated session for username"""
    prune_expired_sessions(db)

    now = now_utc()
    session = AdminSession(
        session_id=new_session_id(),
        username=username,
        ip_address=ip_address,
        user_agent=user_agent,
        login_time=now,
        last_activity=now,
        is_active=True
    )
    db.add(session)
    db.commit()
    db.refresh(session)
    return session


def get_active_session(db: Session, session_id: str) -> Optional[AdminSession]:
    """
    Get a session by its identifier if it has not been deactivated

    A session past its lifetime is deactivated here and treated as missing.
    """
    session = db.query(AdminSession).filter(
        AdminSession.session_id == session_id,
        AdminSession.is_active == True  # noqa: E712
    ).first()
    if session is not None and ensure_utc(session.login_time) <= session_cutoff():
        deactivate_session(db, session)
        return None
    return session


def touch_session(db: Session, session: AdminSession) -> AdminSession:
    session.last_activity = now_utc()
    db.commit()
    return session


def deactivate_session(db: Session, session: AdminSession) -> None:
    """Return the session to anonymous; its cookie stops working immediately"""
    session.is_active = False
    session.last_activity = now_utc()
    db.commit()
