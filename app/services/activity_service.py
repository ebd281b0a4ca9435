"""
Activity logging service - append-only audit trail of admin actions
"""
import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from app.models.activity_log import ActivityLog
from app.utils.datetime_utils import now_utc
from app.utils.json_serializer import sanitize_for_json

logger = logging.getLogger(__name__)


def log_activity(
    db: Session,
    action: str,
    admin_user: Optional[str],
    target_id: Optional[int] = None,
    details: Optional[Dict[str, Any]] = None,
    ip_address: Optional[str] = None
) -> Optional[ActivityLog]:
    """
    Append an activity log entry

    Best-effort: the action being logged has already been committed, so a
    failure here is logged and rolled back locally and never reaches the
    caller.

    Args:
        db: Database session
        action: Action type (e.g., "login", "update", "bulk_delete")
        admin_user: Actor performing the action
        target_id: ID of the affected log entry (optional)
        details: Action-specific context (optional)
        ip_address: Actor IP address (optional)

    Returns:
        Created ActivityLog instance, or None if it could not be written
    """
    try:
        safe_details = sanitize_for_json(details) if details is not None else {}

        # Explicitly set timestamp to avoid SQLite issues with server_default
        entry = ActivityLog(
            action=action,
            target_id=target_id,
            admin_user=admin_user or "unknown",
            details=safe_details,
            ip_address=ip_address,
            timestamp=now_utc()
        )
        db.add(entry)
        db.commit()
        db.refresh(entry)
        return entry
    except Exception:
        logger.exception("Failed to log activity %r for %s (target=%s)", action, admin_user, target_id)
        try:
            db.rollback()
        except Exception:
            logger.exception("Rollback after activity log failure also failed")
        return None


def list_activities(
    db: Session,
    page: int = 1,
    limit: int = 50,
    action: Optional[str] = None,
    admin_user: Optional[str] = None
) -> Tuple[List[ActivityLog], int]:
    """
    List activity log entries, newest first

    Args:
        db: Database session
        page: Page number (1-based)
        limit: Page size
        action: Optional action filter
        admin_user: Optional actor filter

    Returns:
        Tuple of (entries on the page, total matching count)
    """
    query = db.query(ActivityLog)
    if action:
        query = query.filter(ActivityLog.action == action)
    if admin_user:
        query = query.filter(ActivityLog.admin_user == admin_user)

    total = query.count()
    entries = (
        query.order_by(ActivityLog.timestamp.desc(), ActivityLog.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return entries, total


def recent_activities(db: Session, limit: int = 10) -> List[ActivityLog]:
    """Most recent activity log entries"""
    entries, _ = list_activities(db, page=1, limit=limit)
    return entries
