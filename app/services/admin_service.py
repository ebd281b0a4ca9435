"""
Admin action service - authenticated mutations, each followed by exactly one
activity log entry
"""
import logging
from typing import Any, Dict, List, Optional, Sequence

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.constants import (
    ACTION_BULK_DELETE,
    ACTION_DELETE,
    ACTION_EXPORT,
    ACTION_LOGIN,
    ACTION_LOGOUT,
    ACTION_UPDATE,
)
from app.core.security import verify_admin_credentials
from app.models.admin_session import AdminSession
from app.models.log_entry import LogEntry
from app.schemas.log_entry import LogEntryWrite
from app.services import log_entry_service as store
from app.services.activity_service import log_activity, recent_activities
from app.services.log_entry_service import LogEntryFilters, LogEntrySort
from app.services.session_service import create_session, deactivate_session
from app.utils.datetime_utils import iso_8601_utc

logger = logging.getLogger(__name__)

EXPORT_FORMATS = ("csv", "json")
EXPORT_FILENAME = "arcanum_logs.csv"

# Column header -> LogEntry attribute, in export order
EXPORT_COLUMNS = [
    ("ID", "id"),
    ("Name", "name"),
    ("Position", "position"),
    ("Start Date", "start_date"),
    ("End Date", "end_date"),
    ("Attendees Batch 1", "attendees_batch1"),
    ("Attendees Batch 2", "attendees_batch2"),
    ("Attendees Total", "attendees_total"),
    ("Dropped Links", "dropped_links"),
    ("Dropped Links Total", "dropped_links_total"),
    ("Recruits", "recruits"),
    ("Recruits Total", "recruits_total"),
    ("Nicknames Set", "nicknames_set"),
    ("Nicknames Set Total", "nicknames_set_total"),
    ("Game Handled", "game_handled"),
    ("Game Handled Total", "game_handled_total"),
    ("IP Address", "ip_address"),
    ("Created At", "created_at"),
]
EXPORT_HEADERS = [header for header, _ in EXPORT_COLUMNS]
EXPORT_DATE_FIELDS = {"start_date", "end_date", "created_at"}

LOGIN_FAILURE_REASON = "Invalid credentials"


def update_record(
    db: Session,
    entry_id: int,
    data: LogEntryWrite,
    actor: str,
    ip_address: Optional[str] = None
) -> LogEntry:
    """
    Replace a log entry and record an 'update' activity

    Raises:
        HTTPException: 404 if the entry does not exist, 400 on missing fields
    """
    entry = store.update_log_entry(db, entry_id, data)

    log_activity(
        db=db,
        action=ACTION_UPDATE,
        admin_user=actor,
        target_id=entry.id,
        details={"changes": data.model_dump(exclude_unset=True)},
        ip_address=ip_address
    )
    return entry


def delete_record(
    db: Session,
    entry_id: int,
    actor: str,
    ip_address: Optional[str] = None
) -> Dict[str, Any]:
    """
    Delete a log entry and record a 'delete' activity holding its snapshot

    Raises:
        HTTPException: 404 if the entry does not exist
    """
    snapshot = store.delete_log_entry(db, entry_id)

    log_activity(
        db=db,
        action=ACTION_DELETE,
        admin_user=actor,
        target_id=entry_id,
        details={"deleted_entry": snapshot},
        ip_address=ip_address
    )
    return snapshot


def bulk_delete(
    db: Session,
    entry_ids: Sequence[int],
    actor: str,
    ip_address: Optional[str] = None
) -> int:
    """
    Delete several log entries and record a single 'bulk_delete' activity

    Returns:
        Number of entries that existed and were deleted

    Raises:
        HTTPException: 400 if no IDs were given
    """
    if not entry_ids:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No IDs provided for deletion"
        )

    deleted_ids = store.bulk_delete_log_entries(db, entry_ids)

    log_activity(
        db=db,
        action=ACTION_BULK_DELETE,
        admin_user=actor,
        target_id=None,
        details={
            "deleted_count": len(deleted_ids),
            "deleted_ids": deleted_ids,
            "requested_ids": list(entry_ids),
        },
        ip_address=ip_address
    )
    return len(deleted_ids)


def export_row(entry: LogEntry) -> Dict[str, Any]:
    """Flatten a log entry into the fixed export layout"""
    row = {}
    for header, attr in EXPORT_COLUMNS:
        value = getattr(entry, attr)
        if attr in EXPORT_DATE_FIELDS:
            value = iso_8601_utc(value)
        row[header] = value
    return row


def export_records(
    db: Session,
    filters: LogEntryFilters,
    export_format: str,
    actor: str,
    ip_address: Optional[str] = None,
    sort: Optional[LogEntrySort] = None
) -> List[LogEntry]:
    """
    Fetch every entry matching filters for export and record an 'export' activity

    Returns:
        Matching entries, unpaginated, newest first by default

    Raises:
        HTTPException: 400 on an unsupported format
    """
    if export_format not in EXPORT_FORMATS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unsupported export format '{export_format}'. Use one of {list(EXPORT_FORMATS)}"
        )

    entries = store.list_log_entries_for_export(db, filters, sort)

    log_activity(
        db=db,
        action=ACTION_EXPORT,
        admin_user=actor,
        target_id=None,
        details={
            "format": export_format,
            "record_count": len(entries),
            "filters": filters.active(),
        },
        ip_address=ip_address
    )
    return entries


def login(
    db: Session,
    username: Optional[str],
    password: Optional[str],
    ip_address: Optional[str] = None,
    user_agent: Optional[str] = None
) -> Optional[AdminSession]:
    """
    Authenticate against the configured admin credentials

    A 'login' activity is recorded whether or not the attempt succeeds.

    Returns:
        The new AdminSession on success, None on failure
    """
    if not verify_admin_credentials(username, password):
        logger.warning("Failed admin login for %r from %s", username, ip_address)
        log_activity(
            db=db,
            action=ACTION_LOGIN,
            admin_user=username or "unknown",
            details={"success": False, "reason": LOGIN_FAILURE_REASON},
            ip_address=ip_address
        )
        return None

    session = create_session(db, username=username, ip_address=ip_address, user_agent=user_agent)
    logger.info("Admin %s logged in from %s", username, ip_address)
    log_activity(
        db=db,
        action=ACTION_LOGIN,
        admin_user=username,
        details={"success": True},
        ip_address=ip_address
    )
    return session


def logout(db: Session, session: AdminSession, ip_address: Optional[str] = None) -> None:
    """Record a 'logout' activity, then deactivate the session"""
    log_activity(
        db=db,
        action=ACTION_LOGOUT,
        admin_user=session.username,
        ip_address=ip_address
    )
    deactivate_session(db, session)
    logger.info("Admin %s logged out", session.username)


def dashboard_stats(db: Session, recent_limit: int = 10) -> Dict[str, Any]:
    """Totals for the admin dashboard"""
    distribution = store.count_by_position(db)
    return {
        "total_logs": sum(distribution.values()),
        "position_distribution": distribution,
        "points": store.sum_totals(db),
        "recent_activity": recent_activities(db, limit=recent_limit),
    }
