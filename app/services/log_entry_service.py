"""
Log entry service - record store for submitted activity reports
"""
import logging
from dataclasses import dataclass, asdict
from datetime import date
from typing import Any, Dict, List, Optional, Sequence, Tuple

from fastapi import HTTPException, status
from sqlalchemy import func, or_
from sqlalchemy.orm import Query, Session

from app.constants import MAC_ADDRESS_UNAVAILABLE, MAX_RECORD_ID
from app.models.log_entry import LogEntry, COUNTER_FIELDS, TOTAL_FIELDS
from app.schemas.log_entry import LogEntryWrite
from app.services.totals_service import compute_totals
from app.utils.datetime_utils import day_start, next_day_start, now_utc

logger = logging.getLogger(__name__)

# Columns a caller may sort by; camelCase names from the form are accepted too
SORTABLE_COLUMNS = {
    "id": LogEntry.id,
    "name": LogEntry.name,
    "position": LogEntry.position,
    "start_date": LogEntry.start_date,
    "end_date": LogEntry.end_date,
    "attendees_batch1": LogEntry.attendees_batch1,
    "attendees_batch2": LogEntry.attendees_batch2,
    "dropped_links": LogEntry.dropped_links,
    "recruits": LogEntry.recruits,
    "nicknames_set": LogEntry.nicknames_set,
    "game_handled": LogEntry.game_handled,
    "attendees_total": LogEntry.attendees_total,
    "dropped_links_total": LogEntry.dropped_links_total,
    "recruits_total": LogEntry.recruits_total,
    "nicknames_set_total": LogEntry.nicknames_set_total,
    "game_handled_total": LogEntry.game_handled_total,
    "ip_address": LogEntry.ip_address,
    "created_at": LogEntry.created_at,
    "updated_at": LogEntry.updated_at,
}
CAMEL_SORT_ALIASES = {
    "startDate": "start_date",
    "endDate": "end_date",
    "attendeesBatch1": "attendees_batch1",
    "attendeesBatch2": "attendees_batch2",
    "droppedLinks": "dropped_links",
    "nicknamesSet": "nicknames_set",
    "gameHandled": "game_handled",
    "attendeesTotal": "attendees_total",
    "droppedLinksTotal": "dropped_links_total",
    "recruitsTotal": "recruits_total",
    "nicknamesSetTotal": "nicknames_set_total",
    "gameHandledTotal": "game_handled_total",
    "ipAddress": "ip_address",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
}
DEFAULT_SORT_COLUMN = "created_at"

# Position filter value the form uses for "no filter"
ALL_POSITIONS = "all"
LIKE_ESCAPE = "\\"


@dataclass
class LogEntryFilters:
    """Query predicates; every set field is ANDed together"""
    search: Optional[str] = None
    name: Optional[str] = None
    position: Optional[str] = None
    start_from: Optional[date] = None
    start_to: Optional[date] = None
    end_from: Optional[date] = None
    end_to: Optional[date] = None

    def active(self) -> Dict[str, Any]:
        """Filters that are actually set, for audit details"""
        return {k: v for k, v in asdict(self).items() if v not in (None, "")}


@dataclass
class LogEntrySort:
    sort_by: str = DEFAULT_SORT_COLUMN
    sort_order: str = "desc"

    @property
    def column_name(self) -> str:
        name = CAMEL_SORT_ALIASES.get(self.sort_by, self.sort_by)
        return name if name in SORTABLE_COLUMNS else DEFAULT_SORT_COLUMN

    @property
    def ascending(self) -> bool:
        return (self.sort_order or "").lower() == "asc"


def _require_fields(data: LogEntryWrite) -> None:
    """Reject writes without name, position and start date, or with an inverted date range"""
    if not data.name or not data.position or data.start_date is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Name, position, and start date are required"
        )
    if data.end_date is not None and data.end_date < data.start_date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="End date must be on or after start date"
        )


def _apply_write(entry: LogEntry, data: LogEntryWrite) -> None:
    """Copy editable fields onto the entry and recompute every total"""
    counters = data.counters()
    totals = compute_totals(counters)

    entry.name = data.name
    entry.position = data.position
    entry.start_date = data.start_date
    entry.end_date = data.end_date
    for field in COUNTER_FIELDS:
        setattr(entry, field, counters[field])
    for field, value in totals.as_dict().items():
        setattr(entry, field, value)


def create_log_entry(
    db: Session,
    data: LogEntryWrite,
    ip_address: Optional[str] = None,
    mac_address: Optional[str] = None,
    user_agent: Optional[str] = None
) -> LogEntry:
    """
    Create a new log entry

    Args:
        db: Database session
        data: Submitted fields
        ip_address: Client IP at submission time
        mac_address: Client-reported MAC address, if any
        user_agent: Client User-Agent header

    Returns:
        Created LogEntry instance

    Raises:
        HTTPException: If required fields are missing
    """
    _require_fields(data)

    # Explicitly set created_at/updated_at to avoid SQLite issues with server_default
    now = now_utc()
    entry = LogEntry(
        ip_address=ip_address,
        mac_address=mac_address or MAC_ADDRESS_UNAVAILABLE,
        user_agent=user_agent,
        created_at=now,
        updated_at=now
    )
    _apply_write(entry, data)

    db.add(entry)
    db.commit()
    db.refresh(entry)

    logger.info("Log entry %s submitted by %s (%s)", entry.id, entry.name, entry.position)
    return entry


def get_log_entry(db: Session, entry_id: int) -> Optional[LogEntry]:
    """Get a log entry by ID"""
    if not 1 <= entry_id <= MAX_RECORD_ID:
        return None
    return db.query(LogEntry).filter(LogEntry.id == entry_id).first()


def get_log_entry_or_404(db: Session, entry_id: int) -> LogEntry:
    entry = get_log_entry(db, entry_id)
    if not entry:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Log entry not found"
        )
    return entry


def update_log_entry(db: Session, entry_id: int, data: LogEntryWrite) -> LogEntry:
    """
    Replace the editable fields of a log entry

    Counters not present in the payload are reset to 0, and every total is
    recomputed from the new counters. Tracking data and created_at are kept.

    Raises:
        HTTPException: 404 if the entry does not exist, 400 on missing fields
    """
    entry = get_log_entry_or_404(db, entry_id)
    _require_fields(data)

    _apply_write(entry, data)
    # Explicitly update updated_at for SQLite compatibility
    entry.updated_at = now_utc()

    db.commit()
    db.refresh(entry)
    return entry


def snapshot_log_entry(entry: LogEntry) -> Dict[str, Any]:
    """Plain dict of every stored column, used for audit details"""
    return {column.name: getattr(entry, column.name) for column in LogEntry.__table__.columns}


def delete_log_entry(db: Session, entry_id: int) -> Dict[str, Any]:
    """
    Delete a log entry

    Returns:
        Snapshot of the entry as it was before deletion

    Raises:
        HTTPException: 404 if the entry does not exist
    """
    entry = get_log_entry_or_404(db, entry_id)
    snapshot = snapshot_log_entry(entry)

    db.delete(entry)
    db.commit()
    return snapshot


def bulk_delete_log_entries(db: Session, entry_ids: Sequence[int]) -> List[int]:
    """
    Delete every existing entry among entry_ids

    Unknown IDs are ignored.

    Returns:
        IDs that matched and were deleted
    """
    # IDs outside the key range cannot match a row
    unique_ids = sorted({i for i in entry_ids if 1 <= i <= MAX_RECORD_ID})
    if not unique_ids:
        return []

    matched_ids = [
        entry_id for (entry_id,) in
        db.query(LogEntry.id).filter(LogEntry.id.in_(unique_ids)).all()
    ]
    if matched_ids:
        db.query(LogEntry).filter(LogEntry.id.in_(matched_ids)).delete(synchronize_session=False)
        db.commit()
    return sorted(matched_ids)


def _contains_pattern(text: str) -> str:
    """ILIKE pattern matching text literally as a substring"""
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _filtered_query(db: Session, filters: LogEntryFilters) -> Query:
    query = db.query(LogEntry)

    if filters.search:
        pattern = _contains_pattern(filters.search)
        query = query.filter(
            or_(
                LogEntry.name.ilike(pattern, escape=LIKE_ESCAPE),
                LogEntry.position.ilike(pattern, escape=LIKE_ESCAPE)
            )
        )

    if filters.name:
        query = query.filter(LogEntry.name.ilike(_contains_pattern(filters.name), escape=LIKE_ESCAPE))

    if filters.position and filters.position.lower() != ALL_POSITIONS:
        query = query.filter(LogEntry.position == filters.position)

    # Date bounds are whole calendar days, inclusive at both ends
    if filters.start_from:
        query = query.filter(LogEntry.start_date >= day_start(filters.start_from))
    if filters.start_to:
        query = query.filter(LogEntry.start_date < next_day_start(filters.start_to))
    if filters.end_from:
        query = query.filter(LogEntry.end_date >= day_start(filters.end_from))
    if filters.end_to:
        query = query.filter(LogEntry.end_date < next_day_start(filters.end_to))

    return query


def _ordered(query: Query, sort: LogEntrySort) -> Query:
    column = SORTABLE_COLUMNS[sort.column_name]
    if sort.ascending:
        return query.order_by(column.asc(), LogEntry.id.asc())
    return query.order_by(column.desc(), LogEntry.id.desc())


def query_log_entries(
    db: Session,
    filters: LogEntryFilters,
    sort: Optional[LogEntrySort] = None,
    page: int = 1,
    limit: int = 50
) -> Tuple[List[LogEntry], int]:
    """
    Filter, sort and paginate log entries

    Args:
        db: Database session
        filters: Predicates to apply
        sort: Sort column and direction (default newest first)
        page: Page number (1-based)
        limit: Page size

    Returns:
        Tuple of (entries on the page, total matching count)
    """
    if page < 1 or limit < 1:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="page and limit must be positive"
        )
    query = _filtered_query(db, filters)
    total = query.order_by(None).count()
    entries = _ordered(query, sort or LogEntrySort()).offset((page - 1) * limit).limit(limit).all()
    return entries, total


def list_log_entries_for_export(
    db: Session,
    filters: LogEntryFilters,
    sort: Optional[LogEntrySort] = None
) -> List[LogEntry]:
    """Same filters as query_log_entries, without pagination"""
    return _ordered(_filtered_query(db, filters), sort or LogEntrySort()).all()


def count_by_position(db: Session) -> Dict[str, int]:
    """Number of log entries per position"""
    rows = db.query(LogEntry.position, func.count(LogEntry.id)).group_by(LogEntry.position).all()
    return {position: count for position, count in rows}


def sum_totals(db: Session) -> Dict[str, int]:
    """Points awarded across all entries, per total column plus grand_total"""
    row = db.query(*[func.coalesce(func.sum(getattr(LogEntry, field)), 0) for field in TOTAL_FIELDS]).one()
    sums = {field: int(value) for field, value in zip(TOTAL_FIELDS, row)}
    sums["grand_total"] = sum(sums.values())
    return sums
