"""
Query parameter dependencies shared by the public and admin log listings
"""
from datetime import date
from typing import Optional
from fastapi import Query

from app.services.log_entry_service import LogEntryFilters, LogEntrySort


def log_filters(
    search: Optional[str] = Query(None, description="Case-insensitive substring of name or position"),
    name: Optional[str] = Query(None, description="Case-insensitive substring of name"),
    position: Optional[str] = Query(None, description="Exact position ('all' for any)"),
    start_from: Optional[date] = Query(None, description="Start date on or after (YYYY-MM-DD)"),
    start_to: Optional[date] = Query(None, description="Start date on or before (YYYY-MM-DD)"),
    end_from: Optional[date] = Query(None, description="End date on or after (YYYY-MM-DD)"),
    end_to: Optional[date] = Query(None, description="End date on or before (YYYY-MM-DD)"),
) -> LogEntryFilters:
    return LogEntryFilters(
        search=search,
        name=name,
        position=position,
        start_from=start_from,
        start_to=start_to,
        end_from=end_from,
        end_to=end_to,
    )


def log_sort(
    sort_by: str = Query("created_at", description="Column to sort by"),
    sort_order: str = Query("desc", pattern="^(asc|desc|ASC|DESC)$", description="asc or desc"),
) -> LogEntrySort:
    return LogEntrySort(sort_by=sort_by, sort_order=sort_order)
