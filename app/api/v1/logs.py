"""
Public log submission endpoints
"""
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from app.api.v1.query_params import log_filters, log_sort
from app.core.config import settings
from app.core.deps import get_db, get_client_ip, get_mac_address
from app.schemas.common import PaginationOut
from app.schemas.log_entry import (
    CalculateRequest,
    CalculateResponse,
    LogEntryListResponse,
    LogEntryOut,
    LogEntryWrite,
    SubmitResponse,
    TotalsOut,
)
from app.services.log_entry_service import (
    LogEntryFilters,
    LogEntrySort,
    create_log_entry,
    query_log_entries,
)
from app.services.totals_service import compute_totals

router = APIRouter()


@router.post("/submit", response_model=SubmitResponse, status_code=201)
async def submit_log_entry(
    entry_data: LogEntryWrite,
    request: Request,
    db: Session = Depends(get_db)
):
    """
    Submit a new log entry from the public form

    Totals are computed server-side; submitted counters are clamped to
    non-negative integers.
    """
    entry = create_log_entry(
        db=db,
        data=entry_data,
        ip_address=get_client_ip(request),
        mac_address=get_mac_address(request),
        user_agent=request.headers.get("user-agent")
    )
    return SubmitResponse(
        message="Log entry submitted successfully",
        data=LogEntryOut.model_validate(entry)
    )


@router.get("/logs", response_model=LogEntryListResponse)
async def list_log_entries(
    filters: LogEntryFilters = Depends(log_filters),
    sort: LogEntrySort = Depends(log_sort),
    page: int = Query(1, ge=1, description="Page number (1-based)"),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE, description="Page size"),
    db: Session = Depends(get_db)
):
    """List submitted log entries with filters, sorting and pagination"""
    entries, total = query_log_entries(db, filters, sort, page=page, limit=limit)
    return LogEntryListResponse(
        data=[LogEntryOut.model_validate(e) for e in entries],
        pagination=PaginationOut.build(page, limit, total)
    )


@router.post("/calculate", response_model=CalculateResponse)
async def calculate_totals(counters: CalculateRequest):
    """Preview the point totals for a set of counters without saving them"""
    totals = compute_totals(counters.counters())
    return CalculateResponse(totals=TotalsOut(**totals.as_dict(include_grand_total=True)))
