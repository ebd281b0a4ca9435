"""
Admin log entry endpoints: list, get, update, delete, bulk delete, export
"""
from typing import List
from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.api.v1.query_params import log_filters, log_sort
from app.core.config import settings
from app.core.deps import get_db, get_client_ip, get_current_admin
from app.models.admin_session import AdminSession
from app.schemas.common import MessageResponse, PaginationOut
from app.schemas.log_entry import (
    AdminLogEntryListResponse,
    AdminLogEntryOut,
    AdminLogEntryResponse,
    BulkDeleteRequest,
    BulkDeleteResponse,
    LogEntryWrite,
)
from app.services import admin_service
from app.services.log_entry_service import (
    LogEntryFilters,
    LogEntrySort,
    get_log_entry_or_404,
    query_log_entries,
)
from app.utils.csv_export import stream_csv

router = APIRouter()


@router.get("/logs", response_model=AdminLogEntryListResponse)
async def admin_list_logs(
    filters: LogEntryFilters = Depends(log_filters),
    sort: LogEntrySort = Depends(log_sort),
    page: int = Query(1, ge=1, description="Page number (1-based)"),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE, description="Page size"),
    db: Session = Depends(get_db),
    current_admin: AdminSession = Depends(get_current_admin)
):
    """List log entries with tracking data (admin-only)"""
    entries, total = query_log_entries(db, filters, sort, page=page, limit=limit)
    return AdminLogEntryListResponse(
        logs=[AdminLogEntryOut.model_validate(e) for e in entries],
        total=total,
        pagination=PaginationOut.build(page, limit, total)
    )


@router.get("/logs/{entry_id}", response_model=AdminLogEntryResponse)
async def admin_get_log(
    entry_id: int,
    db: Session = Depends(get_db),
    current_admin: AdminSession = Depends(get_current_admin)
):
    """Get a single log entry (admin-only)"""
    entry = get_log_entry_or_404(db, entry_id)
    return AdminLogEntryResponse(data=AdminLogEntryOut.model_validate(entry))


@router.put("/logs/{entry_id}", response_model=AdminLogEntryResponse)
async def admin_update_log(
    entry_id: int,
    entry_data: LogEntryWrite,
    request: Request,
    db: Session = Depends(get_db),
    current_admin: AdminSession = Depends(get_current_admin)
):
    """Replace a log entry; totals are recomputed (admin-only)"""
    entry = admin_service.update_record(
        db=db,
        entry_id=entry_id,
        data=entry_data,
        actor=current_admin.username,
        ip_address=get_client_ip(request)
    )
    return AdminLogEntryResponse(
        message="Log entry updated successfully",
        data=AdminLogEntryOut.model_validate(entry)
    )


@router.delete("/logs/{entry_id}", response_model=MessageResponse)
async def admin_delete_log(
    entry_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_admin: AdminSession = Depends(get_current_admin)
):
    """Delete a log entry (admin-only)"""
    admin_service.delete_record(
        db=db,
        entry_id=entry_id,
        actor=current_admin.username,
        ip_address=get_client_ip(request)
    )
    return MessageResponse(message="Log entry deleted successfully")


@router.delete("/logs", response_model=BulkDeleteResponse)
async def admin_bulk_delete_logs(
    delete_data: BulkDeleteRequest,
    request: Request,
    db: Session = Depends(get_db),
    current_admin: AdminSession = Depends(get_current_admin)
):
    """Delete several log entries; unknown IDs are skipped (admin-only)"""
    deleted_count = admin_service.bulk_delete(
        db=db,
        entry_ids=delete_data.ids,
        actor=current_admin.username,
        ip_address=get_client_ip(request)
    )
    return BulkDeleteResponse(
        message=f"{deleted_count} log entries deleted successfully",
        deleted_count=deleted_count
    )


@router.get("/export")
async def admin_export_logs(
    request: Request,
    export_format: str = Query("csv", alias="format", pattern="^(csv|json)$", description="csv or json"),
    filters: LogEntryFilters = Depends(log_filters),
    sort: LogEntrySort = Depends(log_sort),
    db: Session = Depends(get_db),
    current_admin: AdminSession = Depends(get_current_admin)
):
    """
    Export every log entry matching the filters (admin-only)

    CSV uses a fixed 18-column layout; JSON returns the admin projection.
    """
    entries = admin_service.export_records(
        db=db,
        filters=filters,
        export_format=export_format,
        actor=current_admin.username,
        ip_address=get_client_ip(request),
        sort=sort
    )

    if export_format == "csv":
        rows: List[dict] = [admin_service.export_row(e) for e in entries]
        return stream_csv(
            headers=admin_service.EXPORT_HEADERS,
            rows=rows,
            filename=admin_service.EXPORT_FILENAME
        )

    return JSONResponse(content={
        "success": True,
        "data": [AdminLogEntryOut.model_validate(e).model_dump(mode="json") for e in entries],
    })
