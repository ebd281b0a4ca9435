"""
Admin activity log and dashboard endpoints
"""
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.constants import ACTIVITY_ACTIONS
from app.core.config import settings
from app.core.deps import get_db, get_current_admin
from app.models.admin_session import AdminSession
from app.schemas.activity import (
    ActivityListResponse,
    ActivityLogOut,
    DashboardResponse,
    DashboardStats,
)
from app.schemas.common import PaginationOut
from app.services import admin_service
from app.services.activity_service import list_activities

router = APIRouter()

ACTION_PATTERN = "^(" + "|".join(ACTIVITY_ACTIONS) + ")$"


@router.get("/activity", response_model=ActivityListResponse)
@router.get("/activity-log", response_model=ActivityListResponse, include_in_schema=False)
async def admin_list_activity(
    page: int = Query(1, ge=1, description="Page number (1-based)"),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE, description="Page size"),
    action: Optional[str] = Query(None, pattern=ACTION_PATTERN, description="Filter by action"),
    admin_user: Optional[str] = Query(None, description="Filter by admin user"),
    db: Session = Depends(get_db),
    current_admin: AdminSession = Depends(get_current_admin)
):
    """List admin activity, newest first (admin-only)"""
    entries, total = list_activities(db, page=page, limit=limit, action=action, admin_user=admin_user)
    return ActivityListResponse(
        activities=[ActivityLogOut.model_validate(e) for e in entries],
        pagination=PaginationOut.build(page, limit, total)
    )


@router.get("/dashboard-stats", response_model=DashboardResponse)
async def admin_dashboard_stats(
    db: Session = Depends(get_db),
    current_admin: AdminSession = Depends(get_current_admin)
):
    """Record counts, points and recent activity for the dashboard (admin-only)"""
    stats = admin_service.dashboard_stats(db)
    return DashboardResponse(stats=DashboardStats(
        total_logs=stats["total_logs"],
        position_distribution=stats["position_distribution"],
        points=stats["points"],
        recent_activity=[ActivityLogOut.model_validate(a) for a in stats["recent_activity"]],
    ))
