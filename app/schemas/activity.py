"""
Activity log schemas
"""
from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, field_serializer

from app.schemas.common import PaginationOut
from app.utils.datetime_utils import iso_8601_utc


class ActivityLogOut(BaseModel):
    """Schema for activity log output. Timestamp in ISO-8601 UTC."""
    id: int
    action: str
    target_id: Optional[int] = None
    admin_user: str
    details: Optional[Dict[str, Any]] = None
    ip_address: Optional[str] = None
    timestamp: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("timestamp", when_used="always")
    def _ser_datetime(self, dt):
        return iso_8601_utc(dt) if dt is not None else None


class ActivityListResponse(BaseModel):
    success: bool = True
    activities: List[ActivityLogOut]
    pagination: PaginationOut


class DashboardStats(BaseModel):
    total_logs: int
    position_distribution: Dict[str, int]
    points: Dict[str, int]
    recent_activity: List[ActivityLogOut]


class DashboardResponse(BaseModel):
    success: bool = True
    stats: DashboardStats
