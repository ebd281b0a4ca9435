"""
Database models
"""
from app.models.log_entry import LogEntry, COUNTER_FIELDS, TOTAL_FIELDS
from app.models.activity_log import ActivityLog
from app.models.admin_session import AdminSession

__all__ = [
    "LogEntry",
    "COUNTER_FIELDS",
    "TOTAL_FIELDS",
    "ActivityLog",
    "AdminSession",
]
