"""
Activity log model - append-only trail of admin actions
"""
from sqlalchemy import Column, Integer, String, DateTime, JSON
from app.db.base import Base


class ActivityLog(Base):
    __tablename__ = "activity_log"

    id = Column(Integer, primary_key=True, index=True)
    action = Column(String(50), nullable=False)  # e.g., "login", "update", "bulk_delete", "export"
    # Weak reference to log_entries.id; entries outlive the record they describe
    target_id = Column(Integer, nullable=True)
    admin_user = Column(String(255), nullable=False, index=True)
    details = Column(JSON, nullable=True)
    ip_address = Column(String(255), nullable=True)
    # Note: server_default handled by migration (CURRENT_TIMESTAMP for SQLite, now() for PostgreSQL)
    timestamp = Column(DateTime(timezone=True), nullable=False, index=True)
