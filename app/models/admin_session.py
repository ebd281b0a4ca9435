"""
Admin session model - server-side state behind the session cookie
"""
from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean
from app.db.base import Base


class AdminSession(Base):
    __tablename__ = "admin_sessions"

    id = Column(Integer, primary_key=True, index=True)
    session_id = Column(String(128), nullable=False, unique=True, index=True)
    username = Column(String(255), nullable=False)
    ip_address = Column(String(255), nullable=True)
    user_agent = Column(Text, nullable=True)
    login_time = Column(DateTime(timezone=True), nullable=False)
    last_activity = Column(DateTime(timezone=True), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
