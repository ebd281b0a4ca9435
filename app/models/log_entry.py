"""
Log entry model - one submitted activity report
"""
from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.sql import func
from app.db.base import Base

# Raw counter columns, in form order
COUNTER_FIELDS = (
    "attendees_batch1",
    "attendees_batch2",
    "dropped_links",
    "recruits",
    "nicknames_set",
    "game_handled",
)

# Derived point columns, recomputed from the counters on every write
TOTAL_FIELDS = (
    "attendees_total",
    "dropped_links_total",
    "recruits_total",
    "nicknames_set_total",
    "game_handled_total",
)


class LogEntry(Base):
    __tablename__ = "log_entries"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(Text, nullable=False, index=True)
    position = Column(Text, nullable=False, index=True)
    start_date = Column(DateTime(timezone=True), nullable=False)
    end_date = Column(DateTime(timezone=True), nullable=True)

    # Metric inputs
    attendees_batch1 = Column(Integer, nullable=False, default=0)
    attendees_batch2 = Column(Integer, nullable=False, default=0)
    dropped_links = Column(Integer, nullable=False, default=0)
    recruits = Column(Integer, nullable=False, default=0)
    nicknames_set = Column(Integer, nullable=False, default=0)
    game_handled = Column(Integer, nullable=False, default=0)

    # Calculated values
    attendees_total = Column(Integer, nullable=False, default=0)
    dropped_links_total = Column(Integer, nullable=False, default=0)
    recruits_total = Column(Integer, nullable=False, default=0)
    nicknames_set_total = Column(Integer, nullable=False, default=0)
    game_handled_total = Column(Integer, nullable=False, default=0)

    # Tracking data, captured at submission and never modified
    ip_address = Column(String(255), nullable=True)
    mac_address = Column(String(64), nullable=True)
    user_agent = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), onupdate=func.current_timestamp(), nullable=False)

    @property
    def grand_total(self) -> int:
        return sum(getattr(self, field) or 0 for field in TOTAL_FIELDS)
