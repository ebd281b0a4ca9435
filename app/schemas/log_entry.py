"""
Log entry schemas
"""
from datetime import datetime
from typing import Optional, List
from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
)

from app.constants import MAX_COUNTER
from app.models.log_entry import COUNTER_FIELDS
from app.schemas.common import PaginationOut
from app.services.totals_service import coerce_counter
from app.utils.datetime_utils import iso_8601_utc, parse_timestamp


def _aliases(field: str, camel: str) -> AliasChoices:
    return AliasChoices(field, camel)


class CounterFields(BaseModel):
    """
    Raw activity counters. Accepts snake_case or the form's camelCase keys.

    Counters above MAX_COUNTER are rejected so totals fit the INTEGER columns.
    """
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    attendees_batch1: int = Field(0, le=MAX_COUNTER, validation_alias=_aliases("attendees_batch1", "attendeesBatch1"))
    attendees_batch2: int = Field(0, le=MAX_COUNTER, validation_alias=_aliases("attendees_batch2", "attendeesBatch2"))
    dropped_links: int = Field(0, le=MAX_COUNTER, validation_alias=_aliases("dropped_links", "droppedLinks"))
    recruits: int = Field(0, le=MAX_COUNTER)
    nicknames_set: int = Field(0, le=MAX_COUNTER, validation_alias=_aliases("nicknames_set", "nicknamesSet"))
    game_handled: int = Field(0, le=MAX_COUNTER, validation_alias=_aliases("game_handled", "gameHandled"))

    @field_validator(*COUNTER_FIELDS, mode="before")
    @classmethod
    def clamp_counter(cls, v):
        """Negative, blank and non-numeric counters are stored as 0"""
        return coerce_counter(v)

    def counters(self) -> dict:
        return {field: getattr(self, field) for field in COUNTER_FIELDS}


class LogEntryWrite(CounterFields):
    """
    Schema for submitting or replacing a log entry.

    name, position and start_date are checked by the service so that a
    missing value is reported as 400 rather than a schema error.
    """
    name: Optional[str] = Field(None, description="Submitter name")
    position: Optional[str] = Field(None, description="Submitter position")
    start_date: Optional[datetime] = Field(
        None, validation_alias=_aliases("start_date", "startDate"), description="Shift start"
    )
    end_date: Optional[datetime] = Field(
        None, validation_alias=_aliases("end_date", "endDate"), description="Shift end"
    )

    @field_validator("name", "position", mode="before")
    @classmethod
    def strip_text(cls, v):
        if v is None:
            return None
        if not isinstance(v, str):
            raise ValueError("must be a string")
        v = v.strip()
        return v or None

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def parse_dates(cls, v):
        return parse_timestamp(v)


class CalculateRequest(CounterFields):
    """Schema for previewing totals"""


class TotalsOut(BaseModel):
    """Weighted totals for a set of counters"""
    attendees_total: int
    dropped_links_total: int
    recruits_total: int
    nicknames_set_total: int
    game_handled_total: int
    grand_total: int


class CalculateResponse(BaseModel):
    success: bool = True
    totals: TotalsOut


class LogEntryOut(BaseModel):
    """Public projection of a log entry. Datetimes in ISO-8601 UTC."""
    id: int
    name: str
    position: str
    start_date: datetime
    end_date: Optional[datetime] = None
    attendees_batch1: int
    attendees_batch2: int
    dropped_links: int
    recruits: int
    nicknames_set: int
    game_handled: int
    attendees_total: int
    dropped_links_total: int
    recruits_total: int
    nicknames_set_total: int
    game_handled_total: int
    grand_total: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("start_date", "end_date", "created_at", "updated_at", when_used="always")
    def _ser_datetime(self, dt):
        return iso_8601_utc(dt) if dt is not None else None


class AdminLogEntryOut(LogEntryOut):
    """Admin projection of a log entry, including submission tracking data"""
    ip_address: Optional[str] = None
    mac_address: Optional[str] = None
    user_agent: Optional[str] = None


class SubmitResponse(BaseModel):
    success: bool = True
    message: str
    data: LogEntryOut


class LogEntryListResponse(BaseModel):
    success: bool = True
    data: List[LogEntryOut]
    pagination: PaginationOut


class AdminLogEntryResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    data: AdminLogEntryOut


class AdminLogEntryListResponse(BaseModel):
    success: bool = True
    logs: List[AdminLogEntryOut]
    total: int
    pagination: PaginationOut


class BulkDeleteRequest(BaseModel):
    """Schema for deleting several log entries at once"""
    model_config = ConfigDict(extra="forbid")

    ids: List[int] = Field(default_factory=list, description="Log entry IDs to delete")


class BulkDeleteResponse(BaseModel):
    success: bool = True
    message: str
    deleted_count: int
