"""
Meeting Summary Model Module
"""
from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import field_validator
from sqlmodel import SQLModel, Field, JSON

from issuedesk.models.base import FileRef, utc_now_iso, reject_null


class MeetingSummaryBase(SQLModel):
    meeting_date: datetime = Field(nullable=False)
    meeting_no: str = ""
    meeting_time: Optional[datetime] = None
    attendees: Optional[str] = None
    meeting_topic: Optional[str] = None
    meeting_channel: Optional[str] = None  # e.g. "Zoom", "Teams", "Onsite"
    meeting_place: Optional[str] = None
    note_taker: Optional[str] = None
    remark: Optional[str] = None


class MeetingSummary(MeetingSummaryBase, table=True):
    __tablename__ = "meeting_summaries"

    id: Optional[int] = Field(default=None, primary_key=True)
    files: List[Dict[str, Any]] = Field(default_factory=list, sa_type=JSON)
    created_by: Optional[str] = None
    created_at: Optional[str] = Field(default_factory=utc_now_iso)
    updated_at: Optional[str] = Field(default_factory=utc_now_iso)


class MeetingSummaryCreate(MeetingSummaryBase):
    files: List[FileRef] = []


class MeetingSummaryUpdate(SQLModel):
    meeting_date: Optional[datetime] = None
    meeting_no: Optional[str] = None
    meeting_time: Optional[datetime] = None
    attendees: Optional[str] = None
    meeting_topic: Optional[str] = None
    meeting_channel: Optional[str] = None
    meeting_place: Optional[str] = None
    note_taker: Optional[str] = None
    remark: Optional[str] = None
    files: Optional[List[FileRef]] = None

    @field_validator("meeting_date", "meeting_no")
    @classmethod
    def not_null(cls, value, info):
        return reject_null(value, info.field_name)


class MeetingSummaryRead(MeetingSummaryBase):
    id: int
    files: List[FileRef] = []
    created_by: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
