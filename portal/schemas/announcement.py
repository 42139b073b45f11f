"""
Announcement submission schemas.
"""

from datetime import date, datetime
from enum import Enum
from typing import List, Optional

from pydantic import EmailStr, Field, HttpUrl, field_validator

from portal.schemas.common.base import BaseCreateSchema, BaseResponseSchema

__all__ = [
    "Platform",
    "AnnouncementCreate",
    "AnnouncementResponse",
]


class Platform(str, Enum):
    """Channels an announcement can be promoted on."""
    EMAIL_BLAST = "Email Blast"
    BULLETIN = "Bulletin"
    CHURCH_SCREENS = "Church Screens"


class AnnouncementCreate(BaseCreateSchema):
    """Public announcement request form."""

    name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    ministry: Optional[str] = Field(default=None, max_length=200)
    event_date: Optional[date] = None
    event_time: Optional[str] = Field(default=None, max_length=50)
    promotion_start: Optional[date] = None
    platforms: List[Platform] = Field(default_factory=list)
    announcement_body: str = Field(..., min_length=1)
    add_to_calendar: bool = False
    file_links: List[HttpUrl] = Field(default_factory=list)

    @field_validator("event_date", "promotion_start", "event_time", "ministry", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        # HTML forms submit empty strings for untouched optional inputs
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("platforms")
    @classmethod
    def dedupe_platforms(cls, v: List[Platform]) -> List[Platform]:
        return list(dict.fromkeys(v))


class AnnouncementResponse(BaseResponseSchema):
    name: str
    email: str
    ministry: Optional[str] = None
    event_date: Optional[date] = None
    event_time: Optional[str] = None
    promotion_start: Optional[date] = None
    platforms: List[str]
    announcement_body: str
    add_to_calendar: bool
    file_links: List[str]

    approval_status: str
    requires_approval: bool
    ministry_id: Optional[str] = None
    ministry_name: Optional[str] = None
    approval_coordinator: Optional[str] = None
    needs_editorial_review: bool
    submitted_at: datetime
    approved_by: Optional[str] = None
    approved_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
