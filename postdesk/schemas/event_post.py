from pydantic import Field
from datetime import datetime
from typing import Optional

from .base import CamelModel
from .schedule import ScheduleResponse


class DraftPostCreate(CamelModel):
    name: str = Field(min_length=1)
    caption: str = Field(min_length=1)
    image_url: Optional[str] = None
    event_id: int
    post_schedule_date: datetime


class EventPostCreate(CamelModel):
    name: str = Field(min_length=1)
    platform: str = Field(min_length=1)
    external_ref: Optional[str] = None
    post_schedule_date: datetime
    event_id: int
    caption: Optional[str] = None
    image_url: Optional[str] = None


class EventPostUpdate(CamelModel):
    name: Optional[str] = None
    platform: Optional[str] = None
    external_ref: Optional[str] = None
    post_schedule_date: Optional[datetime] = None
    caption: Optional[str] = None
    image_url: Optional[str] = None


class RejectRequest(CamelModel):
    rejection_reason: str = Field(min_length=1)


class ScheduleRequest(CamelModel):
    timezone: Optional[str] = None


class UserSummary(CamelModel):
    id: int
    name: Optional[str] = None
    email: str
    role: str


class EventPostResponse(CamelModel):
    id: int
    event_id: int
    name: str
    platform: str
    caption: Optional[str] = None
    image_url: Optional[str] = None
    external_ref: Optional[str] = None
    post_schedule_date: datetime
    status: str
    created_by: int
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    linkedin_post_id: Optional[str] = None
    organization_id: Optional[str] = None
    schedule_id: Optional[str] = None
    creator: Optional[UserSummary] = None
    approver: Optional[UserSummary] = None
    created_at: datetime
    updated_at: datetime


class EventPostStatusResponse(EventPostResponse):
    schedule: Optional[ScheduleResponse] = None
