from pydantic import Field
from datetime import datetime
from typing import Literal, Optional

from .base import CamelModel


class ApplicationCreate(CamelModel):
    event_id: int
    role: str = Field(min_length=1)
    team: Optional[str] = None
    motivation: str = Field(min_length=1)


class ApplicantStatusUpdate(CamelModel):
    status: Literal["Selected", "Maybe", "Rejected"]


class ApplicantTeamUpdate(CamelModel):
    team: Optional[str] = None


class ApplicantResponse(CamelModel):
    id: int
    user_id: int
    event_id: int
    role: str
    team: Optional[str] = None
    motivation: str
    status: str
    created_at: datetime
