# belajarshafa/schemas/session.py
from datetime import datetime

from pydantic import BaseModel, Field

from belajarshafa.models.enums import SessionType
from belajarshafa.schemas.attendance import AttendancePublic
from belajarshafa.schemas.common import UserBrief


class SessionCreate(BaseModel):
    title: str = Field(min_length=1)
    description: str | None = None
    start_time: datetime
    end_time: datetime
    type: SessionType
    location: str | None = None
    meeting_url: str | None = None
    check_in_window_minutes: int | None = Field(default=None, ge=0)
    check_in_close_minutes: int | None = Field(default=None, ge=0)


class SessionUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1)
    description: str | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None
    type: SessionType | None = None
    location: str | None = None
    meeting_url: str | None = None
    check_in_window_minutes: int | None = Field(default=None, ge=0)
    check_in_close_minutes: int | None = Field(default=None, ge=0)


class SessionPublic(BaseModel):
    id: int
    class_id: int
    title: str
    description: str | None = None
    start_time: datetime
    end_time: datetime
    type: SessionType
    location: str | None = None
    meeting_url: str | None = None
    check_in_window_minutes: int
    check_in_close_minutes: int
    created_by: int | None = None
    creator: UserBrief | None = None
    attendances: list[AttendancePublic] = []
    created_at: datetime | None = None

    model_config = {"from_attributes": True}
