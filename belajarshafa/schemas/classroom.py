# belajarshafa/schemas/classroom.py
from datetime import datetime

from pydantic import BaseModel, Field

from belajarshafa.schemas.common import OrganizationBrief, SessionSummary, UserBrief
from belajarshafa.schemas.session import SessionPublic


class ClassCreate(BaseModel):
    name: str = Field(min_length=1)
    description: str | None = None
    organization_id: int | None = None
    mentor_ids: list[int] = []
    start_date: datetime | None = None
    end_date: datetime | None = None


class ClassUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1)
    description: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None


class JoinClassRequest(BaseModel):
    code: str = Field(pattern=r"^[A-Za-z0-9]{6,8}$")


class AssignMentorsRequest(BaseModel):
    mentor_ids: list[int] = Field(min_length=1)


class ClassPublic(BaseModel):
    id: int
    name: str
    description: str | None = None
    code: str
    start_date: datetime | None = None
    end_date: datetime | None = None
    organization: OrganizationBrief | None = None
    mentors: list[UserBrief] = []
    mentees: list[UserBrief] = []
    session_count: int = 0
    created_at: datetime | None = None

    model_config = {"from_attributes": True}


class ClassListItem(ClassPublic):
    recent_sessions: list[SessionSummary] = []


class ClassDetail(ClassPublic):
    sessions: list[SessionPublic] = []
