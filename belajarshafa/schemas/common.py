# belajarshafa/schemas/common.py
"""Small reference shapes embedded by several resources."""
from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

from belajarshafa.models.enums import SessionType


class UserBrief(BaseModel):
    id: int
    name: str
    email: EmailStr
    avatar_url: str | None = None

    model_config = {"from_attributes": True}


class OrganizationBrief(BaseModel):
    id: int
    name: str

    model_config = {"from_attributes": True}


class ClassBrief(BaseModel):
    id: int
    name: str
    code: str
    organization: OrganizationBrief | None = None

    model_config = {"from_attributes": True}


class CategoryBrief(BaseModel):
    id: int
    name: str
    slug: str

    model_config = {"from_attributes": True}


class SessionSummary(BaseModel):
    id: int
    title: str
    start_time: datetime
    end_time: datetime
    type: SessionType

    model_config = {"from_attributes": True}


class ReorderItem(BaseModel):
    id: int
    sequence: int = Field(ge=1)


class PageMeta(BaseModel):
    total: int
    page: int
    limit: int
    total_pages: int


class Message(BaseModel):
    message: str


class CourseBrief(BaseModel):
    id: int
    title: str
    thumbnail_url: str | None = None

    model_config = {"from_attributes": True}
