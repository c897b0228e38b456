# belajarshafa/schemas/user.py
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, EmailStr, Field

from belajarshafa.models.enums import Role
from belajarshafa.schemas.common import (
    ClassBrief,
    CourseBrief,
    OrganizationBrief,
    PageMeta,
    UserBrief,
)


class UserCreate(BaseModel):
    email: EmailStr
    password: str = Field(min_length=8)
    name: str = Field(min_length=1)
    roles: list[Role] = Field(default_factory=lambda: [Role.MENTEE], min_length=1)


class UserUpdate(BaseModel):
    email: EmailStr | None = None
    name: str | None = Field(default=None, min_length=1)
    password: str | None = Field(default=None, min_length=8)
    avatar_url: str | None = None
    is_verified: bool | None = None
    roles: list[Role] | None = Field(default=None, min_length=1)


class RolesUpdate(BaseModel):
    roles: list[Role] = Field(min_length=1)


class UserPublic(UserBrief):
    roles: list[Role]
    is_active: bool
    is_verified: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


class UserFilter(BaseModel):
    search: str | None = None
    roles: list[Role] | None = None
    organization_id: int | None = None
    class_id: int | None = None
    is_active: bool | None = None
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1, le=100)
    sort_by: str = "created_at"
    sort_order: Literal["asc", "desc"] = "desc"


class UserPage(BaseModel):
    data: list[UserPublic]
    meta: PageMeta


class RoleCounts(BaseModel):
    admins: int
    managers: int
    mentors: int
    mentees: int


class UserStats(BaseModel):
    total: int
    active: int
    inactive: int
    by_role: RoleCounts


class EnrolledCourseBrief(BaseModel):
    id: int
    course_id: int
    course: CourseBrief
    progress_percent: int
    enrolled_at: datetime | None = None
    completed_at: datetime | None = None

    model_config = {"from_attributes": True}


class UserDetail(UserPublic):
    joined_classes: list[ClassBrief] = []
    mentored_classes: list[ClassBrief] = []
    managed_orgs: list[OrganizationBrief] = []
    member_orgs: list[OrganizationBrief] = []
    enrollments: list[EnrolledCourseBrief] = []
