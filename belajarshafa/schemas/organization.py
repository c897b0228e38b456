# belajarshafa/schemas/organization.py
from datetime import datetime

from pydantic import BaseModel, Field

from belajarshafa.schemas.common import UserBrief


class OrganizationCreate(BaseModel):
    name: str = Field(min_length=2)
    description: str | None = None
    logo_url: str | None = None


class MembersAdd(BaseModel):
    user_ids: list[int] = Field(min_length=1)


class OrganizationPublic(BaseModel):
    id: int
    name: str
    description: str | None = None
    logo_url: str | None = None
    created_at: datetime | None = None
    managers: list[UserBrief] = []
    members: list[UserBrief] = []

    model_config = {"from_attributes": True}
