# belajarshafa/schemas/topic.py
from datetime import datetime

from pydantic import BaseModel, Field

from belajarshafa.schemas.common import ReorderItem
from belajarshafa.schemas.material import MaterialPublic


class TopicCreate(BaseModel):
    course_id: int
    title: str = Field(min_length=2)
    description: str | None = None
    sequence: int | None = Field(default=None, ge=1)
    estimated_duration: int | None = Field(default=None, ge=0)
    is_mandatory: bool = False


class TopicUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=2)
    description: str | None = None
    sequence: int | None = Field(default=None, ge=1)
    estimated_duration: int | None = Field(default=None, ge=0)
    is_mandatory: bool | None = None


class TopicReorderRequest(BaseModel):
    topics: list[ReorderItem] = Field(min_length=1)


class TopicPublic(BaseModel):
    id: int
    course_id: int
    title: str
    description: str | None = None
    sequence: int
    estimated_duration: int | None = None
    is_mandatory: bool
    material_count: int = 0
    materials: list[MaterialPublic] = []
    created_at: datetime | None = None

    model_config = {"from_attributes": True}
