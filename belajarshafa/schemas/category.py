# belajarshafa/schemas/category.py
from datetime import datetime

from pydantic import BaseModel, Field


class CategoryCreate(BaseModel):
    name: str = Field(min_length=2)
    description: str | None = None


class CategoryUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=2)
    description: str | None = None


class CategoryPublic(BaseModel):
    id: int
    name: str
    slug: str
    description: str | None = None
    course_count: int = 0
    created_at: datetime | None = None

    model_config = {"from_attributes": True}
