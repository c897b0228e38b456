# belajarshafa/schemas/material.py
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from belajarshafa.models.enums import MaterialType
from belajarshafa.schemas.common import ReorderItem


class MaterialContent(BaseModel):
    """Type-specific payload; which field is required depends on the material type."""

    # VIDEO
    video_url: str | None = None
    # DOCUMENT
    document_url: str | None = None
    file_name: str | None = None
    file_size: int | None = None
    # ARTICLE
    article_content: str | None = None
    # EXTERNAL_LINK
    external_url: str | None = None


class MaterialCreate(BaseModel):
    topic_id: int
    type: MaterialType
    title: str = Field(min_length=2)
    sequence: int | None = Field(default=None, ge=1)
    estimated_duration: int | None = Field(default=None, ge=0)
    content: MaterialContent


class MaterialUpdate(BaseModel):
    type: MaterialType | None = None
    title: str | None = Field(default=None, min_length=2)
    sequence: int | None = Field(default=None, ge=1)
    estimated_duration: int | None = Field(default=None, ge=0)
    content: MaterialContent | None = None


class MaterialReorderRequest(BaseModel):
    materials: list[ReorderItem] = Field(min_length=1)


class MaterialPublic(BaseModel):
    id: int
    topic_id: int
    type: MaterialType
    title: str
    content: dict[str, Any]
    sequence: int
    estimated_duration: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}
