# belajarshafa/schemas/course.py
from datetime import datetime

from pydantic import BaseModel, Field

from belajarshafa.models.enums import CourseLevel, CourseType
from belajarshafa.schemas.common import CategoryBrief, UserBrief
from belajarshafa.schemas.topic import TopicPublic


class CourseCreate(BaseModel):
    title: str = Field(min_length=3)
    description: str | None = None
    thumbnail_url: str | None = None
    level: CourseLevel
    type: CourseType
    estimated_duration: int | None = Field(default=None, ge=0)
    prerequisites: str | None = None
    category_id: int


class CourseUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=3)
    description: str | None = None
    thumbnail_url: str | None = None
    level: CourseLevel | None = None
    type: CourseType | None = None
    estimated_duration: int | None = Field(default=None, ge=0)
    prerequisites: str | None = None
    category_id: int | None = None


class CourseFilter(BaseModel):
    category_id: int | None = None
    level: CourseLevel | None = None
    type: CourseType | None = None


class CoursePublic(BaseModel):
    id: int
    title: str
    description: str | None = None
    thumbnail_url: str | None = None
    level: CourseLevel
    type: CourseType
    estimated_duration: int | None = None
    prerequisites: str | None = None
    is_active: bool
    category_id: int
    category: CategoryBrief | None = None
    created_by_id: int
    creator: UserBrief | None = None
    topic_count: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class CourseDetail(CoursePublic):
    topics: list[TopicPublic] = []


class CourseStats(BaseModel):
    course_id: int
    total_topics: int
    total_materials: int
    total_enrollments: int
    completed_enrollments: int
    completion_rate: float
    average_progress: float
