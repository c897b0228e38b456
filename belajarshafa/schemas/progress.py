# belajarshafa/schemas/progress.py
from datetime import datetime

from pydantic import BaseModel, Field


class ProgressUpdate(BaseModel):
    watched_duration: int | None = Field(default=None, ge=0)  # seconds
    is_completed: bool | None = None


class MaterialProgress(BaseModel):
    material_id: int
    watched_duration: int = 0
    is_completed: bool = False
    last_accessed_at: datetime | None = None

    model_config = {"from_attributes": True}


class TopicProgress(BaseModel):
    topic_id: int
    materials: list[MaterialProgress]
    completed_count: int
    total_count: int
    progress_percent: int
