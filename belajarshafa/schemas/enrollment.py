# belajarshafa/schemas/enrollment.py
from datetime import datetime

from pydantic import BaseModel

from belajarshafa.schemas.course import CourseDetail, CoursePublic


class EnrollRequest(BaseModel):
    course_id: int


class EnrollmentPublic(BaseModel):
    id: int
    user_id: int
    course_id: int
    progress_percent: int
    enrolled_at: datetime | None = None
    last_accessed_at: datetime | None = None
    completed_at: datetime | None = None

    model_config = {"from_attributes": True}


class EnrollmentWithCourse(EnrollmentPublic):
    course: CoursePublic


class EnrollmentDetail(EnrollmentPublic):
    course: CourseDetail
