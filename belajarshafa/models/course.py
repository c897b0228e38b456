# belajarshafa/models/course.py
from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from belajarshafa.db.base import Base
from belajarshafa.models.enums import CourseLevel, CourseType


class Course(Base):
    __tablename__ = "courses"

    id = Column(Integer, primary_key=True, index=True)
    category_id = Column(Integer, ForeignKey("course_categories.id"), nullable=False, index=True)
    created_by_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    thumbnail_url = Column(String(500), nullable=True)
    level = Column(Enum(CourseLevel, native_enum=False, length=20), nullable=False)
    type = Column(Enum(CourseType, native_enum=False, length=20), nullable=False)
    estimated_duration = Column(Integer, nullable=True)  # minutes
    prerequisites = Column(Text, nullable=True)
    # soft-delete flag
    is_active = Column(Boolean, nullable=False, default=True, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )

    category = relationship("Category", back_populates="courses")
    creator = relationship("User")
    topics = relationship(
        "Topic",
        back_populates="course",
        cascade="all, delete-orphan",
        order_by="Topic.sequence",
    )
    enrollments = relationship(
        "Enrollment", back_populates="course", cascade="all, delete-orphan"
    )

    @property
    def topic_count(self) -> int:
        return len(self.topics)
