# belajarshafa/models/topic.py
from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from belajarshafa.db.base import Base


class Topic(Base):
    __tablename__ = "topics"
    __table_args__ = (UniqueConstraint("course_id", "sequence", name="uq_topic_course_sequence"),)

    id = Column(Integer, primary_key=True, index=True)
    course_id = Column(
        Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    sequence = Column(Integer, nullable=False)
    estimated_duration = Column(Integer, nullable=True)
    is_mandatory = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )

    course = relationship("Course", back_populates="topics")
    materials = relationship(
        "Material",
        back_populates="topic",
        cascade="all, delete-orphan",
        order_by="Material.sequence",
    )

    @property
    def material_count(self) -> int:
        return len(self.materials)
