# belajarshafa/models/progress.py
from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from belajarshafa.db.base import Base


class Progress(Base):
    __tablename__ = "progress"
    __table_args__ = (
        UniqueConstraint("enrollment_id", "material_id", name="uq_progress_enrollment_material"),
    )

    id = Column(Integer, primary_key=True, index=True)
    enrollment_id = Column(
        Integer, ForeignKey("enrollments.id", ondelete="CASCADE"), nullable=False, index=True
    )
    material_id = Column(
        Integer, ForeignKey("materials.id", ondelete="CASCADE"), nullable=False, index=True
    )
    watched_duration = Column(Integer, nullable=False, default=0)  # seconds
    is_completed = Column(Boolean, nullable=False, default=False)
    last_accessed_at = Column(DateTime(timezone=True), nullable=True)

    enrollment = relationship("Enrollment", back_populates="progress")
    material = relationship("Material", back_populates="progress_records")
