# belajarshafa/models/material.py
from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from belajarshafa.db.base import Base
from belajarshafa.models.enums import MaterialType


class Material(Base):
    __tablename__ = "materials"
    __table_args__ = (UniqueConstraint("topic_id", "sequence", name="uq_material_topic_sequence"),)

    id = Column(Integer, primary_key=True, index=True)
    topic_id = Column(
        Integer, ForeignKey("topics.id", ondelete="CASCADE"), nullable=False, index=True
    )
    type = Column(Enum(MaterialType, native_enum=False, length=20), nullable=False)
    title = Column(String(255), nullable=False)
    # video_url / document_url (+ file_name, file_size) / article_content / external_url
    content = Column(JSON, nullable=False, default=dict)
    sequence = Column(Integer, nullable=False)
    estimated_duration = Column(Integer, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )

    topic = relationship("Topic", back_populates="materials")
    progress_records = relationship(
        "Progress", back_populates="material", cascade="all, delete-orphan"
    )
