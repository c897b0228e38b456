# belajarshafa/models/classroom.py
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from belajarshafa.db.base import Base
from belajarshafa.models.associations import class_mentees, class_mentors


class Class(Base):
    __tablename__ = "classes"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    # always stored uppercase
    code = Column(String(16), unique=True, nullable=False, index=True)
    organization_id = Column(Integer, ForeignKey("organizations.id"), nullable=True)
    start_date = Column(DateTime(timezone=True), nullable=True)
    end_date = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )

    organization = relationship("Organization", back_populates="classes")
    mentors = relationship(
        "User", secondary=class_mentors, back_populates="mentored_classes"
    )
    mentees = relationship(
        "User", secondary=class_mentees, back_populates="joined_classes"
    )
    sessions = relationship(
        "ClassSession",
        back_populates="klass",
        cascade="all, delete-orphan",
        order_by="ClassSession.start_time.desc()",
    )

    @property
    def session_count(self) -> int:
        return len(self.sessions)

    @property
    def recent_sessions(self):
        return self.sessions[:5]
