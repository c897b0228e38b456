# belajarshafa/models/class_session.py
from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from belajarshafa.db.base import Base
from belajarshafa.models.enums import SessionType


class ClassSession(Base):
    """One scheduled meeting of a class."""

    __tablename__ = "sessions"

    id = Column(Integer, primary_key=True, index=True)
    class_id = Column(
        Integer, ForeignKey("classes.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    start_time = Column(DateTime(timezone=True), nullable=False)
    end_time = Column(DateTime(timezone=True), nullable=False)
    type = Column(Enum(SessionType, native_enum=False, length=20), nullable=False)
    location = Column(String(255), nullable=True)
    meeting_url = Column(String(500), nullable=True)

    # minutes before start when self check-in opens / after start when it closes
    check_in_window_minutes = Column(Integer, nullable=False, default=15)
    check_in_close_minutes = Column(Integer, nullable=False, default=30)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )

    klass = relationship("Class", back_populates="sessions")
    creator = relationship("User", foreign_keys=[created_by])
    attendances = relationship(
        "Attendance", back_populates="session", cascade="all, delete-orphan"
    )
