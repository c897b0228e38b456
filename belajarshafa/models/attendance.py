# belajarshafa/models/attendance.py
from sqlalchemy import (
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from belajarshafa.db.base import Base
from belajarshafa.models.enums import AttendanceStatus


class Attendance(Base):
    __tablename__ = "attendances"
    __table_args__ = (UniqueConstraint("session_id", "user_id", name="uq_attendance_session_user"),)

    id = Column(Integer, primary_key=True, index=True)
    session_id = Column(
        Integer, ForeignKey("sessions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    status = Column(Enum(AttendanceStatus, native_enum=False, length=20), nullable=False)
    # only set on self check-in
    check_in_time = Column(DateTime(timezone=True), nullable=True)
    notes = Column(Text, nullable=True)
    marked_by = Column(Integer, ForeignKey("users.id"), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )

    session = relationship("ClassSession", back_populates="attendances")
    user = relationship("User", foreign_keys=[user_id], back_populates="attendances")
    marker = relationship("User", foreign_keys=[marked_by])
