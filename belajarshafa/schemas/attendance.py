# belajarshafa/schemas/attendance.py
from datetime import datetime

from pydantic import BaseModel, Field

from belajarshafa.models.enums import AttendanceStatus
from belajarshafa.schemas.common import SessionSummary, UserBrief


class AttendanceRecord(BaseModel):
    mentee_id: int
    status: AttendanceStatus
    notes: str | None = None


class BulkAttendanceRequest(BaseModel):
    records: list[AttendanceRecord] = Field(min_length=1)


class AttendanceUpdate(BaseModel):
    status: AttendanceStatus | None = None
    notes: str | None = None


class AttendancePublic(BaseModel):
    id: int
    session_id: int
    user_id: int
    status: AttendanceStatus
    check_in_time: datetime | None = None
    notes: str | None = None
    marked_by: int | None = None
    user: UserBrief | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class AttendanceStatistics(BaseModel):
    present: int
    absent: int
    permit: int
    sick: int
    no_record: int
    attendance_rate: float


class SessionAttendanceEntry(BaseModel):
    session: SessionSummary
    attendance: AttendancePublic | None = None


class MenteeAttendanceHistory(BaseModel):
    mentee: UserBrief
    total_sessions: int
    statistics: AttendanceStatistics
    history: list[SessionAttendanceEntry]


class ClassAttendanceHistory(BaseModel):
    class_id: int
    total_sessions: int
    mentees: list[MenteeAttendanceHistory]
