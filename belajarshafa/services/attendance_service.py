# belajarshafa/services/attendance_service.py
import logging
import math
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from belajarshafa.core.exceptions import BadRequestError, ForbiddenError, NotFoundError
from belajarshafa.core.timeutils import as_aware
from belajarshafa.models.attendance import Attendance
from belajarshafa.models.class_session import ClassSession
from belajarshafa.models.classroom import Class
from belajarshafa.models.enums import AttendanceStatus, Role
from belajarshafa.models.user import User
from belajarshafa.schemas.attendance import AttendanceUpdate, BulkAttendanceRequest
from belajarshafa.services import class_service

logger = logging.getLogger(__name__)


def get_attendance(db: Session, session_id: int, user_id: int) -> Optional[Attendance]:
    return (
        db.query(Attendance)
        .filter(Attendance.session_id == session_id, Attendance.user_id == user_id)
        .first()
    )


def check_in_window(session_obj: ClassSession):
    """Return the (opens, closes) datetimes of the self check-in window."""
    start = as_aware(session_obj.start_time)
    opens = start - timedelta(minutes=session_obj.check_in_window_minutes)
    closes = start + timedelta(minutes=session_obj.check_in_close_minutes)
    return opens, closes


def check_in(
    db: Session,
    *,
    session_obj: ClassSession,
    actor: User,
    now: Optional[datetime] = None,
) -> Attendance:
    if not actor.has_role(Role.MENTEE):
        raise ForbiddenError("Only Mentees can check in")
    if not class_service.is_class_mentee(db, session_obj.class_id, actor.id):
        raise ForbiddenError("You are not a member of this class")

    if get_attendance(db, session_obj.id, actor.id) is not None:
        raise BadRequestError("You have already checked in for this session")

    now = as_aware(now or datetime.now(timezone.utc))
    opens, closes = check_in_window(session_obj)
    if now < opens:
        minutes = math.ceil((opens - now).total_seconds() / 60)
        raise BadRequestError(f"Check-in window opens in {minutes} minute(s)")
    if now > closes:
        raise BadRequestError("Check-in window has closed")

    attendance = Attendance(
        session_id=session_obj.id,
        user_id=actor.id,
        status=AttendanceStatus.PRESENT,
        check_in_time=now,
        marked_by=actor.id,
    )
    db.add(attendance)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise BadRequestError("You have already checked in for this session")
    db.refresh(attendance)
    logger.info(f"User {actor.id} checked in to session {session_obj.id}")
    return attendance


def bulk_mark(
    db: Session,
    *,
    session_obj: ClassSession,
    actor: User,
    obj_in: BulkAttendanceRequest,
) -> List[Attendance]:
    """
    Create or update one attendance row per record.

    Membership of every mentee is checked before anything is written. The
    upserts themselves are committed one by one, so a failure part way
    leaves the earlier rows in place.
    """
    if not actor.has_role(Role.MENTOR, Role.MANAGER, Role.ADMIN):
        raise ForbiddenError("Only Mentors and Managers can mark attendance")
    class_service.ensure_can_manage_class(db, session_obj.klass, actor)

    member_ids = {mentee.id for mentee in session_obj.klass.mentees}
    requested = {record.mentee_id for record in obj_in.records}
    if requested - member_ids:
        raise BadRequestError("One or more mentee IDs are not members of this class")

    results = []
    for record in obj_in.records:
        attendance = get_attendance(db, session_obj.id, record.mentee_id)
        if attendance is None:
            attendance = Attendance(session_id=session_obj.id, user_id=record.mentee_id)
        attendance.status = record.status
        attendance.notes = record.notes
        attendance.marked_by = actor.id
        db.add(attendance)
        db.commit()
        db.refresh(attendance)
        results.append(attendance)

    logger.info(
        f"User {actor.id} marked attendance for {len(results)} mentee(s) "
        f"in session {session_obj.id}"
    )
    return results


def get_attendance_or_404(db: Session, attendance_id: int) -> Attendance:
    attendance = db.get(Attendance, attendance_id)
    if attendance is None:
        raise NotFoundError("Attendance record not found")
    return attendance


def update_attendance(
    db: Session,
    *,
    attendance: Attendance,
    actor: User,
    obj_in: AttendanceUpdate,
) -> Attendance:
    if not actor.has_role(Role.MENTOR, Role.MANAGER, Role.ADMIN):
        raise ForbiddenError("Only Mentors and Managers can update attendance")
    class_service.ensure_can_manage_class(db, attendance.session.klass, actor)

    update_data = obj_in.model_dump(exclude_unset=True)
    if update_data.get("status", True) is None:
        update_data.pop("status")
    for field, value in update_data.items():
        setattr(attendance, field, value)
    attendance.marked_by = actor.id
    db.add(attendance)
    db.commit()
    db.refresh(attendance)
    return attendance


# ---------------------------------------------------------------------------
# history
# ---------------------------------------------------------------------------

def attendance_statistics(history: List[Dict], total_sessions: int) -> Dict:
    counts = {status: 0 for status in AttendanceStatus}
    no_record = 0
    for entry in history:
        attendance = entry["attendance"]
        if attendance is None:
            no_record += 1
        else:
            counts[AttendanceStatus(attendance.status)] += 1

    present = counts[AttendanceStatus.PRESENT]
    return {
        "present": present,
        "absent": counts[AttendanceStatus.ABSENT],
        "permit": counts[AttendanceStatus.PERMIT],
        "sick": counts[AttendanceStatus.SICK],
        "no_record": no_record,
        "attendance_rate": (present / total_sessions) * 100 if total_sessions > 0 else 0.0,
    }


def _mentee_history(mentee: User, sessions: List[ClassSession]) -> Dict:
    history = []
    for session_obj in sessions:
        attendance = next(
            (a for a in session_obj.attendances if a.user_id == mentee.id), None
        )
        history.append({"session": session_obj, "attendance": attendance})

    return {
        "mentee": mentee,
        "total_sessions": len(sessions),
        "statistics": attendance_statistics(history, len(sessions)),
        "history": history,
    }


def _class_sessions(db: Session, class_id: int) -> List[ClassSession]:
    return (
        db.query(ClassSession)
        .filter(ClassSession.class_id == class_id)
        .order_by(ClassSession.start_time.desc())
        .all()
    )


def class_history(db: Session, *, klass: Class, user: User) -> Dict:
    """
    Per-mentee attendance across every session of ``klass``.

    Mentors and managers get every mentee; a mentee only gets their own
    entry.
    """
    class_service.ensure_can_view_class(db, klass, user)
    sessions = _class_sessions(db, klass.id)

    if class_service.can_manage_class(db, klass, user):
        mentees = sorted(klass.mentees, key=lambda m: m.name.lower())
    else:
        mentees = [user]

    return {
        "class_id": klass.id,
        "total_sessions": len(sessions),
        "mentees": [_mentee_history(mentee, sessions) for mentee in mentees],
    }


def mentee_history(db: Session, *, klass: Class, mentee_id: int, user: User) -> Dict:
    class_service.ensure_can_view_class(db, klass, user)
    if not class_service.can_manage_class(db, klass, user) and mentee_id != user.id:
        raise ForbiddenError("You can only view your own attendance")

    mentee = next((m for m in klass.mentees if m.id == mentee_id), None)
    if mentee is None:
        raise NotFoundError("Mentee is not a member of this class")
    return _mentee_history(mentee, _class_sessions(db, klass.id))
