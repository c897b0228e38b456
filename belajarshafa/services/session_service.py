# belajarshafa/services/session_service.py
import logging
from typing import List

from sqlalchemy.orm import Session

from belajarshafa.core.config import settings
from belajarshafa.core.exceptions import BadRequestError, ForbiddenError, NotFoundError
from belajarshafa.core.timeutils import as_aware
from belajarshafa.models.class_session import ClassSession
from belajarshafa.models.classroom import Class
from belajarshafa.models.enums import Role, SessionType
from belajarshafa.models.user import User
from belajarshafa.schemas.session import SessionCreate, SessionUpdate
from belajarshafa.services import class_service

logger = logging.getLogger(__name__)


def _validate_schedule(start_time, end_time, session_type, location, meeting_url) -> None:
    if as_aware(end_time) <= as_aware(start_time):
        raise BadRequestError("End time must be after start time")
    if session_type == SessionType.ONLINE and not meeting_url:
        raise BadRequestError("Meeting URL is required for online sessions")
    if session_type == SessionType.OFFLINE and not location:
        raise BadRequestError("Location is required for offline sessions")


def create_session(
    db: Session,
    *,
    klass: Class,
    actor: User,
    obj_in: SessionCreate,
) -> ClassSession:
    if not actor.has_role(Role.MANAGER, Role.MENTOR, Role.ADMIN):
        raise ForbiddenError("Only Managers and Mentors can create sessions")
    class_service.ensure_can_manage_class(db, klass, actor)

    _validate_schedule(
        obj_in.start_time,
        obj_in.end_time,
        obj_in.type,
        obj_in.location,
        obj_in.meeting_url,
    )

    window = obj_in.check_in_window_minutes
    close = obj_in.check_in_close_minutes
    session_obj = ClassSession(
        class_id=klass.id,
        created_by=actor.id,
        title=obj_in.title,
        description=obj_in.description,
        start_time=obj_in.start_time,
        end_time=obj_in.end_time,
        type=obj_in.type,
        location=obj_in.location,
        meeting_url=obj_in.meeting_url,
        check_in_window_minutes=(
            window if window is not None else settings.DEFAULT_CHECK_IN_WINDOW_MINUTES
        ),
        check_in_close_minutes=(
            close if close is not None else settings.DEFAULT_CHECK_IN_CLOSE_MINUTES
        ),
    )
    db.add(session_obj)
    db.commit()
    db.refresh(session_obj)
    logger.info(f"Session {session_obj.id} scheduled in class {klass.id} by user {actor.id}")
    return session_obj


def list_sessions(db: Session, *, klass: Class, user: User) -> List[ClassSession]:
    class_service.ensure_can_view_class(db, klass, user)
    return (
        db.query(ClassSession)
        .filter(ClassSession.class_id == klass.id)
        .order_by(ClassSession.start_time.desc())
        .all()
    )


def get_session_or_404(db: Session, session_id: int) -> ClassSession:
    session_obj = db.get(ClassSession, session_id)
    if session_obj is None:
        raise NotFoundError("Session not found")
    return session_obj


def get_session_for_user(db: Session, *, session_id: int, user: User) -> ClassSession:
    session_obj = get_session_or_404(db, session_id)
    class_service.ensure_can_view_class(
        db, session_obj.klass, user, "You do not have access to this session"
    )
    return session_obj


def update_session(
    db: Session,
    *,
    session_obj: ClassSession,
    actor: User,
    obj_in: SessionUpdate,
) -> ClassSession:
    is_creator = session_obj.created_by == actor.id
    if not is_creator and not class_service.can_manage_class(db, session_obj.klass, actor):
        raise ForbiddenError(
            "Only assigned mentors or session creator can update this session"
        )

    update_data = obj_in.model_dump(exclude_unset=True)
    # required columns: an explicit null leaves them unchanged
    for field in (
        "title",
        "start_time",
        "end_time",
        "type",
        "check_in_window_minutes",
        "check_in_close_minutes",
    ):
        if update_data.get(field, True) is None:
            update_data.pop(field)

    merged = {
        field: update_data.get(field, getattr(session_obj, field))
        for field in ("start_time", "end_time", "type", "location", "meeting_url")
    }
    _validate_schedule(
        merged["start_time"],
        merged["end_time"],
        merged["type"],
        merged["location"],
        merged["meeting_url"],
    )

    for field, value in update_data.items():
        setattr(session_obj, field, value)
    db.add(session_obj)
    db.commit()
    db.refresh(session_obj)
    return session_obj


def delete_session(db: Session, *, session_obj: ClassSession, actor: User) -> None:
    if not actor.has_role(Role.MANAGER, Role.ADMIN) and session_obj.created_by != actor.id:
        raise ForbiddenError(
            "Only Managers, Admins, or session creator can delete sessions"
        )
    db.delete(session_obj)
    db.commit()
    logger.info(f"Session {session_obj.id} deleted by user {actor.id}")
