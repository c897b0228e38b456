# belajarshafa/api/v1/endpoints/classes.py
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from belajarshafa.core.security import (
    get_current_manager,
    get_current_mentee,
    get_current_staff,
    get_current_user,
    require_roles,
)
from belajarshafa.db.session import get_db
from belajarshafa.models.enums import Role
from belajarshafa.models.user import User
from belajarshafa.schemas.attendance import ClassAttendanceHistory, MenteeAttendanceHistory
from belajarshafa.schemas.classroom import (
    AssignMentorsRequest,
    ClassCreate,
    ClassDetail,
    ClassListItem,
    ClassPublic,
    ClassUpdate,
    JoinClassRequest,
)
from belajarshafa.schemas.session import SessionCreate, SessionPublic
from belajarshafa.services import attendance_service, class_service, session_service

router = APIRouter(prefix="/classes", tags=["classes"])

get_current_class_creator = require_roles(Role.MANAGER, Role.MENTOR)


@router.post("/", response_model=ClassPublic, status_code=status.HTTP_201_CREATED)
def create_class(
    obj_in: ClassCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_class_creator),
):
    return class_service.create_class(db, actor=current_user, obj_in=obj_in)


@router.get("/", response_model=List[ClassListItem])
def list_classes(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return class_service.list_classes_for_user(db, user=current_user)


@router.post("/join", response_model=ClassPublic)
def join_class(
    payload: JoinClassRequest,
    db: Session = Depends(get_db),
    current_mentee: User = Depends(get_current_mentee),
):
    return class_service.join_by_code(db, actor=current_mentee, code=payload.code)


@router.get("/{class_id}", response_model=ClassDetail)
def get_class(
    class_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return class_service.get_class_for_user(db, class_id=class_id, user=current_user)


@router.patch("/{class_id}", response_model=ClassPublic)
def update_class(
    class_id: int,
    obj_in: ClassUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_staff),
):
    klass = class_service.get_class_or_404(db, class_id)
    return class_service.update_class(db, klass=klass, actor=current_user, obj_in=obj_in)


@router.delete("/{class_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_class(
    class_id: int,
    db: Session = Depends(get_db),
    current_manager: User = Depends(get_current_manager),
):
    klass = class_service.get_class_or_404(db, class_id)
    class_service.delete_class(db, klass=klass, actor=current_manager)
    return None


@router.post("/{class_id}/leave", response_model=ClassPublic)
def leave_class(
    class_id: int,
    db: Session = Depends(get_db),
    current_mentee: User = Depends(get_current_mentee),
):
    klass = class_service.get_class_or_404(db, class_id)
    return class_service.leave_class(db, klass=klass, actor=current_mentee)


@router.post("/{class_id}/mentors", response_model=ClassPublic)
def assign_mentors(
    class_id: int,
    payload: AssignMentorsRequest,
    db: Session = Depends(get_db),
    current_manager: User = Depends(get_current_manager),
):
    klass = class_service.get_class_or_404(db, class_id)
    return class_service.assign_mentors(
        db, klass=klass, actor=current_manager, mentor_ids=payload.mentor_ids
    )


@router.delete("/{class_id}/mentees/{mentee_id}", response_model=ClassPublic)
def remove_mentee(
    class_id: int,
    mentee_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_staff),
):
    klass = class_service.get_class_or_404(db, class_id)
    return class_service.remove_mentee(db, klass=klass, actor=current_user, mentee_id=mentee_id)


# ---------------------------------------------------------------------------
# sessions and attendance scoped to a class
# ---------------------------------------------------------------------------

@router.post(
    "/{class_id}/sessions",
    response_model=SessionPublic,
    status_code=status.HTTP_201_CREATED,
)
def create_session(
    class_id: int,
    obj_in: SessionCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_staff),
):
    klass = class_service.get_class_or_404(db, class_id)
    return session_service.create_session(db, klass=klass, actor=current_user, obj_in=obj_in)


@router.get("/{class_id}/sessions", response_model=List[SessionPublic])
def list_sessions(
    class_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    klass = class_service.get_class_or_404(db, class_id)
    return session_service.list_sessions(db, klass=klass, user=current_user)


@router.get("/{class_id}/attendance", response_model=ClassAttendanceHistory)
def class_attendance_history(
    class_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    klass = class_service.get_class_or_404(db, class_id)
    return attendance_service.class_history(db, klass=klass, user=current_user)


@router.get(
    "/{class_id}/attendance/mentees/{mentee_id}",
    response_model=MenteeAttendanceHistory,
)
def mentee_attendance_history(
    class_id: int,
    mentee_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    klass = class_service.get_class_or_404(db, class_id)
    return attendance_service.mentee_history(
        db, klass=klass, mentee_id=mentee_id, user=current_user
    )
