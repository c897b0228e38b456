# belajarshafa/api/v1/endpoints/sessions.py
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from belajarshafa.core.security import get_current_mentee, get_current_staff, get_current_user
from belajarshafa.db.session import get_db
from belajarshafa.models.user import User
from belajarshafa.schemas.attendance import AttendancePublic, BulkAttendanceRequest
from belajarshafa.schemas.session import SessionPublic, SessionUpdate
from belajarshafa.services import attendance_service, session_service

router = APIRouter(prefix="/sessions", tags=["sessions"])


@router.get("/{session_id}", response_model=SessionPublic)
def get_session(
    session_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return session_service.get_session_for_user(db, session_id=session_id, user=current_user)


@router.patch("/{session_id}", response_model=SessionPublic)
def update_session(
    session_id: int,
    obj_in: SessionUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_staff),
):
    session_obj = session_service.get_session_or_404(db, session_id)
    return session_service.update_session(
        db, session_obj=session_obj, actor=current_user, obj_in=obj_in
    )


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_session(
    session_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_staff),
):
    session_obj = session_service.get_session_or_404(db, session_id)
    session_service.delete_session(db, session_obj=session_obj, actor=current_user)
    return None


@router.post(
    "/{session_id}/check-in",
    response_model=AttendancePublic,
    status_code=status.HTTP_201_CREATED,
)
def check_in(
    session_id: int,
    db: Session = Depends(get_db),
    current_mentee: User = Depends(get_current_mentee),
):
    """
    Mentee self check-in. Only accepted between ``check_in_window_minutes``
    before and ``check_in_close_minutes`` after the session start.
    """
    session_obj = session_service.get_session_or_404(db, session_id)
    return attendance_service.check_in(db, session_obj=session_obj, actor=current_mentee)


@router.post("/{session_id}/attendance", response_model=List[AttendancePublic])
def mark_attendance(
    session_id: int,
    payload: BulkAttendanceRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_staff),
):
    session_obj = session_service.get_session_or_404(db, session_id)
    return attendance_service.bulk_mark(
        db, session_obj=session_obj, actor=current_user, obj_in=payload
    )
