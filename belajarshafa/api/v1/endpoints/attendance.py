# belajarshafa/api/v1/endpoints/attendance.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from belajarshafa.core.security import get_current_staff
from belajarshafa.db.session import get_db
from belajarshafa.models.user import User
from belajarshafa.schemas.attendance import AttendancePublic, AttendanceUpdate
from belajarshafa.services import attendance_service

router = APIRouter(prefix="/attendance", tags=["attendance"])


@router.patch("/{attendance_id}", response_model=AttendancePublic)
def update_attendance(
    attendance_id: int,
    obj_in: AttendanceUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_staff),
):
    """Mentor or manager override of a single attendance record."""
    attendance = attendance_service.get_attendance_or_404(db, attendance_id)
    return attendance_service.update_attendance(
        db, attendance=attendance, actor=current_user, obj_in=obj_in
    )
