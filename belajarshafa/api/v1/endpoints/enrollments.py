# belajarshafa/api/v1/endpoints/enrollments.py
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from belajarshafa.core.security import get_current_user
from belajarshafa.db.session import get_db
from belajarshafa.models.user import User
from belajarshafa.schemas.common import Message
from belajarshafa.schemas.enrollment import (
    EnrollmentDetail,
    EnrollmentPublic,
    EnrollmentWithCourse,
    EnrollRequest,
)
from belajarshafa.services import enrollment_service

router = APIRouter(prefix="/enrollments", tags=["enrollments"])


@router.post("/", response_model=EnrollmentWithCourse, status_code=status.HTTP_201_CREATED)
def enroll(
    payload: EnrollRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return enrollment_service.enroll(db, user=current_user, course_id=payload.course_id)


@router.get("/my-courses", response_model=List[EnrollmentWithCourse])
def my_courses(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return enrollment_service.list_my_enrollments(db, user=current_user)


@router.get("/course/{course_id}", response_model=Optional[EnrollmentDetail])
def get_course_enrollment(
    course_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """The caller's enrollment with the full curriculum, or null."""
    return enrollment_service.get_course_enrollment(db, user=current_user, course_id=course_id)


@router.delete("/course/{course_id}", response_model=Message)
def unenroll(
    course_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return enrollment_service.unenroll(db, user=current_user, course_id=course_id)


@router.post("/course/{course_id}/complete", response_model=EnrollmentPublic)
def mark_course_completed(
    course_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return enrollment_service.mark_course_completed(db, user=current_user, course_id=course_id)
