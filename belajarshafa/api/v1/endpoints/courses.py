# belajarshafa/api/v1/endpoints/courses.py
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from belajarshafa.core.security import get_current_manager, get_current_user
from belajarshafa.db.session import get_db
from belajarshafa.models.enums import CourseLevel, CourseType
from belajarshafa.models.user import User
from belajarshafa.schemas.course import (
    CourseCreate,
    CourseDetail,
    CourseFilter,
    CoursePublic,
    CourseStats,
    CourseUpdate,
)
from belajarshafa.services import course_service

router = APIRouter(prefix="/courses", tags=["courses"])


@router.post("/", response_model=CourseDetail, status_code=status.HTTP_201_CREATED)
def create_course(
    obj_in: CourseCreate,
    db: Session = Depends(get_db),
    current_manager: User = Depends(get_current_manager),
):
    return course_service.create_course(db, actor=current_manager, obj_in=obj_in)


@router.get("/", response_model=List[CoursePublic])
def list_courses(
    category_id: Optional[int] = None,
    level: Optional[CourseLevel] = None,
    type: Optional[CourseType] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Active courses only, newest first."""
    filters = CourseFilter(category_id=category_id, level=level, type=type)
    return course_service.list_courses(db, filters)


@router.get("/{course_id}", response_model=CourseDetail)
def get_course(
    course_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return course_service.get_course_or_404(db, course_id)


@router.patch("/{course_id}", response_model=CourseDetail)
def update_course(
    course_id: int,
    obj_in: CourseUpdate,
    db: Session = Depends(get_db),
    current_manager: User = Depends(get_current_manager),
):
    course = course_service.get_course_or_404(db, course_id)
    return course_service.update_course(db, course=course, actor=current_manager, obj_in=obj_in)


@router.delete("/{course_id}", response_model=CoursePublic)
def delete_course(
    course_id: int,
    db: Session = Depends(get_db),
    current_manager: User = Depends(get_current_manager),
):
    course = course_service.get_course_or_404(db, course_id)
    return course_service.delete_course(db, course=course, actor=current_manager)


@router.post(
    "/{course_id}/duplicate",
    response_model=CourseDetail,
    status_code=status.HTTP_201_CREATED,
)
def duplicate_course(
    course_id: int,
    db: Session = Depends(get_db),
    current_manager: User = Depends(get_current_manager),
):
    course = course_service.get_course_or_404(db, course_id)
    return course_service.duplicate_course(db, course=course, actor=current_manager)


@router.get("/{course_id}/stats", response_model=CourseStats)
def course_stats(
    course_id: int,
    db: Session = Depends(get_db),
    current_manager: User = Depends(get_current_manager),
):
    course = course_service.get_course_or_404(db, course_id)
    return course_service.get_course_stats(db, course=course)
