# belajarshafa/services/enrollment_service.py
import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from belajarshafa.core.exceptions import BadRequestError, NotFoundError
from belajarshafa.models.course import Course
from belajarshafa.models.enrollment import Enrollment
from belajarshafa.models.material import Material
from belajarshafa.models.progress import Progress
from belajarshafa.models.topic import Topic
from belajarshafa.models.user import User
from belajarshafa.services.course_service import get_course_or_404

logger = logging.getLogger(__name__)


def compute_percent(part: int, whole: int) -> int:
    """Integer percentage rounded half up (49.5 -> 50), 0 when ``whole`` is 0."""
    if whole <= 0:
        return 0
    return (part * 200 + whole) // (2 * whole)


def get_enrollment(db: Session, user_id: int, course_id: int) -> Optional[Enrollment]:
    return (
        db.query(Enrollment)
        .filter(Enrollment.user_id == user_id, Enrollment.course_id == course_id)
        .first()
    )


def get_enrollment_or_404(db: Session, user_id: int, course_id: int) -> Enrollment:
    enrollment = get_enrollment(db, user_id, course_id)
    if enrollment is None:
        raise NotFoundError("You are not enrolled in this course")
    return enrollment


def enroll(db: Session, *, user: User, course_id: int) -> Enrollment:
    course = get_course_or_404(db, course_id)
    if not course.is_active:
        raise BadRequestError("Course is not active")
    if get_enrollment(db, user.id, course.id) is not None:
        raise BadRequestError("You are already enrolled in this course")

    enrollment = Enrollment(
        user_id=user.id,
        course_id=course.id,
        progress_percent=0,
        last_accessed_at=datetime.now(timezone.utc),
    )
    db.add(enrollment)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise BadRequestError("You are already enrolled in this course")
    db.refresh(enrollment)
    logger.info(f"User {user.id} enrolled in course {course.id}")
    return enrollment


def ensure_enrolled(db: Session, *, user: User, course: Course) -> Enrollment:
    """
    Return the user's enrollment in ``course``, creating one at 0% if the
    user has none yet.

    Progress writes go through here, so recording progress on a course the
    user never explicitly joined enrolls them.
    """
    enrollment = get_enrollment(db, user.id, course.id)
    if enrollment is not None:
        return enrollment

    enrollment = Enrollment(user_id=user.id, course_id=course.id, progress_percent=0)
    db.add(enrollment)
    try:
        db.flush()
    except IntegrityError:
        # enrolled by a concurrent request in the meantime
        db.rollback()
        return get_enrollment(db, user.id, course.id)
    logger.info(f"Auto-enrolled user {user.id} in course {course.id} on first progress write")
    return enrollment


def unenroll(db: Session, *, user: User, course_id: int) -> dict:
    enrollment = get_enrollment_or_404(db, user.id, course_id)
    db.delete(enrollment)
    db.commit()
    logger.info(f"User {user.id} unenrolled from course {course_id}")
    return {"message": "Successfully unenrolled from course"}


def calculate_course_progress(db: Session, enrollment: Enrollment) -> int:
    total = (
        db.query(func.count(Material.id))
        .join(Topic, Material.topic_id == Topic.id)
        .filter(Topic.course_id == enrollment.course_id)
        .scalar()
    )
    if not total:
        return 0

    completed = (
        db.query(func.count(Progress.id))
        .join(Material, Progress.material_id == Material.id)
        .join(Topic, Material.topic_id == Topic.id)
        .filter(
            Progress.enrollment_id == enrollment.id,
            Progress.is_completed.is_(True),
            Topic.course_id == enrollment.course_id,
        )
        .scalar()
    )
    return compute_percent(completed, total)


def recalculate_course_progress(db: Session, enrollment: Enrollment) -> Enrollment:
    """
    Store the derived percentage on ``enrollment``. ``completed_at`` is
    stamped the first time it reaches 100 and never moved afterwards.
    """
    percent = calculate_course_progress(db, enrollment)
    enrollment.progress_percent = percent
    if percent >= 100 and enrollment.completed_at is None:
        enrollment.completed_at = datetime.now(timezone.utc)
        logger.info(
            f"User {enrollment.user_id} completed course {enrollment.course_id}"
        )
    db.add(enrollment)
    db.commit()
    db.refresh(enrollment)
    return enrollment


def list_my_enrollments(db: Session, *, user: User) -> List[Enrollment]:
    enrollments = (
        db.query(Enrollment)
        .filter(Enrollment.user_id == user.id)
        .order_by(Enrollment.last_accessed_at.desc().nulls_last(), Enrollment.id.desc())
        .all()
    )
    return [recalculate_course_progress(db, e) for e in enrollments]


def get_course_enrollment(db: Session, *, user: User, course_id: int) -> Optional[Enrollment]:
    enrollment = get_enrollment(db, user.id, course_id)
    if enrollment is None:
        return None
    return recalculate_course_progress(db, enrollment)


def touch_last_accessed(enrollment: Enrollment) -> None:
    enrollment.last_accessed_at = datetime.now(timezone.utc)


def mark_course_completed(db: Session, *, user: User, course_id: int) -> Enrollment:
    enrollment = get_enrollment_or_404(db, user.id, course_id)
    percent = calculate_course_progress(db, enrollment)
    if percent < 100:
        raise BadRequestError("Course is not yet completed")

    enrollment.progress_percent = 100
    if enrollment.completed_at is None:
        enrollment.completed_at = datetime.now(timezone.utc)
    db.add(enrollment)
    db.commit()
    db.refresh(enrollment)
    return enrollment
