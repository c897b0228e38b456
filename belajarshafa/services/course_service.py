# belajarshafa/services/course_service.py
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from belajarshafa.core.exceptions import BadRequestError, ForbiddenError, NotFoundError
from belajarshafa.models.category import Category
from belajarshafa.models.course import Course
from belajarshafa.models.enums import Role
from belajarshafa.models.material import Material
from belajarshafa.models.topic import Topic
from belajarshafa.models.user import User
from belajarshafa.schemas.course import CourseCreate, CourseFilter, CourseUpdate

logger = logging.getLogger(__name__)


def ensure_manager(actor: User, message: str) -> None:
    if not actor.has_role(Role.MANAGER, Role.ADMIN):
        raise ForbiddenError(message)


def ensure_course_owner(course: Course, actor: User, message: str) -> None:
    """Only the creating manager or an admin may change a course and its curriculum."""
    if course.created_by_id != actor.id and not actor.has_role(Role.ADMIN):
        raise ForbiddenError(message)


def _ensure_category(db: Session, category_id: int) -> None:
    if db.get(Category, category_id) is None:
        raise BadRequestError("Category not found")


def create_course(db: Session, *, actor: User, obj_in: CourseCreate) -> Course:
    ensure_manager(actor, "Only Managers can create courses")
    _ensure_category(db, obj_in.category_id)

    course = Course(**obj_in.model_dump(), created_by_id=actor.id, is_active=True)
    db.add(course)
    db.commit()
    db.refresh(course)
    logger.info(f"Course {course.id} created by user {actor.id}")
    return course


def list_courses(db: Session, filters: Optional[CourseFilter] = None) -> List[Course]:
    query = db.query(Course).filter(Course.is_active.is_(True))
    if filters is not None:
        if filters.category_id is not None:
            query = query.filter(Course.category_id == filters.category_id)
        if filters.level is not None:
            query = query.filter(Course.level == filters.level)
        if filters.type is not None:
            query = query.filter(Course.type == filters.type)
    return query.order_by(Course.created_at.desc(), Course.id.desc()).all()


def get_course_or_404(db: Session, course_id: int) -> Course:
    course = db.get(Course, course_id)
    if course is None:
        raise NotFoundError("Course not found")
    return course


def update_course(db: Session, *, course: Course, actor: User, obj_in: CourseUpdate) -> Course:
    ensure_manager(actor, "Only Managers can update courses")
    ensure_course_owner(course, actor, "You can only update courses you created")

    update_data = obj_in.model_dump(exclude_unset=True)
    if update_data.get("category_id") is not None:
        _ensure_category(db, update_data["category_id"])

    for field, value in update_data.items():
        # explicit nulls on required columns are ignored
        if value is None and field in ("title", "level", "type", "category_id"):
            continue
        setattr(course, field, value)
    db.add(course)
    db.commit()
    db.refresh(course)
    return course


def delete_course(db: Session, *, course: Course, actor: User) -> Course:
    """Soft delete: the course disappears from listings but keeps its data."""
    ensure_manager(actor, "Only Managers can delete courses")
    ensure_course_owner(course, actor, "You can only delete courses you created")

    course.is_active = False
    db.add(course)
    db.commit()
    db.refresh(course)
    logger.info(f"Course {course.id} deactivated by user {actor.id}")
    return course


def duplicate_course(db: Session, *, course: Course, actor: User) -> Course:
    ensure_manager(actor, "Only Managers can duplicate courses")

    copy = Course(
        title=f"{course.title} (Copy)",
        description=course.description,
        thumbnail_url=course.thumbnail_url,
        level=course.level,
        type=course.type,
        estimated_duration=course.estimated_duration,
        prerequisites=course.prerequisites,
        category_id=course.category_id,
        created_by_id=actor.id,
        is_active=True,
    )
    for topic in course.topics:
        topic_copy = Topic(
            title=topic.title,
            description=topic.description,
            sequence=topic.sequence,
            estimated_duration=topic.estimated_duration,
            is_mandatory=topic.is_mandatory,
        )
        for material in topic.materials:
            topic_copy.materials.append(
                Material(
                    type=material.type,
                    title=material.title,
                    content=dict(material.content or {}),
                    sequence=material.sequence,
                    estimated_duration=material.estimated_duration,
                )
            )
        copy.topics.append(topic_copy)

    db.add(copy)
    db.commit()
    db.refresh(copy)
    logger.info(f"Course {course.id} duplicated as {copy.id} by user {actor.id}")
    return copy


def get_course_stats(db: Session, *, course: Course) -> dict:
    total_topics = len(course.topics)
    total_materials = sum(len(topic.materials) for topic in course.topics)

    enrollments = course.enrollments
    total_enrollments = len(enrollments)
    completed = sum(1 for e in enrollments if e.completed_at is not None)
    if total_enrollments:
        completion_rate = completed / total_enrollments * 100
        average_progress = sum(e.progress_percent for e in enrollments) / total_enrollments
    else:
        completion_rate = 0.0
        average_progress = 0.0

    return {
        "course_id": course.id,
        "total_topics": total_topics,
        "total_materials": total_materials,
        "total_enrollments": total_enrollments,
        "completed_enrollments": completed,
        "completion_rate": completion_rate,
        "average_progress": average_progress,
    }
