# belajarshafa/services/progress_service.py
import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from belajarshafa.models.enrollment import Enrollment
from belajarshafa.models.progress import Progress
from belajarshafa.models.user import User
from belajarshafa.schemas.progress import ProgressUpdate
from belajarshafa.services import enrollment_service
from belajarshafa.services.material_service import get_material_or_404
from belajarshafa.services.topic_service import get_topic_or_404

logger = logging.getLogger(__name__)


def _empty_progress(material_id: int) -> dict:
    return {
        "material_id": material_id,
        "watched_duration": 0,
        "is_completed": False,
        "last_accessed_at": None,
    }


def _get_progress(db: Session, enrollment_id: int, material_id: int) -> Optional[Progress]:
    return (
        db.query(Progress)
        .filter(Progress.enrollment_id == enrollment_id, Progress.material_id == material_id)
        .first()
    )


def update_material_progress(
    db: Session,
    *,
    user: User,
    material_id: int,
    obj_in: ProgressUpdate,
) -> Progress:
    material = get_material_or_404(db, material_id)
    course = material.topic.course
    enrollment = enrollment_service.ensure_enrolled(db, user=user, course=course)

    now = datetime.now(timezone.utc)
    progress = _get_progress(db, enrollment.id, material.id)
    if progress is None:
        progress = Progress(
            enrollment_id=enrollment.id,
            material_id=material.id,
            watched_duration=obj_in.watched_duration or 0,
            is_completed=bool(obj_in.is_completed),
        )
    else:
        if obj_in.watched_duration is not None:
            progress.watched_duration = obj_in.watched_duration
        if obj_in.is_completed is not None:
            progress.is_completed = obj_in.is_completed
    progress.last_accessed_at = now
    db.add(progress)

    enrollment_service.touch_last_accessed(enrollment)
    db.flush()
    enrollment_service.recalculate_course_progress(db, enrollment)

    db.refresh(progress)
    return progress


def mark_material_complete(db: Session, *, user: User, material_id: int) -> Progress:
    return update_material_progress(
        db,
        user=user,
        material_id=material_id,
        obj_in=ProgressUpdate(is_completed=True),
    )


def get_material_progress(db: Session, *, user: User, material_id: int):
    material = get_material_or_404(db, material_id)
    enrollment = enrollment_service.get_enrollment(db, user.id, material.topic.course_id)
    if enrollment is None:
        return _empty_progress(material.id)

    progress = _get_progress(db, enrollment.id, material.id)
    if progress is None:
        return _empty_progress(material.id)
    return progress


def get_topic_progress(db: Session, *, user: User, topic_id: int) -> dict:
    """
    Per-material completion for one topic. The percentage only looks at
    this topic's materials, not at the course-level figure.
    """
    topic = get_topic_or_404(db, topic_id)
    enrollment: Optional[Enrollment] = enrollment_service.get_enrollment(
        db, user.id, topic.course_id
    )

    records = {}
    if enrollment is not None:
        records = {
            p.material_id: p
            for p in db.query(Progress)
            .filter(
                Progress.enrollment_id == enrollment.id,
                Progress.material_id.in_([m.id for m in topic.materials]),
            )
            .all()
        }

    materials = [
        records[m.id] if m.id in records else _empty_progress(m.id)
        for m in topic.materials
    ]
    completed = sum(1 for m in topic.materials if m.id in records and records[m.id].is_completed)
    total = len(topic.materials)

    return {
        "topic_id": topic.id,
        "materials": materials,
        "completed_count": completed,
        "total_count": total,
        "progress_percent": enrollment_service.compute_percent(completed, total),
    }
