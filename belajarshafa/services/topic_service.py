# belajarshafa/services/topic_service.py
import logging
from typing import List

from sqlalchemy.orm import Session

from belajarshafa.core.exceptions import BadRequestError, NotFoundError
from belajarshafa.models.topic import Topic
from belajarshafa.models.user import User
from belajarshafa.schemas.topic import TopicCreate, TopicReorderRequest, TopicUpdate
from belajarshafa.services import ordering
from belajarshafa.services.course_service import (
    ensure_course_owner,
    ensure_manager,
    get_course_or_404,
)

logger = logging.getLogger(__name__)


def _ensure_free_sequence(db: Session, course_id: int, sequence: int) -> None:
    if ordering.sequence_taken(db, Topic, Topic.course_id, course_id, sequence):
        raise BadRequestError(f"Topic with sequence {sequence} already exists in this course")


def create_topic(db: Session, *, actor: User, obj_in: TopicCreate) -> Topic:
    ensure_manager(actor, "Only Managers can create topics")
    course = get_course_or_404(db, obj_in.course_id)
    ensure_course_owner(course, actor, "You can only add topics to courses you created")

    sequence = obj_in.sequence
    if sequence is None:
        sequence = ordering.next_sequence(db, Topic.course_id, course.id, Topic.sequence)
    else:
        _ensure_free_sequence(db, course.id, sequence)

    topic = Topic(
        course_id=course.id,
        title=obj_in.title,
        description=obj_in.description,
        sequence=sequence,
        estimated_duration=obj_in.estimated_duration,
        is_mandatory=obj_in.is_mandatory,
    )
    db.add(topic)
    db.commit()
    db.refresh(topic)
    return topic


def list_topics(db: Session, *, course_id: int) -> List[Topic]:
    get_course_or_404(db, course_id)
    return (
        db.query(Topic)
        .filter(Topic.course_id == course_id)
        .order_by(Topic.sequence.asc())
        .all()
    )


def get_topic_or_404(db: Session, topic_id: int) -> Topic:
    topic = db.get(Topic, topic_id)
    if topic is None:
        raise NotFoundError("Topic not found")
    return topic


def update_topic(db: Session, *, topic: Topic, actor: User, obj_in: TopicUpdate) -> Topic:
    ensure_manager(actor, "Only Managers can update topics")
    ensure_course_owner(
        topic.course, actor, "You can only update topics in courses you created"
    )

    update_data = obj_in.model_dump(exclude_unset=True)
    for field in ("title", "sequence", "is_mandatory"):
        if update_data.get(field, True) is None:
            update_data.pop(field)

    new_sequence = update_data.get("sequence")
    if new_sequence is not None and new_sequence != topic.sequence:
        _ensure_free_sequence(db, topic.course_id, new_sequence)

    for field, value in update_data.items():
        setattr(topic, field, value)
    db.add(topic)
    db.commit()
    db.refresh(topic)
    return topic


def delete_topic(db: Session, *, topic: Topic, actor: User) -> None:
    ensure_manager(actor, "Only Managers can delete topics")
    ensure_course_owner(
        topic.course, actor, "You can only delete topics in courses you created"
    )

    if topic.materials:
        logger.warning(f"Deleting topic {topic.id} with {len(topic.materials)} materials")
    db.delete(topic)
    db.commit()


def reorder_topics(
    db: Session,
    *,
    course_id: int,
    actor: User,
    obj_in: TopicReorderRequest,
) -> List[Topic]:
    ensure_manager(actor, "Only Managers can reorder topics")
    course = get_course_or_404(db, course_id)
    ensure_course_owner(course, actor, "You can only reorder topics in courses you created")

    ordering.apply_reorder(
        db,
        model=Topic,
        parent_column=Topic.course_id,
        parent_id=course.id,
        items=obj_in.topics,
        mismatch_message="One or more topics do not belong to this course",
    )
    return list_topics(db, course_id=course.id)
