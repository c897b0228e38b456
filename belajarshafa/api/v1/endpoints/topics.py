# belajarshafa/api/v1/endpoints/topics.py
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from belajarshafa.core.security import get_current_manager, get_current_user
from belajarshafa.db.session import get_db
from belajarshafa.models.user import User
from belajarshafa.schemas.topic import (
    TopicCreate,
    TopicPublic,
    TopicReorderRequest,
    TopicUpdate,
)
from belajarshafa.services import topic_service

router = APIRouter(prefix="/topics", tags=["topics"])


@router.post("/", response_model=TopicPublic, status_code=status.HTTP_201_CREATED)
def create_topic(
    obj_in: TopicCreate,
    db: Session = Depends(get_db),
    current_manager: User = Depends(get_current_manager),
):
    return topic_service.create_topic(db, actor=current_manager, obj_in=obj_in)


@router.get("/course/{course_id}", response_model=List[TopicPublic])
def list_course_topics(
    course_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return topic_service.list_topics(db, course_id=course_id)


@router.patch("/reorder/{course_id}", response_model=List[TopicPublic])
def reorder_topics(
    course_id: int,
    payload: TopicReorderRequest,
    db: Session = Depends(get_db),
    current_manager: User = Depends(get_current_manager),
):
    """Apply every ``{id, sequence}`` pair or none of them."""
    return topic_service.reorder_topics(
        db, course_id=course_id, actor=current_manager, obj_in=payload
    )


@router.get("/{topic_id}", response_model=TopicPublic)
def get_topic(
    topic_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return topic_service.get_topic_or_404(db, topic_id)


@router.patch("/{topic_id}", response_model=TopicPublic)
def update_topic(
    topic_id: int,
    obj_in: TopicUpdate,
    db: Session = Depends(get_db),
    current_manager: User = Depends(get_current_manager),
):
    topic = topic_service.get_topic_or_404(db, topic_id)
    return topic_service.update_topic(db, topic=topic, actor=current_manager, obj_in=obj_in)


@router.delete("/{topic_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_topic(
    topic_id: int,
    db: Session = Depends(get_db),
    current_manager: User = Depends(get_current_manager),
):
    topic = topic_service.get_topic_or_404(db, topic_id)
    topic_service.delete_topic(db, topic=topic, actor=current_manager)
    return None
