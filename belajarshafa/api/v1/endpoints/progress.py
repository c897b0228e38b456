# belajarshafa/api/v1/endpoints/progress.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from belajarshafa.core.security import get_current_user
from belajarshafa.db.session import get_db
from belajarshafa.models.user import User
from belajarshafa.schemas.progress import MaterialProgress, ProgressUpdate, TopicProgress
from belajarshafa.services import progress_service

router = APIRouter(prefix="/progress", tags=["progress"])


@router.get("/material/{material_id}", response_model=MaterialProgress)
def get_material_progress(
    material_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return progress_service.get_material_progress(db, user=current_user, material_id=material_id)


@router.patch("/material/{material_id}", response_model=MaterialProgress)
def update_material_progress(
    material_id: int,
    obj_in: ProgressUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Record watch time or completion for one material.

    Enrolls the caller in the material's course first if they are not
    enrolled yet, then recomputes the course percentage.
    """
    return progress_service.update_material_progress(
        db, user=current_user, material_id=material_id, obj_in=obj_in
    )


@router.post("/material/{material_id}/complete", response_model=MaterialProgress)
def complete_material(
    material_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return progress_service.mark_material_complete(db, user=current_user, material_id=material_id)


@router.get("/topic/{topic_id}", response_model=TopicProgress)
def get_topic_progress(
    topic_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return progress_service.get_topic_progress(db, user=current_user, topic_id=topic_id)
