# belajarshafa/api/v1/endpoints/materials.py
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from belajarshafa.core.security import get_current_manager, get_current_user
from belajarshafa.db.session import get_db
from belajarshafa.models.user import User
from belajarshafa.schemas.material import (
    MaterialCreate,
    MaterialPublic,
    MaterialReorderRequest,
    MaterialUpdate,
)
from belajarshafa.services import material_service

router = APIRouter(prefix="/materials", tags=["materials"])


@router.post("/", response_model=MaterialPublic, status_code=status.HTTP_201_CREATED)
def create_material(
    obj_in: MaterialCreate,
    db: Session = Depends(get_db),
    current_manager: User = Depends(get_current_manager),
):
    return material_service.create_material(db, actor=current_manager, obj_in=obj_in)


@router.get("/topic/{topic_id}", response_model=List[MaterialPublic])
def list_topic_materials(
    topic_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return material_service.list_materials(db, topic_id=topic_id)


@router.patch("/reorder/{topic_id}", response_model=List[MaterialPublic])
def reorder_materials(
    topic_id: int,
    payload: MaterialReorderRequest,
    db: Session = Depends(get_db),
    current_manager: User = Depends(get_current_manager),
):
    return material_service.reorder_materials(
        db, topic_id=topic_id, actor=current_manager, obj_in=payload
    )


@router.get("/{material_id}", response_model=MaterialPublic)
def get_material(
    material_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return material_service.get_material_or_404(db, material_id)


@router.patch("/{material_id}", response_model=MaterialPublic)
def update_material(
    material_id: int,
    obj_in: MaterialUpdate,
    db: Session = Depends(get_db),
    current_manager: User = Depends(get_current_manager),
):
    material = material_service.get_material_or_404(db, material_id)
    return material_service.update_material(
        db, material=material, actor=current_manager, obj_in=obj_in
    )


@router.delete("/{material_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_material(
    material_id: int,
    db: Session = Depends(get_db),
    current_manager: User = Depends(get_current_manager),
):
    material = material_service.get_material_or_404(db, material_id)
    material_service.delete_material(db, material=material, actor=current_manager)
    return None
