# belajarshafa/api/v1/endpoints/categories.py
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from belajarshafa.core.security import get_current_manager, get_current_user
from belajarshafa.db.session import get_db
from belajarshafa.models.user import User
from belajarshafa.schemas.category import CategoryCreate, CategoryPublic, CategoryUpdate
from belajarshafa.services import category_service

router = APIRouter(prefix="/categories", tags=["categories"])


@router.post("/", response_model=CategoryPublic, status_code=status.HTTP_201_CREATED)
def create_category(
    obj_in: CategoryCreate,
    db: Session = Depends(get_db),
    current_manager: User = Depends(get_current_manager),
):
    return category_service.create_category(db, actor=current_manager, obj_in=obj_in)


@router.get("/", response_model=List[CategoryPublic])
def list_categories(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return category_service.list_categories(db)


@router.get("/{category_id}", response_model=CategoryPublic)
def get_category(
    category_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return category_service.get_category_or_404(db, category_id)


@router.patch("/{category_id}", response_model=CategoryPublic)
def update_category(
    category_id: int,
    obj_in: CategoryUpdate,
    db: Session = Depends(get_db),
    current_manager: User = Depends(get_current_manager),
):
    category = category_service.get_category_or_404(db, category_id)
    return category_service.update_category(
        db, category=category, actor=current_manager, obj_in=obj_in
    )


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(
    category_id: int,
    db: Session = Depends(get_db),
    current_manager: User = Depends(get_current_manager),
):
    category = category_service.get_category_or_404(db, category_id)
    category_service.delete_category(db, category=category, actor=current_manager)
    return None
