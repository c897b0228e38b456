# belajarshafa/api/v1/endpoints/users.py
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from belajarshafa.core.security import get_current_admin, get_current_manager, get_current_user
from belajarshafa.db.session import get_db
from belajarshafa.models.enums import Role
from belajarshafa.models.user import User
from belajarshafa.schemas.common import UserBrief
from belajarshafa.schemas.user import (
    RolesUpdate,
    UserCreate,
    UserDetail,
    UserFilter,
    UserPage,
    UserPublic,
    UserStats,
    UserUpdate,
)
from belajarshafa.services import user_service

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserPublic)
def read_me(current_user: User = Depends(get_current_user)):
    return current_user


@router.get("/stats", response_model=UserStats)
def user_stats(
    db: Session = Depends(get_db),
    current_manager: User = Depends(get_current_manager),
):
    return user_service.get_user_stats(db, actor=current_manager)


@router.get("/mentors", response_model=List[UserBrief])
def list_mentors(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return user_service.list_mentors(db)


@router.get("/", response_model=UserPage)
def list_users(
    search: Optional[str] = None,
    roles: Optional[List[Role]] = Query(None),
    organization_id: Optional[int] = None,
    class_id: Optional[int] = None,
    is_active: Optional[bool] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    sort_by: str = "created_at",
    sort_order: Literal["asc", "desc"] = "desc",
    db: Session = Depends(get_db),
    current_manager: User = Depends(get_current_manager),
):
    """
    Paginated user directory.

    Admins see everybody; managers only see users who share an
    organization or a class with them.
    """
    filters = UserFilter(
        search=search,
        roles=roles,
        organization_id=organization_id,
        class_id=class_id,
        is_active=is_active,
        page=page,
        limit=limit,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return user_service.list_users_filtered(db, actor=current_manager, filters=filters)


@router.post("/", response_model=UserPublic, status_code=status.HTTP_201_CREATED)
def create_user(
    obj_in: UserCreate,
    db: Session = Depends(get_db),
    current_manager: User = Depends(get_current_manager),
):
    return user_service.create_user(db, obj_in=obj_in)


@router.get("/{user_id}", response_model=UserPublic)
def get_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_manager: User = Depends(get_current_manager),
):
    return user_service.get_user_or_404(db, user_id)


@router.get("/{user_id}/details", response_model=UserDetail)
def get_user_details(
    user_id: int,
    db: Session = Depends(get_db),
    current_manager: User = Depends(get_current_manager),
):
    return user_service.get_user_or_404(db, user_id)


@router.patch("/{user_id}", response_model=UserPublic)
def update_user(
    user_id: int,
    obj_in: UserUpdate,
    db: Session = Depends(get_db),
    current_manager: User = Depends(get_current_manager),
):
    if user_id == current_manager.id and obj_in.roles is not None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You cannot modify your own roles",
        )
    db_obj = user_service.get_user_or_404(db, user_id)
    return user_service.update_user(db, db_obj=db_obj, obj_in=obj_in)


@router.patch("/{user_id}/roles", response_model=UserPublic)
def update_user_roles(
    user_id: int,
    obj_in: RolesUpdate,
    db: Session = Depends(get_db),
    current_manager: User = Depends(get_current_manager),
):
    if user_id == current_manager.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You cannot modify your own roles",
        )
    db_obj = user_service.get_user_or_404(db, user_id)
    return user_service.update_roles(db, db_obj=db_obj, roles=obj_in.roles)


@router.patch("/{user_id}/toggle-active", response_model=UserPublic)
def toggle_user_active(
    user_id: int,
    db: Session = Depends(get_db),
    current_manager: User = Depends(get_current_manager),
):
    if user_id == current_manager.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You cannot deactivate yourself",
        )
    db_obj = user_service.get_user_or_404(db, user_id)
    return user_service.toggle_active(db, db_obj=db_obj)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    db_obj = user_service.get_user_or_404(db, user_id)
    user_service.delete_user(db, db_obj=db_obj)
    return None
