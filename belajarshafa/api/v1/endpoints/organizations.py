# belajarshafa/api/v1/endpoints/organizations.py
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from belajarshafa.core.security import get_current_manager, get_current_user
from belajarshafa.db.session import get_db
from belajarshafa.models.user import User
from belajarshafa.schemas.organization import (
    MembersAdd,
    OrganizationCreate,
    OrganizationPublic,
)
from belajarshafa.services import organization_service

router = APIRouter(prefix="/organizations", tags=["organizations"])


@router.post("/", response_model=OrganizationPublic, status_code=status.HTTP_201_CREATED)
def create_organization(
    obj_in: OrganizationCreate,
    db: Session = Depends(get_db),
    current_manager: User = Depends(get_current_manager),
):
    return organization_service.create_organization(db, actor=current_manager, obj_in=obj_in)


@router.get("/", response_model=List[OrganizationPublic])
def list_organizations(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return organization_service.list_organizations_for_user(db, user=current_user)


@router.get("/{organization_id}", response_model=OrganizationPublic)
def get_organization(
    organization_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    org = organization_service.get_organization_or_404(db, organization_id)
    organization_service.ensure_can_view(org, current_user)
    return org


@router.post("/{organization_id}/members", response_model=OrganizationPublic)
def add_members(
    organization_id: int,
    obj_in: MembersAdd,
    db: Session = Depends(get_db),
    current_manager: User = Depends(get_current_manager),
):
    org = organization_service.get_organization_or_404(db, organization_id)
    return organization_service.add_members(
        db, org=org, actor=current_manager, user_ids=obj_in.user_ids
    )
