# belajarshafa/services/organization_service.py
import logging
from typing import List

from sqlalchemy import or_
from sqlalchemy.orm import Session

from belajarshafa.core.exceptions import BadRequestError, ForbiddenError, NotFoundError
from belajarshafa.models.enums import Role
from belajarshafa.models.organization import Organization
from belajarshafa.models.user import User
from belajarshafa.schemas.organization import OrganizationCreate

logger = logging.getLogger(__name__)


def create_organization(
    db: Session,
    *,
    actor: User,
    obj_in: OrganizationCreate,
) -> Organization:
    if not actor.has_role(Role.MANAGER, Role.ADMIN):
        raise ForbiddenError("Only Managers can create organizations")

    org = Organization(
        name=obj_in.name,
        description=obj_in.description,
        logo_url=obj_in.logo_url,
    )
    org.managers.append(actor)
    db.add(org)
    db.commit()
    db.refresh(org)
    logger.info(f"Organization {org.id} created by user {actor.id}")
    return org


def get_organization_or_404(db: Session, organization_id: int) -> Organization:
    org = db.get(Organization, organization_id)
    if org is None:
        raise NotFoundError("Organization not found")
    return org


def list_organizations_for_user(db: Session, *, user: User) -> List[Organization]:
    query = db.query(Organization)
    if not user.has_role(Role.ADMIN):
        query = query.filter(
            or_(
                Organization.managers.any(User.id == user.id),
                Organization.members.any(User.id == user.id),
            )
        )
    return query.order_by(Organization.name.asc()).all()


def ensure_can_view(org: Organization, user: User) -> None:
    if user.has_role(Role.ADMIN):
        return
    if user in org.managers or user in org.members:
        return
    raise ForbiddenError("You do not have access to this organization")


def add_members(
    db: Session,
    *,
    org: Organization,
    actor: User,
    user_ids: List[int],
) -> Organization:
    if not actor.has_role(Role.ADMIN) and actor not in org.managers:
        raise ForbiddenError("Only managers of this organization can add members")

    wanted = set(user_ids)
    users = db.query(User).filter(User.id.in_(wanted)).all()
    if len(users) != len(wanted):
        raise BadRequestError("One or more user IDs are invalid")

    for user in users:
        if user not in org.members:
            org.members.append(user)
    db.add(org)
    db.commit()
    db.refresh(org)
    return org
