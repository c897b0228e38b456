# belajarshafa/services/user_service.py
import logging
import math
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from belajarshafa.core.exceptions import BadRequestError, NotFoundError
from belajarshafa.core.security import get_password_hash
from belajarshafa.models.classroom import Class
from belajarshafa.models.enums import Role
from belajarshafa.models.organization import Organization
from belajarshafa.models.user import User, UserRole
from belajarshafa.schemas.user import UserCreate, UserFilter, UserUpdate

logger = logging.getLogger(__name__)

SORTABLE_FIELDS = {
    "created_at": User.created_at,
    "updated_at": User.updated_at,
    "name": User.name,
    "email": User.email,
}


def get_user(db: Session, user_id: int) -> Optional[User]:
    return db.get(User, user_id)


def get_user_or_404(db: Session, user_id: int) -> User:
    user = get_user(db, user_id)
    if user is None:
        raise NotFoundError(f"User with ID {user_id} not found")
    return user


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email).first()


def create_user(db: Session, *, obj_in: UserCreate) -> User:
    if get_user_by_email(db, obj_in.email) is not None:
        raise BadRequestError("Email already registered")

    user = User(
        email=obj_in.email,
        password_hash=get_password_hash(obj_in.password),
        name=obj_in.name,
    )
    user.roles = obj_in.roles
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"Created user {user.id} with roles {[r.value for r in user.roles]}")
    return user


def update_user(db: Session, *, db_obj: User, obj_in: UserUpdate) -> User:
    update_data = obj_in.model_dump(exclude_unset=True)
    for field in ("email", "name", "is_verified"):
        if update_data.get(field, True) is None:
            update_data.pop(field)

    if "email" in update_data and update_data["email"] != db_obj.email:
        if get_user_by_email(db, update_data["email"]) is not None:
            raise BadRequestError("Email already registered")

    password = update_data.pop("password", None)
    if password:
        db_obj.password_hash = get_password_hash(password)

    roles = update_data.pop("roles", None)
    if roles:
        db_obj.roles = roles

    for field, value in update_data.items():
        setattr(db_obj, field, value)
    db.add(db_obj)
    db.commit()
    db.refresh(db_obj)
    return db_obj


def update_roles(db: Session, *, db_obj: User, roles: List[Role]) -> User:
    db_obj.roles = roles
    db.add(db_obj)
    db.commit()
    db.refresh(db_obj)
    logger.info(f"Roles of user {db_obj.id} set to {[r.value for r in db_obj.roles]}")
    return db_obj


def toggle_active(db: Session, *, db_obj: User) -> User:
    db_obj.is_active = not db_obj.is_active
    db.add(db_obj)
    db.commit()
    db.refresh(db_obj)
    logger.info(f"User {db_obj.id} is_active={db_obj.is_active}")
    return db_obj


def delete_user(db: Session, *, db_obj: User) -> None:
    db.delete(db_obj)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise BadRequestError("User still owns courses or sessions and cannot be deleted")


def list_mentors(db: Session) -> List[User]:
    return (
        db.query(User)
        .filter(
            User.role_links.any(UserRole.role == Role.MENTOR),
            User.is_active.is_(True),
        )
        .order_by(User.name.asc())
        .all()
    )


def _scope_for_actor(actor: User):
    """
    Visibility predicate for the user directory.

    Returns ``None`` for admins (no restriction), ``False`` when a manager
    shares nothing with anybody, otherwise an OR of membership predicates
    over the manager's organizations and classes.
    """
    if actor.has_role(Role.ADMIN):
        return None

    org_ids = {o.id for o in actor.managed_orgs} | {o.id for o in actor.member_orgs}
    class_ids = {c.id for c in actor.mentored_classes} | {c.id for c in actor.joined_classes}

    conditions = []
    if org_ids:
        conditions.append(User.managed_orgs.any(Organization.id.in_(org_ids)))
        conditions.append(User.member_orgs.any(Organization.id.in_(org_ids)))
    if class_ids:
        conditions.append(User.joined_classes.any(Class.id.in_(class_ids)))
        conditions.append(User.mentored_classes.any(Class.id.in_(class_ids)))

    if not conditions:
        return False
    return or_(*conditions)


def list_users_filtered(
    db: Session,
    *,
    actor: User,
    filters: UserFilter,
) -> dict:
    scope = _scope_for_actor(actor)
    if scope is False:
        return {
            "data": [],
            "meta": {"total": 0, "page": filters.page, "limit": filters.limit, "total_pages": 0},
        }

    query = db.query(User)
    if scope is not None:
        query = query.filter(scope)

    if filters.search:
        pattern = f"%{filters.search}%"
        query = query.filter(or_(User.name.ilike(pattern), User.email.ilike(pattern)))
    if filters.roles:
        query = query.filter(User.role_links.any(UserRole.role.in_(filters.roles)))
    if filters.organization_id is not None:
        query = query.filter(
            or_(
                User.managed_orgs.any(Organization.id == filters.organization_id),
                User.member_orgs.any(Organization.id == filters.organization_id),
            )
        )
    if filters.class_id is not None:
        query = query.filter(
            or_(
                User.joined_classes.any(Class.id == filters.class_id),
                User.mentored_classes.any(Class.id == filters.class_id),
            )
        )
    if filters.is_active is not None:
        query = query.filter(User.is_active.is_(filters.is_active))

    total = query.count()

    sort_column = SORTABLE_FIELDS.get(filters.sort_by, User.created_at)
    order = sort_column.asc() if filters.sort_order == "asc" else sort_column.desc()
    users = (
        query.order_by(order, User.id.asc())
        .offset((filters.page - 1) * filters.limit)
        .limit(filters.limit)
        .all()
    )

    return {
        "data": users,
        "meta": {
            "total": total,
            "page": filters.page,
            "limit": filters.limit,
            "total_pages": math.ceil(total / filters.limit),
        },
    }


def get_user_stats(db: Session, *, actor: User) -> dict:
    scope = _scope_for_actor(actor)
    if scope is False:
        empty = {"admins": 0, "managers": 0, "mentors": 0, "mentees": 0}
        return {"total": 0, "active": 0, "inactive": 0, "by_role": empty}

    base = db.query(User)
    if scope is not None:
        base = base.filter(scope)

    def with_role(role: Role) -> int:
        return base.filter(User.role_links.any(UserRole.role == role)).count()

    return {
        "total": base.count(),
        "active": base.filter(User.is_active.is_(True)).count(),
        "inactive": base.filter(User.is_active.is_(False)).count(),
        "by_role": {
            "admins": with_role(Role.ADMIN),
            "managers": with_role(Role.MANAGER),
            "mentors": with_role(Role.MENTOR),
            "mentees": with_role(Role.MENTEE),
        },
    }
