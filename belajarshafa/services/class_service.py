# belajarshafa/services/class_service.py
import logging
import secrets
import string
from typing import List, Optional

from sqlalchemy import and_, exists, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from belajarshafa.core.config import settings
from belajarshafa.core.exceptions import BadRequestError, ForbiddenError, NotFoundError
from belajarshafa.core.timeutils import as_aware
from belajarshafa.models.associations import class_mentees, class_mentors
from belajarshafa.models.classroom import Class
from belajarshafa.models.enums import Role
from belajarshafa.models.organization import Organization
from belajarshafa.models.user import User, UserRole
from belajarshafa.schemas.classroom import ClassCreate, ClassUpdate

logger = logging.getLogger(__name__)

CODE_ALPHABET = string.ascii_uppercase + string.digits


def generate_code(length: int = settings.CLASS_CODE_LENGTH) -> str:
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(length))


def _generate_unique_code(db: Session) -> str:
    for _ in range(settings.CLASS_CODE_MAX_ATTEMPTS):
        code = generate_code()
        if not db.query(exists().where(Class.code == code)).scalar():
            return code
    raise BadRequestError("Failed to generate unique class code. Please try again.")


# ---------------------------------------------------------------------------
# membership
# ---------------------------------------------------------------------------

def is_class_mentor(db: Session, class_id: int, user_id: int) -> bool:
    return db.query(
        exists().where(
            and_(class_mentors.c.class_id == class_id, class_mentors.c.user_id == user_id)
        )
    ).scalar()


def is_class_mentee(db: Session, class_id: int, user_id: int) -> bool:
    return db.query(
        exists().where(
            and_(class_mentees.c.class_id == class_id, class_mentees.c.user_id == user_id)
        )
    ).scalar()


def can_manage_class(db: Session, klass: Class, user: User) -> bool:
    """Managers, admins and the mentors assigned to ``klass``."""
    if user.has_role(Role.MANAGER, Role.ADMIN):
        return True
    return user.has_role(Role.MENTOR) and is_class_mentor(db, klass.id, user.id)


def ensure_can_view_class(
    db: Session,
    klass: Class,
    user: User,
    message: str = "You do not have access to this class",
) -> None:
    if can_manage_class(db, klass, user):
        return
    if user.has_role(Role.MENTEE) and is_class_mentee(db, klass.id, user.id):
        return
    raise ForbiddenError(message)


def ensure_can_manage_class(
    db: Session,
    klass: Class,
    user: User,
    message: str = "You are not assigned to this class",
) -> None:
    if not user.has_role(Role.MANAGER, Role.ADMIN, Role.MENTOR):
        raise ForbiddenError("Only Mentors and Managers can manage this class")
    if not can_manage_class(db, klass, user):
        raise ForbiddenError(message)


def _load_mentors(db: Session, mentor_ids: List[int]) -> List[User]:
    mentors = (
        db.query(User)
        .filter(
            User.id.in_(mentor_ids),
            User.role_links.any(UserRole.role == Role.MENTOR),
        )
        .all()
    )
    if len(mentors) != len(mentor_ids):
        raise BadRequestError("One or more mentor IDs are invalid")
    return mentors


# ---------------------------------------------------------------------------
# CRUD
# ---------------------------------------------------------------------------

def create_class(db: Session, *, actor: User, obj_in: ClassCreate) -> Class:
    if not actor.has_role(Role.MANAGER, Role.MENTOR):
        raise ForbiddenError("Only Managers and Mentors can create classes")

    mentor_ids = list(dict.fromkeys(obj_in.mentor_ids))
    if actor.has_role(Role.MENTOR) and actor.id not in mentor_ids:
        mentor_ids.append(actor.id)
    mentors = _load_mentors(db, mentor_ids) if mentor_ids else []

    organization_id = obj_in.organization_id
    if organization_id is not None:
        if db.get(Organization, organization_id) is None:
            raise BadRequestError("Organization not found")
    elif actor.managed_orgs:
        organization_id = actor.managed_orgs[0].id
    elif actor.member_orgs:
        organization_id = actor.member_orgs[0].id

    if (
        obj_in.start_date is not None
        and obj_in.end_date is not None
        and as_aware(obj_in.end_date) < as_aware(obj_in.start_date)
    ):
        raise BadRequestError("End date must be after start date")

    klass = Class(
        name=obj_in.name,
        description=obj_in.description,
        code=_generate_unique_code(db),
        organization_id=organization_id,
        start_date=obj_in.start_date,
        end_date=obj_in.end_date,
    )
    klass.mentors = mentors
    db.add(klass)
    db.commit()
    db.refresh(klass)
    logger.info(f"Class {klass.id} ({klass.code}) created by user {actor.id}")
    return klass


def get_class(db: Session, class_id: int) -> Optional[Class]:
    return db.get(Class, class_id)


def get_class_or_404(db: Session, class_id: int) -> Class:
    klass = get_class(db, class_id)
    if klass is None:
        raise NotFoundError("Class not found")
    return klass


def get_class_for_user(db: Session, *, class_id: int, user: User) -> Class:
    klass = get_class_or_404(db, class_id)
    ensure_can_view_class(db, klass, user)
    return klass


def list_classes_for_user(db: Session, *, user: User) -> List[Class]:
    """
    Managers and admins see every class, mentors and mentees the classes
    they belong to.
    """
    query = db.query(Class)
    if not user.has_role(Role.MANAGER, Role.ADMIN):
        conditions = []
        if user.has_role(Role.MENTOR):
            conditions.append(Class.mentors.any(User.id == user.id))
        if user.has_role(Role.MENTEE):
            conditions.append(Class.mentees.any(User.id == user.id))
        if not conditions:
            return []
        query = query.filter(or_(*conditions))
    return query.order_by(Class.created_at.desc(), Class.id.desc()).all()


def update_class(db: Session, *, klass: Class, actor: User, obj_in: ClassUpdate) -> Class:
    ensure_can_manage_class(db, klass, actor, "Only assigned mentors can update this class")

    update_data = obj_in.model_dump(exclude_unset=True)
    if update_data.get("name", True) is None:
        update_data.pop("name")
    start = update_data.get("start_date", klass.start_date)
    end = update_data.get("end_date", klass.end_date)
    if start is not None and end is not None and as_aware(end) < as_aware(start):
        raise BadRequestError("End date must be after start date")

    for field, value in update_data.items():
        setattr(klass, field, value)
    db.add(klass)
    db.commit()
    db.refresh(klass)
    return klass


def delete_class(db: Session, *, klass: Class, actor: User) -> None:
    if not actor.has_role(Role.MANAGER, Role.ADMIN):
        raise ForbiddenError("Only Managers can delete classes")
    db.delete(klass)
    db.commit()
    logger.info(f"Class {klass.id} deleted by user {actor.id}")


# ---------------------------------------------------------------------------
# roster
# ---------------------------------------------------------------------------

def join_by_code(db: Session, *, actor: User, code: str) -> Class:
    if not actor.has_role(Role.MENTEE):
        raise ForbiddenError("Only Mentees can join classes")

    klass = db.query(Class).filter(Class.code == code.upper()).first()
    if klass is None:
        raise NotFoundError("Class not found with the provided code")

    if is_class_mentee(db, klass.id, actor.id):
        raise BadRequestError("You are already a member of this class")

    klass.mentees.append(actor)
    db.add(klass)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise BadRequestError("You are already a member of this class")
    db.refresh(klass)
    logger.info(f"User {actor.id} joined class {klass.id}")
    return klass


def leave_class(db: Session, *, klass: Class, actor: User) -> Class:
    if not actor.has_role(Role.MENTEE):
        raise ForbiddenError("Only Mentees can leave classes")

    if not is_class_mentee(db, klass.id, actor.id):
        raise BadRequestError("You are not a member of this class")

    klass.mentees.remove(actor)
    db.add(klass)
    db.commit()
    db.refresh(klass)
    logger.info(f"User {actor.id} left class {klass.id}")
    return klass


def assign_mentors(
    db: Session,
    *,
    klass: Class,
    actor: User,
    mentor_ids: List[int],
) -> Class:
    """Replace the mentor set of ``klass``."""
    if not actor.has_role(Role.MANAGER, Role.ADMIN):
        raise ForbiddenError("Only Managers can assign mentors")

    klass.mentors = _load_mentors(db, list(dict.fromkeys(mentor_ids)))
    db.add(klass)
    db.commit()
    db.refresh(klass)
    return klass


def remove_mentee(db: Session, *, klass: Class, actor: User, mentee_id: int) -> Class:
    ensure_can_manage_class(db, klass, actor)

    mentee = next((m for m in klass.mentees if m.id == mentee_id), None)
    if mentee is not None:
        klass.mentees.remove(mentee)
        db.add(klass)
        db.commit()
        db.refresh(klass)
        logger.info(f"User {mentee_id} removed from class {klass.id} by user {actor.id}")
    return klass
