# belajarshafa/services/category_service.py
import re
from typing import List, Optional

from sqlalchemy.orm import Session

from belajarshafa.core.exceptions import BadRequestError, ForbiddenError, NotFoundError
from belajarshafa.models.category import Category
from belajarshafa.models.enums import Role
from belajarshafa.models.user import User
from belajarshafa.schemas.category import CategoryCreate, CategoryUpdate


def slugify(text: str) -> str:
    slug = text.lower()
    slug = re.sub(r"[^\w\s-]", "", slug)
    slug = re.sub(r"[\s_-]+", "-", slug)
    return slug.strip("-")


def _ensure_manager(actor: User) -> None:
    if not actor.has_role(Role.MANAGER, Role.ADMIN):
        raise ForbiddenError("Only Managers can manage categories")


def _get_by_slug(db: Session, slug: str) -> Optional[Category]:
    return db.query(Category).filter(Category.slug == slug).first()


def create_category(db: Session, *, actor: User, obj_in: CategoryCreate) -> Category:
    _ensure_manager(actor)
    slug = slugify(obj_in.name)
    if _get_by_slug(db, slug) is not None:
        raise BadRequestError("Category with this name already exists")

    category = Category(name=obj_in.name, slug=slug, description=obj_in.description)
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


def list_categories(db: Session) -> List[Category]:
    return db.query(Category).order_by(Category.name.asc()).all()


def get_category_or_404(db: Session, category_id: int) -> Category:
    category = db.get(Category, category_id)
    if category is None:
        raise NotFoundError("Category not found")
    return category


def update_category(
    db: Session,
    *,
    category: Category,
    actor: User,
    obj_in: CategoryUpdate,
) -> Category:
    _ensure_manager(actor)
    update_data = obj_in.model_dump(exclude_unset=True)

    if update_data.get("name"):
        slug = slugify(update_data["name"])
        existing = _get_by_slug(db, slug)
        if existing is not None and existing.id != category.id:
            raise BadRequestError("Category with this name already exists")
        category.name = update_data["name"]
        category.slug = slug
    if "description" in update_data:
        category.description = update_data["description"]

    db.add(category)
    db.commit()
    db.refresh(category)
    return category


def delete_category(db: Session, *, category: Category, actor: User) -> None:
    _ensure_manager(actor)
    if category.courses:
        raise BadRequestError(
            "Cannot delete category with assigned courses. "
            "Please reassign or delete courses first."
        )
    db.delete(category)
    db.commit()
