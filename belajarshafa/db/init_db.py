# belajarshafa/db/init_db.py
import logging

from sqlalchemy.orm import Session

from belajarshafa import models  # noqa
from belajarshafa.core.config import settings
from belajarshafa.db.base import Base
from belajarshafa.db.session import SessionLocal, engine
from belajarshafa.models.enums import Role
from belajarshafa.schemas.user import UserCreate
from belajarshafa.services import user_service

logger = logging.getLogger(__name__)


def create_tables() -> None:
    Base.metadata.create_all(bind=engine)


def seed_admin(db: Session) -> None:
    if not (settings.FIRST_ADMIN_EMAIL and settings.FIRST_ADMIN_PASSWORD):
        return
    if user_service.get_user_by_email(db, settings.FIRST_ADMIN_EMAIL) is not None:
        return
    admin = user_service.create_user(
        db,
        obj_in=UserCreate(
            email=settings.FIRST_ADMIN_EMAIL,
            password=settings.FIRST_ADMIN_PASSWORD,
            name="Super Admin",
            roles=[Role.ADMIN],
        ),
    )
    admin.is_verified = True
    db.commit()
    logger.info(f"Seeded admin account {admin.email}")


def init_db() -> None:
    create_tables()
    db = SessionLocal()
    try:
        seed_admin(db)
    finally:
        db.close()


if __name__ == "__main__":
    from belajarshafa.core.logging_config import setup_logging

    setup_logging()
    init_db()
