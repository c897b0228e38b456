# tests/conftest.py
import os

# must be set before belajarshafa.db.session builds the application engine
os.environ.setdefault("DATABASE_URL", "sqlite://")

from datetime import datetime, timedelta, timezone  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from belajarshafa.core.security import create_user_token  # noqa: E402
from belajarshafa.db.base import Base  # noqa: E402
from belajarshafa.db.session import get_db  # noqa: E402
from belajarshafa.main import app  # noqa: E402
from belajarshafa.models.category import Category  # noqa: E402
from belajarshafa.models.class_session import ClassSession  # noqa: E402
from belajarshafa.models.classroom import Class  # noqa: E402
from belajarshafa.models.course import Course  # noqa: E402
from belajarshafa.models.enums import (  # noqa: E402
    CourseLevel,
    CourseType,
    MaterialType,
    Role,
    SessionType,
)
from belajarshafa.models.material import Material  # noqa: E402
from belajarshafa.models.organization import Organization  # noqa: E402
from belajarshafa.models.topic import Topic  # noqa: E402
from belajarshafa.models.user import User  # noqa: E402

TEST_DATABASE_URL = "sqlite://"

# Pre-hashed password to avoid running bcrypt for every user
FAKE_PASSWORD_HASH = "$2b$12$hashed_password_001"


@pytest.fixture(scope="function")
def db_session():
    """Fresh in-memory database per test."""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    # no context manager: the startup hook would create tables on the app engine
    test_client = TestClient(app)
    try:
        yield test_client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session):
    counter = {"n": 0}

    def _make_user(*roles, name=None, email=None, is_active=True):
        counter["n"] += 1
        n = counter["n"]
        user = User(
            email=email or f"user{n}@belajar.id",
            password_hash=FAKE_PASSWORD_HASH,
            name=name or f"User {n}",
            is_active=is_active,
        )
        user.roles = roles or (Role.MENTEE,)
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def auth_headers():
    def _auth_headers(user: User) -> dict:
        return {"Authorization": f"Bearer {create_user_token(user)}"}

    return _auth_headers


@pytest.fixture
def test_admin(make_user):
    return make_user(Role.ADMIN, name="Admin", email="admin@belajar.id")


@pytest.fixture
def test_manager(make_user):
    return make_user(Role.MANAGER, name="Manager", email="manager@belajar.id")


@pytest.fixture
def test_mentor(make_user):
    return make_user(Role.MENTOR, name="Mentor", email="mentor@belajar.id")


@pytest.fixture
def test_mentee(make_user):
    return make_user(Role.MENTEE, name="Mentee", email="mentee@belajar.id")


@pytest.fixture
def test_organization(db_session, test_manager):
    org = Organization(name="Shafa Foundation")
    org.managers.append(test_manager)
    db_session.add(org)
    db_session.commit()
    db_session.refresh(org)
    return org


@pytest.fixture
def test_class(db_session, test_mentor, test_mentee):
    """Class with one assigned mentor and one joined mentee."""
    klass = Class(name="Tahsin Batch 1", code="TAHSIN01")
    klass.mentors.append(test_mentor)
    klass.mentees.append(test_mentee)
    db_session.add(klass)
    db_session.commit()
    db_session.refresh(klass)
    return klass


@pytest.fixture
def session_start():
    return datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def test_session(db_session, test_class, test_mentor, session_start):
    session_obj = ClassSession(
        class_id=test_class.id,
        created_by=test_mentor.id,
        title="Pertemuan 1",
        start_time=session_start,
        end_time=session_start + timedelta(hours=2),
        type=SessionType.ONLINE,
        meeting_url="https://meet.belajar.id/abc",
        check_in_window_minutes=15,
        check_in_close_minutes=30,
    )
    db_session.add(session_obj)
    db_session.commit()
    db_session.refresh(session_obj)
    return session_obj


@pytest.fixture
def test_category(db_session):
    category = Category(name="Al-Quran", slug="al-quran")
    db_session.add(category)
    db_session.commit()
    db_session.refresh(category)
    return category


@pytest.fixture
def test_course(db_session, test_category, test_manager):
    """Active course owned by test_manager: one topic holding four articles."""
    course = Course(
        title="Tajwid Dasar",
        level=CourseLevel.BEGINNER,
        type=CourseType.PUBLIC,
        category_id=test_category.id,
        created_by_id=test_manager.id,
        is_active=True,
    )
    topic = Topic(title="Makharijul Huruf", sequence=1)
    for i in range(1, 5):
        topic.materials.append(
            Material(
                type=MaterialType.ARTICLE,
                title=f"Bagian {i}",
                content={"article_content": f"Isi bagian {i}"},
                sequence=i,
            )
        )
    course.topics.append(topic)
    db_session.add(course)
    db_session.commit()
    db_session.refresh(course)
    return course
