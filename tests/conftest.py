import os
import sys
from datetime import datetime, timedelta, timezone

CURRENT_DIR = os.path.dirname(__file__)
SERVICE_ROOT = os.path.dirname(CURRENT_DIR)
if SERVICE_ROOT not in sys.path:
    sys.path.insert(0, SERVICE_ROOT)

# Настройки читаются при импорте, поэтому окружение готовим до импорта приложения:
# БД в памяти, без Redis, без rate limiting и без демо-курсов
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CACHE_ENABLED"] = "false"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SEED_SAMPLE_DATA"] = "false"
os.environ["SECRET_KEY"] = "test-secret"

import pytest
from fastapi.testclient import TestClient

from lms_service.infrastructure.db import SessionLocal, engine
from lms_service.infrastructure.models import Base, CourseORM, LessonORM, UserORM
from lms_service.infrastructure.security import PasswordHasher, create_access_token
from lms_service.main import app

PASSWORD = "password123"
PASSWORD_HASH = PasswordHasher().hash(PASSWORD)
BASE_TIME = datetime(2025, 1, 1, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def setup_database():
    """Чистые таблицы на каждый тест"""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def db():
    """Отдельная сессия для подготовки и проверки данных"""
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_user():
    def _make_user(email="student@example.com", name="Student", role="student", avatar=None):
        with SessionLocal() as session:
            row = UserORM(name=name, email=email, password_hash=PASSWORD_HASH, role=role, avatar=avatar)
            session.add(row)
            session.commit()
            return row.id
    return _make_user


@pytest.fixture
def make_course():
    counter = {"n": 0}

    def _make_course(lessons=0, **overrides):
        counter["n"] += 1
        data = dict(
            title=f"Course {counter['n']}",
            description="Description",
            instructor="John Smith",
            category="programming",
            level="beginner",
            price=49.99,
            duration="10 hours",
            image="https://example.com/image.jpg",
            is_published=True,
            created_at=BASE_TIME + timedelta(days=counter["n"]),
        )
        data.update(overrides)
        with SessionLocal() as session:
            row = CourseORM(**data)
            row.lessons = [
                LessonORM(title=f"Lesson {i + 1}", content="...", order=i + 1)
                for i in range(lessons)
            ]
            session.add(row)
            session.commit()
            return row.id
    return _make_course


@pytest.fixture
def auth_headers():
    def _auth_headers(user_id, role="student"):
        token = create_access_token(sub=str(user_id), role=role)
        return {"Authorization": f"Bearer {token}"}
    return _auth_headers


def load_course(course_id):
    with SessionLocal() as session:
        return session.get(CourseORM, course_id)


def count_rows(model, **filters):
    with SessionLocal() as session:
        return session.query(model).filter_by(**filters).count()
