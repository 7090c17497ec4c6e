# /tests/conftest.py

import fnmatch
import os
from datetime import date

# Point the app at throwaway settings before any app module reads the config.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENVIRONMENT", "test")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core import security
from app.core.cache import CacheManager, set_cache
from app.db.base import Base
from app.db.database import get_db
from app.main import app
from app.services.database_service import DatabaseService


class FakeRedis:
    """In-memory stand-in for the handful of redis commands CacheManager uses."""

    def __init__(self):
        self.store = {}
        self.ttls = {}

    def get(self, key):
        return self.store.get(key)

    def setex(self, key, ttl, value):
        self.store[key] = value
        self.ttls[key] = ttl
        return True

    def delete(self, *keys):
        removed = 0
        for key in keys:
            if key in self.store:
                del self.store[key]
                self.ttls.pop(key, None)
                removed += 1
        return removed

    def exists(self, key):
        return int(key in self.store)

    def scan_iter(self, match="*"):
        return [key for key in list(self.store) if fnmatch.fnmatchcase(key, match)]

    def flushdb(self):
        self.store.clear()
        self.ttls.clear()

    def dbsize(self):
        return len(self.store)


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture(autouse=True)
def cache(fake_redis):
    """Every test gets its own empty cache."""
    manager = CacheManager(fake_redis)
    set_cache(manager)
    yield manager
    set_cache(None)


@pytest.fixture
def session():
    """A fresh in-memory schema for each test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db_session = TestingSession()
    yield db_session
    db_session.close()
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db(session):
    return DatabaseService(session)


@pytest.fixture
def client(session):
    def override_get_db():
        yield session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


# --- Data Fixtures ---

@pytest.fixture
def school(db):
    return db.schools.create({"name": "Greenfield Academy", "short_name": "GFA"})


@pytest.fixture
def other_school(db):
    return db.schools.create({"name": "Riverside High"})


def make_user(db, username, role="user", school=None):
    return db.users.create({
        "username": username,
        "email": f"{username}@example.com",
        "hashed_password": security.get_password_hash("password123"),
        "first_name": username.capitalize(),
        "last_name": "Tester",
        "role": role,
        "school_id": school.id if school else None,
    })


@pytest.fixture
def super_admin(db):
    return make_user(db, "root", role="super_admin")


@pytest.fixture
def teacher(db, school):
    return make_user(db, "teacher", role="teacher", school=school)


@pytest.fixture
def project(db, school, teacher):
    return db.projects.create({
        "title": "Volcano Model",
        "teacher_id": teacher.id,
        "school_id": school.id,
        "class_id": None,
    })


@pytest.fixture
def student(db, school):
    pupil = make_user(db, "pupil", role="student", school=school)
    return db.students.create({
        "user_id": pupil.id,
        "school_id": school.id,
        "grade_level": "Grade 7",
        "enrollment_date": date(2024, 9, 1),
        "student_number": "GF-G7-24-001",
    })


def _auth_headers(user):
    token = security.create_access_token(subject=user.id, role=user.role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user_factory(db):
    return lambda username, role="user", school=None: make_user(db, username, role, school)


@pytest.fixture
def auth_headers():
    return _auth_headers
