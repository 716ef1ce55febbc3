"""
Shared fixtures: an in-memory SQLite database, the in-memory session store
and TestClients logged in as admin / staff.
"""
import os

# Must be set before app.config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SESSION_BACKEND"] = "memory"
os.environ["BCRYPT_ROUNDS"] = "10"

import pytest
from fastapi.testclient import TestClient

from app.config import settings
from app.database import Base, SessionLocal, engine
from app.main import app
from app.models import UserRole
from app.schemas.users import UserCreate
from app.services.auth_service import register_user
from app.services.session_store import build_session_manager
from app.services.storage import DatabaseStorage

ADMIN_PASSWORD = "admin123"
STAFF_PASSWORD = "staff123"


@pytest.fixture
def db():
    """Fresh schema per test"""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def storage(db):
    return DatabaseStorage(db)


@pytest.fixture
def admin_user(storage):
    return register_user(storage, UserCreate(
        username="admin",
        password=ADMIN_PASSWORD,
        full_name="Admin User",
        email="admin@intered.com",
        role=UserRole.ADMIN,
    ))


@pytest.fixture
def staff_user(storage):
    return register_user(storage, UserCreate(
        username="staff",
        password=STAFF_PASSWORD,
        full_name="Staff User",
        email="staff@intered.com",
        role=UserRole.STAFF,
    ))


@pytest.fixture
def client(db):
    """Anonymous client with a clean session store"""
    app.state.session_manager = build_session_manager(settings)
    return TestClient(app)


def _logged_in_client(username, password):
    test_client = TestClient(app)
    response = test_client.post("/api/auth/login", json={"username": username, "password": password})
    assert response.status_code == 200, response.text
    return test_client


@pytest.fixture
def admin_client(client, admin_user):
    return _logged_in_client("admin", ADMIN_PASSWORD)


@pytest.fixture
def staff_client(client, staff_user):
    return _logged_in_client("staff", STAFF_PASSWORD)


@pytest.fixture
def university(storage):
    return storage.create_university({"name": "University of Melbourne", "country": "Australia", "city": "Melbourne"})


@pytest.fixture
def program(storage, university):
    return storage.create_program({"name": "MSc Data Science", "university_id": university.id, "level": "Master"})


@pytest.fixture
def agent(storage):
    return storage.create_agent({"name": "Priya Shah", "company": "Global Pathways", "email": "priya@globalpathways.com"})


@pytest.fixture
def student(storage):
    return storage.create_student({"first_name": "Lina", "last_name": "Haddad", "email": "lina.haddad@mail.com"})
