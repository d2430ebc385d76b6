"""
IssueDesk - Test Configuration and Fixtures
"""
import os
from typing import Generator

import pytest

# Settings are read at import time
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only"
os.environ["BCRYPT_ROUNDS"] = "4"

from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from issuedesk.main import app
from issuedesk.db.session import get_db
from issuedesk.core.security import create_access_token, get_password_hash
from issuedesk.models.project import Project
from issuedesk.models.user import User, UserRole, UserStatus


@pytest.fixture(name="db")
def db_fixture() -> Generator[Session, None, None]:
    """Fresh in-memory database for each test"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        yield session
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="client")
def client_fixture(db: Session) -> Generator[TestClient, None, None]:
    """Test client whose requests share the test session"""
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    # Not used as a context manager, so the lifespan (init_db) does not run
    yield TestClient(app)
    app.dependency_overrides.clear()


def _create_user(db: Session, email: str, user_name: str, role: UserRole = UserRole.STAFF,
                 job_position: str = "", status: UserStatus = UserStatus.ACTIVE, user_code: str = "") -> User:
    user = User(
        email=email,
        password=get_password_hash("secret123"),
        user_name=user_name,
        user_code=user_code,
        job_position=job_position,
        role=role,
        status=status,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def _bearer(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.email)}"}


@pytest.fixture
def make_user(db: Session):
    """Factory for extra users: make_user(email, user_name, **fields)"""
    def factory(email: str, user_name: str, **fields) -> User:
        return _create_user(db, email, user_name, **fields)
    return factory


@pytest.fixture
def headers_for():
    return _bearer


@pytest.fixture
def admin_user(db: Session) -> User:
    return _create_user(db, "admin@example.com", "Admin", role=UserRole.ADMIN)


@pytest.fixture
def staff_user(db: Session) -> User:
    return _create_user(db, "dev@example.com", "Dana Dev", job_position="Developer")


@pytest.fixture
def admin_headers(admin_user: User) -> dict:
    return _bearer(admin_user)


@pytest.fixture
def staff_headers(staff_user: User) -> dict:
    return _bearer(staff_user)


@pytest.fixture
def project(db: Session) -> Project:
    project = Project(project_code="PRJ", project_name="Portal")
    db.add(project)
    db.commit()
    db.refresh(project)
    return project
