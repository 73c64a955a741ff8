"""
Complaint Portal - Test Configuration and Fixtures
"""
import itertools
import os
import tempfile
from typing import Callable, Dict, Generator, Optional

import pytest

# Set testing environment before the application reads its settings
_TEST_ROOT = tempfile.mkdtemp(prefix="complaint-portal-tests-")
os.environ["ENVIRONMENT"] = "testing"
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TEST_ROOT, 'test.db')}"
os.environ["UPLOAD_DIR"] = os.path.join(_TEST_ROOT, "uploads")
os.environ["JWT_SECRET_KEY"] = "test-jwt-secret-key-for-testing"
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only"
os.environ["PASSWORD_BCRYPT_ROUNDS"] = "4"
os.environ["MAINTENANCE_KEY"] = "test-maintenance-key"
os.environ["PASSWORD_RESET_FUNCTION_URL"] = "https://functions.example.test"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["CORS_ORIGINS"] = "*"

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from complaint_portal.core.security import create_access_token, hash_password
from complaint_portal.db.init_db import drop_db, init_db
from complaint_portal.db.session import SessionLocal
from complaint_portal.main import app
from complaint_portal.models.base.enums import (
    ComplaintCategory,
    ComplaintStatus,
    SupervisorCategory,
    UserRole,
)
from complaint_portal.models.complaint import Complaint
from complaint_portal.models.user import User

DEFAULT_PASSWORD = "secret123"
DEFAULT_DOB = "2003-03-05"

_EMAIL_DOMAINS = {
    UserRole.STUDENT: "gmail.com",
    UserRole.STAFF: "staff.com",
    UserRole.SUPERVISOR: "sup.com",
    UserRole.MAINTENANCE: "maint.com",
    UserRole.ADMIN: "admin.com",
}
_sequence = itertools.count(1)


@pytest.fixture(scope="function")
def database() -> Generator[None, None, None]:
    """Fresh schema for each test"""
    init_db()
    yield
    drop_db()


@pytest.fixture(scope="function")
def db_session(database) -> Generator[Session, None, None]:
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(database) -> Generator[TestClient, None, None]:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_user(db_session: Session) -> Callable[..., User]:
    """Factory creating committed users; the email domain follows the role"""

    def _make(
        role: UserRole = UserRole.STUDENT,
        email: Optional[str] = None,
        password: Optional[str] = DEFAULT_PASSWORD,
        name: Optional[str] = None,
        dob: str = DEFAULT_DOB,
        category: Optional[SupervisorCategory] = None,
        hashed: bool = True,
    ) -> User:
        n = next(_sequence)
        if role == UserRole.SUPERVISOR and category is None:
            category = SupervisorCategory.PLUMBING
        user = User(
            email=email or f"{role.value}{n}@{_EMAIL_DOMAINS[role]}",
            role=role,
            name=name or f"{role.value.title()} {n}",
            dob=dob,
            category=category,
            password=(hash_password(password) if hashed else password) if password else None,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make


@pytest.fixture
def make_complaint(db_session: Session) -> Callable[..., Complaint]:
    def _make(
        owner: User,
        title: str = "Leaking tap",
        category: ComplaintCategory = ComplaintCategory.PLUMBING,
        status: ComplaintStatus = ComplaintStatus.PENDING,
        building: str = "Boys Hostel 1",
        room: str = "B1-101",
        description: str = "Water keeps dripping from the bathroom tap",
        **fields,
    ) -> Complaint:
        complaint = Complaint(
            title=title,
            description=description,
            building=building,
            room=room,
            category=category,
            status=status,
            user_id=owner.id,
            user_email=owner.email,
            submitted_by="staff" if "staff" in owner.email else "student",
            **fields,
        )
        db_session.add(complaint)
        db_session.commit()
        db_session.refresh(complaint)
        return complaint

    return _make


def _bearer(user: User) -> Dict[str, str]:
    token = create_access_token({
        "sub": user.id,
        "email": user.email,
        "role": user.role.value,
    })
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers() -> Callable[[User], Dict[str, str]]:
    """Authorization header builder for a given user"""
    return _bearer


@pytest.fixture
def student(make_user) -> User:
    return make_user(UserRole.STUDENT)


@pytest.fixture
def staff(make_user) -> User:
    return make_user(UserRole.STAFF)


@pytest.fixture
def supervisor(make_user) -> User:
    return make_user(UserRole.SUPERVISOR, category=SupervisorCategory.PLUMBING)


@pytest.fixture
def maintenance(make_user) -> User:
    return make_user(UserRole.MAINTENANCE)


@pytest.fixture
def admin(make_user) -> User:
    return make_user(UserRole.ADMIN)
