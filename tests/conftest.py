"""
Test configuration and fixtures.

Provides:
- A throw-away SQLite database (unless DATABASE_URL is already set), with the
  schema created and dropped around every test
- Users per role and JWT session cookies for them
- HTTPX AsyncClients with the session cookie and CSRF header
"""
import os
import tempfile
import uuid
from dataclasses import dataclass
from typing import AsyncGenerator, Callable, Generator

# Settings are read at import time, so the environment goes first.
os.environ.setdefault(
    "DATABASE_URL",
    f"sqlite:///{os.path.join(tempfile.mkdtemp(prefix='datadesk-tests-'), 'test.db')}",
)
os.environ["TESTING"] = "1"
os.environ.setdefault("ENV", "test")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.orm import Session

from datadesk.core.deps import COOKIE_NAME, CSRF_HEADER, CSRF_HEADER_VALUE, get_db
from datadesk.core.security import create_session_token, hash_password
from datadesk.db.base import Base
from datadesk.db.enums import Role
from datadesk.db.models import Company, FacebookData, User
from datadesk.db.session import SessionLocal, engine
from datadesk.main import app

TEST_PASSWORD = "secret-password"


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """
    Session on a freshly created schema.

    App code commits and rolls back on this same session (get_db is
    overridden in the client fixtures), so tests see what handlers wrote.
    """
    Base.metadata.create_all(engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(engine)


@pytest.fixture
def make_user(db: Session) -> Callable[..., User]:
    """Factory for committed users with unique username/email/employee_id."""

    def _make(role: Role = Role.EMPLOYEE, **overrides) -> User:
        suffix = uuid.uuid4().hex[:8]
        user = User(
            username=overrides.pop("username", f"{role.value}-{suffix}"),
            email=overrides.pop("email", f"{role.value}-{suffix}@example.com"),
            password=hash_password(overrides.pop("password", TEST_PASSWORD)),
            full_name=overrides.pop("full_name", f"Test {role.value.title()}"),
            employee_id=overrides.pop("employee_id", f"EMP-{suffix}"),
            role=role.value,
            **overrides,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def employee(make_user) -> User:
    return make_user(Role.EMPLOYEE)


@pytest.fixture
def team_lead(make_user) -> User:
    return make_user(Role.TL)


@pytest.fixture
def manager(make_user) -> User:
    return make_user(Role.MANAGER)


@pytest.fixture
def admin(make_user) -> User:
    return make_user(Role.ADMIN)


@pytest.fixture
def make_company(db: Session) -> Callable[..., Company]:
    """Factory for committed companies (unassigned unless an owner is given)."""

    def _make(name: str | None = None, **fields) -> Company:
        company = Company(
            name=name or f"Company {uuid.uuid4().hex[:6]}",
            industry=fields.pop("industry", "Technology"),
            **fields,
        )
        db.add(company)
        db.commit()
        db.refresh(company)
        return company

    return _make


@pytest.fixture
def make_facebook_data(db: Session) -> Callable[..., list[FacebookData]]:
    def _make(count: int) -> list[FacebookData]:
        records = [
            FacebookData(
                company_name=f"Lead {i}",
                products=["Widgets"],
                services=["Installation"],
                quantity=10 * (i + 1),
            )
            for i in range(count)
        ]
        db.add_all(records)
        db.commit()
        return records

    return _make


# =============================================================================
# Auth Fixtures
# =============================================================================

@dataclass
class TestAuth:
    """Test authentication context."""
    __test__ = False

    user: User
    token: str
    cookie_name: str = COOKIE_NAME


def auth_for(user: User) -> TestAuth:
    token = create_session_token(
        user_id=user.id,
        role=user.role,
        token_version=user.token_version,
    )
    return TestAuth(user=user, token=token)


# =============================================================================
# Client Fixtures
# =============================================================================

@pytest.fixture(scope="function")
async def client(db: Session) -> AsyncGenerator[AsyncClient, None]:
    """Unauthenticated AsyncClient (still sends the CSRF header)."""
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers={CSRF_HEADER: CSRF_HEADER_VALUE},
    ) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
async def client_for(db: Session) -> AsyncGenerator[Callable[[User], AsyncClient], None]:
    """
    Factory for authenticated AsyncClients with JWT cookie and CSRF header.

    Usage:
        api = client_for(team_lead)
        await api.put(...)
    """
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    opened: list[AsyncClient] = []

    def _make(user: User, *, csrf: bool = True) -> AsyncClient:
        auth = auth_for(user)
        headers = {CSRF_HEADER: CSRF_HEADER_VALUE} if csrf else {}
        c = AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
            cookies={auth.cookie_name: auth.token},
            headers=headers,
        )
        opened.append(c)
        return c

    yield _make

    for c in opened:
        await c.aclose()
    app.dependency_overrides.clear()
