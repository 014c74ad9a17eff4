"""Pytest configuration and fixtures for parish-core.

Environment is set before any app import so Settings validation passes.
Integration and API tests run against an in-memory SQLite database
(sqlite+aiosqlite, StaticPool) created per test. All imports use app.*.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("NOTIFICATIONS_ENABLED", "false")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from collections.abc import AsyncIterator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from app.api.v1.dependencies import get_uow_factory
from app.application.dtos.account import AccountResult
from app.application.dtos.mappers import account_to_result
from app.application.dtos.parish import ParishCreate
from app.core.limiter import limiter
from app.domain.enums import AccountKind
from app.infrastructure.persistence import models  # noqa: F401
from app.infrastructure.persistence.database import Base, get_db, get_db_transactional
from app.infrastructure.persistence.repositories import (
    AccountRepository,
    ParishRepository,
    RoleRepository,
    UserRoleRepository,
)
from app.infrastructure.persistence.unit_of_work import unit_of_work_factory
from app.infrastructure.security.jwt import create_access_token
from app.infrastructure.security.password import hash_password
from app.infrastructure.services.catalog_seeder import CatalogSeeder
from app.main import app

TEST_PASSWORD = "CorrectHorse9!"


@pytest.fixture
async def engine() -> AsyncIterator[AsyncEngine]:
    """Fresh in-memory database with all tables."""
    eng = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )


@pytest.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncSession]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def uow_factory(session_factory: async_sessionmaker[AsyncSession]):
    return unit_of_work_factory(session_factory)


@pytest.fixture
async def seeded(session_factory: async_sessionmaker[AsyncSession]) -> None:
    """Permission catalog, system roles and ward roles."""
    async with session_factory() as session:
        async with session.begin():
            await CatalogSeeder(session).seed()


@pytest.fixture
async def parish_id(session_factory: async_sessionmaker[AsyncSession]) -> str:
    async with session_factory() as session:
        async with session.begin():
            parish = await ParishRepository(session).create_parish(
                ParishCreate(name="St. Jude", diocese="Kampala")
            )
            return parish.id


@pytest.fixture
def make_account(session_factory: async_sessionmaker[AsyncSession]):
    """Create an account (optionally bound to a global role by code)."""

    async def _make(
        email: str,
        *,
        parish_id: str | None = None,
        kind: AccountKind = AccountKind.PARISHIONER,
        role_code: str | None = None,
        is_tenant_admin: bool = False,
    ) -> AccountResult:
        async with session_factory() as session:
            async with session.begin():
                account = await AccountRepository(session).create_account(
                    email=email,
                    hashed_password=hash_password(TEST_PASSWORD),
                    first_name="Test",
                    last_name="Account",
                    kind=kind.value,
                    parish_id=parish_id,
                    is_tenant_admin=is_tenant_admin,
                )
                if role_code is not None:
                    role = await RoleRepository(session).get_by_code(role_code)
                    assert role is not None, f"role {role_code} not seeded"
                    await UserRoleRepository(session).add(account.id, role.id)
                return account_to_result(account)

    return _make


def _bearer(account: AccountResult) -> dict[str, str]:
    token, _ = create_access_token(account)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def bearer():
    """Authorization headers for an account."""
    return _bearer


@pytest.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncClient]:
    """Async HTTP client against the FastAPI app, wired to the test database.

    get_db and get_db_transactional share one session per request (commit on
    success); provisioning units of work use the same engine.
    """

    async def _session() -> AsyncIterator[AsyncSession]:
        async with session_factory() as session:
            async with session.begin():
                yield session

    app.dependency_overrides[get_db] = _session
    app.dependency_overrides[get_db_transactional] = _session
    app.dependency_overrides[get_uow_factory] = lambda: unit_of_work_factory(
        session_factory
    )
    limiter.enabled = False
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
    limiter.enabled = True
