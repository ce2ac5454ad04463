"""Service test fixtures: memory store, async SQLite DB and the FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database and a fresh MemoryStore
    - Both stores start with the sample catalog
    - db_manager is patched so get_repositories opens sessions on the test engine
    - The OTP sender and payment gateway are replaced by recording fakes

Design Decisions:
    - SQLite in-memory with StaticPool: every session shares the single connection
    - Authenticated requests send the session cookie as an explicit Cookie header
"""

from datetime import datetime, timedelta, timezone

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)
from sqlalchemy.pool import StaticPool

from investestate.api.deps import get_otp_sender, get_payment_gateway
from investestate.config import get_settings
from investestate.db.base import Base
from investestate.infrastructure.database import DatabaseSessionManager
from investestate.infrastructure.memory_store import MemoryStore
from investestate.infrastructure.sql_store import build_sql_repositories
from investestate.main import app
from investestate.services.catalog import seed_catalog
import investestate.infrastructure.database as db_module


class RecordingOtpSender:
    """Captures issued codes instead of delivering them."""

    def __init__(self):
        self.sent: list[tuple[str, str]] = []

    async def send(self, phone_number: str, code: str) -> None:
        self.sent.append((phone_number, code))

    def last_code(self, phone_number: str) -> str:
        return [code for phone, code in self.sent if phone == phone_number][-1]


class FakePaymentGateway:
    def __init__(self):
        self.amounts: list[float] = []

    async def create_payment_intent(self, amount: float) -> str:
        self.amounts.append(amount)
        return f"pi_test_{len(self.amounts)}_secret"


# ─── Memory store ───────────────────────────────────────────────

@pytest.fixture
async def memory_repos():
    repos = MemoryStore().repositories()
    await seed_catalog(repos.catalog)
    return repos


@pytest.fixture
def otp_sender():
    return RecordingOtpSender()


@pytest.fixture
def payment_gateway():
    return FakePaymentGateway()


# ─── SQL store ──────────────────────────────────────────────────

@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    factory = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )
    async with factory() as session:
        await seed_catalog(build_sql_repositories(session).catalog)
    return factory


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def sql_repos(test_db):
    return build_sql_repositories(test_db)


# ─── HTTP client ────────────────────────────────────────────────

@pytest.fixture
async def client(test_engine, test_session_factory, otp_sender, payment_gateway):
    """FastAPI test client backed by the test DB and recording fakes."""
    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    app.dependency_overrides[get_otp_sender] = lambda: otp_sender
    app.dependency_overrides[get_payment_gateway] = lambda: payment_gateway

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


async def _login(session_factory, phone_number: str, name: str) -> dict[str, str]:
    now = datetime.now(timezone.utc)
    async with session_factory() as session:
        repos = build_sql_repositories(session)
        user = await repos.users.create(phone_number, name, None, now)
        token = f"token-{user.id}"
        await repos.auth_sessions.create(
            token, user.id, now + timedelta(hours=24), now,
        )
    return {"Cookie": f"{get_settings().session_cookie_name}={token}"}


@pytest.fixture
async def auth_headers(test_session_factory):
    """Cookie header for a freshly registered user."""
    return await _login(test_session_factory, "9876543210", "Asha")


@pytest.fixture
async def other_auth_headers(test_session_factory):
    return await _login(test_session_factory, "9123456780", "Ravi")
