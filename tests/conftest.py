"""Pytest configuration and shared fixtures for all tests."""

import os

# Minimal environment for settings validation
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_LEVEL", "DEBUG")
os.environ.setdefault("REDIS_HOST", "localhost")

import dramatiq
from dramatiq.brokers.stub import StubBroker

# Actors bind to the broker that is current when their module is imported
stub_broker = StubBroker()
dramatiq.set_broker(stub_broker)

from datetime import UTC, datetime
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from invest_engine.models import Base, Participant
from invest_engine.services.investment.activation import InvestmentActivationService
from invest_engine.services.plan.config_resolver import ConfigurationResolver

ACTIVATED_AT = datetime(2026, 1, 1, tzinfo=UTC)


@pytest.fixture
def mock_session():
    """Mock AsyncSession for tests without a database."""
    session = AsyncMock()
    session.execute = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    session.refresh = AsyncMock()
    return session


@pytest_asyncio.fixture
async def engine():
    """In-memory SQLite engine with all tables created."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    """Session factory bound to the test engine."""
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def session(session_factory):
    """Database session for one test."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def seeded_session(session):
    """Session with the default global plan configuration stored."""
    await ConfigurationResolver(session).seed_defaults()
    await session.commit()
    return session


@pytest.fixture
def make_chain(session):
    """
    Factory creating a linear referral chain.

    make_chain(uplines) returns [owner, level1, level2, ...]: the owner
    at index 0 and its upline at index i for level i.
    """
    async def _make_chain(uplines: int, org_unit_id: int | None = None) -> list[Participant]:
        upline_id = None
        created = []
        for index in range(uplines, -1, -1):
            participant = Participant(
                display_name=f"P{index}",
                upline_id=upline_id,
                org_unit_id=org_unit_id,
            )
            session.add(participant)
            await session.flush()
            upline_id = participant.id
            created.append(participant)
        await session.commit()
        return list(reversed(created))

    return _make_chain


@pytest.fixture
def million():
    """Standard test principal."""
    return Decimal("1000000")


@pytest.fixture
def activated_at():
    """Activation time used by lifecycle tests."""
    return ACTIVATED_AT


@pytest.fixture
def activate(session):
    """
    Factory creating and activating an investment.

    activate(participant, amount, variant) returns the active investment.
    """
    async def _activate(
        participant: Participant,
        amount: Decimal,
        variant: str = "without_product",
        at: datetime = ACTIVATED_AT,
    ):
        service = InvestmentActivationService(session)
        investment = await service.create_pending(participant.id, amount, variant)
        result = await service.activate(investment.id, now=at)
        assert result.success, result.error_message
        return result.investment

    return _activate
