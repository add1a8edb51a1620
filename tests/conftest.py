"""Shared fixtures: in-memory SQLite database, a provisioned venue and an API client."""
from datetime import datetime

import pytest_asyncio
import pytz
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app import models  # noqa: F401
from app.core.clock import get_now
from app.core.database import Base, get_db
from app.main import app
from app.schemas.court import CourtCreate
from app.schemas.tenant import TenantCreate
from app.services import court_service, tenant_service

# Sunday 2026-02-01, noon UTC
NOW = datetime(2026, 2, 1, 12, 0, tzinfo=pytz.UTC)
TENANT_ID = "default"
COURT_ID = "court-1"


@pytest_asyncio.fixture
async def session_maker():
    """Fresh in-memory database per test."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(session_maker):
    """Create a test database session."""
    async with session_maker() as session:
        yield session


@pytest_asyncio.fixture
async def tenant(db_session):
    """The default venue, provisioned with default settings."""
    return await tenant_service.provision_tenant(
        db_session, TenantCreate(slug=TENANT_ID, name="Test Venue")
    )


@pytest_asyncio.fixture
async def court(db_session, tenant):
    """One court for the default venue."""
    return await court_service.create_court(
        db_session, TENANT_ID, CourtCreate(id=COURT_ID, name="Court 1")
    )


@pytest_asyncio.fixture
async def client(session_maker, court):
    """API client bound to the test database with the clock pinned to NOW."""

    async def override_get_db():
        async with session_maker() as session:
            yield session

    async def override_get_now():
        return NOW

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_now] = override_get_now

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac

    app.dependency_overrides.clear()
