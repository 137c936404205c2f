"""
Pytest fixtures for the khata test suite.

Provides:
- A fresh in-memory SQLite database (aiosqlite, StaticPool) per test
- An AsyncSession on that database for service-level tests
- An httpx AsyncClient wired to the FastAPI app with get_db overridden
- Small factories for clients and cylinder types
"""

import os
import tempfile

# Settings are read at import time, so point them away from real files first
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="khata-logs-"))
os.environ.setdefault("SQLITE_DATABASE_URI", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("AUTO_BACKUP_ENABLED", "false")

from decimal import Decimal

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import khata.models  # noqa: F401  (registers every table)
from khata.core.deps import get_db
from khata.db.base import Base
from khata.services import catalogue


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory):
    from khata.main import app

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def make_client(db):
    """Create and commit a client, returning its id"""
    async def _make(name="Ali Traders", phone=None) -> int:
        row = await catalogue.add_client(db, name, phone)
        await db.commit()
        return row.id
    return _make


@pytest.fixture
def make_cylinder_type(db):
    """Create and commit a cylinder type with ``stock`` unassigned cylinders, returning its id"""
    async def _make(name="12kg", stock=10) -> int:
        row = await catalogue.add_cylinder_type(
            db, name, Decimal("12"), Decimal("3000"), Decimal("250"), stock
        )
        await db.commit()
        return row.id
    return _make
