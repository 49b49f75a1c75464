"""
Shared pytest fixtures.

Every test gets its own SQLite file under ``tmp_path`` behind a real
``ConnectionPool``; the API client reaches it through
``app.dependency_overrides``.

Fixture hierarchy:
    pool_config → pool → registrar / client
"""
import os

# Fast hashing for tests; must be set before config is imported
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("DB_CREATE_TABLES", "false")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import func, select

from app.db.models import Clinic
from app.db.pool import ConnectionPool, PoolConfig
from app.db.session import create_db_and_tables, get_pool
from app.main import app
from app.services.registration_service import RegistrationService


@pytest.fixture
def pool_config(tmp_path):
    return PoolConfig(
        url=f"sqlite+aiosqlite:///{tmp_path / 'clinic.db'}",
        capacity=3,
        acquire_timeout=5.0,
    )


@pytest.fixture
async def pool(pool_config):
    pool = ConnectionPool.open(pool_config)
    await create_db_and_tables(pool)
    async with pool.lease() as lease:
        async with AsyncSession(bind=lease.connection) as session:
            session.add(Clinic(clinic_id=1, clinic_name="Central Clinic", is_active=True))
            await session.commit()
    yield pool
    await pool.close_all()


@pytest.fixture
def registrar(pool):
    return RegistrationService(pool, bcrypt_rounds=4, transaction_timeout=10.0)


@pytest.fixture
async def client(pool):
    app.dependency_overrides[get_pool] = lambda: pool
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def row_count(pool):
    """Count committed rows of a table through a fresh lease."""

    async def _count(model) -> int:
        async with pool.lease() as lease:
            result = await lease.connection.execute(select(func.count()).select_from(model))
            return result.scalar()

    return _count
