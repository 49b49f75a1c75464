from typing import AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel

from app.db.pool import ConnectionPool
import app.db.models  # noqa: F401  registers every table on SQLModel.metadata


def get_pool(request: Request) -> ConnectionPool:
    return request.app.state.pool


async def get_session(pool: ConnectionPool = Depends(get_pool)) -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped session bound to a leased connection."""
    async with pool.lease() as lease:
        async with AsyncSession(bind=lease.connection, expire_on_commit=False) as session:
            yield session


async def create_db_and_tables(pool: ConnectionPool) -> None:
    async with pool.lease() as lease:
        await lease.connection.run_sync(SQLModel.metadata.create_all)
        await lease.connection.commit()
