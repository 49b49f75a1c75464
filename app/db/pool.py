"""
Bounded pool of database connections handed out as exclusive leases.

The pool owns one SQLAlchemy async engine. Admission is controlled by an
``asyncio.Semaphore`` sized to the pool capacity, so waiting callers suspend
without holding a thread and are served in arrival order. The engine's own
pool is sized to the same capacity and never has to queue.

Usage::

    pool = ConnectionPool.open(PoolConfig.from_settings(settings))
    async with pool.lease() as lease:
        await lease.connection.execute(...)
    await pool.close_all()
"""
import asyncio
import itertools
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import AsyncIterator, Optional

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine
from sqlalchemy.pool import NullPool

from app.core.exceptions import DatabaseConnectionError, PoolExhaustedError
from app.core.logger import logger


@dataclass
class PoolConfig:
    url: str
    capacity: int = 10
    queue_limit: int = 0  # 0 = unbounded
    acquire_timeout: Optional[float] = None
    keep_alive: bool = True

    @classmethod
    def from_settings(cls, settings) -> "PoolConfig":
        return cls(
            url=settings.DATABASE_URL,
            capacity=settings.DB_POOL_CAPACITY,
            queue_limit=settings.DB_POOL_QUEUE_LIMIT,
            acquire_timeout=settings.DB_POOL_ACQUIRE_TIMEOUT,
            keep_alive=settings.DB_KEEP_ALIVE,
        )

    def describe(self) -> dict:
        """Connection details safe to show an operator (no credentials)."""
        url = make_url(self.url)
        return {
            "host": url.host,
            "user": url.username,
            "database": url.database,
            "port": url.port,
        }


@dataclass(eq=False)
class Lease:
    """Exclusive use of one pooled connection until released."""

    lease_id: int
    connection: AsyncConnection
    acquired_at: float = field(default_factory=time.monotonic)
    released: bool = False


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _build_engine(config: PoolConfig) -> AsyncEngine:
    url = make_url(config.url)
    if url.get_backend_name() == "sqlite":
        # One fresh file connection per lease; the semaphore is the only bound
        engine = create_async_engine(url, poolclass=NullPool)
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        return engine
    return create_async_engine(
        url,
        pool_size=config.capacity,
        max_overflow=0,
        pool_pre_ping=config.keep_alive,
    )


class ConnectionPool:
    def __init__(self, config: PoolConfig, engine: AsyncEngine):
        if config.capacity < 1:
            raise ValueError("Pool capacity must be at least 1")
        self.config = config
        self.engine = engine
        self._slots = asyncio.Semaphore(config.capacity)
        self._lock = asyncio.Lock()
        self._leases: dict[int, Lease] = {}
        self._ids = itertools.count(1)
        self._waiting = 0
        self._confirmed = False
        self._closed = False

    @classmethod
    def open(cls, config: PoolConfig) -> "ConnectionPool":
        return cls(config, _build_engine(config))

    @property
    def capacity(self) -> int:
        return self.config.capacity

    @property
    def in_use(self) -> int:
        return len(self._leases)

    @property
    def available(self) -> int:
        return self.capacity - self.in_use

    @property
    def waiting(self) -> int:
        return self._waiting

    @property
    def closed(self) -> bool:
        return self._closed

    async def acquire(self) -> Lease:
        if self._closed:
            raise DatabaseConnectionError(reason="pool closed")

        await self._wait_for_slot()
        if self._closed:
            # Woken by close_all releasing the leases ahead of us
            self._slots.release()
            raise DatabaseConnectionError(reason="pool closed")
        try:
            connection = await self.engine.connect()
        except Exception as exc:
            # Drivers such as asyncpg raise their own errors for auth or missing databases
            self._slots.release()
            self._report_connect_failure(exc)
            raise DatabaseConnectionError(reason=str(exc), **self.config.describe()) from exc
        except BaseException:
            self._slots.release()
            raise

        if not self._confirmed:
            self._confirmed = True
            details = self.config.describe()
            logger.info(
                f"Connected to database '{details['database']}' at {details['host']}",
                extra=details,
            )

        try:
            async with self._lock:
                lease = Lease(lease_id=next(self._ids), connection=connection)
                self._leases[lease.lease_id] = lease
        except BaseException:
            await asyncio.shield(connection.close())
            self._slots.release()
            raise
        return lease

    async def _wait_for_slot(self) -> None:
        async with self._lock:
            if (
                self.config.queue_limit
                and self._slots.locked()
                and self._waiting >= self.config.queue_limit
            ):
                raise PoolExhaustedError(
                    reason="wait queue full",
                    waiting=self._waiting,
                    queue_limit=self.config.queue_limit,
                )
            self._waiting += 1
        try:
            if self.config.acquire_timeout is None:
                await self._slots.acquire()
            else:
                async with asyncio.timeout(self.config.acquire_timeout):
                    await self._slots.acquire()
        except TimeoutError:
            logger.warning(
                f"Timed out after {self.config.acquire_timeout}s waiting for a database connection",
                extra={"capacity": self.capacity, "in_use": self.in_use},
            )
            raise PoolExhaustedError(
                reason="acquire timeout", timeout=self.config.acquire_timeout
            ) from None
        finally:
            self._waiting -= 1

    async def release(self, lease: Lease) -> None:
        async with self._lock:
            if lease.released or self._leases.get(lease.lease_id) is not lease:
                logger.warning(
                    f"Ignoring release of lease {lease.lease_id}: not outstanding",
                    extra={"lease_id": lease.lease_id},
                )
                return
            lease.released = True
            del self._leases[lease.lease_id]
        try:
            # Returning to the engine pool resets any transaction left open
            await asyncio.shield(lease.connection.close())
        finally:
            self._slots.release()

    @asynccontextmanager
    async def lease(self) -> AsyncIterator[Lease]:
        lease = await self.acquire()
        try:
            yield lease
        finally:
            await self.release(lease)

    async def close_all(self) -> None:
        self._closed = True
        async with self._lock:
            leases = list(self._leases.values())
        for lease in leases:
            await self.release(lease)
        await self.engine.dispose()
        logger.info("Database pool closed")

    def _report_connect_failure(self, exc: BaseException) -> None:
        details = self.config.describe()
        logger.error(
            f"Database connection failed: {exc} "
            f"(host={details['host']}, user={details['user']}, "
            f"database={details['database']}, port={details['port']})",
            extra=details,
        )
