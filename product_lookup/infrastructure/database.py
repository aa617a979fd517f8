"""Database connection pool.

Wraps a SQLAlchemy async engine behind an explicit lifecycle. One pool
is created by the application lifespan and handed to every component
that needs storage access; there is no module-level engine.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Self

import structlog
from sqlalchemy import literal_column, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine

from product_lookup.domain.exceptions import (
    LookupServiceError,
    PoolExhausted,
    PoolUninitialized,
)
from product_lookup.infrastructure.config import Settings

logger = structlog.get_logger()


class ConnectionPool:
    """Bounded pool of database connections.

    Example usage:
        pool = ConnectionPool.from_settings(settings)
        await pool.initialize()
        async with pool.connection() as conn:
            await conn.execute(...)
        await pool.shutdown()
    """

    def __init__(
        self,
        database_url: str,
        pool_min: int = 2,
        pool_max: int = 10,
        pool_timeout: float = 30.0,
    ) -> None:
        """Initialize pool configuration; no connections are opened yet.

        Args:
            database_url: SQLAlchemy async database URL.
            pool_min: Connections kept open in the pool.
            pool_max: Upper bound on simultaneously open connections.
            pool_timeout: Seconds to wait for a free connection.
        """
        self.database_url = database_url
        self.pool_min = pool_min
        self.pool_max = pool_max
        self.pool_timeout = pool_timeout
        self._engine: AsyncEngine | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> Self:
        """Create a pool from application settings."""
        return cls(
            database_url=settings.database_url,
            pool_min=settings.db_pool_min,
            pool_max=settings.db_pool_max,
            pool_timeout=settings.db_pool_timeout,
        )

    @property
    def is_initialized(self) -> bool:
        """Check whether initialize() succeeded and shutdown() was not called."""
        return self._engine is not None

    @property
    def dialect_name(self) -> str:
        """Name of the database dialect (e.g. "oracle", "sqlite")."""
        return self._require_engine().dialect.name

    def _require_engine(self) -> AsyncEngine:
        if self._engine is None:
            raise PoolUninitialized()
        return self._engine

    async def initialize(self) -> None:
        """Create the engine and its connection pool.

        Safe to call more than once; later calls are no-ops.
        """
        if self._engine is not None:
            logger.warning("Connection pool already initialized")
            return

        self._engine = create_async_engine(
            self.database_url,
            pool_size=self.pool_min,
            max_overflow=self.pool_max - self.pool_min,
            pool_timeout=self.pool_timeout,
            pool_pre_ping=True,
        )
        logger.info(
            "Connection pool created",
            dialect=self._engine.dialect.name,
            pool_min=self.pool_min,
            pool_max=self.pool_max,
        )

    async def acquire(self) -> AsyncConnection:
        """Check out an exclusive connection.

        Returns:
            Open connection; must be handed back through release().

        Raises:
            PoolUninitialized: If the pool is not initialized.
            PoolExhausted: If no connection frees up within pool_timeout.
        """
        engine = self._require_engine()
        try:
            return await engine.connect()
        except PoolTimeoutError as e:
            logger.warning(
                "Connection pool exhausted",
                pool_max=self.pool_max,
                timeout=self.pool_timeout,
            )
            raise PoolExhausted(self.pool_timeout) from e

    async def release(self, conn: AsyncConnection, invalidate: bool = False) -> None:
        """Return a connection to the pool.

        Failures are logged and never raised, so they cannot replace the
        outcome of the operation that used the connection.

        Args:
            conn: Connection obtained from acquire().
            invalidate: Discard the underlying DBAPI connection instead of
                reusing it (used after a cancelled statement).
        """
        try:
            if invalidate:
                await conn.invalidate()
            await conn.close()
        except Exception as e:
            logger.error(
                "Failed to release connection",
                error=str(e),
                invalidate=invalidate,
            )

    @asynccontextmanager
    async def connection(self) -> AsyncIterator[AsyncConnection]:
        """Acquire a connection and release it on every exit path."""
        conn = await self.acquire()
        try:
            yield conn
        finally:
            await self.release(conn)

    async def test_connectivity(self) -> bool:
        """Run a trivial round-trip query.

        Returns:
            True if the pool is initialized and the database answered.
        """
        if not self.is_initialized:
            logger.error("Connection pool is not initialized")
            return False

        try:
            async with self.connection() as conn:
                result = await conn.execute(select(literal_column("1")))
                return result.first() is not None
        except (LookupServiceError, SQLAlchemyError, OSError) as e:
            logger.error("Connectivity check failed", error=str(e))
            return False

    async def wait_until_ready(
        self,
        attempts: int = 3,
        timeout: float = 10.0,
        backoff: float = 2.0,
    ) -> bool:
        """Retry the connectivity check during startup.

        Args:
            attempts: Maximum number of checks.
            timeout: Seconds allowed for each check.
            backoff: Seconds to sleep between failed checks.

        Returns:
            True as soon as one check succeeds, False if all fail.
        """
        for attempt in range(1, attempts + 1):
            try:
                ok = await asyncio.wait_for(self.test_connectivity(), timeout)
            except asyncio.TimeoutError:
                logger.warning(
                    "Connectivity check timed out",
                    attempt=attempt,
                    timeout=timeout,
                )
                ok = False

            if ok:
                logger.info("Database connectivity verified", attempt=attempt)
                return True

            if attempt < attempts:
                logger.warning(
                    "Connectivity check failed, retrying",
                    attempt=attempt,
                    max_attempts=attempts,
                    backoff=backoff,
                )
                await asyncio.sleep(backoff)

        logger.error("Database unreachable after startup checks", attempts=attempts)
        return False

    async def shutdown(self) -> None:
        """Close every pooled connection; later acquire() calls fail."""
        if self._engine is None:
            return

        engine, self._engine = self._engine, None
        await engine.dispose()
        logger.info("Connection pool closed")
