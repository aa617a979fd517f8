"""Statement execution against the connection pool.

Each run acquires one connection, executes under a timeout, maps rows
and releases the connection on every exit path.
"""

import asyncio
from collections.abc import Callable, Mapping
from typing import Any, TypeVar

import structlog
from sqlalchemy import Executable
from sqlalchemy.exc import SQLAlchemyError

from product_lookup.domain.exceptions import QueryExecutionError, QueryTimeoutError
from product_lookup.infrastructure.database import ConnectionPool

logger = structlog.get_logger()

T = TypeVar("T")

DEFAULT_ROW_CAP = 1000


def _lower_row(row: Mapping[str, Any]) -> dict[str, Any]:
    return {str(key).lower(): value for key, value in row.items()}


class QueryExecutor:
    """Runs parameterized statements through a ConnectionPool.

    Example usage:
        executor = QueryExecutor(pool, timeout=60.0)
        rows = await executor.run(
            text("SELECT ... WHERE a.seqproduto = :codigoProduto"),
            {"codigoProduto": 4521},
            row_cap=100,
            mapper=ProductRecord.from_row,
        )
    """

    def __init__(self, pool: ConnectionPool, timeout: float = 60.0) -> None:
        """Initialize executor.

        Args:
            pool: Initialized connection pool.
            timeout: Seconds a single statement may run.
        """
        self.pool = pool
        self.timeout = timeout

    async def run(
        self,
        statement: Executable,
        params: Mapping[str, Any] | None = None,
        row_cap: int = DEFAULT_ROW_CAP,
        mapper: Callable[[Mapping[str, Any]], T] | None = None,
    ) -> list[T] | list[dict[str, Any]]:
        """Execute a statement and map its rows.

        Args:
            statement: SQLAlchemy executable (usually a text clause).
            params: Bound parameter values by name.
            row_cap: Maximum rows fetched from the result.
            mapper: Converts each row (keys lower-cased) to a record;
                rows are returned as dicts when omitted.

        Returns:
            Mapped rows in the order the database returned them; empty
            when nothing matched.

        Raises:
            PoolUninitialized: If the pool is not initialized.
            PoolExhausted: If no connection was available in time.
            QueryTimeoutError: If the statement exceeded the timeout.
            QueryExecutionError: If the database rejected the statement
                or the connection was lost.
        """
        try:
            conn = await self.pool.acquire()
        except SQLAlchemyError as e:
            logger.error("Failed to open database connection", error=str(e))
            raise QueryExecutionError(str(e)) from e

        timed_out = False
        try:
            result = await asyncio.wait_for(
                conn.execute(statement, dict(params or {})),
                self.timeout,
            )
            rows = result.mappings().fetchmany(row_cap)
        except asyncio.TimeoutError as e:
            timed_out = True
            logger.error("Query timed out", timeout=self.timeout)
            raise QueryTimeoutError(self.timeout) from e
        except SQLAlchemyError as e:
            logger.error("Query execution failed", error=str(e))
            raise QueryExecutionError(str(e)) from e
        finally:
            await self.pool.release(conn, invalidate=timed_out)

        records = [_lower_row(row) for row in rows]
        if mapper is None:
            return records
        return [mapper(row) for row in records]

    async def fetch_one(
        self,
        statement: Executable,
        params: Mapping[str, Any] | None = None,
    ) -> dict[str, Any] | None:
        """Execute a statement and return its first row, if any."""
        rows = await self.run(statement, params, row_cap=1)
        return rows[0] if rows else None
