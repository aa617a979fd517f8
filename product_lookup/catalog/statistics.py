"""Catalog statistics.

Runs the four summary queries concurrently and merges them.
"""

import asyncio
from typing import Any

import structlog
from sqlalchemy import text

from product_lookup.catalog.executor import QueryExecutor
from product_lookup.catalog.query_builder import (
    FAMILY_COUNT_QUERY,
    LAST_INCLUSION_QUERY,
    PRODUCT_COUNT_QUERY,
    USER_COUNT_QUERY,
)
from product_lookup.domain.exceptions import StatisticsUnavailable
from product_lookup.domain.models import StatisticsSummary

logger = structlog.get_logger()

MAX_PARALLEL_QUERIES = 4


class StatisticsAggregator:
    """Collects catalog-wide counts into a StatisticsSummary."""

    def __init__(
        self,
        executor: QueryExecutor,
        max_parallel: int = MAX_PARALLEL_QUERIES,
    ) -> None:
        self.executor = executor
        self.max_parallel = max_parallel

    async def _scalar(self, sql: str, semaphore: asyncio.Semaphore) -> Any:
        async with semaphore:
            row = await self.executor.fetch_one(text(sql))
        if not row:
            return None
        return next(iter(row.values()))

    async def collect(self) -> StatisticsSummary:
        """Run the summary queries and combine their results.

        Raises:
            StatisticsUnavailable: If any query failed; wraps the first
                failure in query order.
        """
        semaphore = asyncio.Semaphore(self.max_parallel)
        queries = (
            PRODUCT_COUNT_QUERY,
            FAMILY_COUNT_QUERY,
            USER_COUNT_QUERY,
            LAST_INCLUSION_QUERY,
        )
        results = await asyncio.gather(
            *(self._scalar(sql, semaphore) for sql in queries),
            return_exceptions=True,
        )

        for sql, result in zip(queries, results):
            if isinstance(result, Exception):
                logger.error("Statistics query failed", query=sql, error=str(result))
                raise StatisticsUnavailable(result) from result
            # Cancellation is not a query failure
            if isinstance(result, BaseException):
                raise result

        total_products, total_families, total_users, last_inclusion = results
        return StatisticsSummary(
            total_products=int(total_products or 0),
            total_families=int(total_families or 0),
            total_users=int(total_users or 0),
            last_inclusion=last_inclusion,
        )
