"""Catalog repository for read operations.

Turns criteria into statements and statements into records. All access
goes through a QueryExecutor; nothing here writes to the database.
"""

from collections.abc import Mapping, Sequence
from typing import Any

import structlog
from sqlalchemy import text

from product_lookup.catalog.executor import DEFAULT_ROW_CAP, QueryExecutor
from product_lookup.catalog.query_builder import (
    FAMILIES_QUERY,
    USERS_QUERY,
    build_product_query,
)
from product_lookup.domain.exceptions import ValidationError
from product_lookup.domain.models import (
    FamilyRecord,
    FilterCriteria,
    ProductRecord,
    UserRecord,
)

logger = structlog.get_logger()


def normalize_raw_params(params: Sequence[Any] | Mapping[str, Any] | None) -> dict[str, Any]:
    """Turn diagnostic query parameters into named bindings.

    Positional values bind to ``:1``, ``:2``, ... in order.
    """
    if params is None:
        return {}
    if isinstance(params, Mapping):
        return dict(params)
    if isinstance(params, (str, bytes)):
        raise ValidationError("Parâmetros devem ser uma lista ou um objeto", field="params")
    return {str(position): value for position, value in enumerate(params, start=1)}


class ProductRepository:
    """Repository for catalog read queries.

    Example usage:
        repo = ProductRepository(QueryExecutor(pool), excluded_companies=[1, 4])
        products = await repo.find_products(
            FilterCriteria.for_lookup(description="arroz", limit=5)
        )
    """

    def __init__(
        self,
        executor: QueryExecutor,
        excluded_companies: Sequence[int] = (),
    ) -> None:
        """Initialize repository.

        Args:
            executor: Executor bound to the connection pool.
            excluded_companies: Company numbers hidden from product lookups.
        """
        self.executor = executor
        self.excluded_companies = tuple(excluded_companies)

    async def find_products(self, criteria: FilterCriteria) -> list[ProductRecord]:
        """Find products matching criteria, newest inclusion first.

        Args:
            criteria: Validated filter criteria.

        Returns:
            At most ``criteria.limit`` records.
        """
        query = build_product_query(
            criteria,
            excluded_companies=self.excluded_companies,
            dialect=self.executor.pool.dialect_name,
        )
        logger.debug(
            "Running product lookup",
            filters=sorted(query.params),
            limit=criteria.limit,
        )
        return await self.executor.run(
            query.to_statement(),
            query.params,
            row_cap=criteria.limit,
            mapper=ProductRecord.from_row,
        )

    async def list_families(self, limit: int = DEFAULT_ROW_CAP) -> list[FamilyRecord]:
        """List product families ordered by description."""
        return await self.executor.run(
            text(FAMILIES_QUERY),
            row_cap=limit,
            mapper=FamilyRecord.from_row,
        )

    async def list_users(self, limit: int = DEFAULT_ROW_CAP) -> list[UserRecord]:
        """List ERP users ordered by name."""
        return await self.executor.run(
            text(USERS_QUERY),
            row_cap=limit,
            mapper=UserRecord.from_row,
        )

    async def run_raw(
        self,
        sql: str,
        params: Sequence[Any] | Mapping[str, Any] | None = None,
        limit: int = DEFAULT_ROW_CAP,
    ) -> list[dict[str, Any]]:
        """Run an arbitrary statement for diagnostics.

        Only reachable from the development-only diagnostic endpoint.

        Raises:
            ValidationError: If the statement is blank.
        """
        if not sql or not sql.strip():
            raise ValidationError("SQL query é obrigatória", field="sql")

        logger.warning("Running diagnostic query", sql=sql)
        return await self.executor.run(text(sql), normalize_raw_params(params), row_cap=limit)
