"""Catalog service for product lookups.

High-level service combining the repository, projection, statistics
and spreadsheet export behind one interface for the API layer.
"""

from collections.abc import Iterable, Mapping, Sequence
from typing import Any, Self

import structlog

from product_lookup.catalog.executor import QueryExecutor
from product_lookup.catalog.export import build_workbook
from product_lookup.catalog.projection import project
from product_lookup.catalog.repository import ProductRepository
from product_lookup.catalog.statistics import StatisticsAggregator
from product_lookup.domain.exceptions import NoDataError, ValidationError
from product_lookup.domain.models import (
    LOOKUP_KEY_REQUIRED,
    FamilyRecord,
    FilterCriteria,
    ProductRecord,
    StatisticsSummary,
    UserRecord,
)
from product_lookup.infrastructure.config import Settings
from product_lookup.infrastructure.database import ConnectionPool

logger = structlog.get_logger()


class CatalogService:
    """Service for catalog read operations.

    Example usage:
        service = CatalogService.create(pool, settings)
        products = await service.search_products(
            FilterCriteria.for_lookup(product_code=4521)
        )
        payload = await service.export_products(
            FilterCriteria.for_export(family_code=12),
            visible_columns=["col-ean", "col-descricao"],
        )
    """

    def __init__(
        self,
        repository: ProductRepository,
        statistics: StatisticsAggregator,
        request_id: str | None = None,
    ) -> None:
        """Initialize service.

        Args:
            repository: Catalog repository.
            statistics: Statistics aggregator.
            request_id: Request ID for log correlation.
        """
        self.repository = repository
        self.statistics = statistics
        self.request_id = request_id

    @classmethod
    def create(
        cls,
        pool: ConnectionPool,
        settings: Settings,
        request_id: str | None = None,
    ) -> Self:
        """Wire a service onto a connection pool using settings."""
        executor = QueryExecutor(pool, timeout=settings.query_timeout)
        return cls(
            repository=ProductRepository(executor, settings.excluded_companies),
            statistics=StatisticsAggregator(executor),
            request_id=request_id,
        )

    async def search_products(self, criteria: FilterCriteria) -> list[ProductRecord]:
        """Find products for an interactive lookup.

        Raises:
            ValidationError: If the criteria carry no product code, barcode
                or description.
        """
        if not criteria.has_lookup_key:
            raise ValidationError(LOOKUP_KEY_REQUIRED)
        products = await self.repository.find_products(criteria)
        logger.info(
            "Products found",
            total=len(products),
            limit=criteria.limit,
            request_id=self.request_id,
        )
        return products

    async def export_products(
        self,
        criteria: FilterCriteria,
        visible_columns: Iterable[str] | None = None,
    ) -> bytes:
        """Export matching products as an XLSX workbook.

        Args:
            criteria: Export criteria.
            visible_columns: Caller column identifiers to keep.

        Returns:
            XLSX file contents.

        Raises:
            NoDataError: If no product matched.
        """
        products = await self.repository.find_products(criteria)
        if not products:
            raise NoDataError()

        rows = project(products, visible_columns)
        logger.info(
            "Exporting products",
            total=len(rows),
            projected=bool(visible_columns),
            request_id=self.request_id,
        )
        return build_workbook(rows)

    async def list_families(self) -> list[FamilyRecord]:
        """List product families."""
        return await self.repository.list_families()

    async def list_users(self) -> list[UserRecord]:
        """List ERP users."""
        return await self.repository.list_users()

    async def get_statistics(self) -> StatisticsSummary:
        """Collect catalog statistics."""
        return await self.statistics.collect()

    async def run_diagnostic_query(
        self,
        sql: str,
        params: Sequence[Any] | Mapping[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        """Run a raw statement (development only)."""
        return await self.repository.run_raw(sql, params)
