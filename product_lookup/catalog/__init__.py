"""Product Catalog Lookup.

Query construction, execution, projection, statistics and export over
the ERP product catalog.
"""

from product_lookup.catalog.executor import QueryExecutor
from product_lookup.catalog.export import build_workbook
from product_lookup.catalog.projection import COLUMN_MAP, MANDATORY_FIELDS, project
from product_lookup.catalog.query_builder import BuiltQuery, build_product_query
from product_lookup.catalog.repository import ProductRepository
from product_lookup.catalog.service import CatalogService
from product_lookup.catalog.statistics import StatisticsAggregator

__all__ = [
    # Query
    "BuiltQuery",
    "build_product_query",
    "QueryExecutor",
    # Repository
    "ProductRepository",
    # Projection / export
    "COLUMN_MAP",
    "MANDATORY_FIELDS",
    "project",
    "build_workbook",
    # Statistics
    "StatisticsAggregator",
    # Service
    "CatalogService",
]
