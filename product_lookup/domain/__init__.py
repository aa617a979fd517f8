"""Domain layer.

Filter criteria, read-only records and the service exception hierarchy.
"""

from product_lookup.domain.exceptions import (
    LookupServiceError,
    NoDataError,
    PoolError,
    PoolExhausted,
    PoolUninitialized,
    QueryExecutionError,
    QueryTimeoutError,
    StatisticsUnavailable,
    ValidationError,
)
from product_lookup.domain.models import (
    FamilyRecord,
    FilterCriteria,
    ProductRecord,
    StatisticsSummary,
    UserRecord,
)

__all__ = [
    # Models
    "FamilyRecord",
    "FilterCriteria",
    "ProductRecord",
    "StatisticsSummary",
    "UserRecord",
    # Exceptions
    "LookupServiceError",
    "NoDataError",
    "PoolError",
    "PoolExhausted",
    "PoolUninitialized",
    "QueryExecutionError",
    "QueryTimeoutError",
    "StatisticsUnavailable",
    "ValidationError",
]
