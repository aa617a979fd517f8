"""Domain exceptions.

All errors raised by the lookup core. The HTTP layer maps each family
to a status code; nothing below the API layer knows about HTTP.
"""

from typing import Any


class LookupServiceError(Exception):
    """Base class for all lookup service exceptions.

    All service errors inherit from this class to allow catching
    them at the API layer with a single handler.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize service error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


# ============================================================================
# Validation Errors
# ============================================================================


class ValidationError(LookupServiceError):
    """Raised when filter input is missing, malformed or out of range.

    The message is user-facing and is always returned to the caller.
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize validation error.

        Args:
            message: User-facing explanation.
            field: Name of the offending input, if any.
        """
        super().__init__(message, details={"field": field} if field else {})
        self.field = field


# ============================================================================
# Connection Pool Errors
# ============================================================================


class PoolError(LookupServiceError):
    """Base class for connection pool errors."""

    pass


class PoolUninitialized(PoolError):
    """Raised when the pool is used before initialize() or after shutdown()."""

    def __init__(self, message: str = "Connection pool is not initialized") -> None:
        super().__init__(message)


class PoolExhausted(PoolError):
    """Raised when no connection became available within the pool timeout."""

    def __init__(self, timeout: float) -> None:
        """Initialize pool exhausted error.

        Args:
            timeout: Seconds waited before giving up.
        """
        super().__init__(
            f"No database connection available after {timeout:g}s",
            details={"timeout": timeout},
        )
        self.timeout = timeout


# ============================================================================
# Query Errors
# ============================================================================


class QueryExecutionError(LookupServiceError):
    """Wraps a failure raised by the database while running a statement.

    The original driver error is kept as ``__cause__`` and its text in
    ``store_message``; callers decide whether to expose it.
    """

    def __init__(self, store_message: str, message: str = "Query execution failed") -> None:
        super().__init__(message, details={"store_message": store_message})
        self.store_message = store_message


class QueryTimeoutError(QueryExecutionError):
    """Raised when a statement exceeds the configured query timeout."""

    def __init__(self, timeout: float) -> None:
        super().__init__(
            f"Query exceeded {timeout:g}s timeout",
            message="Query timed out",
        )
        self.timeout = timeout


class StatisticsUnavailable(LookupServiceError):
    """Raised when any statistics sub-query fails.

    Wraps the first error encountered; partial statistics are never
    returned.
    """

    def __init__(self, cause: Exception) -> None:
        super().__init__(
            "Statistics are unavailable",
            details={"cause": str(cause)},
        )
        self.cause = cause


# ============================================================================
# Export Errors
# ============================================================================


class NoDataError(LookupServiceError):
    """Raised when an export's filtered result set is empty."""

    def __init__(self, message: str = "No products found for the given filters") -> None:
        super().__init__(message)
