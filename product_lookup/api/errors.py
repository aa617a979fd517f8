"""Error envelope and exception-to-response mapping.

Every error leaves the service as the same JSON envelope:
``{success, error_code, message, error, details, request_id, timestamp}``.
Store error text goes into ``error`` only outside production.
"""

from datetime import datetime, timezone
from typing import Any

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from product_lookup.domain.exceptions import (
    NoDataError,
    PoolError,
    QueryExecutionError,
    QueryTimeoutError,
    StatisticsUnavailable,
    ValidationError,
)
from product_lookup.infrastructure.config import Settings

logger = structlog.get_logger()

GENERIC_ERROR = "Erro interno"


def error_response(
    request: Request,
    status_code: int,
    error_code: str,
    message: str,
    error: str | None = None,
    details: dict[str, Any] | None = None,
) -> JSONResponse:
    """Build the standard error envelope for a request."""
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error_code": error_code,
            "message": message,
            "error": error,
            "details": details or {},
            "request_id": getattr(request.state, "request_id", None),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    )


def register_exception_handlers(app: FastAPI, settings: Settings) -> None:
    """Map service exceptions to HTTP responses.

    | exception               | status | error_code            |
    |-------------------------|--------|-----------------------|
    | ValidationError         | 400    | VALIDATION_ERROR      |
    | PoolError               | 503    | SERVICE_UNAVAILABLE   |
    | QueryTimeoutError       | 504    | QUERY_TIMEOUT         |
    | QueryExecutionError     | 500    | QUERY_FAILED          |
    | StatisticsUnavailable   | 500    | STATISTICS_UNAVAILABLE|
    | NoDataError             | 404    | NO_DATA               |
    | unknown route           | 404    | NOT_FOUND             |
    """
    expose = not settings.is_production

    def detail(text: str) -> str:
        return text if expose else GENERIC_ERROR

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        return error_response(
            request,
            status.HTTP_400_BAD_REQUEST,
            "VALIDATION_ERROR",
            exc.message,
            details=exc.details,
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return error_response(
            request,
            status.HTTP_400_BAD_REQUEST,
            "VALIDATION_ERROR",
            "Requisição inválida",
            details={"errors": exc.errors()} if expose else None,
        )

    @app.exception_handler(PoolError)
    async def pool_error_handler(request: Request, exc: PoolError):
        logger.error("Database pool unavailable", error=exc.message, path=request.url.path)
        return error_response(
            request,
            status.HTTP_503_SERVICE_UNAVAILABLE,
            "SERVICE_UNAVAILABLE",
            "Serviço temporariamente indisponível",
            error=detail(exc.message),
        )

    @app.exception_handler(QueryTimeoutError)
    async def query_timeout_handler(request: Request, exc: QueryTimeoutError):
        return error_response(
            request,
            status.HTTP_504_GATEWAY_TIMEOUT,
            "QUERY_TIMEOUT",
            "Tempo limite da consulta excedido",
            error=detail(exc.store_message),
        )

    @app.exception_handler(QueryExecutionError)
    async def query_error_handler(request: Request, exc: QueryExecutionError):
        logger.error("Query failed", error=exc.store_message, path=request.url.path)
        return error_response(
            request,
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "QUERY_FAILED",
            "Erro interno do servidor",
            error=detail(exc.store_message),
        )

    @app.exception_handler(StatisticsUnavailable)
    async def statistics_error_handler(request: Request, exc: StatisticsUnavailable):
        return error_response(
            request,
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "STATISTICS_UNAVAILABLE",
            "Erro ao buscar estatísticas",
            error=detail(str(exc.cause)),
        )

    @app.exception_handler(NoDataError)
    async def no_data_handler(request: Request, exc: NoDataError):
        return error_response(
            request,
            status.HTTP_404_NOT_FOUND,
            "NO_DATA",
            "Nenhum produto encontrado para exportar",
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            return error_response(
                request,
                exc.status_code,
                "NOT_FOUND",
                "Rota não encontrada",
                details={"path": request.url.path},
            )
        return error_response(request, exc.status_code, "ERROR", str(exc.detail))
