"""HTTP middleware.

Order, outermost first:

1. ``RequestContextMiddleware``: request id, log context, access log.
2. ``AppHeadersMiddleware``: ``X-App-Name`` / ``X-App-Version``.
3. ``CatchAllMiddleware``: turns unhandled exceptions into a 500 envelope.
"""

import time
from typing import Callable
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request, Response, status
from starlette.middleware.base import BaseHTTPMiddleware

from product_lookup.api.errors import GENERIC_ERROR, error_response
from product_lookup.infrastructure.config import Settings

logger = structlog.get_logger()

REQUEST_ID_HEADER = "X-Request-ID"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Tags each request with an id and logs its outcome.

    The id comes from ``X-Request-ID`` when the client sends one. It is
    stored on ``request.state``, bound into the structlog context for the
    duration of the request and echoed on the response.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid4())
        request.state.request_id = request_id

        with structlog.contextvars.bound_contextvars(request_id=request_id):
            started = time.perf_counter()
            response = await call_next(request)
            logger.info(
                "Request completed",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class AppHeadersMiddleware(BaseHTTPMiddleware):
    """Adds X-App-Name and X-App-Version to every response."""

    def __init__(self, app, app_name: str, app_version: str) -> None:
        super().__init__(app)
        self.headers = {"X-App-Name": app_name, "X-App-Version": app_version}

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)
        response.headers.update(self.headers)
        return response


class CatchAllMiddleware(BaseHTTPMiddleware):
    """Last line of defence for exceptions no handler claimed."""

    def __init__(self, app, expose_errors: bool = False) -> None:
        super().__init__(app)
        self.expose_errors = expose_errors

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            logger.exception("Unhandled exception", path=request.url.path, method=request.method)
            return error_response(
                request,
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                "INTERNAL_ERROR",
                "Erro interno do servidor",
                error=str(e) if self.expose_errors else GENERIC_ERROR,
            )


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Install the middleware stack (last added runs first)."""
    app.add_middleware(CatchAllMiddleware, expose_errors=not settings.is_production)
    app.add_middleware(
        AppHeadersMiddleware,
        app_name=settings.app_name,
        app_version=settings.api_version,
    )
    app.add_middleware(RequestContextMiddleware)
