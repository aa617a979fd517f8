"""Diagnostic raw-SQL endpoint.

Only mounted by create_app() when the settings enable diagnostics in a
development environment; production builds never register this router.
"""

from datetime import datetime, timezone
from typing import Annotated

from fastapi import APIRouter, Depends

from product_lookup.api.dependencies import get_catalog_service
from product_lookup.api.schemas import (
    DiagnosticQueryRequest,
    DiagnosticQueryResponse,
    ErrorResponse,
)
from product_lookup.catalog.service import CatalogService

router = APIRouter(prefix="/api", tags=["Diagnostics"])


@router.post(
    "/query",
    response_model=DiagnosticQueryResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="Run a raw SQL statement (development only)",
)
async def run_query(
    body: DiagnosticQueryRequest,
    service: Annotated[CatalogService, Depends(get_catalog_service)],
) -> DiagnosticQueryResponse:
    """Execute an arbitrary statement and return its rows."""
    rows = await service.run_diagnostic_query(body.sql or "", body.params)
    return DiagnosticQueryResponse(
        data=rows,
        total=len(rows),
        sql=body.sql or "",
        params=body.params,
        timestamp=datetime.now(timezone.utc),
    )
