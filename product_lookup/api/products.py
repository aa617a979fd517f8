"""Catalog API endpoints.

Product lookup, spreadsheet export, families, users and statistics.
"""

from datetime import datetime, timezone
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response

from product_lookup.api.dependencies import (
    export_criteria,
    get_catalog_service,
    get_settings,
    lookup_criteria,
)
from product_lookup.api.schemas import (
    ErrorResponse,
    FamilyListResponse,
    FamilySchema,
    InfoResponse,
    ProductFilters,
    ProductListResponse,
    ProductSchema,
    StatisticsResponse,
    StatisticsSchema,
    UserListResponse,
    UserSchema,
)
from product_lookup.catalog.export import EXPORT_FILENAME, XLSX_MEDIA_TYPE
from product_lookup.catalog.service import CatalogService
from product_lookup.domain.models import FilterCriteria
from product_lookup.infrastructure.config import Settings

router = APIRouter(prefix="/api", tags=["Produtos"])


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _split_columns(colunas: list[str] | None) -> list[str]:
    """Accept repeated and comma-separated column parameters."""
    columns: list[str] = []
    for value in colunas or []:
        columns.extend(part.strip() for part in value.split(",") if part.strip())
    return columns


# ============================================================================
# Endpoints
# ============================================================================


@router.get("/info", response_model=InfoResponse, summary="Service information")
async def info(
    settings: Annotated[Settings, Depends(get_settings)],
) -> InfoResponse:
    """Describe the service and list its endpoints."""
    return InfoResponse(
        message=f"{settings.app_name} - API Backend",
        version=settings.api_version,
        status="online",
        timestamp=_now(),
        endpoints={
            "produtos": "/api/produtos",
            "familias": "/api/familias",
            "usuarios": "/api/usuarios",
            "estatisticas": "/api/estatisticas",
            "export": "/api/produtos/export",
            "health": "/health",
        },
    )


@router.get(
    "/produtos",
    response_model=ProductListResponse,
    responses={
        400: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
    summary="Look up products",
    description=(
        "Search products by code, EAN or description; family and company "
        "narrow the search. Results are ordered by inclusion date, newest first."
    ),
)
async def list_products(
    criteria: Annotated[FilterCriteria, Depends(lookup_criteria)],
    service: Annotated[CatalogService, Depends(get_catalog_service)],
) -> ProductListResponse:
    """Interactive product lookup.

    Raises:
        ValidationError: If no lookup key is given or a value is invalid.
    """
    products = await service.search_products(criteria)

    return ProductListResponse(
        data=[ProductSchema.from_record(p) for p in products],
        total=len(products),
        filtros=ProductFilters(**criteria.to_filters()),
        timestamp=_now(),
    )


@router.get(
    "/produtos/export",
    response_class=Response,
    responses={
        200: {"content": {XLSX_MEDIA_TYPE: {}}},
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
    summary="Export products to Excel",
)
async def export_products(
    criteria: Annotated[FilterCriteria, Depends(export_criteria)],
    service: Annotated[CatalogService, Depends(get_catalog_service)],
    colunas: Annotated[list[str] | None, Query()] = None,
) -> Response:
    """Download matching products as an XLSX workbook.

    ``colunas`` selects visible columns (``col-ean``, ``col-descricao``, ...);
    EAN, product code and description are always included.

    Raises:
        NoDataError: If nothing matched the filters.
    """
    payload = await service.export_products(criteria, _split_columns(colunas))

    return Response(
        content=payload,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f"attachment; filename={EXPORT_FILENAME}"},
    )


@router.get("/familias", response_model=FamilyListResponse, summary="List families")
async def list_families(
    service: Annotated[CatalogService, Depends(get_catalog_service)],
) -> FamilyListResponse:
    """List product families ordered by description."""
    families = await service.list_families()
    return FamilyListResponse(
        data=[FamilySchema.from_record(f) for f in families],
        total=len(families),
        timestamp=_now(),
    )


@router.get("/usuarios", response_model=UserListResponse, summary="List users")
async def list_users(
    service: Annotated[CatalogService, Depends(get_catalog_service)],
) -> UserListResponse:
    """List ERP users ordered by name."""
    users = await service.list_users()
    return UserListResponse(
        data=[UserSchema.from_record(u) for u in users],
        total=len(users),
        timestamp=_now(),
    )


@router.get(
    "/estatisticas",
    response_model=StatisticsResponse,
    responses={500: {"model": ErrorResponse}},
    summary="Catalog statistics",
)
async def get_statistics(
    service: Annotated[CatalogService, Depends(get_catalog_service)],
) -> StatisticsResponse:
    """Product, family and user totals plus the latest inclusion date."""
    summary = await service.get_statistics()
    return StatisticsResponse(
        data=StatisticsSchema.from_summary(summary),
        timestamp=_now(),
    )
