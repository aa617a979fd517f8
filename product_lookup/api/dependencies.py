"""FastAPI dependencies.

The connection pool and settings live on ``app.state``; they are set up
by the application lifespan and handed to services per request.

Endpoints declare their criteria dependency ahead of the service so that
a bad request is rejected before the pool is consulted.
"""

from typing import Annotated

from fastapi import Depends, Request

from product_lookup.catalog.service import CatalogService
from product_lookup.domain.exceptions import PoolUninitialized
from product_lookup.domain.models import FilterCriteria
from product_lookup.infrastructure.config import Settings
from product_lookup.infrastructure.database import ConnectionPool


def get_settings(request: Request) -> Settings:
    """Get the settings the application was built with."""
    return request.app.state.settings


def get_pool(request: Request) -> ConnectionPool:
    """Get the application's connection pool.

    Raises:
        PoolUninitialized: If the lifespan has not created a pool.
    """
    pool = getattr(request.app.state, "pool", None)
    if pool is None:
        raise PoolUninitialized()
    return pool


def get_catalog_service(
    request: Request,
    pool: Annotated[ConnectionPool, Depends(get_pool)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> CatalogService:
    """Get catalog service with request ID."""
    request_id = getattr(request.state, "request_id", None)
    return CatalogService.create(pool, settings, request_id=request_id)


def lookup_criteria(
    settings: Annotated[Settings, Depends(get_settings)],
    codigo_produto: str | None = None,
    codigo_familia: str | None = None,
    ean: str | None = None,
    descricao: str | None = None,
    nroEmpresa: str | None = None,
    limit: str | None = None,
) -> FilterCriteria:
    """Parse interactive lookup query parameters.

    Raises:
        ValidationError: If no lookup key is given or a value is invalid.
    """
    return FilterCriteria.for_lookup(
        product_code=codigo_produto,
        family_code=codigo_familia,
        barcode=ean,
        description=descricao,
        company_number=nroEmpresa,
        limit=limit,
        max_limit=settings.max_limit,
        default_limit=settings.default_limit,
    )


def export_criteria(
    settings: Annotated[Settings, Depends(get_settings)],
    codigo_produto: str | None = None,
    codigo_familia: str | None = None,
    ean: str | None = None,
    descricao: str | None = None,
    nroEmpresa: str | None = None,
    limit: str | None = None,
) -> FilterCriteria:
    """Parse export query parameters; every filter is optional."""
    return FilterCriteria.for_export(
        product_code=codigo_produto,
        family_code=codigo_familia,
        barcode=ean,
        description=descricao,
        company_number=nroEmpresa,
        limit=limit,
        max_limit=settings.export_max_limit,
        default_limit=settings.export_default_limit,
    )
