"""Shared fixtures for API tests."""

from collections.abc import Callable, Iterator
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from product_lookup.api.dependencies import get_catalog_service
from product_lookup.infrastructure.config import Settings
from product_lookup.main import create_app


class StubCatalogService:
    """Catalog service stand-in that raises a prepared error everywhere."""

    def __init__(self, error: Exception) -> None:
        self.error = error

    async def search_products(self, criteria: Any) -> Any:
        raise self.error

    async def export_products(self, criteria: Any, visible_columns: Any = None) -> Any:
        raise self.error

    async def list_families(self) -> Any:
        raise self.error

    async def list_users(self) -> Any:
        raise self.error

    async def get_statistics(self) -> Any:
        raise self.error

    async def run_diagnostic_query(self, sql: str, params: Any = None) -> Any:
        raise self.error


@pytest.fixture
def app(test_settings: Settings) -> FastAPI:
    """Application wired to the seeded catalog."""
    return create_app(test_settings)


@pytest.fixture
def client(app: FastAPI) -> Iterator[TestClient]:
    """Create test client with the lifespan (and pool) running."""
    with TestClient(app) as client:
        yield client


@pytest.fixture
def fail_with() -> Callable[[FastAPI, Exception], None]:
    """Make every catalog call of an application raise the given error."""

    def override(app: FastAPI, error: Exception) -> None:
        app.dependency_overrides[get_catalog_service] = lambda: StubCatalogService(error)

    return override


@pytest.fixture
def production_settings(test_settings: Settings) -> Settings:
    """Production settings over the same catalog, diagnostics flag on."""
    return test_settings.model_copy(update={"environment": "production"})


@pytest.fixture
def production_client(production_settings: Settings) -> Iterator[TestClient]:
    """Create test client for a production build."""
    with TestClient(create_app(production_settings)) as client:
        yield client
