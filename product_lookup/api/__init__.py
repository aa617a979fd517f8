"""API layer module.

Contains FastAPI routers and request/response schemas.
"""

from product_lookup.api.diagnostics import router as diagnostics_router
from product_lookup.api.health import router as health_router
from product_lookup.api.products import router as products_router

__all__ = [
    "diagnostics_router",
    "health_router",
    "products_router",
]
