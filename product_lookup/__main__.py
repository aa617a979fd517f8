"""Run the product lookup API with uvicorn.

Usage:
    python -m product_lookup
    product-lookup
"""

import uvicorn

from product_lookup.infrastructure.config import settings


def main() -> None:
    """Serve the application on the configured host and port.

    Uvicorn exits with a non-zero status when the lifespan startup fails,
    e.g. when the database is unreachable.
    """
    uvicorn.run(
        "product_lookup.main:app",
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
