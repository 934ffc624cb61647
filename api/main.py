"""
api.main - FastAPI application entry point.

Run with:
    uvicorn api.main:app --reload
    python run_api.py --port 1337
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI

from api import __version__
from api.routers import health_router, items_router
from api.middleware import setup_error_handlers

if TYPE_CHECKING:
    from core.price_manager import MarketPriceManager

logger = logging.getLogger(__name__)

# Global price manager (initialized at startup unless provided beforehand)
_price_manager: "MarketPriceManager | None" = None


def get_price_manager() -> "MarketPriceManager":
    """Get the global price manager. Must be called after app startup."""
    if _price_manager is None:
        raise RuntimeError("Price manager not initialized. Server not started?")
    return _price_manager


def set_price_manager(manager: "MarketPriceManager | None") -> None:
    """Install a pre-built manager (embedding, tests)."""
    global _price_manager
    _price_manager = manager


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle - startup and shutdown."""
    global _price_manager

    owned = _price_manager is None
    if owned:
        logger.info("Starting Steam Market Manager API...")
        from core.config import Config
        from core.price_manager import create_price_manager

        _price_manager = create_price_manager(Config())
        logger.info("Price manager initialized successfully")

    yield

    if owned and _price_manager is not None:
        logger.info("Shutting down Steam Market Manager API...")
        _price_manager.close()
        _price_manager = None
        logger.info("Shutdown complete")


app = FastAPI(
    title="Steam Market Manager API",
    description="Steam Community Market and backpack.tf item prices",
    version=__version__,
    lifespan=lifespan,
)

setup_error_handlers(app)

app.include_router(health_router, tags=["Health"])
app.include_router(items_router, tags=["Items"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api.main:app",
        host="127.0.0.1",
        port=1337,
        reload=True,
        log_level="info",
    )
