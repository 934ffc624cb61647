"""
api.routers.health - Health check endpoints.

Provides endpoints for monitoring service status.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from api import __version__
from api.models import HealthResponse
from api.dependencies import get_price_manager

if TYPE_CHECKING:
    from core.price_manager import MarketPriceManager

logger = logging.getLogger(__name__)
router = APIRouter()

PROJECT_BANNER = "steam-market-manager price API"


@router.get("/", include_in_schema=False, response_class=PlainTextResponse)
async def root() -> str:
    """Project banner."""
    return PROJECT_BANNER


@router.get("/health", response_model=HealthResponse)
async def health_check(
    manager: "MarketPriceManager" = Depends(get_price_manager),
) -> HealthResponse:
    """
    Report configuration-level health.

    No upstream calls are made; "degraded" means no default app id is set,
    so every lookup must pass one explicitly.
    """
    config = manager.config
    status = "healthy" if config.app_id is not None else "degraded"

    return HealthResponse(
        status=status,
        version=__version__,
        app_id=config.app_id,
        currency=config.currency.name,
        cache_enabled=manager.cache.enabled,
        backpack_tf_configured=bool(config.backpack_tf_api_key),
    )
