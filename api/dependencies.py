"""
api.dependencies - FastAPI dependency injection providers.

Provides access to the price manager through FastAPI's dependency injection system.
"""

from __future__ import annotations

from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from core.price_manager import MarketPriceManager


def get_price_manager() -> "MarketPriceManager":
    """
    Get the application's price manager.

    Must be called after app startup (lifespan context).
    """
    from api.main import get_price_manager as _get_manager

    return _get_manager()
