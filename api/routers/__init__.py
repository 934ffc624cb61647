"""API routers package."""

from api.routers.health import router as health_router
from api.routers.items import router as items_router

__all__ = [
    "health_router",
    "items_router",
]
