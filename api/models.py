"""
api.models - Pydantic models for API response schemas.

These models provide type-safe serialization for all API endpoints.
"""

from __future__ import annotations

from typing import Any, Optional, Union

from pydantic import BaseModel, Field


# ==============================================================================
# Item Price Models
# ==============================================================================


class PriceQuoteModel(BaseModel):
    """Price overview for one market item."""

    name: str = Field(..., description="Market hash name", examples=["Chroma 2 Case"])
    lowest_price: Optional[Union[float, str]] = Field(
        None,
        description="Lowest listing price (string when currency symbols are kept)",
        examples=[0.42],
    )
    median_price: Optional[Union[float, str]] = Field(
        None, description="Median sale price", examples=[0.4]
    )
    volume: Optional[Union[int, str]] = Field(
        None, description="Units sold in the last 24 hours", examples=[12345]
    )
    success: bool = Field(default=True, description="Whether Steam reported success")
    cached: bool = Field(default=False, description="Served from the price cache")
    updated_at: Optional[float] = Field(
        None, description="Unix time the price was fetched"
    )


class ItemResponse(BaseModel):
    """Response for GET /item/{name}: either item or error is set."""

    item: Optional[PriceQuoteModel] = None
    error: Optional[str] = Field(None, description="Error message if lookup failed")


class ItemResult(BaseModel):
    """One entry of a batch lookup."""

    name: str = Field(..., description="Requested item name")
    data: Optional[PriceQuoteModel] = None
    error: Optional[str] = None


class ItemsResponse(BaseModel):
    """Response for GET /items/{names}."""

    items: Optional[list[ItemResult]] = None
    error: Optional[str] = None


class AllItemsResponse(BaseModel):
    """Response for GET /items/all."""

    items: Optional[dict[str, Any]] = Field(
        None, description="backpack.tf items keyed by market hash name"
    )
    error: Optional[str] = None


# ==============================================================================
# Health Models
# ==============================================================================


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Overall service status", examples=["healthy"])
    version: str = Field(..., description="API version", examples=["0.1.0"])
    app_id: Optional[int] = Field(None, description="Default Steam application id")
    currency: str = Field(..., description="Default wallet currency", examples=["EUR"])
    cache_enabled: bool = Field(..., description="Whether the price cache is on")
    backpack_tf_configured: bool = Field(
        ..., description="Whether a backpack.tf API key is set"
    )
