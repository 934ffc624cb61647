"""
api.routers.items - Item price endpoints.

Thin wrappers around MarketPriceManager. Lookup failures are reported in
the body under "error", the same way successful data is reported under
"item"/"items".
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends

from api.models import (
    AllItemsResponse,
    ItemResponse,
    ItemResult,
    ItemsResponse,
    PriceQuoteModel,
)
from api.dependencies import get_price_manager

if TYPE_CHECKING:
    from core.price_manager import MarketPriceManager
    from data_sources.steam_market_client import PriceQuote

logger = logging.getLogger(__name__)
router = APIRouter()


def _quote_model(quote: "PriceQuote") -> PriceQuoteModel:
    return PriceQuoteModel(**quote.to_dict())


@router.get("/item/{name:path}", response_model=ItemResponse, response_model_exclude_none=True)
def get_item(
    name: str,
    manager: "MarketPriceManager" = Depends(get_price_manager),
) -> ItemResponse:
    """Price overview for one item."""
    result = manager.get_item(name)
    if result.is_err():
        logger.info(f"Item lookup failed for {name!r}: {result.error}")
        return ItemResponse(error=str(result.error))
    return ItemResponse(item=_quote_model(result.value))


# Declared before /items/{names} so "all" is not taken for an item name
@router.get("/items/all", response_model=AllItemsResponse, response_model_exclude_none=True)
def get_all_items(
    manager: "MarketPriceManager" = Depends(get_price_manager),
) -> AllItemsResponse:
    """The backpack.tf price list for the configured app."""
    result = manager.get_all_items()
    if result.is_err():
        logger.info(f"Price list lookup failed: {result.error}")
        return AllItemsResponse(error=str(result.error))

    body = result.value
    response = body.get("response") if isinstance(body, dict) else None
    if not isinstance(response, dict):
        logger.warning(f"Price list is not a parsed JSON document: {type(body).__name__}")
        return AllItemsResponse(error="Price list is not available as JSON")
    return AllItemsResponse(items=response.get("items") or {})


@router.get("/items/{names:path}", response_model=ItemsResponse, response_model_exclude_none=True)
def get_items(
    names: str,
    manager: "MarketPriceManager" = Depends(get_price_manager),
) -> ItemsResponse:
    """
    Price overviews for several items.

    Names are joined with the configured separator (default "!N!"), e.g.
    /items/Chroma 2 Case!N!Spectrum Case
    """
    requested = [n for n in names.split(manager.config.web_api_separator) if n]
    result = manager.get_items(requested)
    if result.is_err():
        return ItemsResponse(error=str(result.error))

    items: list[ItemResult] = []
    for name, item_result in result.value.items():
        if item_result.is_ok():
            items.append(ItemResult(name=name, data=_quote_model(item_result.value)))
        else:
            items.append(ItemResult(name=name, error=str(item_result.error)))
    return ItemsResponse(items=items)
