"""
api.tests.conftest - Pytest fixtures for API tests.

Provides a test client backed by a real MarketPriceManager whose upstream
clients are mocks.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Generator
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from core.cache_store import PriceCacheStore
from core.config import Config
from core.price_manager import MarketPriceManager
from core.result import Ok
from data_sources.backpack_tf_client import BackpackTFClient
from data_sources.steam_market_client import PriceQuote, SteamMarketClient


@pytest.fixture
def mock_config(tmp_path) -> Config:
    """Config with a default app id, isolated from the environment."""
    return Config(
        config_file=tmp_path / "config.json",
        overrides={"market": {"app_id": 730}},
        use_env=False,
    )


@pytest.fixture
def mock_steam() -> MagicMock:
    """Steam client that prices every item at 0.42."""
    steam = MagicMock(spec=SteamMarketClient)

    def fetch_item(name, currency, app_id):
        return Ok(PriceQuote(
            name=name,
            lowest_price=Decimal("0.42"),
            median_price=Decimal("0.40"),
            volume=12345,
            updated_at=1700000000.0,
        ))

    def fetch_items(names, currency, app_id):
        return {name: fetch_item(name, currency, app_id) for name in names}

    steam.fetch_item.side_effect = fetch_item
    steam.fetch_items.side_effect = fetch_items
    return steam


@pytest.fixture
def mock_backpack_tf() -> MagicMock:
    """backpack.tf client returning a two-item price list."""
    backpack_tf = MagicMock(spec=BackpackTFClient)
    backpack_tf.fetch_all_items.return_value = Ok({
        "response": {
            "success": 1,
            "items": {
                "Mann Co. Supply Crate Key": {"value": 250, "quantity": 120},
                "Tour of Duty Ticket": {"value": 99, "quantity": 80},
            },
        }
    })
    return backpack_tf


@pytest.fixture
def make_backpack_tf():
    """Factory for a real BackpackTFClient whose session answers 200 with text."""
    clients = []

    def _make(text: str) -> BackpackTFClient:
        response = MagicMock()
        response.status_code = 200
        response.text = text
        session = MagicMock()
        session.get.return_value = response
        backpack_tf = BackpackTFClient(session=session)
        clients.append(backpack_tf)
        return backpack_tf

    yield _make

    for backpack_tf in clients:
        backpack_tf.close()


@pytest.fixture
def price_manager(
    mock_config: Config,
    mock_steam: MagicMock,
    mock_backpack_tf: MagicMock,
    tmp_path,
) -> MarketPriceManager:
    """Manager wired to the mocked clients."""
    return MarketPriceManager(
        config=mock_config,
        cache=PriceCacheStore(tmp_path / "cache.json", ttl_seconds=0),
        steam=mock_steam,
        backpack_tf=mock_backpack_tf,
    )


@pytest.fixture
def client(price_manager: MarketPriceManager) -> Generator[TestClient, None, None]:
    """Create a test client with mocked dependencies."""
    # Import here to avoid circular imports
    import api.main
    from api import dependencies
    from api.main import app

    original_manager = api.main._price_manager
    # A pre-installed manager keeps the lifespan from building a real one
    api.main.set_price_manager(price_manager)
    app.dependency_overrides[dependencies.get_price_manager] = lambda: price_manager

    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client

    # Restore
    api.main.set_price_manager(original_manager)
    app.dependency_overrides.clear()
