# core/price_manager.py
"""
MarketPriceManager - the public entry point of the library.

Wires the configuration, the price cache and both upstream clients together
and validates caller input. Every lookup returns a Result; nothing here
raises for an upstream or configuration problem.

Usage:
    with create_price_manager(Config(overrides={"market": {"app_id": 730}})) as manager:
        result = manager.get_item("Chroma 2 Case")
        if result.is_ok():
            print(result.value.lowest_price)
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence, Union

from core.cache_store import PriceCacheStore
from core.config import Config
from core.constants import BACKPACK_TF_FORMATS
from core.currencies import Currency
from core.errors import ConfigurationError, FormatError, MarketError
from core.result import Err, Ok, Result
from data_sources.backpack_tf_client import BackpackTFClient
from data_sources.steam_market_client import PriceQuote, QuoteResult, SteamMarketClient

logger = logging.getLogger(__name__)

MISSING_APP_ID = (
    "You did not specify any Steam Application ID. Don't know what to use? "
    "Here: https://developer.valvesoftware.com/wiki/Steam_Application_IDs"
)
MISSING_BACKPACK_KEY = (
    "To fetch all items you must get the BackpackTF API Key. "
    "More info: http://backpack.tf/api/register"
)


@dataclass
class MarketPriceManager:
    """
    Aggregates the services behind a price lookup.

    - config: defaults (app id, currency), cache and API settings
    - cache: JSON price cache shared by both clients
    - steam: Steam Community Market price overview client
    - backpack_tf: bulk price list client with its refresh gate

    Call close() when done to flush cache writes and release HTTP sessions.
    """
    config: Config
    cache: PriceCacheStore
    steam: SteamMarketClient
    backpack_tf: BackpackTFClient

    # ----- Lookups -------------------------------------------------------

    def get_item(
        self,
        name: Optional[str],
        currency: Union[Currency, str, int, None] = None,
        app_id: Union[int, str, None] = None,
    ) -> QuoteResult:
        """Price overview for one item."""
        app_id = app_id or self.config.app_id
        if app_id is None:
            return Err(ConfigurationError(MISSING_APP_ID))
        if not name:
            return Err(ConfigurationError("Specify an Item name."))

        resolved = self._resolve_currency(currency)
        if isinstance(resolved, Err):
            return resolved
        return self.steam.fetch_item(name, resolved, app_id)

    def get_items(
        self,
        names: Optional[Sequence[str]],
        currency: Union[Currency, str, int, None] = None,
        app_id: Union[int, str, None] = None,
    ) -> Result[Dict[str, QuoteResult], MarketError]:
        """
        Price overviews for many items, fetched in parallel.

        Returns:
            Err for invalid input, otherwise Ok({name: Ok(quote) | Err(error)})
            with an entry for every requested name.
        """
        app_id = app_id or self.config.app_id
        if app_id is None:
            return Err(ConfigurationError(MISSING_APP_ID))
        if not isinstance(names, (list, tuple)):
            return Err(ConfigurationError(
                "You did not specify `names` parameter or it is not a list."
            ))

        resolved = self._resolve_currency(currency)
        if isinstance(resolved, Err):
            return resolved

        return Ok(self.steam.fetch_items(names, resolved, app_id))

    def get_all_items(
        self,
        fmt: str = "json",
        app_id: Union[int, str, None] = None,
    ) -> Result[Any, MarketError]:
        """Whole price list from backpack.tf, at most once per refresh interval."""
        api_key = self.config.backpack_tf_api_key
        app_id = app_id or self.config.app_id
        if not api_key:
            return Err(ConfigurationError(MISSING_BACKPACK_KEY))
        if app_id is None:
            return Err(ConfigurationError(MISSING_APP_ID))
        if fmt not in BACKPACK_TF_FORMATS:
            return Err(FormatError("Invalid data format for getAllItems"))
        return self.backpack_tf.fetch_all_items(app_id, fmt, api_key)

    def _resolve_currency(self, currency: Union[Currency, str, int, None]) -> Union[Currency, Err]:
        if currency is None:
            return self.config.currency
        resolved = Currency.from_value(currency)
        if resolved is None:
            return Err(ConfigurationError(f"Unknown currency: {currency!r}"))
        return resolved

    # ----- Lifecycle -----------------------------------------------------

    def flush(self, timeout: Optional[float] = None) -> None:
        """Wait for background cache writes."""
        self.steam.flush(timeout=timeout)

    def close(self) -> None:
        """
        Clean up all resources held by the manager:
        - pending cache writes
        - HTTP sessions (API clients)
        """
        logger.info("Closing MarketPriceManager resources...")
        for client in (self.steam, self.backpack_tf):
            try:
                client.close()
            except Exception as e:
                logger.error(f"Error closing {client.__class__.__name__}: {e}")
        logger.info("MarketPriceManager closed")

    def __enter__(self) -> "MarketPriceManager":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.close()
        return False


def create_price_manager(config: Optional[Config] = None) -> MarketPriceManager:
    """Build a manager and its services from config (defaults when None)."""
    config = config or Config()

    cache = PriceCacheStore(config.cache_file, ttl_seconds=config.cache_ttl_seconds)
    steam = SteamMarketClient(
        cache=cache,
        keep_currency_symbols=config.keep_currency_symbols,
        user_agent=config.user_agent,
        timeout=config.timeouts,
    )
    backpack_tf = BackpackTFClient(
        cache=cache,
        refresh_interval=config.refresh_interval_seconds,
        user_agent=config.user_agent,
        timeout=config.timeouts,
    )

    logger.info(
        "MarketPriceManager ready - app_id=%s currency=%s cache=%s",
        config.app_id,
        config.currency,
        f"{config.cache_ttl_seconds}s" if cache.enabled else "off",
    )
    return MarketPriceManager(
        config=config,
        cache=cache,
        steam=steam,
        backpack_tf=backpack_tf,
    )


__all__ = ["MarketPriceManager", "PriceQuote", "create_price_manager"]
