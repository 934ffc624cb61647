"""
Steam Community Market price client.

Looks up the current lowest and median listing price of an item:
GET /market/priceoverview/?currency=&appid=&market_hash_name=

Prices come back as display strings in the wallet currency ("1,23€");
they are normalized to Decimal unless currency symbols are kept.
Results are optionally cached in a PriceCacheStore.
"""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor, as_completed, wait
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Callable, Dict, Iterable, Optional, Union

import requests

from core.cache_store import CacheEntry, PriceCacheStore, PriceValue
from core.constants import STEAM_MARKET_BASE_URL, STEAM_PRICE_OVERVIEW_URI
from core.currencies import Currency
from core.errors import MarketError, UpstreamLogicError, UpstreamStatusError
from core.price_format import parse_price, parse_volume
from core.result import Err, Ok, Result
from data_sources.base_api import BaseAPIClient, TimeoutType
from data_sources.steam_responses import unsuccessful_response

logger = logging.getLogger(__name__)

QuoteResult = Result["PriceQuote", MarketError]


@dataclass
class PriceQuote:
    """Price overview for one market item."""
    name: str
    lowest_price: Optional[PriceValue]
    median_price: Optional[PriceValue] = None
    volume: Optional[Union[int, str]] = None
    success: bool = True
    cached: bool = False
    updated_at: Optional[float] = None

    @classmethod
    def from_cache_entry(cls, entry: CacheEntry) -> "PriceQuote":
        return cls(
            name=entry.key,
            lowest_price=entry.lowest_price,
            median_price=entry.median_price,
            cached=True,
            updated_at=entry.updated_at,
        )

    def to_cache_entry(self) -> CacheEntry:
        return CacheEntry(
            key=self.name,
            lowest_price=self.lowest_price,
            median_price=self.median_price,
        )

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly form (Decimal prices as numbers)."""
        return {
            "name": self.name,
            "lowest_price": _json_price(self.lowest_price),
            "median_price": _json_price(self.median_price),
            "volume": self.volume,
            "success": self.success,
            "cached": self.cached,
            "updated_at": self.updated_at,
        }


class SteamMarketClient(BaseAPIClient):
    """
    Client for the Steam Community Market price overview.

    Cache writes run on a single background thread so a caller gets its
    quote without waiting for the cache document to be rewritten. Call
    flush() to wait for pending writes.
    """

    def __init__(
        self,
        cache: Optional[PriceCacheStore] = None,
        keep_currency_symbols: bool = False,
        base_url: str = STEAM_MARKET_BASE_URL,
        user_agent: Optional[str] = None,
        timeout: Optional[TimeoutType] = None,
        session: Optional[requests.Session] = None,
        clock: Callable[[], float] = time.time,
    ):
        kwargs: Dict[str, Any] = {"user_agent": user_agent, "session": session}
        if timeout is not None:
            kwargs["timeout"] = timeout
        super().__init__(base_url=base_url, **kwargs)

        self.cache = cache
        self.keep_currency_symbols = keep_currency_symbols
        self._clock = clock

        self._writer = ThreadPoolExecutor(max_workers=1, thread_name_prefix="price-cache-writer")
        self._pending: set[Future] = set()
        self._pending_lock = threading.Lock()
        self._closed = False

    @property
    def caching(self) -> bool:
        return self.cache is not None and self.cache.enabled

    # ----- Lookups -------------------------------------------------------

    def fetch_item(
        self,
        item_name: str,
        currency: Union[Currency, int],
        app_id: Union[int, str],
    ) -> QuoteResult:
        """
        Get the price overview for one item.

        A fresh cache entry is returned without touching the network.

        Returns:
            Ok(PriceQuote) or Err(MarketError)
        """
        if self.caching:
            entry = self.cache.get_fresh(item_name)
            if entry is not None:
                return Ok(PriceQuote.from_cache_entry(entry))

        params = {
            "currency": currency.value if isinstance(currency, Currency) else currency,
            "appid": app_id,
            "market_hash_name": item_name,
        }
        try:
            response = self.get(STEAM_PRICE_OVERVIEW_URI, params=params)
        except MarketError as e:
            return Err(e)

        if response.status_code != 200:
            message = unsuccessful_response(response.status_code)
            logger.warning(f"Steam returned {response.status_code} for {item_name!r}")
            return Err(UpstreamStatusError(message, status_code=response.status_code))

        try:
            body = response.json()
        except ValueError:
            return Err(UpstreamLogicError(f"Malformed price response for {item_name!r}"))
        if not isinstance(body, dict) or body.get("success") is False:
            return Err(UpstreamLogicError(f"Steam reported no price data for {item_name!r}"))

        quote = self._parse_quote(item_name, body)
        if self.caching:
            self._schedule_cache_write(quote)
        return Ok(quote)

    def fetch_items(
        self,
        item_names: Iterable[str],
        currency: Union[Currency, int],
        app_id: Union[int, str],
    ) -> Dict[str, QuoteResult]:
        """
        Look up every name in parallel and wait for all of them.

        Every name gets an entry: Ok(PriceQuote) or Err(error). One failing
        item never hides the others.
        """
        names = list(dict.fromkeys(item_names))
        if not names:
            return {}

        results: Dict[str, QuoteResult] = {}
        with ThreadPoolExecutor(max_workers=len(names), thread_name_prefix="steam-market") as pool:
            futures = {
                pool.submit(self.fetch_item, name, currency, app_id): name
                for name in names
            }
            for future in as_completed(futures):
                name = futures[future]
                try:
                    results[name] = future.result()
                except Exception as e:
                    logger.exception(f"Unexpected error fetching {name!r}")
                    results[name] = Err(MarketError(f"Unexpected error: {e}"))

        failed = sum(1 for r in results.values() if r.is_err())
        logger.info(f"Fetched {len(names) - failed}/{len(names)} item prices")
        return {name: results[name] for name in names}

    def _parse_quote(self, item_name: str, body: Dict[str, Any]) -> PriceQuote:
        lowest = body.get("lowest_price")
        median = body.get("median_price")
        volume = body.get("volume")
        if not self.keep_currency_symbols:
            lowest = parse_price(lowest)
            median = parse_price(median)
            volume = parse_volume(volume)
        return PriceQuote(
            name=item_name,
            lowest_price=lowest,
            median_price=median,
            volume=volume,
            success=True,
            updated_at=self._clock(),
        )

    # ----- Cache writer --------------------------------------------------

    def _schedule_cache_write(self, quote: PriceQuote) -> None:
        with self._pending_lock:
            if self._closed:
                logger.debug(f"Client closed, skipping cache write for {quote.name!r}")
                return
            future = self._writer.submit(self.cache.put, quote.name, quote.to_cache_entry())
            self._pending.add(future)
        future.add_done_callback(self._write_done)

    def _write_done(self, future: Future) -> None:
        with self._pending_lock:
            self._pending.discard(future)
        exc = future.exception()
        if exc is not None:
            logger.warning(f"Cache write failed: {exc}")

    def flush(self, timeout: Optional[float] = None) -> None:
        """Block until queued cache writes have finished."""
        with self._pending_lock:
            pending = list(self._pending)
        if pending:
            wait(pending, timeout=timeout)

    def close(self):
        with self._pending_lock:
            self._closed = True
        self._writer.shutdown(wait=True)
        super().close()


def _json_price(value: Optional[PriceValue]) -> Any:
    if isinstance(value, Decimal):
        return float(value)
    return value
