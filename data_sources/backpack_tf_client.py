"""
backpack.tf bulk market price client.

GET /api/IGetMarketPrices/v1/?format=&key=&appid= returns the Steam market
price of every item of an app in one response:

    {"response": {"success": 1, "items": {"Mann Co. Supply Crate Key": {"value": 250, ...}}}}

Values are US cents. backpack.tf allows one call per few minutes, so the
last payload is served from a RefreshGate until the interval elapses.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, Mapping, Optional, Union

import requests

from core.cache_store import PriceCacheStore
from core.constants import (
    BACKPACK_TF_BASE_URL,
    BACKPACK_TF_FORMATS,
    BACKPACK_TF_PRICES_URI,
    BACKPACK_TF_REFRESH_INTERVAL,
)
from core.errors import FormatError, MarketError, UpstreamLogicError, UpstreamStatusError
from core.price_format import cents_to_decimal
from core.refresh_gate import RefreshGate
from core.result import Err, Ok, Result
from data_sources.base_api import BaseAPIClient, TimeoutType

logger = logging.getLogger(__name__)


class BackpackTFClient(BaseAPIClient):
    """
    Client for backpack.tf IGetMarketPrices.

    Provides the aggregate price list and merges it into the price cache.
    """

    def __init__(
        self,
        cache: Optional[PriceCacheStore] = None,
        refresh_interval: int = BACKPACK_TF_REFRESH_INTERVAL,
        base_url: str = BACKPACK_TF_BASE_URL,
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
        self.gate = RefreshGate(refresh_interval, clock=clock)

    def fetch_all_items(
        self,
        app_id: Union[int, str],
        fmt: str,
        api_key: str,
    ) -> Result[Any, MarketError]:
        """
        Get the whole price list, at most once per refresh interval.

        Args:
            app_id: Steam application id
            fmt: One of json, vdf, jsonp, pretty
            api_key: backpack.tf API key

        Within the interval only the same app id and format are served from
        the stored payload; any other request gets an Err until the
        interval elapses.

        Returns:
            Ok(payload) - parsed dict for json, raw text otherwise - or Err
        """
        if fmt not in BACKPACK_TF_FORMATS:
            return Err(FormatError(f"Invalid data format for getAllItems: {fmt!r}"))

        key = (str(app_id), fmt)
        with self.gate.lock:
            if not self.gate.is_open():
                wait = self.gate.seconds_until_open()
                if self.gate.holds(key):
                    logger.debug("Serving stored price list (%.0fs until refresh)", wait)
                    return Ok(self.gate.payload)
                if self.gate.payload is not None:
                    # Stored list answers another app id or format; the
                    # interval still applies to this request
                    logger.info(
                        "Price list for app %s (%s) not stored, refresh allowed in %.0fs",
                        app_id, fmt, wait,
                    )
                    return Err(UpstreamLogicError(
                        f"Price list for app {app_id} in {fmt} format is not available; "
                        f"Backpack.tf allows the next request in {wait:.0f}s"
                    ))
                # Closed gate without a payload; start over once
                logger.warning("Refresh gate closed without stored price list, resetting")
                self.gate.reset()

            result = self._request_prices(app_id, fmt, api_key)
            if result.is_ok():
                self.gate.record_success(result.value, key=key)
            return result

    def _request_prices(self, app_id: Union[int, str], fmt: str, api_key: str) -> Result[Any, MarketError]:
        params = {"format": fmt, "key": api_key, "appid": app_id}
        try:
            response = self.get(BACKPACK_TF_PRICES_URI, params=params)
        except MarketError as e:
            return Err(e)

        if response.status_code != 200:
            logger.warning(f"backpack.tf returned {response.status_code}")
            return Err(UpstreamStatusError(
                f"Unsuccessful response ({response.status_code}) from Backpack.tf",
                status_code=response.status_code,
            ))

        if fmt != "json":
            return Ok(response.text)

        try:
            body = response.json()
        except ValueError:
            return Err(UpstreamLogicError("Malformed price list from Backpack.tf"))

        payload = body.get("response") if isinstance(body, dict) else None
        if not isinstance(payload, dict):
            return Err(UpstreamLogicError("Malformed price list from Backpack.tf"))
        if not payload.get("success"):
            message = payload.get("message") or "Backpack.tf reported an unsuccessful request"
            logger.warning(f"backpack.tf error: {message}")
            return Err(UpstreamLogicError(message))

        items = payload.get("items") or {}
        logger.info(f"Fetched {len(items)} prices from backpack.tf for app {app_id}")
        self._merge_into_cache(items)
        return Ok(body)

    def _merge_into_cache(self, items: Mapping[str, Any]) -> None:
        if self.cache is None or not self.cache.enabled or not items:
            return
        prices = {}
        for name, data in items.items():
            value = data.get("value") if isinstance(data, Mapping) else None
            price = cents_to_decimal(value)
            if price is None:
                logger.debug(f"Skipping {name!r}: no value")
                continue
            prices[name] = price
        self.cache.put_many(prices)
