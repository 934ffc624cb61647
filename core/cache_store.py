"""
Price Cache Store - JSON file cache of item prices.

One document on disk maps item name -> {lowest_price, median_price, updated_at}.
The document is read on every access and rewritten wholesale on every write,
so several managers pointed at the same file see each other's updates.

Features:
- TTL-based freshness (ttl_seconds <= 0 disables the cache)
- Single load-modify-store cycle for bulk merges
- Thread-safe within one process
- Read/write failures degrade to misses and logged warnings

Usage:
    store = PriceCacheStore("cache.json", ttl_seconds=600)

    entry = store.get_fresh("Chroma 2 Case")
    if entry is None:
        quote = fetch(...)
        store.put("Chroma 2 Case", CacheEntry.from_quote(quote))
"""

from __future__ import annotations

import json
import logging
import threading
import time
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional, Union

from core.price_format import parse_price

logger = logging.getLogger(__name__)

# A price is a Decimal once normalized, or the raw display string when
# currency symbols are kept.
PriceValue = Union[Decimal, str]


@dataclass
class CacheEntry:
    """A cached price for one item."""
    key: str
    lowest_price: Optional[PriceValue]
    median_price: Optional[PriceValue] = None
    updated_at: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "lowest_price": _encode_price(self.lowest_price),
            "updated_at": self.updated_at,
        }
        if self.median_price is not None:
            data["median_price"] = _encode_price(self.median_price)
        return data

    @classmethod
    def from_dict(cls, key: str, data: Mapping[str, Any]) -> "CacheEntry":
        return cls(
            key=key,
            lowest_price=_decode_price(data.get("lowest_price")),
            median_price=_decode_price(data.get("median_price")),
            updated_at=float(data.get("updated_at") or 0.0),
        )


class PriceCacheStore:
    """
    Item price cache persisted as a single JSON document.

    The lock makes every load-modify-store cycle atomic inside the process;
    separate processes sharing the file still race (last write wins).
    """

    def __init__(
        self,
        cache_file: Union[str, Path],
        ttl_seconds: float = 0,
        clock: Callable[[], float] = time.time,
    ):
        """
        Args:
            cache_file: Path of the JSON document.
            ttl_seconds: Max entry age in seconds; 0 disables caching.
            clock: Returns the current unix time.
        """
        self.cache_file = Path(cache_file)
        self.ttl_seconds = float(ttl_seconds or 0)
        self._clock = clock
        self._lock = threading.RLock()

    @property
    def enabled(self) -> bool:
        return self.ttl_seconds > 0

    # ----- Reads ---------------------------------------------------------

    def get(self, key: str) -> Optional[CacheEntry]:
        """Return the entry for key regardless of age, or None."""
        with self._lock:
            data = self._load().get(key)
        if not isinstance(data, Mapping):
            return None
        try:
            return CacheEntry.from_dict(key, data)
        except (TypeError, ValueError) as e:
            logger.warning("Ignoring malformed cache entry %r: %s", key, e)
            return None

    def is_fresh(self, entry: CacheEntry, now: Optional[float] = None) -> bool:
        now = self._clock() if now is None else now
        return now - entry.updated_at < self.ttl_seconds

    def get_fresh(self, key: str) -> Optional[CacheEntry]:
        """Return the entry for key only if it is younger than the TTL."""
        if not self.enabled:
            return None
        entry = self.get(key)
        if entry is None:
            logger.debug("Cache miss: %s", key)
            return None
        if not self.is_fresh(entry):
            logger.debug("Cache expired: %s", key)
            return None
        logger.debug("Cache hit: %s", key)
        return entry

    # ----- Writes --------------------------------------------------------

    def put(self, key: str, entry: CacheEntry) -> None:
        """Stamp entry with the current time and store it under key."""
        with self._lock:
            document = self._load()
            entry.key = key
            entry.updated_at = self._clock()
            document[key] = entry.to_dict()
            self._store(document)
        logger.debug("Cache set: %s", key)

    def put_many(self, prices: Mapping[str, Any]) -> int:
        """
        Merge key -> price values into the document in one cycle.

        Values may be CacheEntry objects or bare prices (taken as the lowest
        price).

        Returns:
            Number of entries written
        """
        if not prices:
            return 0
        with self._lock:
            document = self._load()
            now = self._clock()
            for key, value in prices.items():
                if isinstance(value, CacheEntry):
                    entry = value
                    entry.key = key
                else:
                    entry = CacheEntry(key=key, lowest_price=_decode_price(value))
                entry.updated_at = now
                document[key] = entry.to_dict()
            self._store(document)
        logger.info("Cache merged %d entries into %s", len(prices), self.cache_file)
        return len(prices)

    def clear(self) -> None:
        """Delete the cache document."""
        with self._lock:
            try:
                self.cache_file.unlink()
                logger.info("Cache cleared: %s", self.cache_file)
            except FileNotFoundError:
                pass
            except OSError as e:
                logger.warning("Failed to clear cache %s: %s", self.cache_file, e)

    def size(self) -> int:
        with self._lock:
            return len(self._load())

    # ----- Persistence ---------------------------------------------------

    def _load(self) -> Dict[str, Any]:
        if not self.cache_file.exists():
            return {}
        try:
            with open(self.cache_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Cache file %s unreadable, treating as empty: %s", self.cache_file, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Cache file %s is not a JSON object, treating as empty", self.cache_file)
            return {}
        return data

    def _store(self, document: Dict[str, Any]) -> None:
        try:
            if self.cache_file.parent and not self.cache_file.parent.exists():
                self.cache_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.cache_file, "w", encoding="utf-8") as f:
                json.dump(document, f)
        except (OSError, TypeError, ValueError) as e:
            logger.warning("Failed to write cache file %s: %s", self.cache_file, e)


def _encode_price(value: Optional[PriceValue]) -> Any:
    if isinstance(value, Decimal):
        return float(value)
    return value


def _decode_price(value: Any) -> Optional[PriceValue]:
    if value is None or isinstance(value, str):
        return value
    return parse_price(value)
