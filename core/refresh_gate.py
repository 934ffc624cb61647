"""
Minimum-interval guard for the bulk price list.

backpack.tf only allows one IGetMarketPrices call every few minutes, so the
last successful payload is kept and served until the interval has elapsed.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Hashable, Optional

logger = logging.getLogger(__name__)


@dataclass
class RefreshState:
    """When the bulk list was last fetched, for which request, and what it returned."""
    min_interval_seconds: int
    last_fetch: Optional[float] = None
    last_payload: Any = None
    # Identifies the request that produced last_payload, e.g. (app_id, format)
    last_key: Optional[Hashable] = None


class RefreshGate:
    """
    Tracks RefreshState for one client.

    The gate is open when nothing was fetched yet or when at least
    ``min_interval_seconds`` elapsed since the last successful fetch.
    """

    def __init__(self, min_interval_seconds: int, clock: Callable[[], float] = time.time):
        self.state = RefreshState(min_interval_seconds=int(min_interval_seconds))
        self._clock = clock
        self.lock = threading.RLock()

    def is_open(self) -> bool:
        last = self.state.last_fetch
        if last is None:
            return True
        elapsed = self._clock() - last
        return elapsed >= self.state.min_interval_seconds

    def seconds_until_open(self) -> float:
        last = self.state.last_fetch
        if last is None:
            return 0.0
        return max(0.0, self.state.min_interval_seconds - (self._clock() - last))

    @property
    def payload(self) -> Any:
        return self.state.last_payload

    def holds(self, key: Hashable) -> bool:
        """True if the stored payload was produced by the request identified by key."""
        return self.state.last_payload is not None and self.state.last_key == key

    def record_success(self, payload: Any, key: Optional[Hashable] = None) -> None:
        """Store payload and close the gate for the next interval."""
        self.state.last_payload = payload
        self.state.last_key = key
        self.state.last_fetch = self._clock()
        logger.debug(
            "Refresh gate closed for %ss", self.state.min_interval_seconds
        )

    def reset(self) -> None:
        self.state.last_fetch = None
        self.state.last_payload = None
        self.state.last_key = None
