import faulthandler
import json
import sys
from typing import Any, Callable, Optional
from unittest.mock import MagicMock

import pytest

from core.cache_store import PriceCacheStore
from core.config import Config


class FakeClock:
    """Manually advanced unix clock."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache_file(tmp_path):
    return tmp_path / "cache.json"


@pytest.fixture
def cache_store(cache_file, clock) -> PriceCacheStore:
    """Enabled cache with a 60s TTL on the fake clock."""
    return PriceCacheStore(cache_file, ttl_seconds=60, clock=clock)


@pytest.fixture
def make_response() -> Callable[..., MagicMock]:
    """Factory for fake requests.Response objects."""

    def _make(status_code: int = 200, json_body: Any = None, text: Optional[str] = None) -> MagicMock:
        response = MagicMock()
        response.status_code = status_code
        if json_body is not None:
            response.json.return_value = json_body
            response.text = json.dumps(json_body)
        else:
            response.json.side_effect = ValueError("No JSON object could be decoded")
            response.text = text or ""
        return response

    return _make


@pytest.fixture
def temp_config(tmp_path) -> Config:
    """
    Provide a fresh Config isolated from the user's files and environment.

    This fixture GUARANTEES a clean config or fails loudly.
    """
    config = Config(config_file=tmp_path / "config.json", use_env=False)

    assert config.app_id is None, f"FIXTURE CONTAMINATED! app_id={config.app_id}"
    assert config.cache_ttl_seconds == 0, \
        f"FIXTURE CONTAMINATED! ttl={config.cache_ttl_seconds}"
    assert config.backpack_tf_api_key is None, "FIXTURE CONTAMINATED! api key set"

    return config


def pytest_sessionstart(session):  # pragma: no cover - test harness init
    """Enable faulthandler so a hung worker thread dumps all stacks."""
    try:
        faulthandler.enable(file=sys.stderr, all_threads=True)
    except Exception:
        pass
