"""
Base API Client with connection pooling and error translation.
Both upstream clients (Steam Community Market, backpack.tf) inherit from this.

Requests are never retried: a failure is reported to the caller as-is.
"""

from typing import Optional, Dict, Any, Tuple, Union
import logging

import requests
from requests.adapters import HTTPAdapter

from core.constants import (
    API_TIMEOUT_CONNECT,
    API_TIMEOUT_READ,
    DEFAULT_USER_AGENT,
    POOL_CONNECTIONS,
    POOL_MAXSIZE,
)
from core.errors import TransportError

# Get logger - configuration should be done by application entrypoint, not library modules
logger = logging.getLogger(__name__)

TimeoutType = Union[int, float, Tuple[int, int], Tuple[float, float]]


class BaseAPIClient:
    """
    Base class for the upstream API clients.
    Owns one pooled requests.Session and turns transport failures into
    TransportError.
    """

    def __init__(
            self,
            base_url: str,
            user_agent: Optional[str] = None,
            timeout: TimeoutType = (API_TIMEOUT_CONNECT, API_TIMEOUT_READ),
            session: Optional[requests.Session] = None,
    ):
        """
        Args:
            base_url: Base URL for the API
            user_agent: Custom User-Agent header
            timeout: Request timeout in seconds, or (connect, read)
            session: Pre-built session (tests, shared pools)
        """
        self.base_url = base_url.rstrip('/')
        self.timeout: TimeoutType = timeout
        self.user_agent = user_agent or DEFAULT_USER_AGENT

        self.session = session or requests.Session()
        self.session.headers.update({
            'User-Agent': self.user_agent,
            'Accept': 'application/json'
        })

        if session is None:
            # Pooling only; max_retries=0 keeps failures visible to the caller
            adapter = HTTPAdapter(
                pool_connections=POOL_CONNECTIONS,
                pool_maxsize=POOL_MAXSIZE,
                max_retries=0,
            )
            self.session.mount('https://', adapter)
            self.session.mount('http://', adapter)

        logger.info(f"Initialized {self.__class__.__name__} - {self.base_url}, Pool: {POOL_MAXSIZE}")

    def _url(self, endpoint: str) -> str:
        return f"{self.base_url}/{endpoint.lstrip('/')}"

    def get(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> requests.Response:
        """
        Issue a GET and return the raw response, whatever its status.

        Raises:
            TransportError: If no response was received
        """
        url = self._url(endpoint)
        logger.debug(f"GET {url} - params: {_redact(params)}")
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning(f"Request failed: GET {endpoint}: {e}")
            raise TransportError(f"Request failed: {e}", cause=e) from e

        logger.debug(f"GET {endpoint} -> {response.status_code}")
        return response

    def close(self):
        """Clean up resources"""
        self.session.close()
        logger.info(f"Closed {self.__class__.__name__}")

    def __enter__(self):
        """Context manager entry - returns self for use in 'with' blocks."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit - ensures session is closed."""
        self.close()
        return False  # Don't suppress exceptions


def _redact(params: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Hide API keys in debug logs."""
    if not params or "key" not in params:
        return params
    return {**params, "key": "***"}
