"""
Error types shared by the market clients and the manager.

Fetch operations do not raise these; they return them inside ``Err`` so a
batch lookup can carry a failure for one item next to successes for the
others.
"""

from __future__ import annotations

from typing import Optional


class MarketError(Exception):
    """Base class for all price lookup failures."""

    def __str__(self) -> str:
        return self.args[0] if self.args else self.__class__.__name__


class ConfigurationError(MarketError):
    """A required identifier (app id, item name, API key) is missing."""
    pass


class TransportError(MarketError):
    """The HTTP request never produced a response."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class UpstreamStatusError(MarketError):
    """The upstream answered with a non-200 status."""

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code


class UpstreamLogicError(MarketError):
    """Well-formed response that reports failure (e.g. ``success`` is false)."""
    pass


class FormatError(MarketError):
    """Unsupported output format requested from the aggregate provider."""
    pass
