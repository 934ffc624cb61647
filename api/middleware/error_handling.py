"""
api.middleware.error_handling - Global error handling for API.

Lookup failures are returned by the routes as data; these handlers cover
everything that escapes a route so clients always get a JSON body.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.errors import ConfigurationError, MarketError

logger = logging.getLogger(__name__)


def _error_body(request: Request, status_code: int, message: Any, **extra: Any) -> dict[str, Any]:
    return {
        "error": message,
        "status_code": status_code,
        "path": str(request.url.path),
        **extra,
    }


def setup_error_handlers(app: FastAPI) -> None:
    """Register global error handlers on the FastAPI app."""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(request, exc.status_code, exc.detail),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        errors: list[dict[str, Any]] = []
        for error in exc.errors():
            errors.append({
                "field": " -> ".join(str(loc) for loc in error["loc"]),
                "message": error["msg"],
                "type": error["type"],
            })
        return JSONResponse(
            status_code=422,
            content=_error_body(request, 422, "Validation error", details=errors),
        )

    @app.exception_handler(MarketError)
    async def market_exception_handler(
        request: Request, exc: MarketError
    ) -> JSONResponse:
        """A MarketError raised instead of returned (e.g. Err.unwrap())."""
        status_code = 400 if isinstance(exc, ConfigurationError) else 502
        logger.warning(f"Market error on {request.url.path}: {exc}")
        return JSONResponse(
            status_code=status_code,
            content=_error_body(request, status_code, str(exc)),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        logger.exception(f"Unexpected error on {request.url.path}: {exc}")

        # Don't expose internal details
        return JSONResponse(
            status_code=500,
            content=_error_body(request, 500, "Internal server error"),
        )
