"""Error taxonomy shared by the proxy endpoints."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class QuoteboardError(RuntimeError):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInput(QuoteboardError):
    """A required request parameter is missing or blank."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class ConfigurationError(QuoteboardError):
    """Provider credentials are not configured for this process."""

    default_message = "API configuration error. API key is not configured."


class InvalidCredential(QuoteboardError):
    """The provider rejected the configured API key."""

    default_message = "API configuration error. Please check your Alpha Vantage API key."


class RateLimited(QuoteboardError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    default_message = "API rate limit exceeded. Please try again later."


class NotFound(QuoteboardError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "No data found"


class UpstreamFailure(QuoteboardError):
    """Transport failure or an unrecognised provider error."""

    default_message = "Failed to fetch data from provider"


async def _handle_quoteboard_error(request: Request, exc: QuoteboardError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.info("%s %s rejected (%d): %s", request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


def register_exception_handlers(app: FastAPI) -> None:
    """Render every :class:`QuoteboardError` as ``{"error": message}``."""

    app.add_exception_handler(QuoteboardError, _handle_quoteboard_error)  # type: ignore[arg-type]


__all__ = [
    "ConfigurationError",
    "InvalidCredential",
    "InvalidInput",
    "NotFound",
    "QuoteboardError",
    "RateLimited",
    "UpstreamFailure",
    "register_exception_handlers",
]
