"""Credential diagnostic endpoint."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from quoteboard.api.dependencies import get_provider
from quoteboard.core.errors import RateLimited
from quoteboard.providers.alpha_vantage import AlphaVantageClient, AlphaVantageError, ProviderErrorKind
from quoteboard.schemas import ApiKeyCheckResponse, ErrorResponse

router = APIRouter()
logger = logging.getLogger(__name__)

SAMPLE_SYMBOL = "IBM"


@router.get(
    "/test-api-key",
    response_model=ApiKeyCheckResponse,
    responses={401: {"model": ErrorResponse}, 429: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def test_api_key(provider: AlphaVantageClient = Depends(get_provider)) -> Any:
    """Spend one provider call to check that the configured key is accepted."""

    if not provider.configured:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "API key not found"},
        )
    try:
        payload = await provider.global_quote(SAMPLE_SYMBOL)
    except AlphaVantageError as exc:
        if exc.kind is ProviderErrorKind.INVALID_CREDENTIAL:
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content={"error": "Invalid API key", "details": exc.message},
            )
        if exc.kind is ProviderErrorKind.RATE_LIMITED:
            return JSONResponse(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                content={"error": RateLimited.default_message, "details": exc.message},
            )
        logger.error("Error testing API key: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Failed to test API key", "details": exc.message},
        )

    quote = payload.get("Global Quote")
    sample = (
        {"symbol": quote.get("01. symbol"), "price": quote.get("05. price")}
        if quote
        else payload
    )
    return ApiKeyCheckResponse(success=True, message="API key is valid and working", sample=sample)


__all__ = ["router"]
