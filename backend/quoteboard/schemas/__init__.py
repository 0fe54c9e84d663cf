"""Pydantic schema exports."""

from .quotes import (
    ApiKeyCheckResponse,
    DailyBarSchema,
    ErrorResponse,
    HistoryResponse,
    QuoteSchema,
    SearchMatchSchema,
    SearchResponse,
)

__all__ = [
    "ApiKeyCheckResponse",
    "DailyBarSchema",
    "ErrorResponse",
    "HistoryResponse",
    "QuoteSchema",
    "SearchMatchSchema",
    "SearchResponse",
]
