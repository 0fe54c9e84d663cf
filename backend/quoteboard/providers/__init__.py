"""Market-data provider adapters."""

from .alpha_vantage import (
    AlphaVantageClient,
    AlphaVantageError,
    ProviderErrorKind,
    classify_provider_message,
    get_alpha_vantage_client,
)

__all__ = [
    "AlphaVantageClient",
    "AlphaVantageError",
    "ProviderErrorKind",
    "classify_provider_message",
    "get_alpha_vantage_client",
]
