"""Quoteboard: a cached market-data proxy and a rate-limited dashboard client."""

__version__ = "0.1.0"
