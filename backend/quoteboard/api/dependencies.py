"""Request-scoped accessors for objects owned by the application."""

from __future__ import annotations

from fastapi import Request

from quoteboard.cache import ProxyCaches
from quoteboard.config import AppSettings
from quoteboard.providers.alpha_vantage import AlphaVantageClient


def get_caches(request: Request) -> ProxyCaches:
    return request.app.state.caches


def get_provider(request: Request) -> AlphaVantageClient:
    return request.app.state.provider


def get_app_settings(request: Request) -> AppSettings:
    return request.app.state.settings


__all__ = ["get_app_settings", "get_caches", "get_provider"]
