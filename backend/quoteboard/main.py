"""FastAPI application entrypoint."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from quoteboard import __version__
from quoteboard.api.routes import api_router
from quoteboard.cache import ProxyCaches
from quoteboard.config import AppSettings, get_settings
from quoteboard.core.errors import register_exception_handlers
from quoteboard.core.logging import setup_logging
from quoteboard.core.telemetry import setup_telemetry
from quoteboard.providers.alpha_vantage import AlphaVantageClient, get_alpha_vantage_client

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _lifespan(app: FastAPI):
    setup_logging()
    settings: AppSettings = app.state.settings
    if not settings.alphavantage_api_key:
        logger.warning("ALPHAVANTAGE_API_KEY is not set; proxy endpoints will report a configuration error")
    logger.info("Starting %s with settings %s", settings.app_name, settings.dict_for_logging())
    try:
        yield
    finally:
        await app.state.provider.aclose()
        app.state.caches.clear()


def create_app(
    settings: AppSettings | None = None,
    *,
    provider: AlphaVantageClient | None = None,
    caches: ProxyCaches | None = None,
) -> FastAPI:
    """Build the proxy application; collaborators can be injected for tests."""

    settings = settings or get_settings()
    app = FastAPI(title=settings.app_name, version=__version__, lifespan=_lifespan)

    app.state.settings = settings
    app.state.provider = provider if provider is not None else get_alpha_vantage_client(settings)
    app.state.caches = caches if caches is not None else ProxyCaches.from_settings(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_origin_regex=r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$",
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)
    app.include_router(api_router)

    @app.get("/health", tags=["health"])
    async def health() -> dict[str, str]:
        """Return service readiness metadata."""

        return {
            "status": "ok",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    setup_telemetry(app, settings)
    return app


app = create_app()

__all__ = ["app", "create_app"]
