"""Route registration helpers."""

from __future__ import annotations

from fastapi import APIRouter

from .diagnostics import router as diagnostics_router
from .stock import router as stock_router

api_router = APIRouter(prefix="/api")
api_router.include_router(stock_router, tags=["stock"])
api_router.include_router(diagnostics_router, tags=["diagnostics"])

__all__ = ["api_router"]
