from __future__ import annotations

import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class QuoteSchema(BaseModel):
    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "symbol": "MSFT",
                "price": 415.5,
                "change": 2.25,
                "changePercent": 0.5444,
                "previousClose": 413.25,
                "lastUpdated": "2024-05-01T14:30:00+00:00",
            }
        },
    )

    symbol: str = Field(..., examples=["MSFT"])
    price: float
    change: float
    change_percent: float = Field(alias="changePercent")
    previous_close: float = Field(alias="previousClose")
    last_updated: datetime.datetime = Field(alias="lastUpdated")


class DailyBarSchema(BaseModel):
    date: datetime.date
    open: float
    high: float
    low: float
    close: float
    volume: int


class HistoryResponse(BaseModel):
    symbol: str
    data: list[DailyBarSchema] = Field(default_factory=list, description="Newest first")


class SearchMatchSchema(BaseModel):
    symbol: str
    name: str
    type: Optional[str] = None
    region: Optional[str] = None
    currency: Optional[str] = None


class SearchResponse(BaseModel):
    results: list[SearchMatchSchema] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    error: str
    details: Optional[Any] = None


class ApiKeyCheckResponse(BaseModel):
    success: bool
    message: str
    sample: Optional[dict[str, Any]] = None


__all__ = [
    "ApiKeyCheckResponse",
    "DailyBarSchema",
    "ErrorResponse",
    "HistoryResponse",
    "QuoteSchema",
    "SearchMatchSchema",
    "SearchResponse",
]
