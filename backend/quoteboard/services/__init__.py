"""Payload normalisation helpers."""

from .normalize import parse_daily_series, parse_global_quote, parse_search_matches

__all__ = ["parse_daily_series", "parse_global_quote", "parse_search_matches"]
