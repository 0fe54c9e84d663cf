"""Configuration package for the Quoteboard service and dashboard."""

from .settings import AppSettings, ClientSettings, get_client_settings, get_settings

__all__ = ["AppSettings", "ClientSettings", "get_client_settings", "get_settings"]
