"""Dashboard client: proxy wrapper, request queue and session state."""

from .dashboard import DashboardSession
from .proxy_client import ProxyClient, ProxyRequestError
from .queue import BatchResult, RequestQueue
from .scheduler import AsyncioScheduler, ScheduledHandle, Scheduler
from .watchlist import Watchlist

__all__ = [
    "AsyncioScheduler",
    "BatchResult",
    "DashboardSession",
    "ProxyClient",
    "ProxyRequestError",
    "RequestQueue",
    "ScheduledHandle",
    "Scheduler",
    "Watchlist",
]
