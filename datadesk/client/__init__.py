"""Async client for the dashboard API with an optimistic query cache."""

from datadesk.client.api import ApiError, DashboardClient
from datadesk.client.cache import CacheSnapshot, QueryCache, QueryKey
from datadesk.client.mutations import OptimisticMutation, TempIdFactory, run_mutation

__all__ = [
    "ApiError",
    "CacheSnapshot",
    "DashboardClient",
    "OptimisticMutation",
    "QueryCache",
    "QueryKey",
    "TempIdFactory",
    "run_mutation",
]
