"""Async client for the hosted Postgres store that holds playlists and playlist entries."""

from .client import SupabaseClient
from .exceptions import (
    StoreConnectionError,
    StoreDuplicateError,
    StoreError,
    StoreForeignKeyError,
    StoreNotFoundError,
    StoreTableMissingError,
)
from .models import StoreConfig

__all__ = [
    "SupabaseClient",
    "StoreConfig",
    "StoreError",
    "StoreConnectionError",
    "StoreDuplicateError",
    "StoreForeignKeyError",
    "StoreNotFoundError",
    "StoreTableMissingError",
]
