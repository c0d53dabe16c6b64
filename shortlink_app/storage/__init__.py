"""
Storage module for the short link registry.

This module implements the Strategy Pattern for pluggable key/value
storage, plus the record store that keeps all URL records in one blob.
"""

from .strategies import (
    KeyValueStorage,
    InMemoryStorage,
    SQLStorage,
    RedisStorage,
    StorageBackendError,
)
from .factory import StorageFactory, StorageBackend
from .record_store import UrlRecordStore

__all__ = [
    "KeyValueStorage",
    "InMemoryStorage",
    "SQLStorage",
    "RedisStorage",
    "StorageBackendError",
    "StorageFactory",
    "StorageBackend",
    "UrlRecordStore",
]
