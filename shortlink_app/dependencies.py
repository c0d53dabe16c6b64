"""
FastAPI dependencies for dependency injection.

This module provides singleton instances of storage, the record store,
the clock and the persistent log that are injected into the service
and routes.

Pattern: Dependency Injection
- Loose coupling between components
- Easy to test (override with in-memory storage and a fixed clock)
- Flexible (swap storage backends via config)
"""

from functools import lru_cache
from typing import Optional

from fastapi import Depends

from shortlink_app.config import settings
from shortlink_app.services.short_code_strategies import RandomShortCodeStrategy
from shortlink_app.services.url_service import URLService
from shortlink_app.storage.factory import StorageFactory, StorageBackend
from shortlink_app.storage.record_store import UrlRecordStore
from shortlink_app.storage.strategies import KeyValueStorage
from shortlink_app.utils.clock import Clock, SystemClock
from shortlink_app.utils.logging import PersistentLogHandler, initialize_logging


@lru_cache()
def get_storage() -> KeyValueStorage:
    """
    Get storage instance (singleton).
    
    Factory gets config from settings internally.
    """
    backend = StorageBackend(settings.storage_backend)
    return StorageFactory.create(backend)


@lru_cache()
def get_clock() -> Clock:
    return SystemClock()


@lru_cache()
def get_log_handler() -> Optional[PersistentLogHandler]:
    """
    Configure logging once and return the persistent application log.

    None when log persistence is disabled in settings.
    """
    storage = get_storage() if settings.persist_logs else None
    return initialize_logging(
        storage,
        key=settings.logs_storage_key,
        log_level=settings.log_level,
    )


def get_record_store(storage: KeyValueStorage = Depends(get_storage)) -> UrlRecordStore:
    return UrlRecordStore(storage, key=settings.urls_storage_key)


def get_url_service(
    store: UrlRecordStore = Depends(get_record_store),
    clock: Clock = Depends(get_clock)
) -> URLService:
    """
    Get URLService with all dependencies injected.
    
    - Controller depends on service
    - Service depends on infrastructure (record store, clock)
    """
    return URLService(
        store=store,
        clock=clock,
        short_code_strategy=RandomShortCodeStrategy(
            length=settings.short_code_length,
            max_retries=settings.short_code_max_retries
        ),
        base_url=settings.base_url,
        default_validity_minutes=settings.default_validity_minutes
    )
