"""
Test configuration and fixtures for the short link registry.
This centralizes all test setup, making individual tests clean.
"""

import os
import random

# Keep the app off the SQLite file while tests import it
os.environ.setdefault("STORAGE_BACKEND", "memory")
os.environ.setdefault("PERSIST_LOGS", "false")

import logging

import pytest
from fastapi.testclient import TestClient

from main import app
from shortlink_app.dependencies import get_clock, get_log_handler, get_storage
from shortlink_app.services.short_code_strategies import RandomShortCodeStrategy
from shortlink_app.services.url_service import URLService
from shortlink_app.storage.record_store import UrlRecordStore
from shortlink_app.storage.strategies import InMemoryStorage
from shortlink_app.utils.clock import FixedClock
from shortlink_app.utils.logging import APP_LOGGER, PersistentLogHandler


@pytest.fixture(scope="function")
def storage():
    """Fresh in-memory key/value storage for each test"""
    return InMemoryStorage()


@pytest.fixture(scope="function")
def clock():
    return FixedClock()


@pytest.fixture(scope="function")
def record_store(storage):
    return UrlRecordStore(storage, key="shortened-urls")


@pytest.fixture(scope="function")
def url_service(record_store, clock):
    """Service with seeded randomness so generated codes are reproducible"""
    rng = random.Random(1234)
    return URLService(
        store=record_store,
        clock=clock,
        short_code_strategy=RandomShortCodeStrategy(rng=rng),
        base_url="http://sho.rt",
        rng=rng,
    )


@pytest.fixture(scope="function")
def log_handler(storage):
    """Persistent log handler attached to the application logger for one test"""
    handler = PersistentLogHandler(storage, key="app-logs")
    app_logger = logging.getLogger(APP_LOGGER)
    previous_level = app_logger.level
    app_logger.addHandler(handler)
    app_logger.setLevel(logging.DEBUG)
    try:
        yield handler
    finally:
        app_logger.removeHandler(handler)
        app_logger.setLevel(previous_level)


@pytest.fixture(scope="function")
def client(storage, clock, log_handler):
    """
    Create a test client with storage, clock and log dependencies overridden.
    This is the main fixture that API tests will use.
    """
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_log_handler] = lambda: log_handler

    with TestClient(app) as test_client:
        yield test_client

    # Clean up overrides
    app.dependency_overrides.clear()
