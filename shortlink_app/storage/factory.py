"""
Factory for creating key/value storage instances.
Simple, clean factory with singleton caching.
"""

import logging
from enum import Enum

import redis

from .strategies import KeyValueStorage, InMemoryStorage, SQLStorage, RedisStorage
from shortlink_app.config import settings
from shortlink_app.database.connection import create_db_engine

logger = logging.getLogger(__name__)


class StorageBackend(Enum):
    """Available storage backends"""
    SQLITE = "sqlite"
    MEMORY = "memory"
    REDIS = "redis"


class StorageFactory:
    """
    Simple factory for creating storage instances.
    
    Uses Singleton Pattern - creates instance once, reuses it.
    Gets configuration from settings (not passed as parameters).
    """
    
    _instance: KeyValueStorage = None  # Single cached instance
    
    @classmethod
    def create(cls, backend: StorageBackend) -> KeyValueStorage:
        """
        Create or return cached storage instance.
        
        Args:
            backend: Type of storage backend (from enum)
            
        Returns:
            Singleton storage instance
        """
        if cls._instance is not None:
            return cls._instance
        
        if backend == StorageBackend.SQLITE:
            cls._instance = SQLStorage(create_db_engine(settings.database_url))
            logger.info("SQL storage initialized", extra={"database_url": settings.database_url})
            
        elif backend == StorageBackend.MEMORY:
            cls._instance = InMemoryStorage()
            logger.info("In-memory storage initialized")
            
        elif backend == StorageBackend.REDIS:
            try:
                redis_client = redis.from_url(
                    settings.redis_url,
                    socket_connect_timeout=2,
                    socket_timeout=2,
                )
                # Test connection immediately
                redis_client.ping()
                cls._instance = RedisStorage(redis_client)
                logger.info("Redis storage initialized")
                
            except (redis.RedisError, ValueError) as e:
                logger.warning(
                    "Redis connection failed, falling back to in-memory storage",
                    extra={"error": str(e)},
                )
                cls._instance = InMemoryStorage()
            
        else:
            raise ValueError(f"Unknown storage backend: {backend}")
        
        return cls._instance
    
    @classmethod
    def clear_instance(cls):
        """Clear cached instance (for testing)"""
        cls._instance = None
