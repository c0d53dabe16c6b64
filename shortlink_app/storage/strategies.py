"""
Key/value storage strategies using Strategy Pattern.

The registry persists whole serialized collections under fixed keys, the
way a browser app would use local storage. These backends provide that
interface:
- InMemory: Development/testing
- SQL (SQLite by default): Single-node persistence
- Redis: Shared persistence
"""

from abc import ABC, abstractmethod
from typing import Dict, Optional

import redis
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from shortlink_app.database.connection import Base
from shortlink_app.models.storage_item import StorageItem


class StorageBackendError(Exception):
    """Raised by a backend when a read or write could not be performed"""
    pass


class KeyValueStorage(ABC):
    """
    Abstract base class for key/value storage strategies.
    
    Values are strings (serialized blobs). Reads of a missing key return
    None. Failures surface as StorageBackendError so callers can decide
    whether to degrade or abort.
    """
    
    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """
        Get the value stored under key.
        
        Args:
            key: Storage key
            
        Returns:
            Stored value or None if the key is absent
        """
        pass
    
    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """
        Store value under key, replacing whatever was there.
        
        Raises:
            StorageBackendError: if the value could not be written
        """
        pass
    
    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Remove key; missing keys are ignored"""
        pass
    
    @abstractmethod
    def clear(self) -> None:
        """Remove every key owned by this storage"""
        pass


class InMemoryStorage(KeyValueStorage):
    """
    In-memory storage using a Python dict.
    
    Lost on restart. An optional quota (total characters across all values)
    mimics the "storage full" failures of browser local storage.
    """
    
    def __init__(self, quota: Optional[int] = None):
        """
        Initialize in-memory storage.
        
        Args:
            quota: Maximum total size of stored values, None for unlimited
        """
        self._items: Dict[str, str] = {}
        self.quota = quota
    
    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)
    
    def set_item(self, key: str, value: str) -> None:
        if self.quota is not None:
            used = sum(len(v) for k, v in self._items.items() if k != key)
            if used + len(value) > self.quota:
                raise StorageBackendError(
                    f"Storage quota of {self.quota} exceeded while writing {key!r}"
                )
        self._items[key] = value
    
    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)
    
    def clear(self) -> None:
        self._items.clear()


class SQLStorage(KeyValueStorage):
    """
    SQL implementation backed by a single key/value table.
    
    Works with any SQLAlchemy URL; SQLite is the default and needs no setup.
    Each call opens and closes its own session.
    """
    
    def __init__(self, engine: Engine):
        """
        Initialize SQL storage and create the table if it doesn't exist.
        
        Args:
            engine: SQLAlchemy engine
        """
        self.engine = engine
        self.session_factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
        Base.metadata.create_all(bind=engine)
    
    def get_item(self, key: str) -> Optional[str]:
        try:
            with self.session_factory() as db:
                item = db.get(StorageItem, key)
                return item.value if item else None
        except SQLAlchemyError as e:
            raise StorageBackendError(f"SQL read of {key!r} failed: {e}") from e
    
    def set_item(self, key: str, value: str) -> None:
        try:
            with self.session_factory() as db:
                db.merge(StorageItem(key=key, value=value))
                db.commit()
        except SQLAlchemyError as e:
            raise StorageBackendError(f"SQL write of {key!r} failed: {e}") from e
    
    def remove_item(self, key: str) -> None:
        try:
            with self.session_factory() as db:
                db.query(StorageItem).filter(StorageItem.key == key).delete()
                db.commit()
        except SQLAlchemyError as e:
            raise StorageBackendError(f"SQL delete of {key!r} failed: {e}") from e
    
    def clear(self) -> None:
        try:
            with self.session_factory() as db:
                db.query(StorageItem).delete()
                db.commit()
        except SQLAlchemyError as e:
            raise StorageBackendError(f"SQL clear failed: {e}") from e


class RedisStorage(KeyValueStorage):
    """
    Redis implementation.
    
    Keys are namespaced with a prefix so clear() only touches this
    application's data.
    """
    
    def __init__(self, redis_client, prefix: str = "shortlink:"):
        """
        Initialize Redis storage.
        
        Args:
            redis_client: Redis client instance (redis.Redis)
            prefix: Namespace prepended to every key
        """
        self.redis = redis_client
        self.prefix = prefix
    
    def _key(self, key: str) -> str:
        return f"{self.prefix}{key}"
    
    def get_item(self, key: str) -> Optional[str]:
        try:
            value = self.redis.get(self._key(key))
        except redis.RedisError as e:
            raise StorageBackendError(f"Redis read of {key!r} failed: {e}") from e
        if value is None:
            return None
        return value.decode("utf-8") if isinstance(value, bytes) else value
    
    def set_item(self, key: str, value: str) -> None:
        try:
            self.redis.set(self._key(key), value)
        except redis.RedisError as e:
            raise StorageBackendError(f"Redis write of {key!r} failed: {e}") from e
    
    def remove_item(self, key: str) -> None:
        try:
            self.redis.delete(self._key(key))
        except redis.RedisError as e:
            raise StorageBackendError(f"Redis delete of {key!r} failed: {e}") from e
    
    def clear(self) -> None:
        try:
            keys = list(self.redis.scan_iter(match=f"{self.prefix}*"))
            if keys:
                self.redis.delete(*keys)
        except redis.RedisError as e:
            raise StorageBackendError(f"Redis clear failed: {e}") from e
