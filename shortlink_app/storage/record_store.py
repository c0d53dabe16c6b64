"""
Persistent record store: every URL record, serialized as one JSON blob.

Loads and saves are all-or-nothing. There are no partial updates; callers
read the whole collection, change it, and write the whole collection back.
"""

from typing import List

from pydantic import TypeAdapter, ValidationError

from shortlink_app.exceptions import PersistenceError, StorageReadError
from shortlink_app.schemas.url import UrlRecord
from .strategies import KeyValueStorage, StorageBackendError


_records_adapter = TypeAdapter(List[UrlRecord])


class UrlRecordStore:

    def __init__(self, storage: KeyValueStorage, key: str = "shortened-urls"):
        self.storage = storage
        self.key = key

    def load(self) -> List[UrlRecord]:
        """
        Read every record.

        Returns an empty list when nothing has been stored yet.

        Raises:
            StorageReadError: backend failure or an undecodable blob
        """
        try:
            raw = self.storage.get_item(self.key)
        except StorageBackendError as e:
            raise StorageReadError(str(e)) from e

        if raw is None:
            return []

        try:
            return _records_adapter.validate_json(raw)
        except ValidationError as e:
            raise StorageReadError(
                f"Stored URL data under {self.key!r} is corrupt: {e.error_count()} error(s)"
            ) from e

    def save(self, records: List[UrlRecord]) -> None:
        """
        Replace the stored collection with records.

        Raises:
            PersistenceError: the backend rejected the write
        """
        payload = _records_adapter.dump_json(records, by_alias=True).decode("utf-8")
        try:
            self.storage.set_item(self.key, payload)
        except StorageBackendError as e:
            raise PersistenceError() from e
