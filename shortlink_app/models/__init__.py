"""
Database models for the SQL storage backend.

URL records and click events are not mapped to tables: they are stored as
JSON blobs inside StorageItem rows.
"""

from .storage_item import StorageItem

__all__ = ["StorageItem"]
