from sqlalchemy import Column, String, Text, DateTime
from sqlalchemy.sql import func
from shortlink_app.database.connection import Base


class StorageItem(Base):
    """
    One key/value slot of the SQL storage backend.

    The registry keeps whole serialized collections per key (all URL records
    under one key, all log entries under another), so a row holds a blob.
    """
    __tablename__ = "storage_items"

    key = Column(String(255), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
