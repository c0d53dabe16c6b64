"""Application-wide logging initialization

Call `initialize_logging()` once at process start, before any other
logging is done.

Besides the console, every record logged under the `shortlink_app` logger
is appended to an application log kept in key/value storage:

{
    "level": "info",
    "message": "Short URL created successfully",
    "timestamp": "2024-01-01T12:00:00.000Z",
    "context": {"short_code": "aB3dE9", "original_url": "https://example.com"}
}

`context` collects the `extra={...}` fields passed to the logging call.
"""

import json
import logging
import logging.config
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import TypeAdapter, ValidationError

from shortlink_app.schemas.log import LogEntry
from shortlink_app.storage.strategies import KeyValueStorage, StorageBackendError


APP_LOGGER = "shortlink_app"

LEVEL_NAMES = {
    logging.DEBUG: "debug",
    logging.INFO: "info",
    logging.WARNING: "warn",
    logging.ERROR: "error",
    logging.CRITICAL: "error",
}

_entries_adapter = TypeAdapter(List[LogEntry])


class PersistentLogHandler(logging.Handler):
    """
    Keeps every log record as a LogEntry and writes the full list to storage.

    Entries are loaded once when the handler is created and persisted after
    each new entry. Storage failures are ignored: logging never breaks the
    operation being logged.
    """

    STANDARD_ATTRS = frozenset(
        {
            'args',
            'asctime',
            'created',
            'exc_info',
            'exc_text',
            'filename',
            'funcName',
            'levelname',
            'levelno',
            'lineno',
            'message',
            'module',
            'msecs',
            'msg',
            'name',
            'pathname',
            'process',
            'processName',
            'relativeCreated',
            'stack_info',
            'thread',
            'threadName',
            'taskName',
        }
    )

    def __init__(self, storage: KeyValueStorage, key: str = "app-logs", level: int = logging.DEBUG):
        super().__init__(level)
        self.storage = storage
        self.key = key
        self._entries: List[LogEntry] = []
        self.load_persisted_logs()

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self._entries.append(self.to_entry(record))
            self._persist()
        except Exception:
            self.handleError(record)

    def to_entry(self, record: logging.LogRecord) -> LogEntry:
        # fmt: off
        timestamp = datetime.fromtimestamp(record.created, tz=timezone.utc) \
                            .isoformat(timespec="milliseconds") \
                            .replace("+00:00", "Z")
        # fmt: on

        context = {
            key: value
            for key, value in record.__dict__.items()
            if key not in self.STANDARD_ATTRS
        }
        if record.exc_info and record.exc_info[1] is not None:
            context["exception"] = repr(record.exc_info[1])

        return LogEntry(
            level=LEVEL_NAMES.get(record.levelno, "info"),
            message=record.getMessage(),
            timestamp=timestamp,
            # Round-trip through json so arbitrary objects become strings
            context=json.loads(json.dumps(context, default=str)) if context else None,
        )

    def get_logs(self, level: Optional[str] = None) -> List[LogEntry]:
        if level is None:
            return list(self._entries)
        return [entry for entry in self._entries if entry.level == level]

    def clear_logs(self) -> None:
        self._entries.clear()
        self._persist()

    def load_persisted_logs(self) -> None:
        try:
            stored = self.storage.get_item(self.key)
            if stored:
                self._entries = _entries_adapter.validate_json(stored)
        except (StorageBackendError, ValidationError):
            pass

    def _persist(self) -> None:
        payload = _entries_adapter.dump_json(self._entries, exclude_none=True).decode("utf-8")
        try:
            self.storage.set_item(self.key, payload)
        except StorageBackendError:
            pass


def initialize_logging(
    storage: Optional[KeyValueStorage] = None,
    key: str = "app-logs",
    log_level: str = "INFO"
) -> Optional[PersistentLogHandler]:
    """
    Configure console logging for the application logger and, when a
    storage is given, attach a PersistentLogHandler to it.

    Returns:
        The persistent handler, or None without storage
    """
    logging.config.dictConfig(
        {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {
                'console': {
                    'format': '%(asctime)s %(levelname)s [%(name)s] %(message)s',
                }
            },
            'handlers': {
                'stdout': {
                    'class': 'logging.StreamHandler',
                    'formatter': 'console',
                    'stream': 'ext://sys.stdout',
                }
            },
            'loggers': {
                APP_LOGGER: {
                    'level': log_level.upper(),
                    'handlers': ['stdout'],
                },
            },
        }
    )

    if storage is None:
        return None

    handler = PersistentLogHandler(storage, key=key)
    logging.getLogger(APP_LOGGER).addHandler(handler)
    return handler
