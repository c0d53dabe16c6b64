from pydantic import BaseModel
from typing import Any, Dict, Literal, Optional


LogLevel = Literal["info", "warn", "error", "debug"]


class LogEntry(BaseModel):
    """One application log entry as persisted under the log storage key"""

    level: LogLevel
    message: str
    timestamp: str  # ISO-8601
    context: Optional[Dict[str, Any]] = None
