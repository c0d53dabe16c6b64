from typing import List, Optional

from fastapi import APIRouter, Depends, status
from shortlink_app.schemas.log import LogEntry, LogLevel
from shortlink_app.dependencies import get_log_handler
from shortlink_app.utils.logging import PersistentLogHandler

router = APIRouter(prefix="/logs", tags=["logs"])


@router.get("/", response_model=List[LogEntry], response_model_exclude_none=True)
def list_logs(
    level: Optional[LogLevel] = None,
    log_handler: Optional[PersistentLogHandler] = Depends(get_log_handler)
):
    """Application log entries, oldest first"""
    if log_handler is None:
        return []
    return log_handler.get_logs(level)


@router.delete("/", status_code=status.HTTP_204_NO_CONTENT)
def clear_logs(log_handler: Optional[PersistentLogHandler] = Depends(get_log_handler)):
    if log_handler is not None:
        log_handler.clear_logs()
