"""
Time sources for the registry.

The service never calls datetime.now() directly: it asks its clock, so
expiry can be tested against a fixed "now".
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Optional


class Clock(ABC):
    """Abstract time source"""

    @abstractmethod
    def now(self) -> datetime:
        """Current time as an aware UTC datetime"""
        pass


class SystemClock(Clock):
    """Wall clock time in UTC"""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock(Clock):
    """
    Clock that only moves when told to.

    Used in tests to simulate the passage of time.
    """

    def __init__(self, start: Optional[datetime] = None):
        self._now = start or datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def now(self) -> datetime:
        return self._now

    def set(self, moment: datetime) -> None:
        self._now = moment

    def advance(self, **kwargs) -> datetime:
        """Move forward by timedelta(**kwargs) and return the new time"""
        self._now = self._now + timedelta(**kwargs)
        return self._now
