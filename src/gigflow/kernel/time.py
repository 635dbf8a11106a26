"""
Time provider abstraction for deterministic testing

Check-in stages, funds release, suspensions and discrepancy reports are all
timestamped. Injecting the clock keeps those timestamps reproducible in tests.
"""

from datetime import datetime, timedelta, timezone
from typing import Protocol


class TimeProvider(Protocol):
    """Protocol for time providers - allows deterministic testing"""

    def now(self) -> datetime:
        """Return current UTC datetime"""
        ...


class RealTimeProvider:
    """Production time provider using system clock"""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class TestTimeProvider:
    """
    Controllable time provider for deterministic tests

    Allows tests to freeze time and advance it between check-in stages.
    """

    __test__ = False  # not a pytest test class

    def __init__(self, initial_time: datetime | None = None) -> None:
        """
        Initialize with optional fixed time

        Args:
            initial_time: Starting time (defaults to Unix epoch)
        """
        self._current_time = initial_time or datetime(1970, 1, 1, tzinfo=timezone.utc)

    def now(self) -> datetime:
        return self._current_time

    def set_time(self, dt: datetime) -> None:
        """Set current time to specific value"""
        self._current_time = dt

    def advance_minutes(self, minutes: int) -> None:
        """Advance time by specified minutes"""
        self._current_time += timedelta(minutes=minutes)

    def advance_hours(self, hours: int) -> None:
        """Advance time by specified hours"""
        self._current_time += timedelta(hours=hours)


default_time_provider: TimeProvider = RealTimeProvider()
