"""Time source shared by booking, availability and cancellation checks."""

from datetime import datetime
from typing import Protocol


class Clock(Protocol):
    def now(self) -> datetime: ...


class SystemClock:
    """Wall clock in naive local time (appointments carry no timezone)."""

    def now(self) -> datetime:
        return datetime.now()


class FixedClock:
    """Clock frozen at a given instant."""

    def __init__(self, instant: datetime):
        self.instant = instant

    def now(self) -> datetime:
        return self.instant


system_clock = SystemClock()


def get_clock() -> Clock:
    """Dependency to get the clock."""
    return system_clock
