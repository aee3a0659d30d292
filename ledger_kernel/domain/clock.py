"""
Clock -- the time source for amendment intake.

Responsibility:
    ``ProjectService`` stamps each amendment's ``created_at`` from an
    injected Clock, never from ``datetime.now()``, so ledgers recorded in
    tests carry reproducible timestamps.

Architecture position:
    Kernel > Domain.  ``SystemClock`` is the only implementation that
    reads wall-clock time.

Failure modes:
    - ValueError when a SequentialClock is built from an empty list.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone


class Clock(ABC):
    """
    Source of timezone-aware timestamps.

    Subclasses implement ``now``; ``now_utc`` normalizes it to UTC.
    """

    @abstractmethod
    def now(self) -> datetime:
        ...

    def now_utc(self) -> datetime:
        return self.now().astimezone(timezone.utc)


class SystemClock(Clock):
    """Wall-clock UTC time."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class DeterministicClock(Clock):
    """
    Frozen test clock.

    Returns the same instant until moved with ``advance``, ``tick`` or
    ``set_time``.  Defaults to 2025-01-01 12:00 UTC.
    """

    DEFAULT_TIME = datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

    def __init__(self, fixed_time: datetime | None = None):
        self._current = fixed_time or self.DEFAULT_TIME

    def now(self) -> datetime:
        return self._current

    def set_time(self, time: datetime) -> None:
        self._current = time

    def advance(self, seconds: int = 1) -> None:
        self._current = self._current + timedelta(seconds=seconds)

    def tick(self) -> datetime:
        """Move forward one second and return the new instant."""
        self.advance(1)
        return self._current


class SequentialClock(Clock):
    """
    Replays a fixed list of instants, one per ``now()`` call.

    Once the list is used up the final instant repeats.  Feeding it
    decreasing times exercises the intake's non-decreasing timestamp rule.
    """

    def __init__(self, times: list[datetime]):
        if not times:
            raise ValueError("SequentialClock requires at least one time")
        self._pending = list(times)
        self._last = self._pending[0]

    def now(self) -> datetime:
        if self._pending:
            self._last = self._pending.pop(0)
        return self._last
