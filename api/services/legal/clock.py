"""
M&O Legal Desk - Clock Interface

Abstraction over waiting so retry backoff can be tested without sleeping.
"""

import asyncio
import time
from abc import ABC, abstractmethod


class Clock(ABC):
    """Abstract clock interface for testable waits."""

    @abstractmethod
    def monotonic(self) -> float:
        """Seconds from an arbitrary fixed point."""
        pass

    @abstractmethod
    async def sleep(self, seconds: float) -> None:
        """Wait for the given duration."""
        pass


class SystemClock(Clock):
    """Real event-loop clock."""

    def monotonic(self) -> float:
        return time.monotonic()

    async def sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)


class FakeClock(Clock):
    """
    Fake clock for testing.

    Sleeping returns immediately, records the duration and advances time.
    """

    def __init__(self, start: float = 0.0):
        self._now = start
        self._sleep_calls: list[float] = []

    def monotonic(self) -> float:
        return self._now

    async def sleep(self, seconds: float) -> None:
        """Record sleep call and advance time."""
        self._sleep_calls.append(seconds)
        self._now += seconds

    @property
    def sleep_calls(self) -> list[float]:
        """Get list of sleep durations that were called."""
        return self._sleep_calls.copy()
