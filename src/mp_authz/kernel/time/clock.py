"""Kernel time – Clock protocol + implementations."""
from __future__ import annotations

import time
from datetime import UTC, datetime, timedelta
from typing import Protocol


class Clock(Protocol):
    """Port: time source for cache expiry, swappable in tests."""

    def now(self) -> datetime: ...
    def timestamp(self) -> float: ...


class SystemClock:
    """Production clock; ``timestamp`` is monotonic so TTLs survive wall-clock jumps."""

    def now(self) -> datetime:
        return datetime.now(UTC)

    def timestamp(self) -> float:
        return time.monotonic()


class FrozenClock:
    """Test clock pinned to a fixed point in time."""

    def __init__(self, fixed: datetime | None = None) -> None:
        self._fixed = fixed or datetime(2026, 1, 1, 12, 0, tzinfo=UTC)

    def now(self) -> datetime:
        return self._fixed

    def timestamp(self) -> float:
        return self._fixed.timestamp()

    def advance(self, **kwargs: int | float) -> None:
        """Advance the frozen time by the given ``timedelta`` kwargs."""
        self._fixed += timedelta(**kwargs)


__all__ = ["Clock", "FrozenClock", "SystemClock"]
