"""Time sources for token expiry decisions.

Cached client-credentials tokens and introspection verdicts read the time
through an injected :class:`Clock`; :class:`ManualClock` lets callers (and the
test-suite) move time forward explicitly.

>>> clock = ManualClock(100.0)
>>> clock.advance(5)
>>> clock()
105.0
"""

from __future__ import annotations

import threading
import time
from typing import Protocol, runtime_checkable


@runtime_checkable
class Clock(Protocol):
    def __call__(self) -> float: ...


def default_clock() -> float:
    return time.time()


class ManualClock:
    """Settable clock; thread-safe so refresh tests can share it."""

    def __init__(self, now: float = 0.0) -> None:
        self._now = float(now)
        self._lock = threading.Lock()

    def __call__(self) -> float:
        with self._lock:
            return self._now

    def advance(self, seconds: float) -> None:
        if seconds < 0:
            raise ValueError("a clock cannot run backwards")
        with self._lock:
            self._now += seconds

    def set(self, now: float) -> None:
        with self._lock:
            self._now = float(now)
