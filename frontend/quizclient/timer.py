"""
timer.py — the quiz countdown.

The countdown does not schedule itself; whoever owns it calls ``tick`` once
per elapsed second (the Take Quiz page does this from a fragment that reruns
every second). Stopping it makes further ticks no-ops, so no tick can land
after a submission has started.
"""
from __future__ import annotations

from typing import Callable, Optional


class Countdown:
    def __init__(self, seconds: int, on_expire: Optional[Callable[[], None]] = None):
        self.remaining = max(0, int(seconds))
        self._on_expire = on_expire
        self._running = False
        self._fired = False

    @property
    def running(self) -> bool:
        return self._running

    @property
    def expired(self) -> bool:
        return self.remaining == 0

    def start(self) -> None:
        """Start ticking. A countdown seeded at zero expires immediately."""
        self._running = True
        if self.expired:
            self._expire()

    def stop(self) -> None:
        self._running = False

    def resume(self) -> None:
        if not self.expired:
            self._running = True

    def tick(self) -> int:
        if not self._running:
            return self.remaining
        self.remaining = max(0, self.remaining - 1)
        if self.expired:
            self._expire()
        return self.remaining

    def _expire(self) -> None:
        self._running = False
        if self._fired:
            return
        self._fired = True
        if self._on_expire:
            self._on_expire()


def format_time(seconds: int) -> str:
    """``m:ss``"""
    seconds = max(0, int(seconds))
    return f"{seconds // 60}:{seconds % 60:02d}"
