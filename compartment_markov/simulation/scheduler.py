"""Frame schedulers: the "next frame" capability injected into a session.

A scheduler runs a callback once, at the next display frame, and hands back a
handle that can cancel it. Sessions never reschedule themselves directly.
"""

from __future__ import annotations

import itertools
from collections.abc import Callable
from typing import Any, Protocol

FrameCallback = Callable[[], None]


class FrameScheduler(Protocol):
    """Anything able to run a callback at the next frame."""

    def request_frame(self, callback: FrameCallback) -> Any:
        """Schedule ``callback`` for the next frame and return a cancel handle."""
        ...

    def cancel(self, handle: Any) -> None:
        """Cancel a pending callback; unknown or spent handles are ignored."""
        ...


class ManualFrameScheduler:
    """Scheduler advanced explicitly by the caller (tests, headless runs)."""

    def __init__(self) -> None:
        self._pending: dict[int, FrameCallback] = {}
        self._ids = itertools.count(1)
        self.frames_run = 0

    def request_frame(self, callback: FrameCallback) -> int:
        handle = next(self._ids)
        self._pending[handle] = callback
        return handle

    def cancel(self, handle: int) -> None:
        self._pending.pop(handle, None)

    @property
    def pending(self) -> int:
        return len(self._pending)

    def run_frame(self) -> bool:
        """Run every callback pending at the start of this frame.

        Callbacks requested while the frame runs wait for the next one.
        Returns ``False`` when nothing was pending.
        """
        if not self._pending:
            return False
        due = self._pending
        self._pending = {}
        for callback in due.values():
            callback()
        self.frames_run += 1
        return True

    def run_frames(self, n: int) -> int:
        """Run up to ``n`` frames; stops early when nothing is pending."""
        ran = 0
        for _ in range(n):
            if not self.run_frame():
                break
            ran += 1
        return ran


class TimerFrameScheduler:
    """Single-shot matplotlib canvas timers, one per requested frame."""

    def __init__(self, canvas: Any, interval_ms: int = 16) -> None:
        if interval_ms < 1:
            raise ValueError("interval_ms must be >= 1")
        self._canvas = canvas
        self._interval_ms = interval_ms

    def request_frame(self, callback: FrameCallback) -> Any:
        timer = self._canvas.new_timer(interval=self._interval_ms)
        timer.single_shot = True
        timer.add_callback(callback)
        timer.start()
        return timer

    def cancel(self, handle: Any) -> None:
        if handle is not None:
            handle.stop()
