"""Tests for compartment_markov.simulation.scheduler."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from compartment_markov.simulation.scheduler import ManualFrameScheduler, TimerFrameScheduler


class TestManualFrameScheduler:
    def test_runs_pending_callback_once(self) -> None:
        scheduler = ManualFrameScheduler()
        calls: list[int] = []
        scheduler.request_frame(lambda: calls.append(1))
        assert scheduler.run_frame()
        assert not scheduler.run_frame()
        assert calls == [1]
        assert scheduler.frames_run == 1

    def test_requests_during_frame_wait_for_next(self) -> None:
        scheduler = ManualFrameScheduler()
        calls: list[str] = []

        def first() -> None:
            calls.append("first")
            scheduler.request_frame(lambda: calls.append("second"))

        scheduler.request_frame(first)
        scheduler.run_frame()
        assert calls == ["first"]
        assert scheduler.pending == 1
        scheduler.run_frame()
        assert calls == ["first", "second"]

    def test_cancel(self) -> None:
        scheduler = ManualFrameScheduler()
        calls: list[int] = []
        handle = scheduler.request_frame(lambda: calls.append(1))
        scheduler.cancel(handle)
        scheduler.cancel(handle)
        assert not scheduler.run_frame()
        assert calls == []

    def test_run_frames_stops_when_idle(self) -> None:
        scheduler = ManualFrameScheduler()
        remaining = [3]

        def tick() -> None:
            remaining[0] -= 1
            if remaining[0] > 0:
                scheduler.request_frame(tick)

        scheduler.request_frame(tick)
        assert scheduler.run_frames(10) == 3
        assert scheduler.pending == 0


class TestTimerFrameScheduler:
    def test_request_frame_starts_single_shot_timer(self) -> None:
        canvas = MagicMock()
        timer = canvas.new_timer.return_value
        scheduler = TimerFrameScheduler(canvas, interval_ms=20)
        callback = MagicMock()

        handle = scheduler.request_frame(callback)

        canvas.new_timer.assert_called_once_with(interval=20)
        assert handle is timer
        assert timer.single_shot is True
        timer.add_callback.assert_called_once_with(callback)
        timer.start.assert_called_once_with()

    def test_cancel_stops_timer(self) -> None:
        scheduler = TimerFrameScheduler(MagicMock())
        handle = MagicMock()
        scheduler.cancel(handle)
        handle.stop.assert_called_once_with()
        scheduler.cancel(None)

    def test_invalid_interval(self) -> None:
        with pytest.raises(ValueError, match="interval_ms"):
            TimerFrameScheduler(MagicMock(), interval_ms=0)
