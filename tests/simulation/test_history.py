from __future__ import annotations

import pytest

from compartment_markov.simulation.history import HistoryBuffer, HistorySample


class TestHistoryBuffer:
    def test_append_returns_sample(self) -> None:
        buffer = HistoryBuffer(capacity=3)
        sample = buffer.append(0, 5, 6)
        assert sample == HistorySample(step=0, count_a=5, count_b=6)
        assert buffer.latest() == sample

    def test_evicts_oldest_first(self) -> None:
        buffer = HistoryBuffer(capacity=3)
        for step in range(5):
            buffer.append(step, step, 0)
        assert [s.step for s in buffer.snapshot()] == [2, 3, 4]
        assert len(buffer) == 3

    def test_snapshot_is_detached(self) -> None:
        buffer = HistoryBuffer(capacity=3)
        buffer.append(0, 1, 1)
        snap = buffer.snapshot()
        buffer.append(1, 2, 0)
        assert len(snap) == 1

    def test_clear(self) -> None:
        buffer = HistoryBuffer()
        buffer.append(0, 1, 1)
        buffer.clear()
        assert len(buffer) == 0
        assert buffer.latest() is None
        assert buffer.capacity == 200

    def test_iteration_tolerates_appends(self) -> None:
        buffer = HistoryBuffer(capacity=2)
        buffer.append(0, 1, 1)
        buffer.append(1, 1, 1)
        for sample in buffer:
            buffer.append(sample.step + 10, 0, 0)
        assert [s.step for s in buffer] == [10, 11]

    def test_invalid_capacity(self) -> None:
        with pytest.raises(ValueError, match="capacity"):
            HistoryBuffer(capacity=0)
