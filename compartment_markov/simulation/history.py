"""Bounded rolling history of population counts."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterator
from dataclasses import dataclass

from compartment_markov.config.constants import HISTORY_CAPACITY


@dataclass(frozen=True)
class HistorySample:
    """Counts observed at one batch boundary."""

    step: int
    count_a: int
    count_b: int


class HistoryBuffer:
    """FIFO window over the most recent ``capacity`` samples."""

    def __init__(self, capacity: int = HISTORY_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        self._samples: deque[HistorySample] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._samples.maxlen or 0

    def append(self, step: int, count_a: int, count_b: int) -> HistorySample:
        sample = HistorySample(step=step, count_a=count_a, count_b=count_b)
        self._samples.append(sample)
        return sample

    def clear(self) -> None:
        self._samples.clear()

    def snapshot(self) -> tuple[HistorySample, ...]:
        """Immutable copy in chronological order."""
        return tuple(self._samples)

    def latest(self) -> HistorySample | None:
        return self._samples[-1] if self._samples else None

    def __len__(self) -> int:
        return len(self._samples)

    def __iter__(self) -> Iterator[HistorySample]:
        return iter(tuple(self._samples))
