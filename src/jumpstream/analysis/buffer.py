"""Fixed-capacity sliding window of combined foot heights."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SlidingBuffer:
    """FIFO window of recent combined foot heights.

    Immutable: ``push`` returns a new buffer, dropping the oldest value once
    the window is full.
    """

    capacity: int = 30
    values: tuple[float, ...] = ()

    def __post_init__(self) -> None:
        if self.capacity < 1:
            raise ValueError("capacity must be positive")
        if len(self.values) > self.capacity:
            object.__setattr__(self, "values", self.values[-self.capacity :])

    def __len__(self) -> int:
        return len(self.values)

    def push(self, value: float) -> SlidingBuffer:
        """Append a value, evicting the oldest past capacity."""
        values = (*self.values, value)
        if len(values) > self.capacity:
            values = values[-self.capacity :]
        return SlidingBuffer(capacity=self.capacity, values=values)

    @property
    def window(self) -> tuple[float, ...]:
        """All buffered values, oldest first."""
        return self.values

    def recent(self, count: int) -> tuple[float, ...]:
        """The most recent ``count`` values, oldest first."""
        if count <= 0:
            return ()
        return self.values[-count:]

    def clear(self) -> SlidingBuffer:
        """An empty buffer of the same capacity."""
        return SlidingBuffer(capacity=self.capacity)
