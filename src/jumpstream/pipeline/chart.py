"""Buffered foot-height series for chart consumers."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import numpy as np
from numpy.typing import NDArray

from jumpstream.core.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class ChartPoint:
    """One plotted foot-height sample.

    Attributes:
        t: Seconds since the session started
        left: Left foot height in pixels
        right: Right foot height in pixels
        min_height: Lower of the two feet, ignoring a zeroed foot
    """

    t: float
    left: float
    right: float
    min_height: float


def chart_min_height(left: float, right: float) -> float:
    """Lower foot height, unless one foot reads zero (then the other one)."""
    if left != 0 and right != 0:
        return min(left, right)
    return max(left, right)


class FootHeightSeries:
    """Collects per-tick foot heights and hands them over in batches.

    Register ``append`` (bound with a clock) as a foot-height listener and
    call ``flush`` from the display loop; batches are released at most once
    per ``flush_interval_s`` so chart redraws stay cheap.
    """

    def __init__(self, flush_interval_s: float = 1.0) -> None:
        """Initialize series.

        Args:
            flush_interval_s: Minimum time between released batches
        """
        self.flush_interval_s = flush_interval_s
        self._points: list[ChartPoint] = []
        self._pending: list[ChartPoint] = []
        self._start_s: float | None = None
        self._last_flush_s: float | None = None

    @property
    def points(self) -> list[ChartPoint]:
        """All points released so far."""
        return list(self._points)

    @property
    def pending_count(self) -> int:
        """Points waiting for the next flush."""
        return len(self._pending)

    def start(self, now_s: float) -> None:
        """Clear the series and anchor its time axis at ``now_s``."""
        self._points.clear()
        self._pending.clear()
        self._start_s = now_s
        self._last_flush_s = now_s

    def append(self, left: float, right: float, now_s: float) -> ChartPoint:
        """Buffer one sample."""
        if self._start_s is None:
            self.start(now_s)
        point = ChartPoint(
            t=now_s - (self._start_s or 0.0),
            left=left,
            right=right,
            min_height=chart_min_height(left, right),
        )
        self._pending.append(point)
        return point

    def flush(self, now_s: float, force: bool = False) -> list[ChartPoint]:
        """Release pending points if the flush interval has elapsed.

        Args:
            now_s: Current time in seconds
            force: Release regardless of the interval

        Returns:
            Newly released points (empty if not yet due)
        """
        due = (
            force
            or self._last_flush_s is None
            or now_s - self._last_flush_s >= self.flush_interval_s
        )
        if not due or not self._pending:
            return []

        batch = self._pending
        self._pending = []
        self._points.extend(batch)
        self._last_flush_s = now_s
        return batch

    def to_array(self) -> NDArray[np.float64]:
        """Released points as an (n, 4) array of t, left, right, min_height."""
        if not self._points:
            return np.empty((0, 4), dtype=np.float64)
        return np.array(
            [(p.t, p.left, p.right, p.min_height) for p in self._points],
            dtype=np.float64,
        )

    def save_csv(self, path: Path) -> None:
        """Write released points to a CSV file with a header row."""
        path.parent.mkdir(parents=True, exist_ok=True)
        np.savetxt(
            path,
            self.to_array(),
            delimiter=",",
            header="t,left,right,min_height",
            comments="",
            fmt="%.6g",
        )
        logger.info("Saved %d chart points to %s", len(self._points), path)
