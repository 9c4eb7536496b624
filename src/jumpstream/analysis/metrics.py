"""Jump metrics and session statistics.

This module is pure logic apart from the JSON export helpers at the bottom.
"""

from __future__ import annotations

import json
from pathlib import Path

from jumpstream.analysis.buffer import SlidingBuffer
from jumpstream.core.logging import get_logger
from jumpstream.core.types import JumpEvent, RunningStats

logger = get_logger(__name__)


def flight_time_seconds(start_ms: float, end_ms: float) -> float:
    """Airborne duration in seconds."""
    return (end_ms - start_ms) / 1000


def peak_height_px(buffer: SlidingBuffer, ground_level: float, lookback: int = 15) -> float:
    """Highest recent foot height relative to ground level.

    Args:
        buffer: Sliding window of combined foot heights
        ground_level: Current ground level
        lookback: Number of most recent samples to scan

    Returns:
        Peak height in pixels, 0.0 if the buffer is empty
    """
    recent = buffer.recent(lookback)
    if not recent:
        return 0.0
    return max(recent) - ground_level


def measure_jump(
    episode: tuple[float, float],
    buffer: SlidingBuffer,
    ground_level: float | None,
    previous_jump_count: int,
    lookback: int = 15,
    min_flight_time_s: float = 0.1,
) -> JumpEvent | None:
    """Turn a closed airborne episode into a JumpEvent.

    Episodes no longer than ``min_flight_time_s`` are discarded as noise.

    Args:
        episode: (start_ms, end_ms) of the airborne episode
        buffer: Sliding window including the landing sample
        ground_level: Current ground level
        previous_jump_count: Jumps accepted so far this session
        lookback: Samples scanned for the peak
        min_flight_time_s: Debounce floor

    Returns:
        JumpEvent, or None for a noise episode
    """
    start_ms, end_ms = episode
    flight_time = flight_time_seconds(start_ms, end_ms)

    if flight_time <= min_flight_time_s:
        logger.debug("Discarded airborne episode of %.3f s", flight_time)
        return None

    peak = peak_height_px(buffer, ground_level, lookback) if ground_level is not None else 0.0

    return JumpEvent(
        jump_index=previous_jump_count + 1,
        start_timestamp_ms=start_ms,
        end_timestamp_ms=end_ms,
        flight_time_s=flight_time,
        peak_height_px=peak,
    )


class JumpLog:
    """Consumer-side record of accepted jumps.

    The engine does not retain events; register ``add`` as a jump listener to
    keep a history for display or export.
    """

    def __init__(self) -> None:
        self.events: list[JumpEvent] = []
        self.stats = RunningStats()

    def __len__(self) -> int:
        return len(self.events)

    @property
    def last_jump(self) -> JumpEvent | None:
        """Most recent jump event."""
        return self.events[-1] if self.events else None

    @property
    def avg_height_px(self) -> float | None:
        """Average peak height in pixels."""
        if not self.events:
            return None
        return sum(e.peak_height_px for e in self.events) / len(self.events)

    @property
    def avg_flight_time_s(self) -> float | None:
        """Average flight time in seconds."""
        if not self.events:
            return None
        return sum(e.flight_time_s for e in self.events) / len(self.events)

    def add(self, event: JumpEvent) -> None:
        """Record an accepted jump."""
        self.events.append(event)

    def update_stats(self, stats: RunningStats) -> None:
        """Keep the latest stats snapshot alongside the events."""
        self.stats = stats

    def get_recent_jumps(self, count: int = 5) -> list[JumpEvent]:
        """Most recent jumps, newest first."""
        return list(reversed(self.events[-count:]))

    def reset(self) -> None:
        """Clear all recorded jumps."""
        self.events.clear()
        self.stats = RunningStats()


def export_session(log: JumpLog, path: Path) -> None:
    """Export a session's jumps and final stats to a JSON file.

    Args:
        log: Session jump log
        path: Output file path
    """
    data = {
        "jump_count": len(log),
        "avg_height_px": log.avg_height_px,
        "avg_flight_time_s": log.avg_flight_time_s,
        "stats": log.stats.to_dict(),
        "jumps": [e.to_dict() for e in log.events],
    }

    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(data, f, indent=2)

    logger.info("Exported %d jumps to %s", len(log), path)


def import_session(path: Path) -> JumpLog:
    """Load a session exported by ``export_session``.

    Args:
        path: Input file path

    Returns:
        Reconstructed JumpLog
    """
    with open(path) as f:
        data = json.load(f)

    log = JumpLog()
    for j in data.get("jumps", []):
        log.add(JumpEvent(**j))
    if "stats" in data:
        log.update_stats(RunningStats.from_dict(data["stats"]))

    return log
