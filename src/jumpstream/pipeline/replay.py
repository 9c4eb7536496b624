"""Recorded keypoint logs and offline replay through the engine."""

from __future__ import annotations

import json
from collections.abc import Generator, Iterable
from pathlib import Path
from typing import IO, Any

from jumpstream.analysis.extractor import sample_from_keypoints
from jumpstream.analysis.metrics import JumpLog
from jumpstream.core.exceptions import KeypointLogError
from jumpstream.core.logging import get_logger
from jumpstream.core.types import Keypoint, KeypointSample
from jumpstream.pipeline.chart import FootHeightSeries
from jumpstream.pipeline.engine import JumpEngine

logger = get_logger(__name__)


def _parse_keypoint(raw: Any) -> Keypoint | None:
    if raw is None:
        return None
    return Keypoint(x=float(raw["x"]), y=float(raw["y"]), score=raw.get("score"))


def parse_log_line(line: str) -> KeypointSample | None:
    """Parse one JSON line into a KeypointSample.

    Expected format: ``{"t": ms, "h": frame_height, "left": {x, y, score} | null,
    "right": {...} | null}``.

    Returns:
        KeypointSample, or None if either ankle is missing

    Raises:
        KeypointLogError: If the line is not valid
    """
    try:
        data = json.loads(line)
        left = _parse_keypoint(data.get("left"))
        right = _parse_keypoint(data.get("right"))
        return sample_from_keypoints(left, right, float(data["h"]), float(data["t"]))
    except (ValueError, KeyError, TypeError, AttributeError) as e:
        raise KeypointLogError(f"Invalid keypoint log entry: {e}") from e


def read_keypoint_log(path: Path) -> Generator[KeypointSample | None, None, None]:
    """Yield samples from a JSON-lines keypoint log, one per recorded frame.

    Blank lines are skipped.
    """
    with open(path) as f:
        for lineno, line in enumerate(f, start=1):
            if not line.strip():
                continue
            try:
                yield parse_log_line(line)
            except KeypointLogError as e:
                raise KeypointLogError(f"{path}:{lineno}: {e.message}") from e


def write_log_entry(
    f: IO[str],
    left: Keypoint | None,
    right: Keypoint | None,
    frame_height_px: float,
    timestamp_ms: float,
) -> None:
    """Append one frame to an open keypoint log."""
    entry = {
        "t": timestamp_ms,
        "h": frame_height_px,
        "left": None if left is None else {"x": left.x, "y": left.y, "score": left.score},
        "right": None if right is None else {"x": right.x, "y": right.y, "score": right.score},
    }
    f.write(json.dumps(entry) + "\n")


def replay(
    engine: JumpEngine,
    samples: Iterable[KeypointSample | None],
    series: FootHeightSeries | None = None,
) -> JumpLog:
    """Feed recorded samples through an engine session.

    Cadence gating uses each sample's own timestamp, so results do not
    depend on how fast the replay runs.

    Args:
        engine: Engine to drive; a session is started and stopped here
        samples: Samples in timestamp order (None for frames without ankles)
        series: Optional chart series to fill with foot heights

    Returns:
        JumpLog with every accepted jump and the final stats

    Raises:
        KeypointLogError: If the sample source fails; the session is still
            stopped and the listeners removed
    """
    log = JumpLog()
    detach = [engine.on_jump(log.add), engine.on_stats(log.update_stats)]

    frames = 0
    processed = 0
    try:
        engine.start()
        for sample in samples:
            frames += 1
            if sample is None:
                continue

            result = engine.process_sample(sample, now_ms=sample.timestamp_ms)
            if result is None:
                continue

            processed += 1
            if series is not None:
                foot = result.foot_sample
                series.append(foot.left_height_px, foot.right_height_px, foot.timestamp_ms / 1000)
    finally:
        for unsubscribe in detach:
            unsubscribe()
        final = engine.stop()

    log.update_stats(final)
    if series is not None:
        series.flush(0.0, force=True)

    logger.info(
        "Replayed %d frames (%d processed): %d jumps",
        frames,
        processed,
        final.jump_count,
    )
    return log
