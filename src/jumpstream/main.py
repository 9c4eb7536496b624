"""Command-line entry point for offline jump analysis."""

from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Generator
from pathlib import Path

from jumpstream.analysis.metrics import JumpLog, export_session
from jumpstream.core.config import Settings, get_settings
from jumpstream.core.exceptions import JumpStreamError
from jumpstream.core.logging import get_logger, setup_logging
from jumpstream.core.types import KeypointSample
from jumpstream.pipeline.chart import FootHeightSeries
from jumpstream.pipeline.clock import ManualClock
from jumpstream.pipeline.engine import JumpEngine
from jumpstream.pipeline.replay import read_keypoint_log, replay, write_log_entry

logger = get_logger(__name__)


def _video_samples(
    video_path: Path,
    settings: Settings,
    record_log: Path | None,
) -> Generator[KeypointSample | None, None, None]:
    """Run pose estimation over a video and yield one sample per frame."""
    # MediaPipe and OpenCV load only for video replays
    from jumpstream.analysis.extractor import sample_from_keypoints
    from jumpstream.vision.landmarks import ankles_from_pose
    from jumpstream.vision.pose import PoseEstimator
    from jumpstream.vision.video import VideoFileSource

    log_file = None
    if record_log is not None:
        record_log.parent.mkdir(parents=True, exist_ok=True)
        log_file = open(record_log, "w")

    try:
        with VideoFileSource(video_path) as source, PoseEstimator(settings.pose) as estimator:
            for frame in source:
                pose = estimator.estimate(frame)
                left, right = (
                    ankles_from_pose(pose, frame.width, frame.height)
                    if pose is not None
                    else (None, None)
                )
                if log_file is not None:
                    write_log_entry(log_file, left, right, frame.height, frame.timestamp_ms)

                yield sample_from_keypoints(left, right, frame.height, frame.timestamp_ms)

                if frame.index and frame.index % 100 == 0:
                    logger.info("Processed %d frames...", frame.index)
    finally:
        if log_file is not None:
            log_file.close()
            logger.info("Keypoint log written to %s", record_log)


def _print_summary(log: JumpLog, as_json: bool) -> None:
    stats = log.stats
    if as_json:
        print(
            json.dumps(
                {"stats": stats.to_dict(), "jumps": [e.to_dict() for e in log.events]},
                indent=2,
            )
        )
        return

    print(f"Jumps: {stats.jump_count}")
    for event in log.events:
        print(
            f"  #{event.jump_index}: {event.peak_height_px:.1f} px, "
            f"{event.flight_time_s:.2f} s flight"
        )
    print(f"Max height: {stats.max_height_ever_px:.1f} px")
    print(
        f"Best flight time: {stats.best_flight_time_s:.2f} s "
        f"(jump #{stats.best_flight_time_jump_index})"
    )
    print(f"Best height: {stats.best_height_px:.1f} px (jump #{stats.best_height_jump_index})")


def run_replay(args: argparse.Namespace, settings: Settings) -> int:
    """Replay a keypoint log or video through the engine.

    Returns:
        Exit code (0 for success)
    """
    engine_settings = settings.engine
    if args.min_interval is not None:
        engine_settings = engine_settings.model_copy(
            update={"min_sample_interval_ms": args.min_interval}
        )

    engine = JumpEngine(engine_settings, clock=ManualClock())
    series = FootHeightSeries(settings.chart.flush_interval_s)

    if args.command == "replay-log":
        samples = read_keypoint_log(args.path)
    else:
        samples = _video_samples(args.path, settings, args.record_log)

    log = replay(engine, samples, series)
    _print_summary(log, args.json)

    if args.export:
        export_session(log, args.export)

    if args.series:
        series.save_csv(args.series)

    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser."""
    parser = argparse.ArgumentParser(
        prog="jumpstream",
        description="jumpstream - jump detection from ankle keypoints",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_common(sub: argparse.ArgumentParser) -> None:
        sub.add_argument("path", type=Path)
        sub.add_argument("--json", action="store_true", help="Print results as JSON")
        sub.add_argument("--export", type=Path, help="Write session summary JSON here")
        sub.add_argument("--series", type=Path, help="Write the foot-height chart series as CSV")
        sub.add_argument(
            "--min-interval",
            type=float,
            default=None,
            help="Override the minimum sample interval in ms",
        )

    add_common(subparsers.add_parser("replay-log", help="Replay a JSON-lines keypoint log"))

    video = subparsers.add_parser("replay-video", help="Run pose estimation over a video file")
    add_common(video)
    video.add_argument("--record-log", type=Path, help="Also save the ankle keypoints here")

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)

    settings = get_settings()
    level = "DEBUG" if args.debug else settings.logging.level
    setup_logging(level, settings.logging.file)

    try:
        return run_replay(args, settings)

    except JumpStreamError as e:
        logger.error("Replay failed: %s", e)
        return 2

    except FileNotFoundError as e:
        logger.error("File not found: %s", e.filename)
        return 2

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 0

    except Exception as e:
        logger.exception("Unexpected error: %s", e)
        return 3


if __name__ == "__main__":
    sys.exit(main())
