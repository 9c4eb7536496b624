"""Tests for keypoint logs, replay, and landmark conversion."""

from __future__ import annotations

import io
import json
from pathlib import Path

import numpy as np
import pytest

from jumpstream.core.config import EngineSettings
from jumpstream.core.exceptions import KeypointLogError
from jumpstream.core.types import Keypoint, Landmark, LandmarkIndex, Pose
from jumpstream.main import main
from jumpstream.pipeline.chart import FootHeightSeries
from jumpstream.pipeline.engine import JumpEngine
from jumpstream.pipeline.replay import parse_log_line, read_keypoint_log, replay, write_log_entry
from jumpstream.vision.landmarks import ankles_from_pose, sample_from_pose


def _write_log(path: Path, heights: list[float | None], step_ms: float = 50.0) -> None:
    with open(path, "w") as f:
        for i, height in enumerate(heights):
            if height is None:
                write_log_entry(f, None, None, 480.0, i * step_ms)
                continue
            ankle = Keypoint(x=320.0, y=480.0 - height, score=0.9)
            write_log_entry(f, ankle, ankle, 480.0, i * step_ms)


class TestKeypointLog:
    """Tests for reading and writing keypoint logs."""

    def test_write_then_parse(self) -> None:
        buf = io.StringIO()
        write_log_entry(buf, Keypoint(1.0, 380.0, 0.8), Keypoint(2.0, 370.0, None), 480.0, 33.0)

        sample = parse_log_line(buf.getvalue())

        assert sample is not None
        assert sample.left_ankle_y == 380.0
        assert sample.right_ankle_y == 370.0
        assert sample.left_confidence == 0.8
        assert sample.right_confidence is None
        assert sample.timestamp_ms == 33.0

    def test_missing_ankle_yields_none(self) -> None:
        line = json.dumps({"t": 0, "h": 480, "left": None, "right": {"x": 1, "y": 2}})
        assert parse_log_line(line) is None

    @pytest.mark.parametrize(
        "line",
        ["not json", json.dumps({"t": 0, "left": None}), json.dumps({"t": 0, "h": 480, "left": 5})],
    )
    def test_malformed_line(self, line: str) -> None:
        with pytest.raises(KeypointLogError):
            parse_log_line(line)

    def test_read_reports_line_number(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.jsonl"
        path.write_text(json.dumps({"t": 0, "h": 480, "left": None, "right": None}) + "\n\nnope\n")

        with pytest.raises(KeypointLogError, match=":3:"):
            list(read_keypoint_log(path))

    def test_read_skips_blank_lines(self, tmp_path: Path) -> None:
        path = tmp_path / "log.jsonl"
        _write_log(path, [100.0, 100.0])
        path.write_text(path.read_text() + "\n\n")

        assert len(list(read_keypoint_log(path))) == 2


class TestReplay:
    """Tests for replaying samples through an engine."""

    def test_replay_log(self, tmp_path: Path) -> None:
        path = tmp_path / "session.jsonl"
        _write_log(path, [100, 100, None, 100, 130, 130, 130, 130, 100, 100])

        series = FootHeightSeries()
        engine = JumpEngine(EngineSettings(min_sample_interval_ms=16.0))
        log = replay(engine, read_keypoint_log(path), series)

        assert len(log) == 1
        assert log.stats.jump_count == 1
        assert log.events[0].peak_height_px == pytest.approx(30)
        assert len(series.points) == 9
        assert not engine.is_active

    def test_replay_twice_on_one_engine(self, single_jump_sequence, engine_settings) -> None:
        """Each replay gets only its own session and leaves no callbacks behind."""
        engine = JumpEngine(engine_settings)

        first = replay(engine, single_jump_sequence)
        second = replay(engine, single_jump_sequence)

        assert len(first) == 1
        assert len(second) == 1
        assert first.stats.jump_count == 1
        assert engine.listener_count == 0

    def test_failing_source_stops_session(self, single_jump_sequence, engine_settings) -> None:
        def broken_log():
            yield from single_jump_sequence[:2]
            raise KeypointLogError("session.jsonl:3: Invalid keypoint log entry")

        engine = JumpEngine(engine_settings)

        with pytest.raises(KeypointLogError):
            replay(engine, broken_log())

        assert not engine.is_active
        assert engine.listener_count == 0
        assert engine.state.ground_level is None

    def test_replay_honours_cadence(self, make_sequence) -> None:
        """Samples closer than the interval on the recording timeline are dropped."""
        samples = make_sequence([100.0] * 10, step_ms=10.0)
        series = FootHeightSeries()

        replay(JumpEngine(EngineSettings(min_sample_interval_ms=30.0)), samples, series)

        assert [p.t for p in series.points] == pytest.approx([0.0, 0.03, 0.06, 0.09])

    def test_cli_replay_log(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        path = tmp_path / "session.jsonl"
        export = tmp_path / "summary.json"
        _write_log(path, [100, 100, 100, 130, 130, 130, 130, 100])

        code = main(["replay-log", str(path), "--json", "--export", str(export)])

        assert code == 0
        output = json.loads(capsys.readouterr().out)
        assert output["stats"]["jump_count"] == 1
        assert json.loads(export.read_text())["jump_count"] == 1

    def test_cli_writes_chart_series(self, tmp_path: Path) -> None:
        path = tmp_path / "session.jsonl"
        series_path = tmp_path / "out" / "series.csv"
        _write_log(path, [100, 100, 100, 130, 130, 130, 130, 100])

        code = main(["replay-log", str(path), "--series", str(series_path)])

        assert code == 0
        assert series_path.read_text().splitlines()[0] == "t,left,right,min_height"
        rows = np.loadtxt(series_path, delimiter=",", skiprows=1)
        assert rows.shape == (8, 4)
        assert rows[3, 3] == pytest.approx(130)

    def test_cli_missing_file(self, tmp_path: Path) -> None:
        assert main(["replay-log", str(tmp_path / "missing.jsonl")]) == 2


class TestLandmarkConversion:
    """Tests for converting pose landmarks to ankle keypoints."""

    def test_ankles_in_pixels(self) -> None:
        pose = Pose(
            landmarks={
                LandmarkIndex.LEFT_ANKLE.value: Landmark(x=0.25, y=0.75, visibility=0.9),
                LandmarkIndex.RIGHT_ANKLE.value: Landmark(x=0.5, y=0.8, visibility=0.4),
            },
            timestamp_ms=66.0,
            frame_idx=2,
        )

        left, right = ankles_from_pose(pose, width=640, height=480)

        assert left == Keypoint(x=160.0, y=360.0, score=0.9)
        assert right is not None
        assert right.y == pytest.approx(384.0)
        assert right.score == 0.4

        sample = sample_from_pose(pose, 640, 480)
        assert sample is not None
        assert sample.frame_height_px == 480
        assert sample.timestamp_ms == 66.0

    def test_missing_ankle(self) -> None:
        pose = Pose(
            landmarks={LandmarkIndex.LEFT_ANKLE.value: Landmark(0.5, 0.5, 0.9)},
            timestamp_ms=0.0,
            frame_idx=0,
        )

        assert ankles_from_pose(pose, 640, 480)[1] is None
        assert sample_from_pose(pose, 640, 480) is None
        assert sample_from_pose(None, 640, 480) is None
