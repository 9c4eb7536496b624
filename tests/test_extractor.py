"""Tests for foot-height extraction."""

from __future__ import annotations

import pytest

from jumpstream.analysis.extractor import (
    combine_heights,
    extract_foot_height,
    is_low_confidence,
    sample_from_keypoints,
)
from jumpstream.core.types import Keypoint, KeypointSample


def _sample(
    left_y: float,
    right_y: float,
    left_conf: float | None = 0.9,
    right_conf: float | None = 0.9,
) -> KeypointSample:
    return KeypointSample(
        left_ankle_y=left_y,
        left_confidence=left_conf,
        right_ankle_y=right_y,
        right_confidence=right_conf,
        frame_height_px=480.0,
        timestamp_ms=10.0,
    )


class TestSampleFromKeypoints:
    """Tests for building samples from raw keypoints."""

    def test_builds_sample_from_both_ankles(self) -> None:
        """Both ankles present should produce a sample."""
        sample = sample_from_keypoints(
            Keypoint(x=100, y=400, score=0.8),
            Keypoint(x=140, y=410, score=0.7),
            frame_height_px=480,
            timestamp_ms=33.0,
        )

        assert sample is not None
        assert sample.left_ankle_y == 400
        assert sample.right_ankle_y == 410
        assert sample.left_confidence == 0.8
        assert sample.right_confidence == 0.7
        assert sample.timestamp_ms == 33.0

    @pytest.mark.parametrize("missing", ["left", "right", "both"])
    def test_missing_ankle_gives_none(self, missing: str) -> None:
        """A frame missing either ankle should be skipped."""
        ankle = Keypoint(x=100, y=400, score=0.9)
        left = None if missing in ("left", "both") else ankle
        right = None if missing in ("right", "both") else ankle

        assert sample_from_keypoints(left, right, 480, 0.0) is None


class TestExtractFootHeight:
    """Tests for the foot-height extractor."""

    def test_height_measured_from_frame_bottom(self) -> None:
        """Height should be frame height minus ankle y."""
        foot = extract_foot_height(_sample(left_y=380, right_y=360))

        assert foot.left_height_px == 100
        assert foot.right_height_px == 120
        assert foot.timestamp_ms == 10.0

    def test_combined_uses_lower_foot(self) -> None:
        """Default combine should follow the planted (lower) foot."""
        foot = extract_foot_height(_sample(left_y=380, right_y=360))
        assert foot.combined_height_px == 100

    def test_mean_combine_mode(self) -> None:
        """Mean combine should average both feet."""
        foot = extract_foot_height(_sample(left_y=380, right_y=360), combine="mean")
        assert foot.combined_height_px == 110

    def test_low_confidence_forces_zero(self) -> None:
        """Summed confidence below threshold should zero both heights."""
        foot = extract_foot_height(_sample(left_y=100, right_y=50, left_conf=0.2, right_conf=0.2))

        assert foot.left_height_px == 0
        assert foot.right_height_px == 0
        assert foot.combined_height_px == 0

    def test_confidence_at_threshold_is_kept(self) -> None:
        """A sum exactly at the threshold is not low confidence."""
        foot = extract_foot_height(_sample(left_y=380, right_y=380, left_conf=0.3, right_conf=0.3))
        assert foot.combined_height_px == 100

    def test_custom_threshold(self) -> None:
        """Threshold should be configurable."""
        sample = _sample(left_y=380, right_y=380, left_conf=0.5, right_conf=0.5)

        assert extract_foot_height(sample, low_confidence_sum_threshold=1.5).combined_height_px == 0
        assert extract_foot_height(sample, low_confidence_sum_threshold=0.6).combined_height_px == 100

    def test_unknown_score_skips_confidence_rule(self) -> None:
        """Without both scores the low-confidence rule does not apply."""
        sample = _sample(left_y=380, right_y=380, left_conf=None, right_conf=0.1)

        assert not is_low_confidence(sample, 0.6)
        assert extract_foot_height(sample).combined_height_px == 100


class TestCombineHeights:
    """Tests for left/right combination."""

    def test_min(self) -> None:
        assert combine_heights(10.0, 20.0) == 10.0

    def test_mean(self) -> None:
        assert combine_heights(10.0, 20.0, "mean") == 15.0
