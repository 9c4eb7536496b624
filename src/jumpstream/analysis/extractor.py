"""Foot-height extraction from ankle keypoints.

This module is pure logic with NO I/O and NO OpenCV imports.
"""

from __future__ import annotations

from typing import Literal

from jumpstream.core.types import FootHeightSample, Keypoint, KeypointSample

CombineMode = Literal["min", "mean"]


def sample_from_keypoints(
    left: Keypoint | None,
    right: Keypoint | None,
    frame_height_px: float,
    timestamp_ms: float,
) -> KeypointSample | None:
    """Build a KeypointSample from the two ankle keypoints.

    Args:
        left: Left ankle keypoint, or None if not detected
        right: Right ankle keypoint, or None if not detected
        frame_height_px: Height of the source frame in pixels
        timestamp_ms: Frame timestamp in milliseconds

    Returns:
        KeypointSample, or None if either ankle is missing
    """
    if left is None or right is None:
        return None

    return KeypointSample(
        left_ankle_y=left.y,
        left_confidence=left.score,
        right_ankle_y=right.y,
        right_confidence=right.score,
        frame_height_px=frame_height_px,
        timestamp_ms=timestamp_ms,
    )


def is_low_confidence(sample: KeypointSample, threshold: float) -> bool:
    """Check whether the combined ankle confidence falls below threshold.

    Only applies when both confidences were reported.
    """
    if sample.left_confidence is None or sample.right_confidence is None:
        return False
    return sample.left_confidence + sample.right_confidence < threshold


def combine_heights(left: float, right: float, mode: CombineMode = "min") -> float:
    """Reduce two foot heights to one scalar.

    ``min`` follows the planted foot, which keeps the ground level clean
    during single-leg takeoffs. ``mean`` averages both feet.
    """
    if mode == "mean":
        return (left + right) / 2
    return min(left, right)


def extract_foot_height(
    sample: KeypointSample,
    low_confidence_sum_threshold: float = 0.6,
    combine: CombineMode = "min",
) -> FootHeightSample:
    """Convert ankle positions to heights above the bottom of the frame.

    Low-confidence frames are suppressed to zero height rather than skipped.

    Args:
        sample: Ankle keypoints for one frame
        low_confidence_sum_threshold: Floor for the summed ankle confidences
        combine: How to reduce left/right heights to the combined signal

    Returns:
        FootHeightSample for the frame
    """
    if is_low_confidence(sample, low_confidence_sum_threshold):
        left_height = 0.0
        right_height = 0.0
    else:
        left_height = sample.frame_height_px - sample.left_ankle_y
        right_height = sample.frame_height_px - sample.right_ankle_y

    return FootHeightSample(
        left_height_px=left_height,
        right_height_px=right_height,
        combined_height_px=combine_heights(left_height, right_height, combine),
        timestamp_ms=sample.timestamp_ms,
    )
