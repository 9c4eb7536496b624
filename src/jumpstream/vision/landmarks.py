"""Conversion from pose landmarks to ankle keypoints."""

from __future__ import annotations

from jumpstream.analysis.extractor import sample_from_keypoints
from jumpstream.core.types import Keypoint, KeypointSample, LandmarkIndex, Pose


def ankles_from_pose(
    pose: Pose,
    width: float,
    height: float,
) -> tuple[Keypoint | None, Keypoint | None]:
    """Extract left and right ankle keypoints in pixel coordinates.

    Args:
        pose: Pose with normalized landmarks
        width: Frame width in pixels
        height: Frame height in pixels

    Returns:
        (left, right) keypoints; an entry is None if the landmark is absent
    """
    left = pose.get_landmark(LandmarkIndex.LEFT_ANKLE)
    right = pose.get_landmark(LandmarkIndex.RIGHT_ANKLE)

    return (
        left.to_keypoint(width, height) if left is not None else None,
        right.to_keypoint(width, height) if right is not None else None,
    )


def sample_from_pose(pose: Pose | None, width: float, height: float) -> KeypointSample | None:
    """Build a KeypointSample from a pose, or None if no usable ankles."""
    if pose is None:
        return None

    left, right = ankles_from_pose(pose, width, height)
    return sample_from_keypoints(left, right, height, pose.timestamp_ms)
