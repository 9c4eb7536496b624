"""Core data types and structures."""

from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from enum import Enum, auto
from typing import Any

import numpy as np
from numpy.typing import NDArray


@dataclass(frozen=True, slots=True)
class Keypoint:
    """A single 2D keypoint in frame pixels.

    ``score`` is None when the pose model did not report a confidence.
    """

    x: float
    y: float
    score: float | None = None


@dataclass(frozen=True, slots=True)
class Landmark:
    """A single body landmark with normalized coordinates and visibility score.

    Coordinates are normalized [0, 1] relative to frame dimensions.
    """

    x: float
    y: float
    visibility: float

    def to_keypoint(self, width: float, height: float) -> Keypoint:
        """Convert to a pixel-space keypoint, carrying visibility as score."""
        return Keypoint(x=self.x * width, y=self.y * height, score=self.visibility)


class LandmarkIndex(Enum):
    """MediaPipe pose landmark indices for the ankles."""

    LEFT_ANKLE = 27
    RIGHT_ANKLE = 28


@dataclass(slots=True)
class Pose:
    """Collection of body landmarks for a single frame.

    Attributes:
        landmarks: Mapping of landmark index to Landmark object
        timestamp_ms: Frame timestamp in milliseconds
        frame_idx: Frame sequence number
    """

    landmarks: dict[int, Landmark]
    timestamp_ms: float
    frame_idx: int

    def get_landmark(self, index: LandmarkIndex) -> Landmark | None:
        """Get a specific landmark by its enum index."""
        return self.landmarks.get(index.value)


@dataclass(slots=True)
class Frame:
    """A video frame with metadata.

    Attributes:
        image: BGR image array (OpenCV format)
        timestamp_ms: Frame timestamp in milliseconds
        index: Frame sequence number
    """

    image: NDArray[np.uint8]
    timestamp_ms: float
    index: int

    @property
    def width(self) -> int:
        """Frame width in pixels."""
        return int(self.image.shape[1])

    @property
    def height(self) -> int:
        """Frame height in pixels."""
        return int(self.image.shape[0])


@dataclass(frozen=True, slots=True)
class KeypointSample:
    """Ankle positions and confidences for one processed frame."""

    left_ankle_y: float
    left_confidence: float | None
    right_ankle_y: float
    right_confidence: float | None
    frame_height_px: float
    timestamp_ms: float


@dataclass(frozen=True, slots=True)
class FootHeightSample:
    """Per-frame foot heights measured up from the bottom of the frame.

    Attributes:
        left_height_px: Left ankle height above the frame bottom
        right_height_px: Right ankle height above the frame bottom
        combined_height_px: Single scalar driving ground and jump logic
        timestamp_ms: Sample timestamp in milliseconds
    """

    left_height_px: float
    right_height_px: float
    combined_height_px: float
    timestamp_ms: float


class AirborneState(Enum):
    """States of the airborne state machine."""

    GROUNDED = auto()
    AIRBORNE = auto()


@dataclass(frozen=True, slots=True)
class JumpEvent:
    """A completed airborne episode that passed the debounce filter.

    Attributes:
        jump_index: 1-based index of the jump within the session
        start_timestamp_ms: Timestamp of the rising edge
        end_timestamp_ms: Timestamp of the falling edge
        flight_time_s: Time spent airborne in seconds
        peak_height_px: Highest recent foot height relative to ground level
    """

    jump_index: int
    start_timestamp_ms: float
    end_timestamp_ms: float
    flight_time_s: float
    peak_height_px: float

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dict."""
        return asdict(self)


@dataclass(frozen=True, slots=True)
class RunningStats:
    """Running counters and best-of statistics.

    Instances are immutable; ``record`` returns a new value with every field
    derived from the same event.
    """

    jump_count: int = 0
    last_jump_height_px: float = 0.0
    last_flight_time_s: float = 0.0
    max_height_ever_px: float = 0.0
    best_flight_time_s: float = 0.0
    best_flight_time_jump_index: int = 0
    best_height_px: float = 0.0
    best_height_jump_index: int = 0

    def record(self, event: JumpEvent) -> RunningStats:
        """Fold an accepted jump into the stats."""
        best_flight_time_s = self.best_flight_time_s
        best_flight_time_jump_index = self.best_flight_time_jump_index
        if event.flight_time_s > best_flight_time_s:
            best_flight_time_s = event.flight_time_s
            best_flight_time_jump_index = event.jump_index

        best_height_px = self.best_height_px
        best_height_jump_index = self.best_height_jump_index
        if event.peak_height_px > best_height_px:
            best_height_px = event.peak_height_px
            best_height_jump_index = event.jump_index

        return RunningStats(
            jump_count=event.jump_index,
            last_jump_height_px=event.peak_height_px,
            last_flight_time_s=event.flight_time_s,
            max_height_ever_px=max(self.max_height_ever_px, event.peak_height_px),
            best_flight_time_s=best_flight_time_s,
            best_flight_time_jump_index=best_flight_time_jump_index,
            best_height_px=best_height_px,
            best_height_jump_index=best_height_jump_index,
        )

    def start_session(self, persist_best: bool) -> RunningStats:
        """Stats for a fresh session, optionally keeping the best-of fields."""
        if not persist_best:
            return RunningStats()
        return replace(
            self,
            jump_count=0,
            last_jump_height_px=0.0,
            last_flight_time_s=0.0,
            max_height_ever_px=0.0,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dict."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RunningStats:
        """Rebuild from ``to_dict`` output."""
        return cls(**data)
