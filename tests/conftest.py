"""Pytest fixtures for jumpstream tests."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from jumpstream.core.config import EngineSettings
from jumpstream.core.types import JumpEvent, KeypointSample

FRAME_HEIGHT = 480.0

SampleFactory = Callable[..., KeypointSample]
SequenceFactory = Callable[..., list[KeypointSample]]


def _create_sample(
    height_px: float,
    timestamp_ms: float,
    confidence: float = 0.9,
    frame_height_px: float = FRAME_HEIGHT,
) -> KeypointSample:
    """Create a sample with both ankles at the given foot height."""
    ankle_y = frame_height_px - height_px
    return KeypointSample(
        left_ankle_y=ankle_y,
        left_confidence=confidence,
        right_ankle_y=ankle_y,
        right_confidence=confidence,
        frame_height_px=frame_height_px,
        timestamp_ms=timestamp_ms,
    )


@pytest.fixture
def make_sample() -> SampleFactory:
    """Factory for single samples at a given foot height."""
    return _create_sample


@pytest.fixture
def make_sequence() -> SequenceFactory:
    """Factory turning a list of foot heights into evenly spaced samples."""

    def _sequence(
        heights: list[float],
        step_ms: float = 33.0,
        start_ms: float = 0.0,
    ) -> list[KeypointSample]:
        return [
            _create_sample(height, start_ms + i * step_ms) for i, height in enumerate(heights)
        ]

    return _sequence


@pytest.fixture
def engine_settings() -> EngineSettings:
    """Engine settings with the documented defaults and no cadence throttle."""
    return EngineSettings(min_sample_interval_ms=0.0)


@pytest.fixture
def noise_sequence(make_sequence: SequenceFactory) -> list[KeypointSample]:
    """Ground at 100 with a 99 ms excursion above threshold."""
    return make_sequence([100, 100, 100, 125, 140, 125, 100, 100])


@pytest.fixture
def single_jump_sequence(make_sequence: SequenceFactory) -> list[KeypointSample]:
    """Ground at 100, then 130 held for 200 ms, then back to 100."""
    return make_sequence([100, 100, 100, 130, 130, 130, 130, 100, 100], step_ms=50.0)


@pytest.fixture
def two_jump_sequence(make_sequence: SequenceFactory) -> list[KeypointSample]:
    """Two valid jumps: 30 px then 50 px above a ground level of 100."""
    heights = [100, 100, 100, 130, 130, 130, 130, 100, 100, 100, 150, 150, 150, 150, 100, 100]
    return make_sequence(heights, step_ms=50.0)


@pytest.fixture
def sample_jump_event() -> JumpEvent:
    """Create a sample jump event."""
    return JumpEvent(
        jump_index=1,
        start_timestamp_ms=150.0,
        end_timestamp_ms=350.0,
        flight_time_s=0.2,
        peak_height_px=30.0,
    )
