"""jumpstream: streaming jump detection and metrics from ankle keypoints."""

from jumpstream.core.config import EngineSettings
from jumpstream.core.types import AirborneState, JumpEvent, KeypointSample, RunningStats
from jumpstream.pipeline.engine import EngineState, JumpEngine, detect_jumps_batch, tick

__version__ = "0.1.0"

__all__ = [
    "EngineSettings",
    "AirborneState",
    "JumpEvent",
    "KeypointSample",
    "RunningStats",
    "EngineState",
    "JumpEngine",
    "detect_jumps_batch",
    "tick",
]
