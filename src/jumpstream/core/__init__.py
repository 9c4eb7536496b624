"""Core infrastructure: config, types, exceptions, and logging."""

from jumpstream.core.config import EngineSettings, Settings, get_settings
from jumpstream.core.exceptions import (
    JumpStreamError,
    KeypointLogError,
    PoseEstimationError,
    SessionNotActiveError,
    VideoSourceError,
)
from jumpstream.core.logging import get_logger, setup_logging
from jumpstream.core.types import (
    AirborneState,
    FootHeightSample,
    Frame,
    JumpEvent,
    Keypoint,
    KeypointSample,
    Landmark,
    Pose,
    RunningStats,
)

__all__ = [
    # Config
    "Settings",
    "EngineSettings",
    "get_settings",
    # Types
    "Keypoint",
    "KeypointSample",
    "FootHeightSample",
    "AirborneState",
    "JumpEvent",
    "RunningStats",
    "Landmark",
    "Pose",
    "Frame",
    # Exceptions
    "JumpStreamError",
    "SessionNotActiveError",
    "PoseEstimationError",
    "VideoSourceError",
    "KeypointLogError",
    # Logging
    "setup_logging",
    "get_logger",
]
