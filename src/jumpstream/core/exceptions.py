"""Custom exceptions for jumpstream."""


class JumpStreamError(Exception):
    """Base exception for all jumpstream errors."""

    pass


class SessionNotActiveError(JumpStreamError):
    """A sample was pushed to an engine without an active session."""

    def __init__(self, message: str = "No active session; call start() first") -> None:
        self.message = message
        super().__init__(self.message)


class PoseEstimationError(JumpStreamError):
    """Pose estimation failed or returned invalid data."""

    def __init__(self, message: str = "Pose estimation failed") -> None:
        self.message = message
        super().__init__(self.message)


class VideoSourceError(JumpStreamError):
    """A video file could not be opened or read."""

    def __init__(self, message: str = "Video source error") -> None:
        self.message = message
        super().__init__(self.message)


class KeypointLogError(JumpStreamError):
    """A recorded keypoint log contained a malformed entry."""

    def __init__(self, message: str = "Malformed keypoint log") -> None:
        self.message = message
        super().__init__(self.message)
