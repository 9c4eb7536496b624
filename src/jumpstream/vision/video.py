"""Video file frame generator."""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path

import cv2
import numpy as np

from jumpstream.core.exceptions import VideoSourceError
from jumpstream.core.logging import get_logger
from jumpstream.core.types import Frame

logger = get_logger(__name__)


class VideoFileSource:
    """Generator-based frame source reading a recorded video with OpenCV.

    Timestamps come from the container position so replay timing matches
    the recording, not processing speed.
    """

    def __init__(self, path: Path | str) -> None:
        """Initialize source.

        Args:
            path: Video file to read
        """
        self.path = Path(path)
        self._capture: cv2.VideoCapture | None = None
        self._frame_idx = 0

    @property
    def is_open(self) -> bool:
        """Check if the file is open."""
        return self._capture is not None

    @property
    def fps(self) -> float:
        """Container frame rate (0.0 if unknown)."""
        if self._capture is None:
            return 0.0
        return float(self._capture.get(cv2.CAP_PROP_FPS) or 0.0)

    def open(self) -> None:
        """Open the video file.

        Raises:
            VideoSourceError: If the file cannot be opened
        """
        if not self.path.exists():
            raise VideoSourceError(f"Video not found: {self.path}")

        capture = cv2.VideoCapture(str(self.path))
        if not capture.isOpened():
            capture.release()
            raise VideoSourceError(f"Could not open video: {self.path}")

        self._capture = capture
        self._frame_idx = 0
        logger.info("Opened %s (%.1f fps)", self.path, self.fps)

    def close(self) -> None:
        """Release the capture."""
        if self._capture is not None:
            self._capture.release()
            self._capture = None
            logger.info("Closed %s after %d frames", self.path, self._frame_idx)

    def frames(self) -> Generator[Frame, None, None]:
        """Yield frames until the end of the file."""
        if self._capture is None:
            self.open()
        assert self._capture is not None

        fps = self.fps
        while True:
            ok, image = self._capture.read()
            if not ok:
                break

            timestamp_ms = float(self._capture.get(cv2.CAP_PROP_POS_MSEC))
            if timestamp_ms <= 0 and fps > 0 and self._frame_idx > 0:
                timestamp_ms = self._frame_idx * 1000.0 / fps

            yield Frame(
                image=np.asarray(image, dtype=np.uint8),
                timestamp_ms=timestamp_ms,
                index=self._frame_idx,
            )
            self._frame_idx += 1

    def __iter__(self) -> Generator[Frame, None, None]:
        """Allow direct iteration over the file."""
        return self.frames()

    def __enter__(self) -> VideoFileSource:
        """Context manager entry."""
        self.open()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Context manager exit."""
        self.close()
