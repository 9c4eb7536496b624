"""MediaPipe pose estimation wrapper using the Tasks API."""

from __future__ import annotations

import urllib.request
from pathlib import Path

import cv2
import mediapipe as mp
from mediapipe.tasks import python
from mediapipe.tasks.python import vision

from jumpstream.core.config import PoseSettings
from jumpstream.core.exceptions import PoseEstimationError
from jumpstream.core.logging import get_logger
from jumpstream.core.types import Frame, Landmark, Pose

logger = get_logger(__name__)

# Lite model; only the ankles are consumed
MODEL_URL = "https://storage.googleapis.com/mediapipe-models/pose_landmarker/pose_landmarker_lite/float16/latest/pose_landmarker_lite.task"
MODEL_DIR = Path("data") / "models"
MODEL_PATH = MODEL_DIR / "pose_landmarker_lite.task"


def _download_model() -> Path:
    """Download the pose landmarker model if not present.

    Returns:
        Path to the downloaded model file

    Raises:
        PoseEstimationError: If download fails
    """
    if MODEL_PATH.exists():
        return MODEL_PATH

    logger.info("Downloading MediaPipe pose landmarker model...")
    MODEL_DIR.mkdir(parents=True, exist_ok=True)

    try:
        urllib.request.urlretrieve(MODEL_URL, MODEL_PATH)
        logger.info("Model downloaded to %s", MODEL_PATH)
        return MODEL_PATH
    except Exception as e:
        raise PoseEstimationError(f"Failed to download model: {e}") from e


class PoseEstimator:
    """Wrapper for MediaPipe pose estimation.

    Converts MediaPipe results to Pose/Landmark types so that MediaPipe
    objects never reach the engine.
    """

    def __init__(self, settings: PoseSettings | None = None) -> None:
        """Initialize pose estimator with settings.

        Args:
            settings: Pose estimation settings (uses defaults if None)
        """
        self.settings = settings or PoseSettings()
        self._landmarker: vision.PoseLandmarker | None = None

    @property
    def is_initialized(self) -> bool:
        """Check if the MediaPipe model is loaded."""
        return self._landmarker is not None

    def initialize(self) -> None:
        """Load the MediaPipe pose model.

        Raises:
            PoseEstimationError: If model fails to load
        """
        try:
            model_path = (
                Path(self.settings.model_path) if self.settings.model_path else _download_model()
            )

            options = vision.PoseLandmarkerOptions(
                base_options=python.BaseOptions(model_asset_path=str(model_path)),
                running_mode=vision.RunningMode.VIDEO,
                num_poses=1,
                min_pose_detection_confidence=self.settings.min_detection_confidence,
                min_pose_presence_confidence=self.settings.min_tracking_confidence,
                min_tracking_confidence=self.settings.min_tracking_confidence,
            )

            self._landmarker = vision.PoseLandmarker.create_from_options(options)
            logger.info("MediaPipe PoseLandmarker initialized from %s", model_path)

        except PoseEstimationError:
            raise
        except Exception as e:
            raise PoseEstimationError(f"Failed to initialize MediaPipe: {e}") from e

    def close(self) -> None:
        """Release MediaPipe resources."""
        if self._landmarker is not None:
            self._landmarker.close()
            self._landmarker = None

    def estimate(self, frame: Frame) -> Pose | None:
        """Run pose estimation on a frame.

        Args:
            frame: Input video frame

        Returns:
            Pose with normalized landmarks, or None if no person detected

        Raises:
            PoseEstimationError: If estimation fails
        """
        if self._landmarker is None:
            self.initialize()
        if self._landmarker is None:
            raise PoseEstimationError("Pose estimator not initialized")

        try:
            rgb_image = cv2.cvtColor(frame.image, cv2.COLOR_BGR2RGB)
            mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=rgb_image)
            results = self._landmarker.detect_for_video(mp_image, int(frame.timestamp_ms))
        except Exception as e:
            logger.error("Pose estimation failed: %s", e)
            raise PoseEstimationError(f"Estimation failed: {e}") from e

        if not results.pose_landmarks:
            return None

        landmarks = {
            idx: Landmark(
                x=float(lm.x),
                y=float(lm.y),
                visibility=float(lm.visibility if lm.visibility is not None else 1.0),
            )
            for idx, lm in enumerate(results.pose_landmarks[0])
        }
        return Pose(landmarks=landmarks, timestamp_ms=frame.timestamp_ms, frame_idx=frame.index)

    def __enter__(self) -> PoseEstimator:
        """Context manager entry."""
        self.initialize()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Context manager exit."""
        self.close()
