"""Computer vision edge: pose estimation, landmark conversion, and video input.

``pose`` and ``video`` pull in MediaPipe and OpenCV; import them directly.
"""

from jumpstream.vision.landmarks import ankles_from_pose, sample_from_pose

__all__ = [
    "ankles_from_pose",
    "sample_from_pose",
]
