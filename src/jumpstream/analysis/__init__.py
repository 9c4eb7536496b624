"""Pure analysis logic: foot heights, ground level, airborne detection, and metrics.

This module contains NO OpenCV imports.
All functions operate on typed dataclasses and return results.
"""

from jumpstream.analysis.buffer import SlidingBuffer
from jumpstream.analysis.detector import AirborneTransition, advance_airborne
from jumpstream.analysis.extractor import extract_foot_height, sample_from_keypoints
from jumpstream.analysis.ground import update_ground_level
from jumpstream.analysis.metrics import JumpLog, measure_jump

__all__ = [
    "SlidingBuffer",
    "AirborneTransition",
    "advance_airborne",
    "extract_foot_height",
    "sample_from_keypoints",
    "update_ground_level",
    "JumpLog",
    "measure_jump",
]
