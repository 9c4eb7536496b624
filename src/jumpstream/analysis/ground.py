"""Adaptive ground-level baseline."""

from __future__ import annotations


def update_ground_level(
    ground_level: float | None,
    height_px: float,
    tolerance_band_px: float = 100.0,
) -> float | None:
    """Fold a new combined foot height into the ground level.

    The first sample defines the floor. After that the level only moves down,
    and only when the new height lies strictly within ``tolerance_band_px``
    below it; larger drops are treated as tracking loss.

    Args:
        ground_level: Current ground level, or None if not yet established
        height_px: Combined foot height of the current sample
        tolerance_band_px: Largest per-update drop accepted

    Returns:
        Updated ground level
    """
    if ground_level is None:
        return height_px

    if ground_level - tolerance_band_px < height_px < ground_level:
        return height_px

    return ground_level
