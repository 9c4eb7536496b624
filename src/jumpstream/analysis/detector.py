"""Airborne state machine.

This module is pure logic with NO I/O and NO OpenCV imports.

Transitions:
    GROUNDED → AIRBORNE: combined height rises above ground + threshold
    AIRBORNE → GROUNDED: combined height is back at or below ground + threshold

A single threshold is used in both directions, so a signal hovering exactly
on the boundary chatters between states.
"""

from __future__ import annotations

from dataclasses import dataclass

from jumpstream.core.types import AirborneState


@dataclass(frozen=True, slots=True)
class AirborneTransition:
    """Outcome of evaluating one frame against the state machine.

    Attributes:
        state: State after this frame
        jump_start_ms: Rising-edge timestamp of the open episode, if any
        episode: (start_ms, end_ms) of an episode closed on this frame
    """

    state: AirborneState
    jump_start_ms: float | None = None
    episode: tuple[float, float] | None = None

    @property
    def landed(self) -> bool:
        """True if an airborne episode ended on this frame."""
        return self.episode is not None


def is_airborne(
    height_px: float,
    ground_level: float | None,
    threshold_px: float = 20.0,
) -> bool:
    """Check whether a height counts as off the ground."""
    return ground_level is not None and height_px > ground_level + threshold_px


def advance_airborne(
    state: AirborneState,
    jump_start_ms: float | None,
    height_px: float,
    ground_level: float | None,
    threshold_px: float,
    timestamp_ms: float,
) -> AirborneTransition:
    """Evaluate the state machine for one processed frame.

    Args:
        state: Current state
        jump_start_ms: Rising-edge timestamp of the open episode
        height_px: Combined foot height of this frame
        ground_level: Current ground level
        threshold_px: Margin above ground that counts as airborne
        timestamp_ms: Timestamp of this frame

    Returns:
        AirborneTransition with the new state and any closed episode
    """
    in_air = is_airborne(height_px, ground_level, threshold_px)

    if state == AirborneState.GROUNDED:
        return _handle_grounded(in_air, timestamp_ms)

    return _handle_airborne(in_air, jump_start_ms, timestamp_ms)


def _handle_grounded(in_air: bool, timestamp_ms: float) -> AirborneTransition:
    """GROUNDED - watch for the rising edge."""
    if in_air:
        return AirborneTransition(state=AirborneState.AIRBORNE, jump_start_ms=timestamp_ms)

    return AirborneTransition(state=AirborneState.GROUNDED)


def _handle_airborne(
    in_air: bool,
    jump_start_ms: float | None,
    timestamp_ms: float,
) -> AirborneTransition:
    """AIRBORNE - watch for the falling edge and close the episode."""
    if in_air:
        return AirborneTransition(state=AirborneState.AIRBORNE, jump_start_ms=jump_start_ms)

    # Without a recorded start the episode cannot be measured
    episode = (jump_start_ms, timestamp_ms) if jump_start_ms is not None else None
    return AirborneTransition(state=AirborneState.GROUNDED, episode=episode)
