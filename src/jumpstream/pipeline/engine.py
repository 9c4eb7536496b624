"""Streaming jump engine: pure tick function and session facade."""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field, replace
from typing import Any

from jumpstream.analysis.buffer import SlidingBuffer
from jumpstream.analysis.detector import advance_airborne
from jumpstream.analysis.extractor import extract_foot_height, sample_from_keypoints
from jumpstream.analysis.ground import update_ground_level
from jumpstream.analysis.metrics import measure_jump
from jumpstream.core.config import EngineSettings
from jumpstream.core.exceptions import SessionNotActiveError
from jumpstream.core.logging import get_logger
from jumpstream.core.types import (
    AirborneState,
    FootHeightSample,
    JumpEvent,
    Keypoint,
    KeypointSample,
    RunningStats,
)
from jumpstream.pipeline.cadence import CadenceController
from jumpstream.pipeline.clock import Clock, MonotonicClock

logger = get_logger(__name__)

FootHeightListener = Callable[[float, float], None]
StatsListener = Callable[[RunningStats], None]
JumpListener = Callable[[JumpEvent], None]
Unsubscribe = Callable[[], None]


@dataclass(frozen=True, slots=True)
class EngineState:
    """Everything the engine carries from one tick to the next.

    Attributes:
        ground_level: Adaptive ground baseline, None until the first sample
        airborne_state: Current state of the airborne state machine
        jump_start_ms: Rising-edge timestamp of the open airborne episode
        buffer: Recent combined foot heights
        stats: Running statistics
        last_height_px: Combined height of the most recent tick
    """

    ground_level: float | None = None
    airborne_state: AirborneState = AirborneState.GROUNDED
    jump_start_ms: float | None = None
    buffer: SlidingBuffer = field(default_factory=SlidingBuffer)
    stats: RunningStats = field(default_factory=RunningStats)
    last_height_px: float | None = None

    @classmethod
    def initial(
        cls,
        settings: EngineSettings | None = None,
        stats: RunningStats | None = None,
    ) -> EngineState:
        """Fresh session state."""
        settings = settings or EngineSettings()
        return cls(
            buffer=SlidingBuffer(capacity=settings.buffer_capacity),
            stats=stats or RunningStats(),
        )

    def start_session(self, settings: EngineSettings) -> EngineState:
        """Reset session-scoped fields, keeping best-of stats if configured."""
        return EngineState.initial(
            settings,
            stats=self.stats.start_session(settings.persist_best_stats_across_sessions),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to JSON-compatible primitives."""
        return {
            "ground_level": self.ground_level,
            "airborne_state": self.airborne_state.name,
            "jump_start_ms": self.jump_start_ms,
            "buffer": {"capacity": self.buffer.capacity, "values": list(self.buffer.values)},
            "stats": self.stats.to_dict(),
            "last_height_px": self.last_height_px,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EngineState:
        """Rebuild from ``to_dict`` output."""
        buffer = data["buffer"]
        return cls(
            ground_level=data["ground_level"],
            airborne_state=AirborneState[data["airborne_state"]],
            jump_start_ms=data["jump_start_ms"],
            buffer=SlidingBuffer(capacity=buffer["capacity"], values=tuple(buffer["values"])),
            stats=RunningStats.from_dict(data["stats"]),
            last_height_px=data.get("last_height_px"),
        )


@dataclass(frozen=True, slots=True)
class TickResult:
    """Fully settled output of one tick."""

    state: EngineState
    foot_sample: FootHeightSample
    jump_event: JumpEvent | None = None


def tick(
    state: EngineState,
    sample: KeypointSample,
    settings: EngineSettings | None = None,
) -> TickResult:
    """Run one sample through extraction, buffering, ground, airborne and metrics.

    Pure function: the input state is never modified.

    Args:
        state: State after the previous tick
        sample: Ankle keypoints for this frame
        settings: Engine parameters (uses defaults if None)

    Returns:
        TickResult with the new state, the foot heights and any accepted jump
    """
    settings = settings or EngineSettings()

    foot = extract_foot_height(
        sample,
        settings.low_confidence_sum_threshold,
        settings.foot_combine_mode,
    )
    height = foot.combined_height_px

    buffer = state.buffer.push(height)
    ground_level = update_ground_level(
        state.ground_level,
        height,
        settings.ground_tolerance_band_px,
    )

    transition = advance_airborne(
        state.airborne_state,
        state.jump_start_ms,
        height,
        ground_level,
        settings.jump_threshold_px,
        foot.timestamp_ms,
    )

    event = None
    stats = state.stats
    if transition.episode is not None:
        event = measure_jump(
            transition.episode,
            buffer,
            ground_level,
            previous_jump_count=stats.jump_count,
            lookback=settings.peak_lookback,
            min_flight_time_s=settings.min_flight_time_seconds,
        )
        if event is not None:
            stats = stats.record(event)

    new_state = replace(
        state,
        ground_level=ground_level,
        airborne_state=transition.state,
        jump_start_ms=transition.jump_start_ms,
        buffer=buffer,
        stats=stats,
        last_height_px=height,
    )
    return TickResult(state=new_state, foot_sample=foot, jump_event=event)


class JumpEngine:
    """Session-scoped driver around ``tick``.

    Owns the single EngineState reference, gates samples through a
    CadenceController and publishes settled results to listeners. State is
    swapped under a lock so concurrent readers only see committed snapshots.

    Ticks are serialized: a second process_sample call waits until the
    previous tick has been committed and delivered to every listener, so
    listeners observe results in commit order. Listeners run on the calling
    thread and may read the engine or call back into it.
    """

    def __init__(
        self,
        settings: EngineSettings | None = None,
        clock: Clock | None = None,
    ) -> None:
        """Initialize engine with settings.

        Args:
            settings: Engine parameters (uses defaults if None)
            clock: Time source for cadence gating (monotonic if None)
        """
        self.settings = settings or EngineSettings()
        self.clock = clock or MonotonicClock()
        self._cadence = CadenceController(self.settings.min_sample_interval_ms, self.clock)
        self._state = EngineState.initial(self.settings)
        self._active = False
        self._lock = threading.Lock()
        self._publish_lock = threading.RLock()

        self._foot_listeners: list[FootHeightListener] = []
        self._stats_listeners: list[StatsListener] = []
        self._jump_listeners: list[JumpListener] = []

    @property
    def is_active(self) -> bool:
        """Check if a session is running."""
        return self._active

    @property
    def state(self) -> EngineState:
        """Last committed state snapshot."""
        with self._lock:
            return self._state

    @property
    def stats(self) -> RunningStats:
        """Current running statistics."""
        return self.state.stats

    @property
    def airborne_state(self) -> AirborneState:
        """Current airborne state, for overlays."""
        return self.state.airborne_state

    @property
    def ground_level(self) -> float | None:
        """Current ground level, for overlays."""
        return self.state.ground_level

    @property
    def current_jump_height_px(self) -> float | None:
        """Live height above ground while airborne, None when grounded."""
        state = self.state
        if (
            state.airborne_state != AirborneState.AIRBORNE
            or state.ground_level is None
            or state.last_height_px is None
        ):
            return None
        return state.last_height_px - state.ground_level

    def on_foot_heights(self, callback: FootHeightListener) -> Unsubscribe:
        """Register a callback receiving (left_px, right_px) every accepted tick.

        Returns:
            Callable that removes the callback again
        """
        return self._subscribe(self._foot_listeners, callback)

    def on_stats(self, callback: StatsListener) -> Unsubscribe:
        """Register a callback receiving RunningStats after each accepted jump."""
        return self._subscribe(self._stats_listeners, callback)

    def on_jump(self, callback: JumpListener) -> Unsubscribe:
        """Register a callback receiving each accepted JumpEvent."""
        return self._subscribe(self._jump_listeners, callback)

    @property
    def listener_count(self) -> int:
        """Number of registered callbacks across all channels."""
        return len(self._foot_listeners) + len(self._stats_listeners) + len(self._jump_listeners)

    def _subscribe(self, listeners: list[Any], callback: Any) -> Unsubscribe:
        with self._publish_lock:
            listeners.append(callback)

        def unsubscribe() -> None:
            with self._publish_lock:
                if callback in listeners:
                    listeners.remove(callback)

        return unsubscribe

    def start(self, settings: EngineSettings | None = None) -> None:
        """Begin a new session.

        Args:
            settings: Replacement engine parameters for this session
        """
        with self._lock:
            if settings is not None:
                self.settings = settings
                self._cadence.min_interval_ms = settings.min_sample_interval_ms
            self._reset_locked()
            self._active = True
        logger.info("Session started")

    def stop(self) -> RunningStats:
        """End the session and return its final stats."""
        with self._lock:
            final = self._state.stats
            self._reset_locked()
            self._active = False
        logger.info(
            "Session stopped: %d jumps, max %.1f px",
            final.jump_count,
            final.max_height_ever_px,
        )
        return final

    def reset(self) -> None:
        """Clear session state without ending the session."""
        with self._lock:
            self._reset_locked()
        logger.debug("Session state reset")

    def _reset_locked(self) -> None:
        self._state = self._state.start_session(self.settings)
        self._cadence.reset()

    def process_sample(
        self,
        sample: KeypointSample,
        now_ms: float | None = None,
    ) -> TickResult | None:
        """Process one keypoint sample.

        Args:
            sample: Ankle keypoints for this frame
            now_ms: Arrival time for cadence gating; read from the clock if None

        Returns:
            TickResult, or None if the sample was dropped by the cadence gate

        Raises:
            SessionNotActiveError: If ``start`` has not been called
        """
        with self._publish_lock:
            with self._lock:
                if not self._active:
                    raise SessionNotActiveError()

                if not self._cadence.admit(now_ms):
                    return None

                result = tick(self._state, sample, self.settings)
                self._state = result.state

            self._publish(result)
        return result

    def process_keypoints(
        self,
        left: Keypoint | None,
        right: Keypoint | None,
        frame_height_px: float,
        timestamp_ms: float,
        now_ms: float | None = None,
    ) -> TickResult | None:
        """Process raw ankle keypoints; frames missing either ankle are ignored."""
        sample = sample_from_keypoints(left, right, frame_height_px, timestamp_ms)
        if sample is None:
            if not self._active:
                raise SessionNotActiveError()
            return None
        return self.process_sample(sample, now_ms)

    def _publish(self, result: TickResult) -> None:
        foot = result.foot_sample
        for foot_callback in list(self._foot_listeners):
            foot_callback(foot.left_height_px, foot.right_height_px)

        event = result.jump_event
        if event is None:
            return

        logger.info(
            "Jump #%d: %.1f px, %.2f s flight",
            event.jump_index,
            event.peak_height_px,
            event.flight_time_s,
        )
        for jump_callback in list(self._jump_listeners):
            jump_callback(event)
        for stats_callback in list(self._stats_listeners):
            stats_callback(result.state.stats)

    def __enter__(self) -> JumpEngine:
        """Context manager entry."""
        self.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Context manager exit."""
        if self._active:
            self.stop()


def detect_jumps_batch(
    samples: Iterable[KeypointSample | None],
    settings: EngineSettings | None = None,
) -> list[JumpEvent]:
    """Process a sequence of samples and return all accepted jumps.

    Pure function for batch processing recorded data; no cadence gating.
    None entries (frames with missing ankles) are skipped.

    Args:
        samples: Samples in timestamp order
        settings: Engine parameters

    Returns:
        List of accepted jump events
    """
    settings = settings or EngineSettings()
    state = EngineState.initial(settings)
    events: list[JumpEvent] = []

    for sample in samples:
        if sample is None:
            continue
        result = tick(state, sample, settings)
        state = result.state
        if result.jump_event is not None:
            events.append(result.jump_event)

    return events
