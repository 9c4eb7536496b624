"""Sample cadence throttling."""

from __future__ import annotations

from jumpstream.pipeline.clock import Clock, MonotonicClock


class CadenceController:
    """Drops samples that arrive sooner than a minimum interval.

    Decouples the detection rate from the rate at which the upstream pose
    model produces frames. Dropped samples are not queued.
    """

    def __init__(self, min_interval_ms: float = 16.0, clock: Clock | None = None) -> None:
        """Initialize controller.

        Args:
            min_interval_ms: Minimum time between processed samples
            clock: Time source used when ``admit`` is called without a time
        """
        self.min_interval_ms = min_interval_ms
        self.clock = clock or MonotonicClock()
        self._last_processed_ms: float | None = None

    @property
    def last_processed_ms(self) -> float | None:
        """Time of the last admitted sample."""
        return self._last_processed_ms

    def admit(self, now_ms: float | None = None) -> bool:
        """Decide whether a sample arriving now should be processed.

        Args:
            now_ms: Arrival time; read from the clock if None

        Returns:
            True if the sample should be processed
        """
        if now_ms is None:
            now_ms = self.clock.now_ms()

        if (
            self._last_processed_ms is not None
            and now_ms - self._last_processed_ms < self.min_interval_ms
        ):
            return False

        self._last_processed_ms = now_ms
        return True

    def reset(self) -> None:
        """Forget the last processed time."""
        self._last_processed_ms = None
