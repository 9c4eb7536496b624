"""Sample pipeline: cadence gating, the tick function, and the engine facade."""

from jumpstream.pipeline.cadence import CadenceController
from jumpstream.pipeline.chart import FootHeightSeries
from jumpstream.pipeline.clock import Clock, ManualClock, MonotonicClock
from jumpstream.pipeline.engine import (
    EngineState,
    JumpEngine,
    TickResult,
    detect_jumps_batch,
    tick,
)

__all__ = [
    "CadenceController",
    "FootHeightSeries",
    "Clock",
    "ManualClock",
    "MonotonicClock",
    "EngineState",
    "JumpEngine",
    "TickResult",
    "detect_jumps_batch",
    "tick",
]
