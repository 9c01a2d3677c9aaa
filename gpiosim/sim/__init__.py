"""
Cycle-driven behavioral model of the GPIO controller.

Use ``GpioTop`` and drive it one tick at a time; the sub-components are
exported for unit-level testing.
"""

from .bus import IDLE_BUS, BusInterface, BusPhase, BusSignals, BusTransaction, next_phase
from .interrupt import InterruptController, InterruptPolarity, InterruptState, InterruptType
from .pin_pipeline import PinChannel, PinPipeline, debounce_step
from .register_file import RegisterBank, RegisterFile, RegisterOffset
from .top import GpioTop, TickResult

__all__ = [
    "IDLE_BUS",
    "BusInterface",
    "BusPhase",
    "BusSignals",
    "BusTransaction",
    "next_phase",
    "RegisterBank",
    "RegisterFile",
    "RegisterOffset",
    "PinChannel",
    "PinPipeline",
    "debounce_step",
    "InterruptController",
    "InterruptState",
    "InterruptType",
    "InterruptPolarity",
    "GpioTop",
    "TickResult",
]
