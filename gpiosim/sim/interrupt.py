"""
Interrupt generation: edge/level detection and sticky status.

All operations work on whole pin vectors, one bit per pin. For every pin:

* rising/falling pulses compare the debounced input with its value one
  tick earlier;
* INT_TYPE selects edge (1) or level (0) detection, strictly per bit;
* INT_POLARITY selects rising/active-high (1) or falling/active-low (0);
* the status bit is sticky and cleared by writing 1 to INT_STATUS.

Clearing is applied before new events are merged in, so a level source
that is still active sets its bit again on the same tick and the
aggregated IRQ line never drops.
"""

import logging
from dataclasses import dataclass
from enum import IntEnum

from gpiosim.model.config import GpioConfig
from gpiosim.utils import iter_set_bits

from .register_file import RegisterBank

logger = logging.getLogger(__name__)


class InterruptType(IntEnum):
    """INT_TYPE bit encoding."""

    LEVEL = 0
    EDGE = 1


class InterruptPolarity(IntEnum):
    """INT_POLARITY bit encoding."""

    FALLING_OR_LOW = 0
    RISING_OR_HIGH = 1


@dataclass(frozen=True)
class InterruptState:
    prev_debounced: int = 0
    status: int = 0

    @property
    def irq_line(self) -> bool:
        return self.status != 0


def edge_events(debounced: int, prev_debounced: int, bank: RegisterBank, pin_mask: int) -> int:
    """Pins with a qualifying transition on this tick."""
    rising = debounced & ~prev_debounced
    falling = ~debounced & prev_debounced & pin_mask
    rise_enabled = bank.int_mask & bank.int_type & bank.int_polarity
    fall_enabled = bank.int_mask & bank.int_type & ~bank.int_polarity
    return ((rising & rise_enabled) | (falling & fall_enabled)) & pin_mask


def level_events(debounced: int, bank: RegisterBank, pin_mask: int) -> int:
    """Pins whose input currently matches their active level."""
    level_enabled = bank.int_mask & ~bank.int_type
    active = ~(debounced ^ bank.int_polarity)
    return level_enabled & active & pin_mask


def next_status(status: int, set_event: int, clear_pulse: int) -> int:
    """Sticky status update: clear first, then merge the new events."""
    return (status & ~clear_pulse) | set_event


class InterruptController:
    """Owns ``InterruptState`` and drives the aggregated IRQ output."""

    def __init__(self, config: GpioConfig):
        self.config = config
        self.state = InterruptState()

    @property
    def status(self) -> int:
        return self.state.status

    @property
    def irq(self) -> bool:
        """Aggregated interrupt line, high while any status bit is set."""
        return self.state.irq_line

    def reset(self) -> None:
        self.state = InterruptState()

    def tick(self, debounced: int, bank: RegisterBank, clear_pulse: int) -> InterruptState:
        """Compute the interrupt state after this tick without committing it.

        Args:
            debounced: Debounced input vector during this tick.
            bank: Configuration registers during this tick.
            clear_pulse: W1C mask issued on the previous tick (0 if none).
        """
        pin_mask = self.config.pin_mask
        prev = self.state.prev_debounced
        set_event = edge_events(debounced, prev, bank, pin_mask) | level_events(
            debounced, bank, pin_mask
        )
        status = next_status(self.state.status, set_event, clear_pulse)

        if logger.isEnabledFor(logging.DEBUG):
            self._log_changes(self.state.status, status, clear_pulse)

        return InterruptState(prev_debounced=debounced, status=status)

    @staticmethod
    def _log_changes(old: int, new: int, clear_pulse: int) -> None:
        for pin in iter_set_bits(new & ~old):
            logger.debug("Interrupt status set on pin %d", pin)
        for pin in iter_set_bits(old & ~new):
            logger.debug("Interrupt status cleared on pin %d", pin)
        for pin in iter_set_bits(clear_pulse & old & new):
            logger.debug("Clear of pin %d overridden by active level", pin)
        if bool(old) != bool(new):
            logger.debug("IRQ line %s", "asserted" if new else "released")

    def commit(self, state: InterruptState) -> None:
        self.state = state
