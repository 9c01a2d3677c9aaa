"""
3-phase register bus slave (IDLE -> SETUP -> ACCESS).

The protocol state is an explicit ``BusPhase`` advanced by the pure
``next_phase`` function; ``BusInterface`` wraps it with the transaction
latched during SETUP. The slave is always ready, adds no wait states and
never signals an error.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)


class BusPhase(str, Enum):
    """Protocol phase of the slave as seen at the end of a tick."""

    IDLE = "idle"
    SETUP = "setup"
    ACCESS = "access"


@dataclass(frozen=True)
class BusSignals:
    """Master-driven bus inputs for one tick."""

    psel: bool = False
    penable: bool = False
    pwrite: bool = False
    paddr: int = 0
    pwdata: int = 0

    @classmethod
    def setup(cls, address: int, write: bool = False, data: int = 0) -> "BusSignals":
        return cls(psel=True, penable=False, pwrite=write, paddr=address, pwdata=data)

    @classmethod
    def access(cls, address: int, write: bool = False, data: int = 0) -> "BusSignals":
        return cls(psel=True, penable=True, pwrite=write, paddr=address, pwdata=data)

    @property
    def is_access(self) -> bool:
        return self.psel and self.penable


IDLE_BUS = BusSignals()


@dataclass(frozen=True)
class BusTransaction:
    """One register access as framed by the protocol."""

    address: int
    is_write: bool
    write_data: int = 0

    @classmethod
    def from_signals(cls, signals: BusSignals) -> "BusTransaction":
        return cls(
            address=signals.paddr,
            is_write=signals.pwrite,
            write_data=signals.pwdata if signals.pwrite else 0,
        )


def next_phase(phase: BusPhase, psel: bool, penable: bool) -> BusPhase:
    """Protocol transition for one tick.

    ``phase`` is the phase of the previous tick; the result is the phase the
    current tick's select/enable pair puts the slave in. Any tick with both
    select and enable high is an ACCESS tick, whatever came before it.
    """
    if not psel:
        return BusPhase.IDLE
    if penable:
        return BusPhase.ACCESS
    return BusPhase.SETUP


class BusInterface:
    """Slave-side protocol tracker.

    ``tick()`` classifies the current bus signals and returns the transaction
    to perform on this tick (ACCESS ticks only), or ``None``.
    """

    # Always ready, never an error
    pready = True
    pslverr = False

    def __init__(self):
        self.phase = BusPhase.IDLE
        self.pending: Optional[BusTransaction] = None

    def reset(self) -> None:
        self.phase = BusPhase.IDLE
        self.pending = None

    def tick(self, signals: BusSignals) -> Optional[BusTransaction]:
        """Advance the protocol by one tick.

        Returns:
            The transaction carried by an ACCESS tick, else None.
        """
        previous = self.phase
        self.phase = next_phase(previous, signals.psel, signals.penable)

        if self.phase is BusPhase.SETUP:
            self.pending = BusTransaction.from_signals(signals)
            return None

        if self.phase is BusPhase.IDLE:
            self.pending = None
            return None

        transaction = BusTransaction.from_signals(signals)
        if previous is not BusPhase.SETUP:
            logger.warning(
                "ACCESS at %#x without a preceding SETUP tick (previous phase: %s)",
                signals.paddr,
                previous.value,
            )
        elif self.pending is not None and (
            self.pending.address != transaction.address
            or self.pending.is_write != transaction.is_write
            or self.pending.write_data != transaction.write_data
        ):
            logger.warning(
                "ACCESS changed the transaction latched in SETUP: %s -> %s",
                self.pending,
                transaction,
            )
        self.pending = None
        return transaction
