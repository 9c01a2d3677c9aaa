"""
Register file of the GPIO controller.

Owns the configuration registers (``RegisterBank``), decodes bus offsets
and produces the one-tick INT_STATUS clear pulse. IN and INT_STATUS are
not stored here: their read values are supplied by the pin pipeline and the
interrupt controller.
"""

import logging
from dataclasses import dataclass, replace
from enum import IntEnum
from typing import Optional

from gpiosim.model.config import GpioConfig

from .bus import BusTransaction

logger = logging.getLogger(__name__)


class RegisterOffset(IntEnum):
    """Byte offsets of the registers within the peripheral window."""

    DIR = 0x00
    OUT = 0x04
    IN = 0x08
    INT_MASK = 0x0C
    INT_STATUS = 0x10
    INT_TYPE = 0x14
    INT_POLARITY = 0x18
    DEBOUNCE_CFG = 0x1C

    @classmethod
    def decode(cls, offset: int) -> Optional["RegisterOffset"]:
        """Map a window offset to a register, or None if unmapped."""
        try:
            return cls(offset)
        except ValueError:
            return None


# Registers that hold plain per-pin configuration, keyed to RegisterBank fields
_BANK_FIELDS = {
    RegisterOffset.DIR: "direction",
    RegisterOffset.OUT: "output_value",
    RegisterOffset.INT_MASK: "int_mask",
    RegisterOffset.INT_TYPE: "int_type",
    RegisterOffset.INT_POLARITY: "int_polarity",
}


@dataclass(frozen=True)
class RegisterBank:
    """Configuration register contents. All fields reset to zero."""

    direction: int = 0
    output_value: int = 0
    int_mask: int = 0
    int_type: int = 0
    int_polarity: int = 0
    debounce_threshold: int = 0


@dataclass(frozen=True)
class RegisterFileState:
    bank: RegisterBank = RegisterBank()
    clear_pulse: int = 0


class RegisterFile:
    """Address decode, register storage and the status-clear pulse."""

    def __init__(self, config: GpioConfig):
        self.config = config
        self.state = RegisterFileState()

    @property
    def bank(self) -> RegisterBank:
        return self.state.bank

    @property
    def clear_pulse(self) -> int:
        """W1C mask written to INT_STATUS on the previous tick, else 0."""
        return self.state.clear_pulse

    def reset(self) -> None:
        self.state = RegisterFileState()

    def read(self, address: int, debounced_in: int, int_status: int) -> int:
        """Combinational read mux. Has no side effects.

        Args:
            address: Bus address of the access.
            debounced_in: Current value of the IN register source.
            int_status: Current sticky interrupt status.

        Returns:
            The register value, or 0 for unmapped addresses.
        """
        reg = RegisterOffset.decode(self.config.to_offset(address))
        if reg is None:
            return 0
        if reg is RegisterOffset.IN:
            return debounced_in
        if reg is RegisterOffset.INT_STATUS:
            return int_status
        if reg is RegisterOffset.DEBOUNCE_CFG:
            return self.bank.debounce_threshold
        return getattr(self.bank, _BANK_FIELDS[reg])

    def tick(self, transaction: Optional[BusTransaction]) -> RegisterFileState:
        """Compute the register state after this tick without committing it.

        The clear pulse from the previous tick is always dropped, so a pulse
        lasts exactly one tick.
        """
        bank = self.bank
        clear_pulse = 0

        if transaction is None or not transaction.is_write:
            return RegisterFileState(bank, clear_pulse)

        reg = RegisterOffset.decode(self.config.to_offset(transaction.address))
        data = transaction.write_data
        if reg is None:
            logger.debug("Write to unmapped address %#x ignored", transaction.address)
        elif reg is RegisterOffset.IN:
            logger.debug("Write to read-only IN register ignored")
        elif reg is RegisterOffset.INT_STATUS:
            clear_pulse = data & self.config.pin_mask
            logger.debug("INT_STATUS clear pulse %#010x", clear_pulse)
        elif reg is RegisterOffset.DEBOUNCE_CFG:
            bank = replace(bank, debounce_threshold=data & self.config.debounce_mask)
            logger.debug("DEBOUNCE_CFG <= %d", bank.debounce_threshold)
        else:
            value = data & self.config.pin_mask
            bank = replace(bank, **{_BANK_FIELDS[reg]: value})
            logger.debug("%s <= %#010x", reg.name, value)

        return RegisterFileState(bank, clear_pulse)

    def commit(self, state: RegisterFileState) -> None:
        self.state = state
