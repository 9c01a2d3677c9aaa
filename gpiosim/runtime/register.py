"""
Register and BitField access over a word bus.

Host-side view of the peripheral's registers: field extraction, validated
read-modify-write and write-1-to-clear handling, on top of any
``AbstractBusInterface`` (the simulated bus master in ``gpiosim.driver``
or a mock in tests).
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Dict, List, Optional

logger = logging.getLogger(__name__)


class BusIOError(IOError):
    """Raised when a bus read/write operation fails.

    Bus masters raise this when a transfer completes with an error response
    or the slave never signals ready.
    """


class RuntimeAccessType(str, Enum):
    """
    Register field access types.
    """

    RO = "ro"  # Read-only
    WO = "wo"  # Write-only
    RW = "rw"  # Read-write
    RW1C = "rw1c"  # Read, write-1-to-clear


@dataclass
class BitField:
    """
    Represents a bit field within a 32-bit register.
    """

    REGISTER_WIDTH: ClassVar[int] = 32

    name: str
    offset: int
    width: int
    access: str = "rw"
    description: str = ""
    reset_value: Optional[int] = None

    def __post_init__(self):
        valid_access = {at.value for at in RuntimeAccessType}
        if isinstance(self.access, RuntimeAccessType):
            self.access = self.access.value
        if self.access not in valid_access:
            raise ValueError(f"access must be one of {valid_access}")

        if self.width <= 0:
            raise ValueError(f"Bit field '{self.name}' width must be positive")
        if self.offset < 0:
            raise ValueError(f"Bit field '{self.name}' offset must be non-negative")
        if self.offset + self.width > self.REGISTER_WIDTH:
            raise ValueError(
                f"Bit field '{self.name}' extends beyond "
                f"{self.REGISTER_WIDTH}-bit register boundary"
            )

    @property
    def mask(self) -> int:
        """Get the bit mask for this field within the register."""
        return ((1 << self.width) - 1) << self.offset

    @property
    def max_value(self) -> int:
        return (1 << self.width) - 1

    @property
    def is_readable(self) -> bool:
        return self.access != RuntimeAccessType.WO.value

    @property
    def is_writable(self) -> bool:
        return self.access != RuntimeAccessType.RO.value

    def extract_value(self, register_value: int) -> int:
        """Extract this field's value from a complete register value."""
        return (register_value >> self.offset) & self.max_value

    def insert_value(self, register_value: int, field_value: int) -> int:
        """Insert this field's value into a complete register value."""
        return (register_value & ~self.mask) | ((field_value << self.offset) & self.mask)


class AbstractBusInterface(ABC):
    """
    Abstract base class for word-addressed bus masters.
    """

    @abstractmethod
    def read_word(self, address: int) -> int:
        """Read a 32-bit word from the specified address.

        Raises:
            BusIOError: If the bus operation fails.
        """

    @abstractmethod
    def write_word(self, address: int, data: int) -> None:
        """Write a 32-bit word to the specified address.

        Raises:
            BusIOError: If the bus operation fails.
        """


class RegisterBoundField:
    """
    Helper class to provide access to a specific field within a register instance.
    """

    def __init__(self, register: "Register", field_def: BitField):
        self._register = register
        self._field_def = field_def

    def read(self) -> int:
        return self._register.read_field(self._field_def.name)

    def write(self, value: int) -> None:
        self._register.write_field(self._field_def.name, value)

    def __int__(self) -> int:
        return self.read()

    def __repr__(self) -> str:
        return str(self.read())


def _build_rmw_value(
    fields_dict: Dict[str, BitField], field_values: Dict[str, int], current_reg_val: int
) -> int:
    """
    Build register write value preserving non-target fields safely.

    RW fields not being written keep their current value. RW1C fields not
    being written are sent as 0, because writing back the 1s just read
    would clear them.

    Args:
        fields_dict: Dictionary mapping field names to BitField definitions
        field_values: Dictionary of field names to new values to write
        current_reg_val: Current register value (from read operation)

    Returns:
        Computed register value with updated fields and preserved RW fields

    Raises:
        ValueError: If a field value exceeds its width
    """
    reg_val_to_write = 0
    for f_name, field in fields_dict.items():
        if f_name in field_values:
            value = field_values[f_name]
            if value < 0 or value > field.max_value:
                raise ValueError(f"Value {value} exceeds field '{f_name}' width")
            reg_val_to_write = field.insert_value(reg_val_to_write, value)
            continue

        if field.access == RuntimeAccessType.RW.value:
            preserved = field.extract_value(current_reg_val)
            reg_val_to_write = field.insert_value(reg_val_to_write, preserved)

    return reg_val_to_write


class Register:
    """
    A memory-mapped register with named bit fields.

    Fields are also bound as attributes, so ``reg.threshold.write(4)`` is
    equivalent to ``reg.write_field("threshold", 4)``.
    """

    def __init__(
        self,
        name: str,
        offset: int,
        bus: AbstractBusInterface,
        fields: List[BitField],
        description: str = "",
    ):
        self.name = name
        self.offset = offset
        self.description = description
        self._bus = bus
        self._fields: Dict[str, BitField] = {f.name: f for f in fields}
        for field in fields:
            setattr(self, field.name, RegisterBoundField(self, field))

    def __repr__(self) -> str:
        return f"Register({self.name!r}, offset={self.offset:#x})"

    @property
    def reset_value(self) -> int:
        """Calculate the register's reset value from its fields."""
        value = 0
        for field in self._fields.values():
            if field.reset_value is not None:
                value = field.insert_value(value, field.reset_value)
        return value

    def get_field_names(self) -> List[str]:
        return list(self._fields.keys())

    def get_field_info(self, name: str) -> BitField:
        """Get the BitField object for a given field name."""
        if name not in self._fields:
            raise KeyError(f"Field '{name}' not found in register '{self.name}'")
        return self._fields[name]

    def read(self) -> int:
        """Read the entire register value."""
        return self._bus.read_word(self.offset)

    def write(self, value: int) -> None:
        """Write the entire register value."""
        self._bus.write_word(self.offset, value & 0xFFFFFFFF)

    def read_field(self, field_name: str) -> int:
        """Read a specific bit field.

        Raises:
            KeyError: If field not found.
            ValueError: If field is write-only.
        """
        field = self.get_field_info(field_name)
        if not field.is_readable:
            raise ValueError(f"Field '{field_name}' is write-only")
        return field.extract_value(self.read())

    def read_all_fields(self) -> Dict[str, int]:
        """Read all readable fields with a single bus read."""
        reg_value = self.read()
        return {
            name: field.extract_value(reg_value)
            for name, field in self._fields.items()
            if field.is_readable
        }

    def write_field(self, field_name: str, value: int) -> None:
        """Write a specific bit field (Read-Modify-Write)."""
        self.write_multiple_fields({field_name: value})

    def write_multiple_fields(self, field_values: Dict[str, int]) -> None:
        """Write several fields in a single register operation.

        Raises:
            KeyError: If a field is not found.
            ValueError: If a field is read-only or a value exceeds its width.
        """
        for field_name in field_values:
            field = self.get_field_info(field_name)
            if not field.is_writable:
                raise ValueError(f"Field '{field_name}' is read-only")

        current_reg_val = 0
        if any(f.access == RuntimeAccessType.RW.value for f in self._fields.values()):
            try:
                current_reg_val = self.read()
            except BusIOError as exc:
                logger.warning(
                    "Failed to read register '%s' during RMW: %s; "
                    "proceeding with current_value=0, other fields may be corrupted",
                    self.name,
                    exc,
                )

        self.write(_build_rmw_value(self._fields, field_values, current_reg_val))

    def clear(self, mask: int = 0xFFFFFFFF) -> None:
        """Write ``mask`` to a write-1-to-clear register.

        Raises:
            ValueError: If the register has no RW1C field under ``mask``.
        """
        rw1c_mask = 0
        for field in self._fields.values():
            if field.access == RuntimeAccessType.RW1C.value:
                rw1c_mask |= field.mask
        if not mask & rw1c_mask:
            raise ValueError(f"Register '{self.name}' has no write-1-to-clear bits in {mask:#x}")
        self.write(mask & rw1c_mask)
