"""
Memory map definitions for the GPIO register window.

These are Pydantic models for YAML parsing and validation.
For runtime register access, use gpiosim.runtime.register classes.

Naming convention:
- Classes here use *Def suffix (e.g., RegisterDef, BitFieldDef) to indicate
    they are definitions/schemas, not runtime objects.
- Use to_runtime_*() methods to convert to runtime objects.
"""

from enum import Enum
from typing import TYPE_CHECKING, Any, List, Optional, Union

from pydantic import Field, computed_field, field_validator, model_validator

from gpiosim.utils import parse_bit_range

from .base import FlexibleModel, StrictModel

if TYPE_CHECKING:
    from gpiosim.runtime.register import AbstractBusInterface


class AccessType(str, Enum):
    """Register/field access types for YAML parsing."""

    READ_ONLY = "read-only"
    WRITE_ONLY = "write-only"
    READ_WRITE = "read-write"
    WRITE_1_TO_CLEAR = "write-1-to-clear"

    @classmethod
    def normalize(cls, value: str) -> "AccessType":
        """Normalize various access type representations."""
        normalized_map = {
            "ro": cls.READ_ONLY,
            "r": cls.READ_ONLY,
            "readonly": cls.READ_ONLY,
            "wo": cls.WRITE_ONLY,
            "writeonly": cls.WRITE_ONLY,
            "rw": cls.READ_WRITE,
            "r/w": cls.READ_WRITE,
            "readwrite": cls.READ_WRITE,
            "rw1c": cls.WRITE_1_TO_CLEAR,
            "r/w1c": cls.WRITE_1_TO_CLEAR,
            "w1c": cls.WRITE_1_TO_CLEAR,
            "write1toclear": cls.WRITE_1_TO_CLEAR,
        }
        try:
            return normalized_map[value.lower()]
        except KeyError:
            raise ValueError(f"Unknown access type '{value}'") from None

    @classmethod
    def from_string(cls, value: str) -> "AccessType":
        """Parse access value from enum value or alias string."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return cls.normalize(value)

    def to_runtime_access(self) -> str:
        """Convert to runtime access string value (ro, wo, rw, rw1c)."""
        mapping = {
            AccessType.READ_ONLY: "ro",
            AccessType.WRITE_ONLY: "wo",
            AccessType.READ_WRITE: "rw",
            AccessType.WRITE_1_TO_CLEAR: "rw1c",
        }
        return mapping[self]


class BitFieldDef(FlexibleModel):
    """
    Bit field definition within a register (Pydantic model for YAML parsing).

    Represents a named range of bits with specific access semantics.
    """

    name: str = Field(..., description="Bit field name")
    bit_offset: Optional[int] = Field(
        default=None, alias="offset", description="Starting bit position (LSB = 0)", ge=0
    )
    bit_width: Optional[int] = Field(
        default=None, alias="width", description="Number of bits", ge=1
    )
    bits: Optional[str] = Field(default=None, description="Bit range string e.g. [7:0]")
    access: AccessType = Field(default=AccessType.READ_WRITE, description="Access type")
    reset_value: Optional[int] = Field(default=None, description="Reset/default value")
    description: str = Field(default="", description="Field description")

    @model_validator(mode="before")
    @classmethod
    def parse_bits_notation(cls, data: Any) -> Any:
        """Parse bits notation (e.g. '[7:4]') into bit_offset and bit_width."""
        if not isinstance(data, dict):
            return data

        bits_val = data.get("bits")
        has_offset = "bit_offset" in data or "bitOffset" in data or "offset" in data
        has_width = "bit_width" in data or "bitWidth" in data or "width" in data

        if bits_val and not (has_offset and has_width):
            offset, width = parse_bit_range(str(bits_val))
            data = {**data, "bit_offset": offset, "bit_width": width}

        return data

    @field_validator("access", mode="before")
    @classmethod
    def normalize_access(cls, v: Any) -> Any:
        if isinstance(v, str):
            return AccessType.from_string(v)
        return v

    @property
    def offset(self) -> int:
        return self.bit_offset or 0

    @property
    def width(self) -> int:
        return self.bit_width or 1

    @property
    def mask(self) -> int:
        """Bit mask of this field within its register."""
        return ((1 << self.width) - 1) << self.offset

    def to_runtime_bitfield(self):
        """Convert to a runtime BitField object."""
        from gpiosim.runtime.register import BitField as RuntimeBitField

        return RuntimeBitField(
            name=self.name,
            offset=self.offset,
            width=self.width,
            access=self.access.to_runtime_access(),
            description=self.description,
            reset_value=self.reset_value,
        )

    @property
    def bit_range(self) -> str:
        """Get bit range as string (e.g. [7:0])."""
        msb = self.offset + self.width - 1
        lsb = self.offset
        if msb == lsb:
            return f"[{lsb}]"
        return f"[{msb}:{lsb}]"


class RegisterDef(FlexibleModel):
    """
    Register definition within a memory map (Pydantic model for YAML parsing).
    """

    name: str = Field(..., description="Register name")
    address_offset: int = Field(
        default=0, alias="offset", description="Offset from address block base", ge=0
    )
    size: int = Field(default=32, description="Register width in bits")
    access: AccessType = Field(default=AccessType.READ_WRITE, description="Default access type")
    reset_value: int = Field(default=0, description="Reset value for entire register")
    description: str = Field(default="", description="Register description")
    fields: List[BitFieldDef] = Field(default_factory=list, description="Bit fields")

    @field_validator("access", mode="before")
    @classmethod
    def normalize_access(cls, v: Any) -> Any:
        if isinstance(v, str):
            return AccessType.from_string(v)
        return v

    @field_validator("address_offset")
    @classmethod
    def validate_alignment(cls, v: int) -> int:
        if v % 4 != 0:
            raise ValueError(f"Register offset {v:#x} must be word-aligned")
        return v

    @model_validator(mode="after")
    def default_field(self) -> "RegisterDef":
        """A register without explicit fields gets one full-width field."""
        if not self.fields:
            self.fields.append(
                BitFieldDef(
                    name="value",
                    bit_offset=0,
                    bit_width=self.size,
                    access=self.access,
                    reset_value=self.reset_value,
                )
            )
        return self

    def to_runtime_register(
        self,
        bus: "AbstractBusInterface",
        base_offset: int = 0,
        register_class: Any = None,
    ):
        """
        Convert to a runtime Register object.

        Args:
            bus: Bus interface for hardware communication
            base_offset: Base address offset to add to register offset
            register_class: Class to use for register creation.
                            Defaults to gpiosim.runtime.register.Register

        Returns:
            Runtime Register object
        """
        from gpiosim.runtime.register import Register as RuntimeRegister

        if register_class is None:
            register_class = RuntimeRegister

        return register_class(
            name=self.name,
            offset=self.address_offset + base_offset,
            bus=bus,
            fields=[f.to_runtime_bitfield() for f in self.fields],
            description=self.description,
        )

    @property
    def hex_address(self) -> str:
        """Get relative address as hex string."""
        return f"0x{self.address_offset:02X}"


class AddressBlock(FlexibleModel):
    """
    Contiguous address block within a memory map (Pydantic model).
    """

    name: str = Field(..., description="Block name")
    base_address: int = Field(default=0, description="Block starting address", ge=0)
    range: Optional[Union[int, str]] = Field(
        default=None, description="Block size (bytes or '4K', '1M', etc.)"
    )
    description: str = Field(default="", description="Block description")
    registers: List[RegisterDef] = Field(default_factory=list, description="Registers in block")

    @computed_field
    @property
    def end_address(self) -> int:
        """Calculate end address of the block."""
        range_val = self.range
        if isinstance(range_val, str):
            suffix = range_val[-1].upper()
            if suffix == "K":
                range_val = int(range_val[:-1]) * 1024
            elif suffix == "M":
                range_val = int(range_val[:-1]) * 1024 * 1024
            else:
                range_val = int(range_val, 0)

        if range_val is None:
            # Size implied by the last register
            range_val = max((r.address_offset + r.size // 8 for r in self.registers), default=0)
        return self.base_address + range_val

    def contains_address(self, address: int) -> bool:
        """Check if address is within this block."""
        return self.base_address <= address < self.end_address

    @property
    def hex_range(self) -> str:
        """Get range as hex string."""
        return f"[{hex(self.base_address)} : {hex(self.end_address)}]"


class MemoryMap(StrictModel):
    """
    Complete memory map (Pydantic model).

    Organizes registers into address blocks with validation.
    """

    name: str = Field(..., description="Memory map name")
    description: str = Field(default="", description="Memory map description")
    address_blocks: List[AddressBlock] = Field(default_factory=list, description="Address blocks")

    def model_post_init(self, __context: Any) -> None:
        """Validate memory map after initialization."""
        for i, block1 in enumerate(self.address_blocks):
            for block2 in self.address_blocks[i + 1 :]:
                if self._blocks_overlap(block1, block2):
                    raise ValueError(
                        f"Overlapping address blocks: '{block1.name}' {block1.hex_range} "
                        f"and '{block2.name}' {block2.hex_range}"
                    )
            seen = {}
            for reg in block1.registers:
                if reg.address_offset in seen:
                    raise ValueError(
                        f"Registers '{seen[reg.address_offset]}' and '{reg.name}' "
                        f"share offset {reg.hex_address} in block '{block1.name}'"
                    )
                seen[reg.address_offset] = reg.name

    @staticmethod
    def _blocks_overlap(block1: AddressBlock, block2: AddressBlock) -> bool:
        """Check if two address blocks overlap."""
        return not (
            block1.end_address <= block2.base_address or block2.end_address <= block1.base_address
        )

    def get_block_at_address(self, address: int) -> Optional[AddressBlock]:
        """Find address block containing given address."""
        for block in self.address_blocks:
            if block.contains_address(address):
                return block
        return None

    def get_register_by_name(self, name: str) -> Optional[RegisterDef]:
        """Find register by name across all blocks (case-insensitive)."""
        for block in self.address_blocks:
            for reg in block.registers:
                if reg.name.upper() == name.upper():
                    return reg
        return None

    def iter_registers(self):
        """Yield ``(absolute_address, RegisterDef)`` for every register."""
        for block in self.address_blocks:
            for reg in block.registers:
                yield block.base_address + reg.address_offset, reg

    @computed_field
    @property
    def total_registers(self) -> int:
        """Count total registers across all blocks."""
        return sum(len(block.registers) for block in self.address_blocks)
