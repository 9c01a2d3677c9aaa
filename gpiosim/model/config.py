"""
Build-time parameters of the GPIO peripheral model.

These correspond to the generics of the hardware block: the defaults describe
the standard 32-pin controller with a 2-stage synchronizer and a 16-bit
debounce threshold.
"""

from pydantic import Field, field_validator, model_validator

from gpiosim.utils import width_mask

from .base import StrictModel

# Highest register offset in the window (DEBOUNCE_CFG) plus one word
REGISTER_WINDOW_SIZE = 0x20


class GpioConfig(StrictModel):
    """
    Static configuration of one GPIO peripheral instance.

    Example:
        >>> cfg = GpioConfig(pin_count=8)
        >>> hex(cfg.pin_mask)
        '0xff'
    """

    pin_count: int = Field(default=32, ge=1, le=32, description="Number of GPIO pins")
    sync_stages: int = Field(
        default=2, ge=1, description="Flip-flop stages in the input synchronizer"
    )
    debounce_width: int = Field(
        default=16, ge=1, le=32, description="Width of the debounce threshold field in bits"
    )
    address_width: int = Field(
        default=12, ge=5, le=32, description="Number of PADDR bits decoded by the peripheral"
    )
    base_address: int = Field(default=0, ge=0, description="Bus address of register 0x00")

    @field_validator("base_address")
    @classmethod
    def validate_base_alignment(cls, v: int) -> int:
        """Ensure the register window starts on a word boundary."""
        if v % 4 != 0:
            raise ValueError(f"base_address {v:#x} must be word-aligned")
        return v

    @model_validator(mode="after")
    def validate_window(self) -> "GpioConfig":
        """The decoded address space must hold the whole register window."""
        if (1 << self.address_width) < REGISTER_WINDOW_SIZE:
            raise ValueError(
                f"address_width={self.address_width} cannot decode the "
                f"{REGISTER_WINDOW_SIZE:#x}-byte register window"
            )
        return self

    @property
    def pin_mask(self) -> int:
        """Mask covering every implemented pin."""
        return width_mask(self.pin_count)

    @property
    def debounce_mask(self) -> int:
        """Mask of the DEBOUNCE_CFG threshold field."""
        return width_mask(self.debounce_width)

    @property
    def address_mask(self) -> int:
        return width_mask(self.address_width)

    def to_offset(self, address: int) -> int:
        """Translate a bus address into an offset within the register window."""
        return (address - self.base_address) & self.address_mask
