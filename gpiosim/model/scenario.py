"""
Stimulus scenario definitions.

A scenario is an ordered list of steps run against a fresh peripheral
model. Each step carries exactly one action::

    name: edge_irq
    config: {pinCount: 8}
    steps:
      - write: {reg: INT_MASK, value: 0x1}
      - pins: 0x1
      - idle: 6
      - expect: {irq: true}
      - read: {reg: INT_STATUS, expect: 0x1}
"""

from typing import List, Optional, Union

from pydantic import Field, model_validator

from .base import StrictModel
from .config import GpioConfig

RegisterRef = Union[int, str]


class RegisterWrite(StrictModel):
    reg: RegisterRef = Field(..., description="Register name or byte offset")
    value: int = Field(..., ge=0, le=0xFFFFFFFF)


class RegisterRead(StrictModel):
    reg: RegisterRef = Field(..., description="Register name or byte offset")
    expect: Optional[int] = Field(default=None, description="Expected value after masking")
    mask: int = Field(default=0xFFFFFFFF, description="Bits compared against 'expect'")


class OutputCheck(StrictModel):
    """Expected pad/interrupt outputs; omitted fields are not checked."""

    irq: Optional[bool] = None
    out: Optional[int] = None
    oe: Optional[int] = None


class Step(StrictModel):
    write: Optional[RegisterWrite] = None
    read: Optional[RegisterRead] = None
    pins: Optional[int] = Field(default=None, ge=0, description="Drive the raw pad inputs")
    idle: Optional[int] = Field(default=None, ge=1, description="Idle ticks")
    reset: Optional[int] = Field(default=None, ge=1, description="Ticks with reset held")
    expect: Optional[OutputCheck] = None

    @model_validator(mode="after")
    def check_single_action(self) -> "Step":
        actions = [name for name in type(self).model_fields if getattr(self, name) is not None]
        if len(actions) != 1:
            raise ValueError(
                f"Each step needs exactly one action, got {actions or 'none'}"
            )
        return self

    @property
    def action(self) -> str:
        for name in type(self).model_fields:
            if getattr(self, name) is not None:
                return name
        raise AssertionError("unreachable: validated step without an action")


class Scenario(StrictModel):
    name: str = Field(default="scenario")
    description: str = Field(default="")
    config: GpioConfig = Field(default_factory=GpioConfig)
    idle_ticks: int = Field(default=1, ge=0, description="Idle ticks after each bus access")
    steps: List[Step] = Field(..., min_length=1)
