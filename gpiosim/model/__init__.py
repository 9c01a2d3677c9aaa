"""
Pydantic models for gpiosim: peripheral configuration, register map
description and stimulus scenarios.

For runtime register access, use gpiosim.runtime.register.
"""

from .base import FlexibleModel, GpioBaseModel, StrictModel
from .config import REGISTER_WINDOW_SIZE, GpioConfig
from .memory_map import AccessType, AddressBlock, BitFieldDef, MemoryMap, RegisterDef
from .scenario import OutputCheck, RegisterRead, RegisterWrite, Scenario, Step

__all__ = [
    # Base
    "GpioBaseModel",
    "StrictModel",
    "FlexibleModel",
    # Config
    "GpioConfig",
    "REGISTER_WINDOW_SIZE",
    # Memory map
    "AccessType",
    "MemoryMap",
    "AddressBlock",
    "RegisterDef",
    "BitFieldDef",
    # Scenario
    "Scenario",
    "Step",
    "RegisterWrite",
    "RegisterRead",
    "OutputCheck",
]
