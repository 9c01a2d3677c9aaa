"""
Runtime register access for the GPIO controller.

This module provides classes for reading/writing registers at runtime.
For YAML schema definitions, use gpiosim.model instead.
"""

from .register import (
    AbstractBusInterface,
    BitField,
    BusIOError,
    Register,
    RegisterBoundField,
    RuntimeAccessType,
)

__all__ = [
    "RuntimeAccessType",
    "BitField",
    "BusIOError",
    "Register",
    "RegisterBoundField",
    "AbstractBusInterface",
]
