"""Generators for artifacts derived from the GPIO register map."""

from .base_generator import BaseGenerator
from .header_generator import CHeaderGenerator, c_identifier

__all__ = ["BaseGenerator", "CHeaderGenerator", "c_identifier"]
