"""Shared utility helpers for gpiosim."""

import re
from enum import Enum
from pathlib import Path
from typing import Any, Iterator, Tuple

# Packaged data files (memory map etc.) live next to the package sources
DATA_DIR = Path(__file__).resolve().parent.parent / "data"
DEFAULT_MEMORY_MAP_PATH = DATA_DIR / "gpio.mm.yml"


def parse_bit_range(bits_str: str) -> Tuple[int, int]:
    """Parse bit notation like ``[7:4]`` or ``[0]`` into ``(offset, width)``.

    Args:
        bits_str: Bit notation string.

    Returns:
        Tuple of ``(bit_offset, bit_width)``.

    Raises:
        ValueError: If notation is empty or invalid.
    """
    if not bits_str:
        raise ValueError("Empty bit range notation")

    clean = bits_str.strip().strip("[]").strip()

    match_range = re.fullmatch(r"(\d+)\s*:\s*(\d+)", clean)
    if match_range:
        msb = int(match_range.group(1))
        lsb = int(match_range.group(2))
        if msb < lsb:
            raise ValueError(f"Invalid bit range '{bits_str}': MSB must be >= LSB")
        return lsb, msb - lsb + 1

    match_single = re.fullmatch(r"(\d+)", clean)
    if match_single:
        bit = int(match_single.group(1))
        return bit, 1

    raise ValueError(f"Invalid bit range notation: '{bits_str}'")


def width_mask(width: int) -> int:
    """Return an all-ones mask ``width`` bits wide (``width_mask(4) == 0xF``)."""
    if width < 0:
        raise ValueError(f"Width must be non-negative, got {width}")
    return (1 << width) - 1


def bit(value: int, index: int) -> int:
    """Return bit ``index`` of ``value`` as 0 or 1."""
    return (value >> index) & 1


def pack_bits(bits) -> int:
    """Pack an iterable of 0/1 values (index 0 = LSB) into an integer."""
    value = 0
    for index, b in enumerate(bits):
        if b:
            value |= 1 << index
    return value


def iter_set_bits(value: int) -> Iterator[int]:
    """Yield the indices of the set bits in ``value``, LSB first."""
    index = 0
    while value:
        if value & 1:
            yield index
        value >>= 1
        index += 1


def enum_value(v: Any) -> str:
    """Extract the string value from an Enum member or return str(v)."""
    return v.value if isinstance(v, Enum) else str(v)


def filter_none(data: dict) -> dict:
    """Remove keys with None values from a dictionary.

    Required for Pydantic v2 compatibility: passing None explicitly
    to fields with defaults causes validation errors. Filtering None
    values lets Pydantic use its own defaults.
    """
    return {k: v for k, v in data.items() if v is not None}
