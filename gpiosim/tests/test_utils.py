import pytest

from gpiosim.model import AccessType
from gpiosim.utils import (
    bit,
    enum_value,
    filter_none,
    iter_set_bits,
    pack_bits,
    parse_bit_range,
    width_mask,
)


@pytest.mark.parametrize(
    "notation, expected",
    [("[7:0]", (0, 8)), ("[31:16]", (16, 16)), ("[5]", (5, 1)), (" 3 : 2 ", (2, 2))],
)
def test_parse_bit_range(notation, expected):
    assert parse_bit_range(notation) == expected


@pytest.mark.parametrize("notation", ["", "[0:7]", "[a:b]", "[1:2:3]"])
def test_parse_bit_range_invalid(notation):
    with pytest.raises(ValueError):
        parse_bit_range(notation)


def test_width_mask():
    assert width_mask(0) == 0
    assert width_mask(16) == 0xFFFF
    assert width_mask(32) == 0xFFFF_FFFF
    with pytest.raises(ValueError):
        width_mask(-1)


def test_bit_helpers():
    assert [bit(0b1010, i) for i in range(4)] == [0, 1, 0, 1]
    assert pack_bits([0, 1, 0, 1]) == 0b1010
    assert list(iter_set_bits(0x8000_0005)) == [0, 2, 31]
    assert list(iter_set_bits(0)) == []


def test_enum_value_and_filter_none():
    assert enum_value(AccessType.READ_ONLY) == "read-only"
    assert enum_value(3) == "3"
    assert filter_none({"a": 1, "b": None, "c": 0}) == {"a": 1, "c": 0}
