"""
Write-1-to-clear handling in the runtime register layer.

The first group checks the words the driver puts on the bus against a
recording mock; the second runs the same operations against the
peripheral model, where INT_STATUS is a real W1C register.
"""

import pytest

from gpiosim.driver import SimBus, load_driver
from gpiosim.runtime.register import AbstractBusInterface, BitField, Register, RuntimeAccessType
from gpiosim.sim import GpioTop, RegisterOffset


class MockBusInterface(AbstractBusInterface):
    """Word memory that records the last write."""

    def __init__(self):
        self.memory = {}
        self.writes = []

    def read_word(self, address: int) -> int:
        return self.memory.get(address, 0)

    def write_word(self, address: int, data: int) -> None:
        self.memory[address] = data & 0xFFFFFFFF
        self.writes.append((address, data))


class TestRW1CWordComposition:
    def setup_method(self):
        self.bus = MockBusInterface()
        # Status flags in the low byte, an enable field above them
        self.reg = Register(
            name="INT_CTRL",
            offset=0x10,
            bus=self.bus,
            fields=[
                BitField(name="flags", offset=0, width=8, access="rw1c"),
                BitField(name="enable", offset=16, width=4, access="rw"),
                BitField(name="version", offset=28, width=4, access="ro"),
            ],
        )

    def test_clearing_flags_preserves_rw_field(self):
        self.bus.memory[0x10] = 0x3003_00FF
        self.reg.write_field("flags", 0x81)
        # Only the requested flags are written as 1; enable written back; ro as 0
        assert self.bus.writes[-1] == (0x10, 0x0003_0081)

    def test_writing_rw_field_sends_zero_to_flags(self):
        self.bus.memory[0x10] = 0x0000_00FF
        self.reg.write_field("enable", 0x5)
        assert self.bus.writes[-1] == (0x10, 0x0005_0000)

    def test_clear_only_touches_rw1c_bits(self):
        self.reg.clear()
        assert self.bus.writes[-1] == (0x10, 0x0000_00FF)

    def test_clear_rejects_mask_without_rw1c_bits(self):
        with pytest.raises(ValueError):
            self.reg.clear(0x000F_0000)

    def test_read_only_field_rejected(self):
        with pytest.raises(ValueError, match="read-only"):
            self.reg.write_field("version", 1)

    def test_value_wider_than_field_rejected(self):
        with pytest.raises(ValueError):
            self.reg.write_field("enable", 0x10)
        assert self.bus.writes == []

    def test_field_validation(self):
        f = BitField(name="test", offset=0, width=1, access=RuntimeAccessType.RW1C)
        assert f.access == "rw1c"
        with pytest.raises(ValueError):
            BitField(name="test", offset=0, width=1, access="invalid")
        with pytest.raises(ValueError):
            BitField(name="test", offset=30, width=4)


class TestRW1COnModel:
    def setup_method(self):
        self.top = GpioTop()
        self.driver = load_driver(SimBus(self.top, idle_ticks=1))
        self.driver.INT_TYPE.write(0xFF)
        self.driver.INT_POLARITY.write(0xFF)
        self.driver.INT_MASK.write(0xFF)
        self.top.run(4, gpio_in=0b1011)

    def test_status_fields_from_map(self):
        field = self.driver.INT_STATUS.get_field_info("status")
        assert field.access == RuntimeAccessType.RW1C.value
        assert field.width == 32

    def test_clear_single_bit(self):
        assert self.driver.INT_STATUS.read() == 0b1011
        self.driver.INT_STATUS.clear(0b0010)
        assert self.driver.INT_STATUS.read() == 0b1001
        assert self.top.irq

    def test_field_write_clears_requested_bits_only(self):
        self.driver.INT_STATUS.status.write(0b1001)
        assert self.driver.INT_STATUS.status.read() == 0b0010

    def test_clear_all_drops_irq(self):
        self.driver.INT_STATUS.clear()
        assert self.driver.INT_STATUS.read() == 0
        assert not self.top.irq

    def test_threshold_field_rmw(self):
        self.driver.DEBOUNCE_CFG.threshold.write(0x1234)
        assert self.top.registers.bank.debounce_threshold == 0x1234
        assert self.driver.DEBOUNCE_CFG.read_all_fields() == {"threshold": 0x1234}

    def test_in_register_is_read_only(self):
        with pytest.raises(ValueError):
            self.driver.IN.write_field("pins", 1)
        assert self.driver.IN.offset == RegisterOffset.IN
        assert int(self.driver.IN.pins) == 0b1011
