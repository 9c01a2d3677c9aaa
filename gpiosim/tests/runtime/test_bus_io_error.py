import logging
from dataclasses import replace

import pytest

from gpiosim.driver import SimBus
from gpiosim.runtime.register import AbstractBusInterface, BitField, BusIOError, Register
from gpiosim.sim import GpioTop


class FailingBus(AbstractBusInterface):
    """Bus that raises BusIOError on read."""

    def __init__(self):
        self.written = None

    def read_word(self, address: int) -> int:
        raise BusIOError("bus timeout")

    def write_word(self, address: int, data: int) -> None:
        self.written = data


class ErrorTop(GpioTop):
    """Model variant whose slave flags every transfer as an error."""

    def tick(self, *args, **kwargs):
        result = super().tick(*args, **kwargs)
        return replace(result, pslverr=True)


class TestRMWWithBusError:
    def test_write_field_logs_warning_on_bus_error(self, caplog):
        bus = FailingBus()
        fields = [
            BitField(name="threshold", offset=0, width=16, access="rw"),
            BitField(name="spare", offset=16, width=16, access="rw"),
        ]
        reg = Register("DEBOUNCE_CFG", 0x1C, bus, fields)

        with caplog.at_level(logging.WARNING):
            reg.write_field("threshold", 8)

        assert "bus timeout" in caplog.text
        assert bus.written == 8

    def test_bus_io_error_is_ioerror(self):
        assert issubclass(BusIOError, IOError)

    def test_programming_errors_propagate(self):
        """Non-BusIOError exceptions should NOT be caught."""

        class BrokenBus(AbstractBusInterface):
            def read_word(self, address: int) -> int:
                raise TypeError("this is a bug")

            def write_word(self, address: int, data: int) -> None:
                pass

        fields = [BitField(name="dir", offset=0, width=32, access="rw")]
        reg = Register("DIR", 0x00, BrokenBus(), fields)
        with pytest.raises(TypeError, match="this is a bug"):
            reg.write_field("dir", 1)


class TestSimBusErrors:
    def test_slave_error_raises_bus_io_error(self):
        bus = SimBus(ErrorTop())
        with pytest.raises(BusIOError, match="Slave error on read"):
            bus.read_word(0x00)

    def test_model_never_reports_error(self):
        bus = SimBus(GpioTop(), record=True)
        bus.write_word(0x00, 0xFF)
        assert bus.read_word(0x00) == 0xFF
        assert all(r.pready and not r.pslverr for r in bus.history)
