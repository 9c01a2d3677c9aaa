import logging

import pytest

from gpiosim.model.config import GpioConfig
from gpiosim.sim.interrupt import (
    InterruptController,
    InterruptPolarity,
    InterruptState,
    InterruptType,
    edge_events,
    level_events,
    next_status,
)
from gpiosim.sim.register_file import RegisterBank

EDGE, LEVEL = InterruptType.EDGE, InterruptType.LEVEL
HIGH, LOW = InterruptPolarity.RISING_OR_HIGH, InterruptPolarity.FALLING_OR_LOW

EDGE_RISING = RegisterBank(int_mask=0x1, int_type=EDGE, int_polarity=HIGH)
EDGE_FALLING = RegisterBank(int_mask=0x1, int_type=EDGE, int_polarity=LOW)
LEVEL_HIGH = RegisterBank(int_mask=0x1, int_type=LEVEL, int_polarity=HIGH)
LEVEL_LOW = RegisterBank(int_mask=0x1, int_type=LEVEL, int_polarity=LOW)


class TestInterruptController:
    def setup_method(self):
        self.ctrl = InterruptController(GpioConfig())

    def step(self, debounced, bank, clear=0):
        self.ctrl.commit(self.ctrl.tick(debounced, bank, clear))
        return self.ctrl.status

    def test_rising_edge_sets_and_clear_succeeds(self):
        assert self.step(0, EDGE_RISING) == 0
        assert self.step(1, EDGE_RISING) == 1
        assert self.ctrl.irq is True
        # Stays set while the input stays high (sticky, no new edge needed)
        assert self.step(1, EDGE_RISING) == 1
        assert self.step(1, EDGE_RISING, clear=1) == 0
        assert self.ctrl.irq is False
        assert self.step(1, EDGE_RISING) == 0

    def test_falling_edge(self):
        assert self.step(1, EDGE_FALLING) == 0
        assert self.step(1, EDGE_FALLING) == 0
        assert self.step(0, EDGE_FALLING) == 1

    def test_rising_edge_ignored_when_falling_selected(self):
        assert self.step(1, EDGE_FALLING) == 0

    def test_masked_pin_never_sets(self):
        bank = RegisterBank(int_mask=0x0, int_type=0x1, int_polarity=0x1)
        for value in (0, 1, 0, 1):
            assert self.step(value, bank) == 0
        assert self.ctrl.irq is False

    def test_level_high_reasserts_over_clear(self):
        assert self.step(1, LEVEL_HIGH) == 1
        assert self.step(1, LEVEL_HIGH, clear=1) == 1
        assert self.ctrl.irq is True
        # Level gone: bit is sticky until cleared
        assert self.step(0, LEVEL_HIGH) == 1
        assert self.step(0, LEVEL_HIGH, clear=1) == 0
        assert self.ctrl.irq is False

    def test_level_low_fires_while_input_low(self):
        assert self.step(0, LEVEL_LOW) == 1
        assert self.step(1, LEVEL_LOW, clear=1) == 0
        assert self.step(1, LEVEL_LOW) == 0

    def test_clear_of_zero_bits_has_no_effect(self):
        self.step(1, EDGE_RISING)
        assert self.step(1, EDGE_RISING, clear=0b10) == 1

    def test_irq_is_or_of_all_status_bits(self):
        bank = RegisterBank(int_mask=0b11, int_type=0b11, int_polarity=0b11)
        self.step(0b00, bank)
        self.step(0b11, bank)
        assert self.ctrl.status == 0b11

        self.step(0b11, bank, clear=0b01)
        assert self.ctrl.status == 0b10
        assert self.ctrl.irq is True

        self.step(0b11, bank, clear=0b10)
        assert self.ctrl.irq is False

    def test_type_is_a_strict_per_bit_selector(self):
        # Pin 0 edge, pin 1 level, both active-high
        bank = RegisterBank(int_mask=0b11, int_type=0b01, int_polarity=0b11)
        self.step(0b11, bank)
        self.step(0b11, bank, clear=0b11)
        assert self.ctrl.status == 0b10

    def test_reset(self):
        self.step(1, LEVEL_HIGH)
        self.ctrl.reset()
        assert self.ctrl.state == InterruptState()
        assert self.ctrl.irq is False

    def test_logs_overridden_clear(self, caplog):
        self.step(1, LEVEL_HIGH)
        with caplog.at_level(logging.DEBUG, logger="gpiosim.sim.interrupt"):
            self.step(1, LEVEL_HIGH, clear=1)
        assert "overridden by active level" in caplog.text


class TestEventFunctions:
    @pytest.mark.parametrize(
        "status, set_event, clear, expected",
        [
            (0b0, 0b0, 0b0, 0b0),
            (0b1, 0b0, 0b1, 0b0),
            (0b1, 0b1, 0b1, 0b1),  # clear loses against a same-tick event
            (0b01, 0b10, 0b01, 0b10),
            (0b11, 0b00, 0b00, 0b11),
        ],
    )
    def test_next_status(self, status, set_event, clear, expected):
        assert next_status(status, set_event, clear) == expected

    def test_edge_events_use_previous_value(self):
        bank = RegisterBank(int_mask=0xF, int_type=0xF, int_polarity=0b0011)
        # Pins 0,1 rising-enabled; pins 2,3 falling-enabled
        assert edge_events(0b0101, 0b1010, bank, 0xF) == 0b1001

    def test_level_events_match_polarity(self):
        bank = RegisterBank(int_mask=0xF, int_type=0x0, int_polarity=0b0011)
        assert level_events(0b0101, bank, 0xF) == 0b1001

    def test_level_events_limited_to_pins(self):
        bank = RegisterBank(int_mask=0xFFFF_FFFF, int_type=0, int_polarity=0)
        assert level_events(0, bank, 0xFF) == 0xFF
