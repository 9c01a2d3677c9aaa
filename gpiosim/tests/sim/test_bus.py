import logging

import pytest

from gpiosim.sim.bus import BusInterface, BusPhase, BusSignals, BusTransaction, next_phase


class TestNextPhase:
    @pytest.mark.parametrize(
        "phase, psel, penable, expected",
        [
            (BusPhase.IDLE, False, False, BusPhase.IDLE),
            (BusPhase.IDLE, True, False, BusPhase.SETUP),
            (BusPhase.SETUP, True, True, BusPhase.ACCESS),
            (BusPhase.SETUP, False, False, BusPhase.IDLE),
            (BusPhase.ACCESS, True, False, BusPhase.SETUP),  # back-to-back
            (BusPhase.ACCESS, False, False, BusPhase.IDLE),
            (BusPhase.ACCESS, False, True, BusPhase.IDLE),  # enable without select
            (BusPhase.IDLE, True, True, BusPhase.ACCESS),  # missing SETUP
        ],
    )
    def test_transitions(self, phase, psel, penable, expected):
        assert next_phase(phase, psel, penable) is expected


class TestBusInterface:
    def setup_method(self):
        self.bus = BusInterface()

    def test_always_ready_never_error(self):
        assert self.bus.pready is True
        assert self.bus.pslverr is False

    def test_setup_latches_transaction_without_access(self):
        assert self.bus.tick(BusSignals.setup(0x04, write=True, data=0x55)) is None
        assert self.bus.phase is BusPhase.SETUP
        assert self.bus.pending == BusTransaction(0x04, True, 0x55)

    def test_access_returns_transaction_once(self):
        self.bus.tick(BusSignals.setup(0x0C))
        txn = self.bus.tick(BusSignals.access(0x0C))
        assert txn == BusTransaction(address=0x0C, is_write=False)
        assert self.bus.phase is BusPhase.ACCESS
        assert self.bus.pending is None

        assert self.bus.tick(BusSignals()) is None
        assert self.bus.phase is BusPhase.IDLE

    def test_read_transaction_drops_write_data(self):
        self.bus.tick(BusSignals(psel=True, paddr=0x08, pwdata=0xDEAD))
        txn = self.bus.tick(BusSignals(psel=True, penable=True, paddr=0x08, pwdata=0xDEAD))
        assert txn.write_data == 0

    def test_back_to_back_transactions(self):
        self.bus.tick(BusSignals.setup(0x00, write=True, data=1))
        first = self.bus.tick(BusSignals.access(0x00, write=True, data=1))
        assert self.bus.tick(BusSignals.setup(0x04, write=True, data=2)) is None
        second = self.bus.tick(BusSignals.access(0x04, write=True, data=2))

        assert first == BusTransaction(0x00, True, 1)
        assert second == BusTransaction(0x04, True, 2)

    def test_access_without_setup_warns_but_proceeds(self, caplog):
        with caplog.at_level(logging.WARNING):
            txn = self.bus.tick(BusSignals.access(0x10, write=True, data=0x3))

        assert txn == BusTransaction(0x10, True, 0x3)
        assert "without a preceding SETUP" in caplog.text

    def test_changed_address_in_access_warns(self, caplog):
        self.bus.tick(BusSignals.setup(0x00, write=True, data=1))
        with caplog.at_level(logging.WARNING):
            txn = self.bus.tick(BusSignals.access(0x04, write=True, data=1))

        # The ACCESS-tick signals win
        assert txn.address == 0x04
        assert "changed the transaction" in caplog.text

    def test_changed_write_data_in_access_warns(self, caplog):
        self.bus.tick(BusSignals.setup(0x04, write=True, data=0x1))
        with caplog.at_level(logging.WARNING):
            txn = self.bus.tick(BusSignals.access(0x04, write=True, data=0x2))

        assert txn.write_data == 0x2
        assert "changed the transaction" in caplog.text

    def test_matching_access_does_not_warn(self, caplog):
        self.bus.tick(BusSignals.setup(0x04, write=True, data=0x2))
        with caplog.at_level(logging.WARNING):
            self.bus.tick(BusSignals.access(0x04, write=True, data=0x2))
        assert caplog.text == ""

    def test_reset_returns_to_idle(self):
        self.bus.tick(BusSignals.setup(0x00))
        self.bus.reset()
        assert self.bus.phase is BusPhase.IDLE
        assert self.bus.pending is None
