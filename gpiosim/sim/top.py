"""
Top-level GPIO controller model.

``GpioTop.tick()`` is one rising clock edge. Every sub-component computes
its next state from the values held before the edge, then all of them are
committed together, so no component ever sees another's partial update.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from gpiosim.model.config import GpioConfig

from .bus import IDLE_BUS, BusInterface, BusPhase, BusSignals
from .interrupt import InterruptController
from .pin_pipeline import PinChannel, PinPipeline
from .register_file import RegisterFile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TickResult:
    """Outputs observed for one tick.

    ``prdata``/``pready``/``pslverr`` are the bus response sampled at the
    clock edge (computed from the state before the edge). ``gpio_out``,
    ``gpio_oe`` and ``irq`` are the pad and interrupt outputs after the edge.
    """

    cycle: int
    phase: BusPhase
    prdata: int
    pready: bool
    pslverr: bool
    gpio_out: int
    gpio_oe: int
    irq: bool


class GpioTop:
    """Composes bus, register file, pin pipeline and interrupt controller.

    Example:
        >>> top = GpioTop()
        >>> _ = top.tick(BusSignals.setup(0x00, write=True, data=0xFF))
        >>> _ = top.tick(BusSignals.access(0x00, write=True, data=0xFF))
        >>> hex(top.gpio_oe)
        '0xff'
    """

    def __init__(self, config: Optional[GpioConfig] = None):
        self.config = config or GpioConfig()
        self.bus = BusInterface()
        self.registers = RegisterFile(self.config)
        self.pins = PinPipeline(self.config)
        self.interrupts = InterruptController(self.config)
        self.gpio_in = 0
        self.cycle = 0
        self._in_reset = False

    # Combinational outputs between ticks

    @property
    def gpio_oe(self) -> int:
        return PinPipeline.output_enable(self.registers.bank)

    @property
    def gpio_out(self) -> int:
        return PinPipeline.driven_value(self.registers.bank)

    @property
    def irq(self) -> bool:
        return self.interrupts.irq

    @property
    def gpio_in_debounced(self) -> int:
        return self.pins.debounced(self.registers.bank.debounce_threshold)

    def pin_channel(self, pin: int) -> PinChannel:
        """Per-pin input path under the current DEBOUNCE_CFG threshold."""
        return self.pins.channel(pin, self.registers.bank.debounce_threshold)

    def read_data(self, address: int) -> int:
        """Value a read of ``address`` would return on the next ACCESS tick."""
        return self.registers.read(address, self.gpio_in_debounced, self.interrupts.status)

    def tick(
        self,
        bus: BusSignals = IDLE_BUS,
        gpio_in: Optional[int] = None,
        rst_n: bool = True,
    ) -> TickResult:
        """Evaluate one clock edge.

        Args:
            bus: Bus signals driven by the master during this tick.
            gpio_in: Raw pad input vector. When omitted the previously driven
                value is held.
            rst_n: Active-low synchronous reset.

        Returns:
            The bus response and post-edge outputs for this tick.
        """
        if gpio_in is not None:
            self.gpio_in = gpio_in & self.config.pin_mask
        self.cycle += 1

        if not rst_n:
            if not self._in_reset:
                logger.debug("Reset asserted at cycle %d", self.cycle)
            self._in_reset = True
            self._reset()
            return self._result(BusPhase.IDLE, 0)
        if self._in_reset:
            logger.debug("Reset released at cycle %d", self.cycle)
            self._in_reset = False

        bank = self.registers.bank
        debounced = self.pins.debounced(bank.debounce_threshold)

        transaction = self.bus.tick(bus)
        prdata = 0
        if transaction is not None and not transaction.is_write:
            prdata = self.registers.read(transaction.address, debounced, self.interrupts.status)

        # Dependency order: pins, interrupts, then register-visible state
        pins_next = self.pins.tick(self.gpio_in, bank.debounce_threshold)
        irq_next = self.interrupts.tick(debounced, bank, self.registers.clear_pulse)
        regs_next = self.registers.tick(transaction)

        self.pins.commit(pins_next)
        self.interrupts.commit(irq_next)
        self.registers.commit(regs_next)

        return self._result(self.bus.phase, prdata)

    def run(self, ticks: int, gpio_in: Optional[int] = None) -> TickResult:
        """Idle the bus for ``ticks`` ticks and return the last result."""
        if ticks < 1:
            raise ValueError(f"ticks must be >= 1, got {ticks}")
        result = self.tick(gpio_in=gpio_in)
        for _ in range(ticks - 1):
            result = self.tick()
        return result

    def reset(self, ticks: int = 1) -> TickResult:
        """Hold reset for ``ticks`` ticks. The next ``tick()`` releases it."""
        if ticks < 1:
            raise ValueError(f"ticks must be >= 1, got {ticks}")
        for _ in range(ticks):
            result = self.tick(rst_n=False)
        return result

    def _reset(self) -> None:
        self.bus.reset()
        self.registers.reset()
        self.pins.reset()
        self.interrupts.reset()

    def _result(self, phase: BusPhase, prdata: int) -> TickResult:
        return TickResult(
            cycle=self.cycle,
            phase=phase,
            prdata=prdata,
            pready=self.bus.pready,
            pslverr=self.bus.pslverr,
            gpio_out=self.gpio_out,
            gpio_oe=self.gpio_oe,
            irq=self.irq,
        )
