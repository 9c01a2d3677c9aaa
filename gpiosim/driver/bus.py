from typing import List, Optional

from gpiosim.runtime.register import AbstractBusInterface, BusIOError
from gpiosim.sim.bus import BusSignals
from gpiosim.sim.top import GpioTop, TickResult


class SimBus(AbstractBusInterface):
    """Bus master that drives a ``GpioTop`` model through the 3-phase protocol.

    Every word access takes one SETUP tick and one ACCESS tick. With
    ``back_to_back`` the next access starts directly with its SETUP tick;
    otherwise ``idle_ticks`` idle ticks follow each access.
    """

    def __init__(
        self,
        top: GpioTop,
        idle_ticks: int = 1,
        back_to_back: bool = False,
        record: bool = False,
    ):
        if idle_ticks < 0:
            raise ValueError(f"idle_ticks must be >= 0, got {idle_ticks}")
        self.top = top
        self.idle_ticks = 0 if back_to_back else idle_ticks
        self.history: Optional[List[TickResult]] = [] if record else None

    def _tick(self, signals: BusSignals) -> TickResult:
        result = self.top.tick(signals)
        if self.history is not None:
            self.history.append(result)
        return result

    def _transfer(self, address: int, write: bool, data: int = 0) -> int:
        self._tick(BusSignals.setup(address, write, data))
        result = self._tick(BusSignals.access(address, write, data))

        if not result.pready:
            raise BusIOError(f"Slave not ready at {address:#x}")
        if result.pslverr:
            raise BusIOError(
                f"Slave error on {'write' if write else 'read'} at {address:#x}"
            )

        for _ in range(self.idle_ticks):
            self._tick(BusSignals())
        return result.prdata

    def read_word(self, address: int) -> int:
        return self._transfer(address, write=False)

    def write_word(self, address: int, data: int) -> None:
        self._transfer(address, write=True, data=data & 0xFFFFFFFF)
