from pathlib import Path
from typing import Dict, Optional, Union

from gpiosim.model.memory_map import MemoryMap
from gpiosim.parser.yaml_loader import default_memory_map, load_memory_map
from gpiosim.runtime.register import AbstractBusInterface, Register


class GpioDriver:
    """Root driver object with one ``Register`` attribute per register.

    Example:
        >>> driver = load_driver(SimBus(GpioTop()))
        >>> driver.DIR.write(0x0F)
        >>> driver.INT_STATUS.clear(1 << 3)
    """

    def __init__(self, bus_interface: AbstractBusInterface, base_address: int = 0):
        self._bus = bus_interface
        self._base_address = base_address
        self._registers: Dict[str, Register] = {}

    def _add_register(self, register: Register) -> None:
        self._registers[register.name] = register
        setattr(self, register.name, register)

    @property
    def registers(self) -> Dict[str, Register]:
        return dict(self._registers)

    def __getitem__(self, name: str) -> Register:
        """Look up a register by name, case-insensitively."""
        try:
            return self._registers[name.upper()]
        except KeyError:
            raise KeyError(f"Unknown register '{name}'") from None


def load_driver(
    bus_interface: AbstractBusInterface,
    memory_map: Optional[Union[str, Path, MemoryMap]] = None,
    base_address: int = 0,
) -> GpioDriver:
    """
    Build a ``GpioDriver`` from a memory map.

    Args:
        bus_interface: Bus master used for every register access.
        memory_map: A ``MemoryMap``, a path to a ``*.mm.yml`` file (first map
            is used) or None for the packaged GPIO map.
        base_address: Bus address added to every block's base address.

    Returns:
        Configured GpioDriver instance with accessible registers.
    """
    if memory_map is None:
        memory_map = default_memory_map()
    elif not isinstance(memory_map, MemoryMap):
        memory_map = load_memory_map(memory_map)[0]

    driver = GpioDriver(bus_interface, base_address)
    for block in memory_map.address_blocks:
        for reg_def in block.registers:
            register = reg_def.to_runtime_register(
                bus=bus_interface, base_offset=base_address + block.base_address
            )
            driver._add_register(register)
    return driver
