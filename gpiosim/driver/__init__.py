from .bus import SimBus
from .loader import GpioDriver, load_driver

__all__ = ["SimBus", "GpioDriver", "load_driver"]
