"""
gpiosim - cycle-driven behavioral model of a 32-pin GPIO controller.

The model (``gpiosim.sim``) is driven one clock tick at a time through a
3-phase register bus; ``gpiosim.driver`` provides a simulated bus master
and register-level driver on top of it.
"""

from .model.config import GpioConfig
from .sim import BusSignals, GpioTop, RegisterOffset, TickResult

__version__ = "0.1.0"

__all__ = ["GpioConfig", "GpioTop", "BusSignals", "RegisterOffset", "TickResult", "__version__"]
