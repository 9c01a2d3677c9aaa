import os
import sys

import pytest

# Add the project root to sys.path so that gpiosim is importable
# This is needed because of the flat layout structure
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), "../.."))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from gpiosim.driver import SimBus, load_driver  # noqa: E402
from gpiosim.sim import GpioTop  # noqa: E402


@pytest.fixture
def top():
    return GpioTop()


@pytest.fixture
def sim_bus(top):
    return SimBus(top, idle_ticks=0)


@pytest.fixture
def driver(sim_bus):
    return load_driver(sim_bus)
