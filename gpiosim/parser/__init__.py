"""
YAML loaders for gpiosim configuration, memory map and scenario files.
"""

from .errors import ParseError
from .yaml_loader import default_memory_map, load_config, load_memory_map, load_scenario

__all__ = [
    "ParseError",
    "load_config",
    "load_memory_map",
    "default_memory_map",
    "load_scenario",
]
