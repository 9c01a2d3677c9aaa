"""
YAML loading for gpiosim.

Loads YAML files and converts them to validated Pydantic models. All
failures (missing file, YAML syntax, schema violations) surface as
``ParseError`` carrying the offending file path.
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, List, Union

import yaml
from pydantic import ValidationError

from gpiosim.model.config import GpioConfig
from gpiosim.model.memory_map import MemoryMap
from gpiosim.model.scenario import Scenario
from gpiosim.utils import DEFAULT_MEMORY_MAP_PATH

from .errors import ParseError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def _read_yaml(file_path: PathLike) -> Any:
    path = Path(file_path)
    if not path.exists():
        raise ParseError(f"File not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ParseError.from_yaml_error(e, path) from e

    logger.debug("Loaded YAML from %s", path)
    return data


def load_config(file_path: PathLike) -> GpioConfig:
    """Load a ``GpioConfig`` from YAML.

    An empty file yields the default configuration. A top-level ``gpio:``
    key is accepted so the parameters can live inside a larger document.
    """
    data = _read_yaml(file_path) or {}
    if not isinstance(data, dict):
        raise ParseError("Configuration must be a mapping", file_path)
    if "gpio" in data:
        data = data["gpio"] or {}

    try:
        return GpioConfig.model_validate(data)
    except ValidationError as e:
        raise ParseError.from_validation_error(e, "configuration", file_path) from e


def load_memory_map(file_path: PathLike) -> List[MemoryMap]:
    """Load memory maps from a ``*.mm.yml`` file (a list or a single mapping)."""
    data = _read_yaml(file_path)

    # Normalize input to list of maps
    if isinstance(data, dict):
        data_list = [data]
    elif isinstance(data, list):
        data_list = data
    else:
        raise ParseError("Invalid memory map: expected list or dict at root", file_path)

    memory_maps = []
    for idx, map_data in enumerate(data_list):
        try:
            memory_maps.append(MemoryMap.model_validate(map_data))
        except ValidationError as e:
            raise ParseError.from_validation_error(
                e, f"memory map at index {idx}", file_path
            ) from e
        except ValueError as e:
            # Cross-block checks in model_post_init raise plain ValueError
            raise ParseError(f"Invalid memory map at index {idx}: {e}", file_path) from e
    return memory_maps


@lru_cache(maxsize=1)
def default_memory_map() -> MemoryMap:
    """Return the packaged GPIO register map."""
    return load_memory_map(DEFAULT_MEMORY_MAP_PATH)[0]


def load_scenario(file_path: PathLike) -> Scenario:
    """Load a stimulus ``Scenario`` from YAML."""
    data = _read_yaml(file_path)
    if not isinstance(data, dict):
        raise ParseError("Scenario must be a mapping with a 'steps' list", file_path)

    try:
        return Scenario.model_validate(data)
    except ValidationError as e:
        raise ParseError.from_validation_error(e, "scenario", file_path) from e
