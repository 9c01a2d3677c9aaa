"""
Base generator for artifacts rendered from the register map.

Concrete generators supply the template names and context; templates are
loaded from the ``templates`` directory next to this module.
"""

import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional, Union

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from gpiosim.model.memory_map import MemoryMap


class BaseGenerator(ABC):
    """
    Abstract base class for register-map generators.
    """

    def __init__(self, template_dir: Optional[str] = None):
        """
        Initialize the generator with Jinja2 environment.

        Args:
            template_dir: Optional custom template directory.
                Defaults to the package's 'templates' directory.
        """
        if template_dir is None:
            template_dir = os.path.join(os.path.dirname(__file__), "templates")

        self.template_dir = template_dir
        self.env = Environment(
            loader=FileSystemLoader(template_dir),
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
            keep_trailing_newline=True,
        )

    @abstractmethod
    def generate_all(self, memory_map: MemoryMap) -> Dict[str, str]:
        """
        Generate every output file for the memory map.

        Returns:
            Dictionary mapping filename to content
        """

    def write_files(self, memory_map: MemoryMap, output_dir: Union[str, Path]) -> Dict[str, Path]:
        """
        Generate and write all files to output directory.

        Returns:
            Dictionary mapping filename to written file path
        """
        output_path = Path(output_dir)
        output_path.mkdir(parents=True, exist_ok=True)

        written = {}
        for filename, content in self.generate_all(memory_map).items():
            file_path = output_path / filename
            file_path.parent.mkdir(parents=True, exist_ok=True)
            file_path.write_text(content)
            written[filename] = file_path

        return written
