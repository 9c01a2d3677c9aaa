"""Exceptions raised while loading gpiosim YAML files."""

from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import ValidationError


class ParseError(Exception):
    """Error while loading a configuration, memory map or scenario file."""

    def __init__(
        self,
        message: str,
        file_path: Optional[Union[str, Path]] = None,
        line: Optional[int] = None,
    ):
        self.file_path = Path(file_path) if file_path is not None else None
        self.line = line
        super().__init__(self._format_message(message))

    def _format_message(self, message: str) -> str:
        parts = []
        if self.file_path:
            parts.append(f"File: {self.file_path}")
        if self.line is not None:
            parts.append(f"Line: {self.line}")
        parts.append(message)
        return " | ".join(parts)

    @classmethod
    def from_yaml_error(cls, exc: yaml.YAMLError, file_path=None) -> "ParseError":
        """Wrap a PyYAML error, keeping the 1-based line of the problem mark."""
        mark = getattr(exc, "problem_mark", None)
        line = mark.line + 1 if mark is not None else None
        return cls(f"YAML syntax error: {exc}", file_path, line)

    @classmethod
    def from_validation_error(
        cls, exc: ValidationError, what: str, file_path=None
    ) -> "ParseError":
        """Flatten a pydantic ValidationError into one readable message."""
        details = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or '<root>'}: {err['msg']}"
            for err in exc.errors()
        )
        return cls(f"Invalid {what}: {details}", file_path)
