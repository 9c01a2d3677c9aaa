"""C header generation for the GPIO register map."""

import re
from typing import Any, Dict, List, Optional

from gpiosim.model.memory_map import MemoryMap
from gpiosim.utils import enum_value

from .base_generator import BaseGenerator


def c_identifier(name: str) -> str:
    """Upper-case ``name`` and replace anything not valid in a C macro."""
    ident = re.sub(r"[^0-9A-Za-z_]", "_", name).upper()
    if ident and ident[0].isdigit():
        ident = "_" + ident
    return ident


class CHeaderGenerator(BaseGenerator):
    """Render ``#define`` offsets, reset values and field masks for C firmware."""

    TEMPLATE = "regs.h.j2"

    def __init__(self, prefix: Optional[str] = None, template_dir: Optional[str] = None):
        super().__init__(template_dir)
        self.prefix = prefix

    def _get_template_context(self, memory_map: MemoryMap) -> Dict[str, Any]:
        prefix = c_identifier(self.prefix or memory_map.name)
        registers: List[Dict[str, Any]] = []
        for address, reg in memory_map.iter_registers():
            fields = []
            for f in reg.fields:
                fields.append(
                    {
                        "name": c_identifier(f.name),
                        "offset": f.offset,
                        "width": f.width,
                        "mask": f.mask,
                        "bit_range": f.bit_range,
                        "access": enum_value(f.access),
                    }
                )
            registers.append(
                {
                    "name": c_identifier(reg.name),
                    "address": address,
                    "reset_value": reg.reset_value,
                    "access": enum_value(reg.access),
                    "description": reg.description,
                    "fields": fields,
                }
            )
        return {
            "prefix": prefix,
            "guard": f"{prefix}_REGS_H",
            "map_name": memory_map.name,
            "description": memory_map.description,
            "registers": registers,
        }

    def generate_header(self, memory_map: MemoryMap) -> str:
        template = self.env.get_template(self.TEMPLATE)
        return template.render(**self._get_template_context(memory_map))

    def generate_all(self, memory_map: MemoryMap) -> Dict[str, str]:
        name = c_identifier(self.prefix or memory_map.name).lower()
        return {f"{name}_regs.h": self.generate_header(memory_map)}
