#!/usr/bin/env python3
"""
gpiosim - GPIO controller model tools.

Usage:
    python scripts/gpiosim.py run scenario.yml
    python scripts/gpiosim.py run scenario.yml --json
    python scripts/gpiosim.py regmap
    python scripts/gpiosim.py regmap --header ./include

Subcommands:
    run       Run a stimulus scenario against the model
    regmap    Show the register map or generate a C header from it
"""
import argparse
import json
import logging
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from gpiosim.generator.header_generator import CHeaderGenerator
from gpiosim.parser.yaml_loader import default_memory_map, load_memory_map, load_scenario
from gpiosim.runner import run_scenario


def _load_map(path):
    return load_memory_map(path)[0] if path else default_memory_map()


def cmd_run(args):
    """Run a scenario YAML file."""
    try:
        scenario = load_scenario(args.input)
        result = run_scenario(scenario, _load_map(args.memmap))
    except Exception as e:
        if args.json:
            print(json.dumps({"success": False, "error": str(e)}))
        else:
            print(f"Error: {e}")
        sys.exit(1)

    if args.json:
        print(json.dumps({"success": result.passed, **result.to_dict()}))
    else:
        for record in result.records:
            status = "ok  " if record.passed else "FAIL"
            value = f" {record.value:#010x}" if record.value is not None else ""
            message = f"  {record.message}" if record.message else ""
            print(f"  [{status}] #{record.index:<3} @{record.cycle:<6} {record.action}{value}{message}")
        verdict = "✓ passed" if result.passed else f"✗ {len(result.failures)} step(s) failed"
        print(f"\n{result.name}: {verdict} ({result.cycles} cycles)")

    if not result.passed:
        sys.exit(1)


def cmd_regmap(args):
    """Print the register map, or write a C header for it."""
    try:
        memory_map = _load_map(args.memmap)

        if args.header:
            written = CHeaderGenerator(prefix=args.prefix).write_files(memory_map, args.header)
            if args.json:
                print(json.dumps({"success": True, "files": {k: str(v) for k, v in written.items()}}))
            else:
                for path in written.values():
                    print(f"✓ Generated: {path}")
            return

        if args.json:
            print(json.dumps({"success": True, "memoryMap": memory_map.model_dump(by_alias=True)}))
            return

        print(f"\n{memory_map.name}")
        if memory_map.description:
            print(f"  {memory_map.description}")
        print()
        for address, reg in memory_map.iter_registers():
            print(f"  {address:#06x}  {reg.name:14} {reg.access.value:18} {reg.description}")
            for field in reg.fields:
                print(f"          {field.bit_range:8} {field.name:12} {field.access.value}")

    except Exception as e:
        if args.json:
            print(json.dumps({"success": False, "error": str(e)}))
        else:
            print(f"Error: {e}")
        sys.exit(1)


def main():
    parser = argparse.ArgumentParser(prog="gpiosim", description="GPIO controller model tools")
    parser.add_argument("--verbose", "-v", action="count", default=0, help="More logging (-vv for debug)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # run subcommand
    run_parser = subparsers.add_parser("run", help="Run a stimulus scenario")
    run_parser.add_argument("input", help="Scenario YAML file")
    run_parser.add_argument("--memmap", help="Memory map YAML (default: packaged GPIO map)")
    run_parser.add_argument("--json", action="store_true", help="JSON output")
    run_parser.set_defaults(func=cmd_run)

    # regmap subcommand
    map_parser = subparsers.add_parser("regmap", help="Show the register map")
    map_parser.add_argument("--memmap", help="Memory map YAML (default: packaged GPIO map)")
    map_parser.add_argument("--header", metavar="DIR", help="Write a C header into DIR")
    map_parser.add_argument("--prefix", help="Macro prefix for the C header")
    map_parser.add_argument("--json", action="store_true", help="JSON output")
    map_parser.set_defaults(func=cmd_regmap)

    args = parser.parse_args()
    level = {0: logging.WARNING, 1: logging.INFO}.get(args.verbose, logging.DEBUG)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
    args.func(args)


if __name__ == "__main__":
    main()
