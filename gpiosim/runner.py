"""
Scenario execution.

Runs a ``Scenario`` against a fresh ``GpioTop`` through the simulated bus
master and records what every step observed.
"""

import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from gpiosim.driver.bus import SimBus
from gpiosim.driver.loader import load_driver
from gpiosim.model.memory_map import MemoryMap
from gpiosim.model.scenario import OutputCheck, RegisterRef, Scenario, Step
from gpiosim.sim.top import GpioTop
from gpiosim.utils import filter_none

logger = logging.getLogger(__name__)


@dataclass
class StepRecord:
    index: int
    action: str
    cycle: int
    value: Optional[int] = None
    passed: bool = True
    message: str = ""


@dataclass
class ScenarioResult:
    name: str
    cycles: int = 0
    records: List[StepRecord] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return all(r.passed for r in self.records)

    @property
    def failures(self) -> List[StepRecord]:
        return [r for r in self.records if not r.passed]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "passed": self.passed,
            "cycles": self.cycles,
            "steps": [filter_none(asdict(r)) for r in self.records],
        }


class ScenarioRunner:
    """Execute a scenario step by step on its own peripheral instance."""

    def __init__(self, scenario: Scenario, memory_map: Optional[MemoryMap] = None):
        self.scenario = scenario
        self.top = GpioTop(scenario.config)
        self.bus = SimBus(self.top, idle_ticks=scenario.idle_ticks)
        self.driver = load_driver(
            self.bus, memory_map, base_address=scenario.config.base_address
        )

    def _address(self, reg: RegisterRef) -> int:
        if isinstance(reg, int):
            return self.scenario.config.base_address + reg
        return self.driver[reg].offset

    def run(self) -> ScenarioResult:
        result = ScenarioResult(name=self.scenario.name)
        logger.info(
            "Running scenario '%s' (%d steps)", self.scenario.name, len(self.scenario.steps)
        )
        for index, step in enumerate(self.scenario.steps):
            record = self._run_step(index, step)
            if not record.passed:
                logger.info("Step %d (%s) failed: %s", index, record.action, record.message)
            result.records.append(record)

        result.cycles = self.top.cycle
        logger.info(
            "Scenario '%s' %s after %d cycles",
            self.scenario.name,
            "passed" if result.passed else "FAILED",
            result.cycles,
        )
        return result

    def _run_step(self, index: int, step: Step) -> StepRecord:
        action = step.action
        record = StepRecord(index=index, action=action, cycle=self.top.cycle)

        if action == "write":
            self.bus.write_word(self._address(step.write.reg), step.write.value)
            record.value = step.write.value
        elif action == "read":
            value = self.bus.read_word(self._address(step.read.reg))
            record.value = value
            expected = step.read.expect
            if expected is not None and (value & step.read.mask) != (expected & step.read.mask):
                record.passed = False
                record.message = (
                    f"read {step.read.reg}: expected {expected:#010x}, got {value:#010x}"
                )
        elif action == "pins":
            self.top.gpio_in = step.pins & self.scenario.config.pin_mask
            record.value = self.top.gpio_in
        elif action == "idle":
            self.top.run(step.idle)
        elif action == "reset":
            self.top.reset(step.reset)
        elif action == "expect":
            record.message = self._check_outputs(step.expect)
            record.passed = not record.message

        record.cycle = self.top.cycle
        return record

    def _check_outputs(self, check: OutputCheck) -> str:
        problems = []
        if check.irq is not None and self.top.irq != check.irq:
            problems.append(f"irq: expected {check.irq}, got {self.top.irq}")
        if check.out is not None and self.top.gpio_out != check.out:
            problems.append(f"out: expected {check.out:#x}, got {self.top.gpio_out:#x}")
        if check.oe is not None and self.top.gpio_oe != check.oe:
            problems.append(f"oe: expected {check.oe:#x}, got {self.top.gpio_oe:#x}")
        return "; ".join(problems)


def run_scenario(scenario: Scenario, memory_map: Optional[MemoryMap] = None) -> ScenarioResult:
    """Convenience wrapper: run ``scenario`` on a fresh model."""
    return ScenarioRunner(scenario, memory_map).run()
