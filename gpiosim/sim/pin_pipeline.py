"""
Input synchronizer, debounce filter and pad output path.

Every pin owns an independent channel: a chain of synchronizer flops
followed by a debounce counter and the held (debounced) value. Channel
state is kept in fixed-size per-pin arrays indexed by pin number.

The output path is purely combinational: the pad output-enable is the DIR
register and the driven value is the OUT register.
"""

import logging
from dataclasses import dataclass
from typing import Tuple

from gpiosim.model.config import GpioConfig
from gpiosim.utils import bit, pack_bits

from .register_file import RegisterBank

logger = logging.getLogger(__name__)


def debounce_step(synced: int, held: int, counter: int, threshold: int) -> Tuple[int, int]:
    """Advance one debounce channel by one tick.

    The counter runs while the synchronized input differs from the held
    value and restarts as soon as they agree again. When it reaches
    ``threshold`` the held value takes the new level.

    Returns:
        ``(held, counter)`` after the tick.
    """
    if synced == held:
        return held, 0
    counter += 1
    if counter >= threshold:
        return synced, 0
    return held, counter


@dataclass(frozen=True)
class PinChannel:
    """Snapshot of one pin's input path."""

    pin: int
    sync: Tuple[int, ...]
    debounce_counter: int
    debounced_value: int

    @property
    def sync_stage1(self) -> int:
        return self.sync[0]

    @property
    def synchronized(self) -> int:
        """Output of the last synchronizer stage."""
        return self.sync[-1]


@dataclass(frozen=True)
class PinPipelineState:
    """Per-pin arrays; ``sync[stage][pin]`` with stage 0 nearest the pad."""

    sync: Tuple[Tuple[int, ...], ...]
    counter: Tuple[int, ...]
    held: Tuple[int, ...]

    @classmethod
    def zero(cls, pin_count: int, sync_stages: int) -> "PinPipelineState":
        zeros = (0,) * pin_count
        return cls(sync=(zeros,) * sync_stages, counter=zeros, held=zeros)


class PinPipeline:
    """Synchronizer + debounce for all pins, plus pad outputs."""

    def __init__(self, config: GpioConfig):
        self.config = config
        self.state = PinPipelineState.zero(config.pin_count, config.sync_stages)

    def reset(self) -> None:
        self.state = PinPipelineState.zero(self.config.pin_count, self.config.sync_stages)

    @property
    def synchronized(self) -> int:
        """Last synchronizer stage as a pin vector."""
        return pack_bits(self.state.sync[-1])

    def debounced(self, threshold: int) -> int:
        """Debounced input vector as seen by the IN register and interrupts.

        A threshold of 0 disables filtering: the synchronizer output is used
        directly, so only the synchronizer latency remains.
        """
        if threshold == 0:
            return self.synchronized
        return pack_bits(self.state.held)

    def channel(self, pin: int, threshold: int) -> PinChannel:
        """Snapshot of one pin; ``debounced_value`` follows the same rule as ``debounced()``."""
        if not 0 <= pin < self.config.pin_count:
            raise IndexError(f"Pin {pin} out of range [0, {self.config.pin_count})")
        held = self.state.sync[-1][pin] if threshold == 0 else self.state.held[pin]
        return PinChannel(
            pin=pin,
            sync=tuple(stage[pin] for stage in self.state.sync),
            debounce_counter=self.state.counter[pin],
            debounced_value=held,
        )

    def tick(self, raw_input: int, threshold: int) -> PinPipelineState:
        """Compute the channel state after this tick without committing it.

        Args:
            raw_input: Pad input vector sampled at this tick.
            threshold: DEBOUNCE_CFG value in effect during this tick.
        """
        state = self.state
        raw = tuple(bit(raw_input, pin) for pin in range(self.config.pin_count))
        # Each stage samples the one before it; stage 0 samples the pad
        sync = (raw,) + state.sync[:-1]

        counter = []
        held = []
        # The debounce filter sees the last stage as it was before this tick
        for pin, synced in enumerate(state.sync[-1]):
            new_held, new_count = debounce_step(
                synced, state.held[pin], state.counter[pin], threshold
            )
            if new_held != state.held[pin] and threshold:
                logger.debug("Pin %d debounced -> %d", pin, new_held)
            held.append(new_held)
            counter.append(new_count)

        return PinPipelineState(sync=sync, counter=tuple(counter), held=tuple(held))

    def commit(self, state: PinPipelineState) -> None:
        self.state = state

    @staticmethod
    def output_enable(bank: RegisterBank) -> int:
        return bank.direction

    @staticmethod
    def driven_value(bank: RegisterBank) -> int:
        return bank.output_value
