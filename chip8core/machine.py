"""Stateful host-facing wrapper around the functional CHIP-8 core."""

import secrets
from typing import Optional

import jax
import jax.numpy as jnp

from chip8core.config import MachineConfig
from chip8core.emulator import (
    step, fetch, disassemble, tick_timers, set_key, load_program, is_waiting_for_key,
)
from chip8core.errors import Chip8Error
from chip8core.logging import MachineLogger, progress_bar
from chip8core.state import EmulatorState, create_state


class Machine:
    """One CHIP-8 machine driven by a host loop.

    The host decides when to call ``step`` (instruction rate), ``advance_timers``
    (60 Hz) and ``set_key`` (input events). Each call either commits a complete
    new state or raises a ``Chip8Error`` and keeps the previous one.
    """

    def __init__(self, config: Optional[MachineConfig] = None, logger: Optional[MachineLogger] = None):
        self.config = (config if config is not None else MachineConfig()).validate()
        self.logger = logger or MachineLogger(
            trace=self.config.trace,
            log_level=self.config.log_level,
            use_colors=self.config.use_colors,
        )
        seed = self.config.seed if self.config.seed is not None else secrets.randbits(32)
        self._rng = jax.random.PRNGKey(seed)
        self.state: EmulatorState = create_state(self._rng)

    def reset(self):
        """Return every field, memory included, to the freshly created state."""
        self.state = create_state(self._rng)
        self.logger.log_reset()

    def load_program(self, data: bytes):
        """Copy program bytes to 0x200."""
        self.state = load_program(self.state, data)
        self.logger.log_program_loaded(len(data))

    @property
    def waiting_for_key(self) -> bool:
        return is_waiting_for_key(self.state)

    def step(self):
        """Execute one instruction, or retry a pending key wait."""
        address = int(self.state.pc)
        was_waiting = self.waiting_for_key
        try:
            if self.logger.trace and not was_waiting:
                _, instruction = fetch(self.state)
                self.logger.log_instruction(address, int(instruction), disassemble(instruction))
            new_state = step(self.state)
        except Chip8Error as error:
            self.logger.log_fault(error, address)
            raise

        now_waiting = is_waiting_for_key(new_state)
        if now_waiting and not was_waiting:
            self.logger.log_key_wait(int(new_state.wait_register))
        elif was_waiting and not now_waiting:
            register = int(self.state.wait_register)
            self.logger.log_key_resolved(register, int(new_state.V[register]))
        self.state = new_state

    def run(self, num_steps: int, progress: bool = False):
        """Call ``step`` ``num_steps`` times. Pending key waits count as steps."""
        bar = progress_bar(num_steps) if progress else None
        try:
            for _ in range(num_steps):
                self.step()
                if bar is not None:
                    bar.update(1)
        finally:
            if bar is not None:
                bar.close()

    def advance_timers(self):
        """Count the delay and sound timers down once. Call at 60 Hz."""
        self.state = tick_timers(self.state)

    def set_key(self, index: int, pressed: bool):
        self.state = set_key(self.state, index, pressed)

    def framebuffer(self) -> jnp.ndarray:
        """Current 32x64 display, indexed ``[y, x]``. Jax arrays are immutable."""
        return self.state.display

    @property
    def sound_active(self) -> bool:
        """Whether the host should be sounding its tone."""
        return int(self.state.sound_timer) > 0
