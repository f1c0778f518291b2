"""Main CHIP-8 emulator execution engine."""

from typing import Callable

import jax.numpy as jnp
from chip8core.state import EmulatorState, NOT_WAITING
from chip8core.decode import InstructionPattern, decode, pattern
from chip8core.constants import PROGRAM_START, MEMORY_SIZE, MAX_PROGRAM_SIZE, NUM_KEYS
from chip8core.errors import UnsupportedOpcode, AddressOutOfRange, InvalidProgramLength, InvalidKey
from chip8core.instructions.system import no_op, execute_clear_screen, execute_return
from chip8core.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset,
    execute_skip_if_key, execute_skip_if_not_key
)
from chip8core.instructions.alu import (
    execute_alu_set, execute_alu_or, execute_alu_and, execute_alu_xor, execute_alu_add,
    execute_alu_sub_xy, execute_alu_shift_right, execute_alu_sub_yx, execute_alu_shift_left
)
from chip8core.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from chip8core.instructions.display import execute_display
from chip8core.instructions.misc import (
    execute_get_delay_timer, execute_wait_for_key, resolve_key_wait, execute_set_delay_timer,
    execute_set_sound_timer, execute_add_to_index, execute_font_character,
    execute_bcd_conversion, execute_store_registers, execute_load_registers
)


OPCODE_TABLE: list[tuple[InstructionPattern, Callable]] = sorted(
    [
        (pattern("0000", "NOP"), no_op),
        (pattern("00E0", "CLS"), execute_clear_screen),
        (pattern("00EE", "RET"), execute_return),
        (pattern("1NNN", "JP NNN"), execute_jump),
        (pattern("2NNN", "CALL NNN"), execute_call),
        (pattern("3XNN", "SE VX, NN"), execute_skip_if_equal_immediate),
        (pattern("4XNN", "SNE VX, NN"), execute_skip_if_not_equal_immediate),
        (pattern("5XY0", "SE VX, VY"), execute_skip_if_equal_register),
        (pattern("6XNN", "LD VX, NN"), execute_set),
        (pattern("7XNN", "ADD VX, NN"), execute_add),
        (pattern("8XY0", "LD VX, VY"), execute_alu_set),
        (pattern("8XY1", "OR VX, VY"), execute_alu_or),
        (pattern("8XY2", "AND VX, VY"), execute_alu_and),
        (pattern("8XY3", "XOR VX, VY"), execute_alu_xor),
        (pattern("8XY4", "ADD VX, VY"), execute_alu_add),
        (pattern("8XY5", "SUB VX, VY"), execute_alu_sub_xy),
        (pattern("8XY6", "SHR VX"), execute_alu_shift_right),
        (pattern("8XY7", "SUBN VX, VY"), execute_alu_sub_yx),
        (pattern("8XYE", "SHL VX"), execute_alu_shift_left),
        (pattern("9XY0", "SNE VX, VY"), execute_skip_if_not_equal_register),
        (pattern("ANNN", "LD I, NNN"), execute_set_index),
        (pattern("BNNN", "JP V0, NNN"), execute_jump_with_offset),
        (pattern("CXNN", "RND VX, NN"), execute_random),
        (pattern("DXYN", "DRW VX, VY, N"), execute_display),
        (pattern("EX9E", "SKP VX"), execute_skip_if_key),
        (pattern("EXA1", "SKNP VX"), execute_skip_if_not_key),
        (pattern("FX07", "LD VX, DT"), execute_get_delay_timer),
        (pattern("FX0A", "LD VX, K"), execute_wait_for_key),
        (pattern("FX15", "LD DT, VX"), execute_set_delay_timer),
        (pattern("FX18", "LD ST, VX"), execute_set_sound_timer),
        (pattern("FX1E", "ADD I, VX"), execute_add_to_index),
        (pattern("FX29", "LD F, VX"), execute_font_character),
        (pattern("FX33", "LD B, VX"), execute_bcd_conversion),
        (pattern("FX55", "LD [I], VX"), execute_store_registers),
        (pattern("FX65", "LD VX, [I]"), execute_load_registers),
    ],
    key=lambda entry: entry[0].specificity,
    reverse=True,
)


def lookup(instruction: int, address: int | None = None):
    """Find the table entry for an instruction word, most specific pattern first."""
    instruction = int(instruction)
    for entry in OPCODE_TABLE:
        if entry[0].matches(instruction):
            return entry
    raise UnsupportedOpcode(instruction, address)


def disassemble(instruction: int) -> str:
    """Render an instruction word as a mnemonic, e.g. ``ADD V1, V2``."""
    try:
        entry_pattern, _ = lookup(instruction)
    except UnsupportedOpcode:
        return f"DW 0x{int(instruction):04X}"
    return entry_pattern.describe(decode(instruction))


def execute(state: EmulatorState, instruction: int) -> EmulatorState:
    """Execute single CHIP-8 instruction.

    The program counter is expected to already point past the instruction.
    """
    _, handler = lookup(instruction, int(state.pc) - 2)
    return handler(state, decode(instruction))


def _pack_u16(high: jnp.uint8, low: jnp.uint8) -> jnp.uint16:
    """Pack two bytes into uint16."""
    return (high.astype(jnp.uint16) << 8) | low.astype(jnp.uint16)


def fetch(state: EmulatorState) -> tuple[EmulatorState, jnp.uint16]:
    """Fetch next instruction from memory."""
    pc = int(state.pc)
    if pc + 1 >= MEMORY_SIZE:
        raise AddressOutOfRange(pc, "cannot hold a full instruction")
    instruction = _pack_u16(state.memory[pc], state.memory[pc + 1])
    return state.replace(pc=state.pc + 2), instruction


def is_waiting_for_key(state: EmulatorState) -> bool:
    return int(state.wait_register) != NOT_WAITING


def step(state: EmulatorState) -> EmulatorState:
    """Run one instruction, or make one attempt at finishing a pending key wait."""
    if is_waiting_for_key(state):
        return resolve_key_wait(state)
    state, instruction = fetch(state)
    return execute(state, instruction)


def tick_timers(state: EmulatorState) -> EmulatorState:
    """Count both timers down by one, stopping at zero."""
    return state.replace(
        delay_timer=jnp.where(state.delay_timer > 0, state.delay_timer - 1, state.delay_timer),
        sound_timer=jnp.where(state.sound_timer > 0, state.sound_timer - 1, state.sound_timer),
    )


def set_key(state: EmulatorState, index: int, pressed: bool) -> EmulatorState:
    """Record a key press or release."""
    if not 0 <= index < NUM_KEYS:
        raise InvalidKey(index)
    return state.replace(keypad=state.keypad.at[index].set(bool(pressed)))


def load_program(state: EmulatorState, data: bytes) -> EmulatorState:
    """Load program bytes into CHIP-8 memory starting at 0x200."""
    if len(data) > MAX_PROGRAM_SIZE:
        raise InvalidProgramLength(len(data), MAX_PROGRAM_SIZE)
    if not data:
        return state
    rom_array = jnp.array(list(bytes(data)), dtype=jnp.uint8)
    new_memory = state.memory.at[PROGRAM_START:PROGRAM_START + len(data)].set(rom_array)
    return state.replace(memory=new_memory)
