"""CHIP-8 miscellaneous instructions (Fxxx)."""

import jax.numpy as jnp
from chip8core.state import EmulatorState, NOT_WAITING
from chip8core.decode import DecodedInstruction
from chip8core.constants import FONT_START, FONT_END, FONT_CHAR_SIZE, MEMORY_SIZE, INDEX_MASK
from chip8core.errors import AddressOutOfRange


def _check_range(start: int, length: int, writable: bool = False):
    """Validate ``length`` bytes starting at ``start`` before touching memory."""
    end = start + length - 1
    if end >= MEMORY_SIZE:
        raise AddressOutOfRange(end)
    if writable and start < FONT_END:
        raise AddressOutOfRange(start, "inside the read-only font region")


def execute_get_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX07 - Set VX to delay timer value."""
    return state.replace(V=state.V.at[instruction.x].set(state.delay_timer))


def execute_wait_for_key(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX0A - Wait for key press.

    With a key already held the lowest pressed key is stored at once. Otherwise
    the program counter is wound back onto this instruction and the state is
    marked as waiting; ``resolve_key_wait`` finishes the instruction later.
    """
    if jnp.any(state.keypad):
        pressed_key = jnp.argmax(state.keypad)
        return state.replace(V=state.V.at[instruction.x].set(jnp.astype(pressed_key, jnp.uint8)))
    return state.replace(
        pc=state.pc - 2,
        wait_register=jnp.astype(instruction.x, jnp.int8),
    )


def resolve_key_wait(state: EmulatorState) -> EmulatorState:
    """Complete a pending FX0A if any key is held, else leave the state as is."""
    if not jnp.any(state.keypad):
        return state
    register = int(state.wait_register)
    pressed_key = jnp.argmax(state.keypad)
    return state.replace(
        V=state.V.at[register].set(jnp.astype(pressed_key, jnp.uint8)),
        pc=state.pc + 2,
        wait_register=jnp.astype(NOT_WAITING, jnp.int8),
    )


def execute_set_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX15 - Set delay timer to VX."""
    return state.replace(delay_timer=state.V[instruction.x])


def execute_set_sound_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX18 - Set sound timer to VX."""
    return state.replace(sound_timer=state.V[instruction.x])


def execute_add_to_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX1E - Add VX to I register, wrapping at 16 bits."""
    new_i = (int(state.I) + int(state.V[instruction.x])) & INDEX_MASK
    return state.replace(I=jnp.astype(new_i, jnp.uint16))


def execute_font_character(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX29 - Set I to location of sprite for digit VX."""
    font_address = FONT_START + int(state.V[instruction.x]) * FONT_CHAR_SIZE
    return state.replace(I=jnp.astype(font_address, jnp.uint16))


def execute_bcd_conversion(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX33 - Store BCD representation of VX at I, I+1, I+2."""
    start = int(state.I)
    _check_range(start, 3, writable=True)
    value = int(state.V[instruction.x])

    digits = jnp.array([
        value // 100,
        (value // 10) % 10,
        value % 10
    ], dtype=jnp.uint8)

    new_memory = state.memory.at[start:start + 3].set(digits)
    return state.replace(memory=new_memory)


def execute_store_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX55 - Store V0 through VX in memory starting at I. I is unchanged."""
    start = int(state.I)
    count = instruction.x + 1
    _check_range(start, count, writable=True)
    new_memory = state.memory.at[start:start + count].set(state.V[:count])
    return state.replace(memory=new_memory)


def execute_load_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX65 - Load V0 through VX from memory starting at I. I is unchanged."""
    start = int(state.I)
    count = instruction.x + 1
    _check_range(start, count)
    new_V = state.V.at[:count].set(state.memory[start:start + count])
    return state.replace(V=new_V)
