"""CHIP-8 display operations."""

import jax.numpy as jnp
from chip8core.state import EmulatorState
from chip8core.decode import DecodedInstruction
from chip8core.constants import SCREEN_WIDTH, SCREEN_HEIGHT, MEMORY_SIZE, FLAG_REGISTER
from chip8core.errors import AddressOutOfRange

SPRITE_WIDTH = 8

# Bit 7 of a sprite row is its leftmost pixel
bit_shifts = jnp.arange(SPRITE_WIDTH - 1, -1, -1)


def execute_display(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """DXYN - Draw sprite at (VX, VY) with height N.

    The sprite is XORed onto the display. Both axes wrap around independently.
    VF is set when any lit pixel is turned off.
    """
    height = instruction.n
    start = int(state.I)
    if start + height > MEMORY_SIZE:
        raise AddressOutOfRange(start + height - 1, "beyond the end of memory for sprite data")

    rows = state.memory[start:start + height]
    sprite = ((rows[:, None] >> bit_shifts[None, :]) & 1).astype(jnp.bool_)

    ys = (jnp.astype(state.V[instruction.y], jnp.int32) + jnp.arange(height)) % SCREEN_HEIGHT
    xs = (jnp.astype(state.V[instruction.x], jnp.int32) + jnp.arange(SPRITE_WIDTH)) % SCREEN_WIDTH

    # Height < SCREEN_HEIGHT and width < SCREEN_WIDTH, so no two sprite bits share a cell
    layer = jnp.zeros_like(state.display).at[ys[:, None], xs[None, :]].set(sprite)
    collision = jnp.any(state.display & layer)

    return state.replace(
        display=state.display ^ layer,
        V=state.V.at[FLAG_REGISTER].set(jnp.astype(collision, jnp.uint8))
    )
