"""CHIP-8 virtual machine core."""

from chip8core.state import EmulatorState, StackState, create_state
from chip8core.emulator import (
    OPCODE_TABLE, execute, fetch, step, lookup, disassemble, tick_timers, set_key,
    load_program, is_waiting_for_key,
)
from chip8core.decode import DecodedInstruction, InstructionPattern, decode
from chip8core.errors import (
    Chip8Error, UnsupportedOpcode, StackOverflow, StackUnderflow, AddressOutOfRange,
    InvalidProgramLength, InvalidKey,
)
from chip8core.config import MachineConfig
from chip8core.machine import Machine
from chip8core.constants import *

__all__ = [
    "EmulatorState",
    "StackState",
    "create_state",
    "OPCODE_TABLE",
    "execute",
    "fetch",
    "step",
    "lookup",
    "disassemble",
    "tick_timers",
    "set_key",
    "load_program",
    "is_waiting_for_key",
    "DecodedInstruction",
    "InstructionPattern",
    "decode",
    "Chip8Error",
    "UnsupportedOpcode",
    "StackOverflow",
    "StackUnderflow",
    "AddressOutOfRange",
    "InvalidProgramLength",
    "InvalidKey",
    "MachineConfig",
    "Machine",
    "PROGRAM_START",
    "FONT_START",
    "FONT_DATA",
    "MEMORY_SIZE",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
]
