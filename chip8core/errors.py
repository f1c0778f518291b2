"""Faults raised by the CHIP-8 core.

Every fault is raised at the point of the operation that caused it and before
any part of the machine state is replaced, so the caller's state is always the
one from before the failing call.
"""


class Chip8Error(Exception):
    """Base class for every fault the core raises."""


class UnsupportedOpcode(Chip8Error):
    """Fetched word matches none of the defined instruction patterns."""

    def __init__(self, word: int, address: int | None = None):
        self.word = word
        self.address = address
        location = f" at 0x{address:03X}" if address is not None else ""
        super().__init__(f"Unsupported opcode 0x{word:04X}{location}")


class StackOverflow(Chip8Error):
    """Subroutine call with every stack slot already in use."""

    def __init__(self, address: int):
        self.address = address
        super().__init__(f"Stack overflow while calling from 0x{address:03X}")


class StackUnderflow(Chip8Error):
    """Return from subroutine with an empty call stack."""

    def __init__(self):
        super().__init__("Stack underflow: return with an empty call stack")


class AddressOutOfRange(Chip8Error, IndexError):
    """Memory access outside the addressable (or writable) region."""

    def __init__(self, address: int, reason: str = "outside memory"):
        self.address = address
        super().__init__(f"Address 0x{address:04X} {reason}")


class InvalidProgramLength(Chip8Error, ValueError):
    """Program does not fit in the program region."""

    def __init__(self, length: int, limit: int):
        self.length = length
        self.limit = limit
        super().__init__(f"Program of {length} bytes exceeds the {limit}-byte program region")


class InvalidKey(Chip8Error, ValueError):
    """Key index outside the 16-key keypad."""

    def __init__(self, index: int):
        self.index = index
        super().__init__(f"Key index {index} is outside 0x0-0xF")
