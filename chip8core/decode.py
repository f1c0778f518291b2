"""CHIP-8 instruction decoding."""

from chex import dataclass


@dataclass(frozen=True)
class DecodedInstruction:
    """Decoded CHIP-8 instruction with extracted operands."""
    raw: int
    opcode: int  # First nibble
    x: int       # Second nibble (VX register)
    y: int       # Third nibble (VY register)
    n: int       # Fourth nibble (4-bit immediate)
    nn: int      # Last byte (8-bit immediate)
    nnn: int     # Last 12 bits (12-bit address)


def decode(instruction: int) -> DecodedInstruction:
    """Decode 16-bit instruction into components."""
    instruction = int(instruction)
    return DecodedInstruction(
        raw=instruction,
        opcode=(instruction & 0xF000) >> 12,
        x=(instruction & 0x0F00) >> 8,
        y=(instruction & 0x00F0) >> 4,
        n=instruction & 0x000F,
        nn=instruction & 0x00FF,
        nnn=instruction & 0x0FFF
    )


@dataclass(frozen=True)
class InstructionPattern:
    """One opcode table entry: a word matches when ``word & mask == value``.

    ``mnemonic`` uses the conventional operand letters (``X``, ``Y``, ``N``,
    ``NN``, ``NNN``), which ``describe`` fills in from a decoded word.
    """
    mask: int
    value: int
    mnemonic: str

    def matches(self, instruction: int) -> bool:
        return (instruction & self.mask) == self.value

    @property
    def specificity(self) -> int:
        """Number of fixed bits; higher is matched first."""
        return bin(self.mask).count("1")

    def describe(self, instruction: DecodedInstruction) -> str:
        text = self.mnemonic
        text = text.replace("NNN", f"0x{instruction.nnn:03X}")
        text = text.replace("NN", f"0x{instruction.nn:02X}")
        text = text.replace("VX", f"V{instruction.x:X}").replace("VY", f"V{instruction.y:X}")
        return text.replace(" N", f" {instruction.n}")


def pattern(template: str, mnemonic: str) -> InstructionPattern:
    """Build a pattern from a four-character template such as ``"8XY4"``.

    Hex digits are fixed nibbles; any other character is a wildcard.
    """
    mask = value = 0
    for char in template:
        mask <<= 4
        value <<= 4
        if char in "0123456789ABCDEF":
            mask |= 0xF
            value |= int(char, 16)
    return InstructionPattern(mask=mask, value=value, mnemonic=mnemonic)
