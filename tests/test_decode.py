"""Tests for instruction decoding and the opcode table."""

import pytest
from chip8core import decode, lookup, disassemble, execute, OPCODE_TABLE, UnsupportedOpcode


def test_decode_fields():
    """Nibbles and immediates are extracted by shifting and masking."""
    instruction = decode(0xD12F)
    assert instruction.opcode == 0xD
    assert instruction.x == 0x1
    assert instruction.y == 0x2
    assert instruction.n == 0xF
    assert instruction.nn == 0x2F
    assert instruction.nnn == 0x12F
    assert instruction.raw == 0xD12F


def test_table_has_every_instruction():
    """The table holds 35 distinct patterns."""
    assert len(OPCODE_TABLE) == 35
    assert len({(p.mask, p.value) for p, _ in OPCODE_TABLE}) == 35


def test_table_is_most_specific_first():
    specificities = [p.specificity for p, _ in OPCODE_TABLE]
    assert specificities == sorted(specificities, reverse=True)


def test_patterns_do_not_overlap():
    """Each supported word matches exactly one pattern."""
    for word in range(0x10000):
        matches = sum(1 for p, _ in OPCODE_TABLE if p.matches(word))
        assert matches <= 1, f"0x{word:04X} matches {matches} patterns"


@pytest.mark.parametrize("instruction, mnemonic", [
    (0x0000, "NOP"),
    (0x00E0, "CLS"),
    (0x00EE, "RET"),
    (0x1234, "JP 0x234"),
    (0x6A42, "LD VA, 0x42"),
    (0x8124, "ADD V1, V2"),
    (0x812E, "SHL V1"),
    (0xB300, "JP V0, 0x300"),
    (0xD125, "DRW V1, V2, 5"),
    (0xE3A1, "SKNP V3"),
    (0xF40A, "LD V4, K"),
    (0xF565, "LD V5, [I]"),
])
def test_disassemble(instruction, mnemonic):
    assert disassemble(instruction) == mnemonic


def test_disassemble_unsupported():
    assert disassemble(0x5001) == "DW 0x5001"


@pytest.mark.parametrize("instruction", [0x5001, 0x512F, 0x8008, 0x900F, 0xE000, 0xE19F, 0xF000, 0xF0FF, 0xF066])
def test_unsupported_words(instruction):
    with pytest.raises(UnsupportedOpcode) as excinfo:
        lookup(instruction)
    assert excinfo.value.word == instruction


def test_unsupported_opcode_does_not_mutate(fresh_state):
    """A fault raises instead of returning a changed state."""
    with pytest.raises(UnsupportedOpcode) as excinfo:
        execute(fresh_state, 0x5001)
    assert excinfo.value.address == 0x200 - 2
    assert fresh_state.pc == 0x200
