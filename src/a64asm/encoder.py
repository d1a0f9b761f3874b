"""
A64 Instruction Encoder
=======================

This module holds the instruction table of the supported A64 subset and
the single encoding function shared by every front end.

Instruction Formats
-------------------
Each mnemonic belongs to one encoding format. Register fields are 5 bits
wide, immediates are stored as the signed value reduced modulo 2^width.

1. **THREE_REGISTER**: ``add rd, rn, rm``
   - base + rm·2^16 + rn·2^5 + rd
   - add, sub, mul, smulh, umulh, sdiv, udiv

2. **COMPARE**: ``cmp rn, rm``
   - the three-register layout with the destination fixed to 31

3. **BRANCH_REGISTER**: ``br rn``
   - base + rn·2^5
   - br, blr

4. **UNSCALED**: ``ldur rt, [rn, imm]``
   - imm in [-256, 255], stored in 9 bits at bit 12
   - ldur, stur

5. **LITERAL**: ``ldr rt, distance``
   - distance a multiple of 4, distance/4 stored in 19 bits at bit 5

6. **BRANCH**: ``b distance``
   - distance a multiple of 4, distance/4 stored in 26 bits at bit 0

7. **CONDITIONAL**: ``b.<cond> distance``
   - distance a multiple of 4, distance/4 stored in 19 bits at bit 5
   - 4-bit condition code at bit 0

Example
-------
>>> hex(encode("add", 0, 1, 2))
'0x8b226020'
>>> hex(encode("b", 8))
'0x14000002'
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from a64asm.errors import (
    AlignmentError,
    ImmediateRangeError,
    RegisterError,
    SourceLocation,
    UnknownInstructionError,
)


# =============================================================================
# Encoding Formats
# =============================================================================

class Format(Enum):
    """Encoding layouts of the supported instructions."""
    THREE_REGISTER = auto()   # add x0, x1, x2
    COMPARE = auto()          # cmp x1, x2
    BRANCH_REGISTER = auto()  # br x3
    UNSCALED = auto()         # ldur x0, [x1, 8]
    LITERAL = auto()          # ldr x0, 16
    BRANCH = auto()           # b 8
    CONDITIONAL = auto()      # b.eq -8


@dataclass(frozen=True)
class InstructionInfo:
    """
    Encoding information for one mnemonic.

    Attributes:
        base: Fixed bits of the 32-bit instruction word
        format: Layout of the operand fields
        operands: Operand pattern used by the line front end, one
            character per operand slot: 'r' register, 'z' register that
            may be xzr, 'i' immediate, ' ' no operand allowed
    """
    base: int
    format: Format
    operands: str


# =============================================================================
# Instruction Table
# =============================================================================

INSTRUCTIONS: dict[str, InstructionInfo] = {
    # Arithmetic
    "add":   InstructionInfo(0x8B206000, Format.THREE_REGISTER, "rrz"),
    "sub":   InstructionInfo(0xCB206000, Format.THREE_REGISTER, "rrz"),
    "mul":   InstructionInfo(0x9B007C00, Format.THREE_REGISTER, "rrz"),
    "smulh": InstructionInfo(0x9B407C00, Format.THREE_REGISTER, "rrz"),
    "umulh": InstructionInfo(0x9BC07C00, Format.THREE_REGISTER, "rrz"),
    "sdiv":  InstructionInfo(0x9AC00C00, Format.THREE_REGISTER, "rrz"),
    "udiv":  InstructionInfo(0x9AC00800, Format.THREE_REGISTER, "rrz"),
    "cmp":   InstructionInfo(0xEB206000, Format.COMPARE, "rz "),

    # Branch to register
    "br":    InstructionInfo(0xD61F0000, Format.BRANCH_REGISTER, "r  "),
    "blr":   InstructionInfo(0xD63F0000, Format.BRANCH_REGISTER, "r  "),

    # Memory
    "ldur":  InstructionInfo(0xF8400000, Format.UNSCALED, "rri"),
    "stur":  InstructionInfo(0xF8000000, Format.UNSCALED, "rri"),
    "ldr":   InstructionInfo(0x58000000, Format.LITERAL, "ri "),

    # PC-relative branch
    "b":     InstructionInfo(0x14000000, Format.BRANCH, "i  "),
}

# b.<cond> shares one base; the condition code fills bits 0-3
CONDITIONAL_BRANCH = InstructionInfo(0x54000000, Format.CONDITIONAL, "i  ")

CONDITION_CODES: dict[str, int] = {
    "eq": 0,
    "ne": 1,
    "hs": 2,
    "lo": 3,
    "hi": 8,
    "ls": 9,
    "ge": 10,
    "lt": 11,
    "gt": 12,
    "le": 13,
}

# Operand patterns for the line-oriented front end (b.<cond> is not part
# of its grammar)
OPERAND_PATTERNS: dict[str, str] = {
    mnemonic: info.operands for mnemonic, info in INSTRUCTIONS.items()
}

# What a missing operand of each pattern kind is reported as
OPERAND_DESCRIPTIONS: dict[str, str] = {
    "r": "a register value",
    "z": "a zeroable register value",
    "i": "an immediate value",
}

# Every instruction word is 4 bytes
INSTRUCTION_SIZE = 4

ZERO_REGISTER = 31

UNSCALED_MIN = -256
UNSCALED_MAX = 255


# =============================================================================
# Lookup Helpers
# =============================================================================

def condition_code(mnemonic: str) -> Optional[int]:
    """
    Return the condition code of a ``b.<cond>`` mnemonic.

    Returns None for anything that is not a known conditional branch.
    """
    if not mnemonic.startswith("b."):
        return None
    return CONDITION_CODES.get(mnemonic[2:])


def get_instruction_info(mnemonic: str) -> Optional[InstructionInfo]:
    """Look up encoding information, including conditional branches."""
    if mnemonic in INSTRUCTIONS:
        return INSTRUCTIONS[mnemonic]
    if condition_code(mnemonic) is not None:
        return CONDITIONAL_BRANCH
    return None


def is_valid_mnemonic(mnemonic: str) -> bool:
    return get_instruction_info(mnemonic) is not None


# =============================================================================
# Field Helpers
# =============================================================================

def _check_registers(
    mnemonic: str,
    location: Optional[SourceLocation],
    *registers: int,
) -> None:
    """Every register operand must fit the 5-bit register field."""
    for register in registers:
        if not 0 <= register <= ZERO_REGISTER:
            raise RegisterError(
                f"register number {register} out of range for {mnemonic}",
                location,
            )


def _three_register(base: int, rd: int, rn: int, rm: int) -> int:
    return base + rm * 2**16 + rn * 2**5 + rd


def _scaled_distance(
    mnemonic: str,
    distance: int,
    width: int,
    location: Optional[SourceLocation],
) -> int:
    """
    Convert a byte distance to its word-count field value.

    The distance must be a multiple of 4. The word count must fit a signed
    field of ``width`` bits and is returned reduced modulo 2^width.

    Raises:
        AlignmentError: If the distance is not a multiple of 4
        ImmediateRangeError: If distance/4 does not fit the field
    """
    if distance % INSTRUCTION_SIZE != 0:
        raise AlignmentError(mnemonic, distance, location)

    words = distance // INSTRUCTION_SIZE
    low = -(2 ** (width - 1))
    high = 2 ** (width - 1) - 1
    if not low <= words <= high:
        raise ImmediateRangeError(
            mnemonic,
            distance,
            low * INSTRUCTION_SIZE,
            high * INSTRUCTION_SIZE,
            location,
        )
    return words % 2**width


# =============================================================================
# Encoding
# =============================================================================

def encode(
    mnemonic: str,
    one: int = 0,
    two: int = 0,
    three: int = 0,
    location: Optional[SourceLocation] = None,
) -> int:
    """
    Encode one instruction into its 32-bit word.

    The operands are positional in source order: for ``add x0, x1, x2``
    they are (0, 1, 2); for ``ldur x0, [x1, 8]`` they are (0, 1, 8); for
    branches the first operand is the byte distance from the branch to
    its target. Unused operands are ignored.

    Args:
        mnemonic: Instruction name, e.g. "add" or "b.ne"
        one: First operand value
        two: Second operand value
        three: Third operand value
        location: Source location for error reporting

    Returns:
        The instruction word as an unsigned 32-bit integer

    Raises:
        UnknownInstructionError: If the mnemonic is not supported
        RegisterError: If a register operand does not fit 5 bits
        AlignmentError: If a branch or literal distance is not a multiple of 4
        ImmediateRangeError: If an immediate or distance does not fit its field
    """
    info = get_instruction_info(mnemonic)
    if info is None:
        raise UnknownInstructionError(mnemonic, location)

    fmt = info.format

    if fmt == Format.THREE_REGISTER:
        _check_registers(mnemonic, location, one, two, three)
        return _three_register(info.base, one, two, three)

    if fmt == Format.COMPARE:
        _check_registers(mnemonic, location, one, two)
        return _three_register(info.base, ZERO_REGISTER, one, two)

    if fmt == Format.BRANCH_REGISTER:
        _check_registers(mnemonic, location, one)
        return info.base + one * 2**5

    if fmt == Format.UNSCALED:
        _check_registers(mnemonic, location, one, two)
        if not UNSCALED_MIN <= three <= UNSCALED_MAX:
            raise ImmediateRangeError(
                mnemonic, three, UNSCALED_MIN, UNSCALED_MAX, location
            )
        return info.base + (three % 2**9) * 2**12 + two * 2**5 + one

    if fmt == Format.LITERAL:
        _check_registers(mnemonic, location, one)
        imm19 = _scaled_distance(mnemonic, two, 19, location)
        return info.base + imm19 * 2**5 + one

    if fmt == Format.BRANCH:
        return info.base + _scaled_distance(mnemonic, one, 26, location)

    # Format.CONDITIONAL
    imm19 = _scaled_distance(mnemonic, one, 19, location)
    return info.base + imm19 * 2**5 + condition_code(mnemonic)
