"""
Line-Oriented Front End
=======================

Assembles source written one instruction per line, without labels or
directives. Each line is matched against a single regular expression
and its operands are checked against the mnemonic's operand pattern
(see encoder.OPERAND_PATTERNS).

Line Grammar
------------
    mnemonic op[, op[, op]]
    mnemonic reg, [reg, imm]

where an operand is ``x<digits>``, ``xzr``, ``0x<hex>`` or a signed
decimal. Everything from the first ``;`` is a comment; a trailing ``//``
comment is also accepted. Blank lines are skipped.

Operand Patterns
----------------
| Char | Meaning                                  |
|------|------------------------------------------|
| r    | register, xzr rejected                   |
| z    | register, xzr accepted (as 31)           |
| i    | immediate                                |
| ' '  | operand must be absent                   |
"""

import logging
import re
from typing import Iterator, Optional

from a64asm.encoder import INSTRUCTION_SIZE, OPERAND_DESCRIPTIONS, OPERAND_PATTERNS
from a64asm.errors import (
    AssemblySyntaxError,
    OperandError,
    SourceLocation,
    UnknownInstructionError,
)
from a64asm.registers import parse_immediate, parse_register
from a64asm.resolver import ResolvedInstruction


logger = logging.getLogger(__name__)


_OPERAND = r"x\d+|0x[0-9a-fA-F]*|-?\d+|xzr"
_IMMEDIATE = r"0x[0-9a-fA-F]*|-?\d+"

LINE_PATTERN = re.compile(
    rf"^\s*([a-z]+)\s+({_OPERAND})\s*"
    rf"(?:"
    rf"(?:(?:,\s*({_OPERAND}))?(?:,\s*({_OPERAND}))?)"
    rf"|(?:,\s*\[\s*(x\d+|xzr)\s*,\s*({_IMMEDIATE})\s*\])"
    rf")\s*(?://.*)?$"
)

EMPTY_LINE = re.compile(r"^\s*(//.*)?$")


def strip_comment(line: str) -> str:
    """Drop everything from the first ';'."""
    return line.split(";", 1)[0]


def is_blank(line: str) -> bool:
    """True for an empty line or one holding only a '//' comment."""
    return EMPTY_LINE.match(line) is not None


def parse_line(line: str, location: Optional[SourceLocation] = None) -> tuple[str, tuple[int, int, int]]:
    """
    Parse one comment-free instruction line.

    Args:
        line: The line text, ';' comments already removed
        location: Source location for error reporting

    Returns:
        (mnemonic, (one, two, three)) ready for encode()

    Raises:
        AssemblySyntaxError: If the line does not match the line grammar
        UnknownInstructionError: If the mnemonic is not supported
        OperandError: If an operand is missing or extraneous
        RegisterError: If a register operand is not encodable here
    """
    match = LINE_PATTERN.match(line)
    if match is None:
        raise AssemblySyntaxError(f'unable to parse line: "{line.strip()}"', location)

    mnemonic = match.group(1)
    pattern = OPERAND_PATTERNS.get(mnemonic)
    if pattern is None:
        raise UnknownInstructionError(mnemonic, location)

    # Bracketed memory operands land in groups 5 and 6
    arguments = (
        match.group(2),
        match.group(3) if match.group(3) is not None else match.group(5),
        match.group(4) if match.group(4) is not None else match.group(6),
    )

    values = [0, 0, 0]
    for index, (kind, argument) in enumerate(zip(pattern, arguments)):
        if kind == " ":
            if argument is not None:
                raise OperandError(
                    f"instruction '{mnemonic}' has extraneous arguments",
                    location,
                )
            continue

        if argument is None:
            raise OperandError(
                f"instruction '{mnemonic}' is missing {OPERAND_DESCRIPTIONS[kind]}",
                location,
            )

        if kind == "i":
            values[index] = parse_immediate(argument, location)
        else:
            values[index] = parse_register(argument, zero_allowed=kind == "z", location=location)

    return mnemonic, (values[0], values[1], values[2])


def parse_lines(text: str, filename: str = "<input>") -> Iterator[ResolvedInstruction]:
    """
    Parse line-oriented source lazily, one instruction at a time.

    Lines are parsed only as the caller asks for them, so instructions
    before a bad line can be emitted before the error is raised.

    Yields:
        ResolvedInstruction for each non-blank line
    """
    offset = 0
    for line_number, raw_line in enumerate(text.splitlines(), start=1):
        line = strip_comment(raw_line)
        if is_blank(line):
            continue

        location = SourceLocation(filename, line_number)
        mnemonic, operands = parse_line(line, location)
        logger.debug(f"Line {line_number}: {mnemonic} {operands}")

        yield ResolvedInstruction(mnemonic, operands, offset, location)
        offset += INSTRUCTION_SIZE
