"""
Operand Resolver
================

Pass two operand resolution: turns the operand tokens of one instruction
into the integer values the encoder consumes.

Resolution Rules
----------------
| Token             | Value                                              |
|-------------------|----------------------------------------------------|
| REG               | register number (x0..x30)                          |
| ZREG              | 31                                                 |
| ID ``sp``         | 31, unless the mnemonic takes a label operand      |
| INT / HEXINT      | integer value                                      |
| ID (b, b.cond)    | label offset minus the instruction's own offset    |
| COMMA, [, ]       | ignored                                            |

The number of values must match the mnemonic's operand pattern
(encoder.OPERAND_PATTERNS); unused operands are 0. A ``.8byte`` value
must fit 64 bits, signed or unsigned.
"""

from dataclasses import dataclass
import logging
from typing import Optional

from a64asm.encoder import (
    CONDITION_CODES,
    OPERAND_DESCRIPTIONS,
    condition_code,
    encode,
    get_instruction_info,
)
from a64asm.errors import (
    AssemblySyntaxError,
    ImmediateRangeError,
    OperandError,
    SourceLocation,
    UnknownInstructionError,
)
from a64asm.registers import ZERO_REGISTER, parse_immediate, parse_register
from a64asm.statements import Directive, Instruction
from a64asm.symbols import SymbolTable
from a64asm.tokens import Token, TokenType


logger = logging.getLogger(__name__)

__all__ = [
    "CONDITION_CODES",
    "MAX_OPERANDS",
    "OperandResolver",
    "ResolvedInstruction",
    "accepts_label_operand",
]


MAX_OPERANDS = 3

# .8byte accepts any value that fits 64 bits as signed or unsigned
QUAD_MIN = -(2**63)
QUAD_MAX = 2**64 - 1

# Name that aliases register 31 outside label-taking instructions
STACK_POINTER = "sp"

_PUNCTUATION = frozenset({TokenType.COMMA, TokenType.LBRACK, TokenType.RBRACK})
_INTEGERS = frozenset({TokenType.INT, TokenType.HEXINT})


def accepts_label_operand(mnemonic: str) -> bool:
    """Only ``b`` and ``b.<cond>`` take a label as operand."""
    return mnemonic == "b" or condition_code(mnemonic) is not None


@dataclass(frozen=True)
class ResolvedInstruction:
    """
    Instruction with every operand reduced to an integer.

    Attributes:
        mnemonic: Instruction name ("b.eq" for conditional branches)
        operands: Exactly three operand values, unused ones 0
        offset: Byte offset of the instruction from the start of the program
        location: Source location for error reporting
    """
    mnemonic: str
    operands: tuple[int, int, int]
    offset: int = 0
    location: Optional[SourceLocation] = None

    def encode(self) -> int:
        """Encode to the 32-bit instruction word."""
        return encode(self.mnemonic, *self.operands, location=self.location)


class OperandResolver:
    """
    Resolves operands against a completed symbol table.

    Usage:
        resolver = OperandResolver(symbols)
        resolved = resolver.resolve(instruction, offset)
        word = resolved.encode()
    """

    def __init__(self, symbols: SymbolTable):
        self.symbols = symbols

    def resolve(self, instruction: Instruction, offset: int) -> ResolvedInstruction:
        """
        Resolve the operands of one instruction.

        Args:
            instruction: The instruction statement
            offset: Byte offset of the instruction

        Raises:
            UnknownInstructionError: If the mnemonic is not supported
            RegisterError: On an unencodable register
            UndefinedSymbolError: On a reference to an undefined label
            AssemblySyntaxError: On a token that cannot be an operand here
            OperandError: On a missing or extraneous operand
        """
        mnemonic = instruction.mnemonic
        info = get_instruction_info(mnemonic)
        if info is None:
            raise UnknownInstructionError(mnemonic, instruction.location)

        # Pattern slots are filled left to right; trailing blanks are absent operands
        pattern = info.operands.rstrip()
        values: list[int] = []

        for token in instruction.operands:
            if token.type in _PUNCTUATION:
                continue

            if len(values) == len(pattern):
                raise OperandError(
                    f"instruction '{mnemonic}' has extraneous operand '{token.lexeme}'",
                    token.location,
                )
            values.append(self._resolve_operand(mnemonic, token, offset))

        if len(values) < len(pattern):
            raise OperandError(
                f"instruction '{mnemonic}' is missing "
                f"{OPERAND_DESCRIPTIONS[pattern[len(values)]]}",
                instruction.location,
            )

        values.extend([0] * (MAX_OPERANDS - len(values)))
        logger.debug(f"Resolved {mnemonic} at {offset}: {values}")
        return ResolvedInstruction(mnemonic, tuple(values), offset, instruction.location)

    def resolve_literal(self, directive: Directive) -> int:
        """
        Return the value of a ``.8byte`` operand (integer or label offset).

        Raises:
            UndefinedSymbolError: On a reference to an undefined label
            ImmediateRangeError: If an integer does not fit 64 bits
        """
        operand = directive.operand
        if operand.type == TokenType.ID:
            return self.symbols.lookup(operand.lexeme, operand.location)

        value = parse_immediate(operand.lexeme, operand.location)
        if not QUAD_MIN <= value <= QUAD_MAX:
            raise ImmediateRangeError(
                directive.name, value, QUAD_MIN, QUAD_MAX, operand.location
            )
        return value

    def _resolve_operand(self, mnemonic: str, token: Token, offset: int) -> int:
        if token.type == TokenType.REG:
            return parse_register(token.lexeme, zero_allowed=True, location=token.location)

        if token.type == TokenType.ZREG:
            return ZERO_REGISTER

        if token.type in _INTEGERS:
            return parse_immediate(token.lexeme, token.location)

        if token.type == TokenType.ID:
            takes_label = accepts_label_operand(mnemonic)
            if token.lexeme == STACK_POINTER and not takes_label:
                return ZERO_REGISTER
            if takes_label:
                return self.symbols.lookup(token.lexeme, token.location) - offset

        raise AssemblySyntaxError(
            f"unexpected token {token.type.name} '{token.lexeme}' "
            f"while processing {mnemonic}",
            token.location,
        )
