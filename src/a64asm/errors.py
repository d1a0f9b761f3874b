"""
a64asm Error Hierarchy
======================

This module defines the exception hierarchy for the whole assembler.
All exceptions inherit from A64Error, allowing callers to catch every
assembler-related failure with a single except clause.

Exception Hierarchy
-------------------
A64Error (base)
└── AssemblerError (source-related)
    ├── AssemblySyntaxError - lexical/grammar errors (token types, label lines)
    ├── DirectiveError - unknown directive or bad directive operand
    ├── UnknownInstructionError - mnemonic outside the supported subset
    ├── UndefinedSymbolError - reference to an undefined label
    ├── DuplicateSymbolError - label defined twice (only when rejected)
    ├── RegisterError - register name or number not representable
    ├── OperandError - operand missing or extraneous for a mnemonic
    ├── ImmediateRangeError - immediate or distance outside its field
    └── AlignmentError - distance not a multiple of the instruction size

Every error is fatal: the assembler stops at the first one, there is no
warning tier and no error collection.

Error messages are a single line in this format:
    filename:line:column: description (hint: suggestion, when available)
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class A64Error(Exception):
    """
    Base exception for all a64asm errors.

    The command-line tools catch this class and report it as a single
    ``ERROR: <message>`` line:

        try:
            assembler.assemble_source(text)
        except A64Error as e:
            print(f"ERROR: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in source code for error reporting.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed, 0 when unknown)
        column: Column number (1-indexed, 0 when unknown)
    """
    filename: str
    line: int
    column: int = 0

    def __str__(self) -> str:
        """Format as 'filename:line:column' (column omitted when unknown)."""
        if self.column > 0:
            return f"{self.filename}:{self.line}:{self.column}"
        return f"{self.filename}:{self.line}"


# =============================================================================
# Assembler Exceptions
# =============================================================================

class AssemblerError(A64Error):
    """
    Base exception for all errors tied to a piece of assembly input.

    Attributes:
        message: The error description
        location: Where in the source the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error as a single line.

        The CLI prints exactly one diagnostic line per failure, so the
        location and hint are folded into the message instead of being
        printed on lines of their own.

        Example output:
            prog.s:4:9: undefined label 'lop' (hint: did you mean 'loop'?)
        """
        text = self.message
        if self.location is not None:
            text = f"{self.location}: {text}"
        if self.hint:
            text = f"{text} (hint: {self.hint})"
        return text


class AssemblySyntaxError(AssemblerError):
    """
    Lexical or grammar error in the input.

    Examples:
        - Unrecognised token type in a token stream
        - Label not followed by a newline
        - Unexpected token in operand position
        - Source line that does not match the line grammar
    """
    pass


class DirectiveError(AssemblerError):
    """
    Error in an assembler directive.

    Only ``.8byte`` is supported; any other directive, or ``.8byte``
    without a literal or label operand, raises this error.
    """
    pass


class UnknownInstructionError(AssemblerError):
    """Mnemonic that is not part of the supported instruction subset."""

    def __init__(
        self,
        mnemonic: str,
        location: Optional[SourceLocation] = None,
    ):
        self.mnemonic = mnemonic
        super().__init__(f"unknown instruction: {mnemonic}", location=location)


class UndefinedSymbolError(AssemblerError):
    """
    Reference to a label that was never defined.

    Raised during pass two, once the symbol table is complete. Similar
    label names are offered as a hint to catch typos.
    """

    def __init__(
        self,
        symbol: str,
        location: Optional[SourceLocation] = None,
        similar_symbols: Optional[list[str]] = None,
    ):
        self.symbol = symbol
        self.similar_symbols = similar_symbols or []

        hint = None
        if self.similar_symbols:
            suggestions = ", ".join(f"'{s}'" for s in self.similar_symbols[:3])
            hint = f"did you mean {suggestions}?"

        super().__init__(
            f"undefined label '{symbol}'",
            location=location,
            hint=hint,
        )


class DuplicateSymbolError(AssemblerError):
    """
    Label defined more than once.

    Only raised when duplicate rejection is enabled in the configuration;
    by default the last definition wins.
    """

    def __init__(
        self,
        symbol: str,
        location: Optional[SourceLocation] = None,
        original_offset: Optional[int] = None,
    ):
        self.symbol = symbol
        self.original_offset = original_offset

        hint = None
        if original_offset is not None:
            hint = f"'{symbol}' was first defined at offset {original_offset}"

        super().__init__(
            f"duplicate label '{symbol}'",
            location=location,
            hint=hint,
        )


class RegisterError(AssemblerError):
    """
    Register operand that cannot be encoded.

    Examples:
        - x31 or above (31 is only reachable through xzr/sp)
        - xzr in a position that does not allow the zero register
        - a name that is not a register at all
    """
    pass


class OperandError(AssemblerError):
    """Operand missing for a mnemonic that needs it, or present where forbidden."""
    pass


class ImmediateRangeError(AssemblerError):
    """
    Immediate or branch distance outside its field's signed range.

    Attributes:
        value: The offending value (in bytes, as written or computed)
        low: Smallest legal value
        high: Largest legal value
    """

    def __init__(
        self,
        mnemonic: str,
        value: int,
        low: int,
        high: int,
        location: Optional[SourceLocation] = None,
    ):
        self.mnemonic = mnemonic
        self.value = value
        self.low = low
        self.high = high
        super().__init__(
            f"{mnemonic} immediate out of range: {value}",
            location=location,
            hint=f"allowed range is {low} to {high}",
        )


class AlignmentError(AssemblerError):
    """Branch or literal distance that is not a multiple of 4 bytes."""

    def __init__(
        self,
        mnemonic: str,
        value: int,
        location: Optional[SourceLocation] = None,
    ):
        self.mnemonic = mnemonic
        self.value = value
        super().__init__(
            f"{mnemonic} immediate must be a multiple of 4 bytes: {value}",
            location=location,
        )
