"""
Token Stream Format
===================

This module defines the token vocabulary shared by every front end of the
assembler, and reads the plain-text token-stream format.

Token Types
-----------
- DOTID: Directive or condition suffix (.8byte, .eq)
- LABEL: Label definition, lexeme ends with ':' (loop:)
- ID: Mnemonic, label reference, or the name sp
- HEXINT: Hexadecimal literal with 0x/0X prefix (0x1F)
- REG: General purpose register x0..x30
- ZREG: Zero register (xzr)
- INT: Signed decimal literal (-8)
- COMMA, LBRACK, RBRACK: Punctuation
- NEWLINE: Statement boundary

Stream Format
-------------
A token stream is a whitespace separated sequence of ``<TYPE> <LEXEME>``
pairs. NEWLINE carries no lexeme:

    ID add
    REG x0
    COMMA ,
    REG x1
    COMMA ,
    REG x2
    NEWLINE

The type names are exactly the TokenType member names.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator
import re

from a64asm.errors import AssemblySyntaxError, SourceLocation


# =============================================================================
# Token Type Enumeration
# =============================================================================

class TokenType(Enum):
    """Token categories of the A64 subset. Member names are the wire tags."""

    # Directives and condition suffixes
    DOTID = auto()      # .8byte, .eq
    LABEL = auto()      # name:
    ID = auto()         # mnemonics, label references, sp

    # Operands
    HEXINT = auto()     # 0x...
    REG = auto()        # x0..x30
    ZREG = auto()       # xzr
    INT = auto()        # decimal, optionally negative

    # Delimiters
    COMMA = auto()      # ,
    LBRACK = auto()     # [
    RBRACK = auto()     # ]

    # Structural
    NEWLINE = auto()    # end of statement


# Token types that carry no lexeme in the wire format
LEXEMELESS_TYPES = frozenset({TokenType.NEWLINE})


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    A single token of the assembly input.

    Attributes:
        type: The TokenType classification
        lexeme: The text of the token ("" for NEWLINE)
        line: Line number of the token (1-indexed, 0 when unknown)
        column: Column number of the token (1-indexed, 0 when unknown)
        filename: Name of the input the token came from
    """
    type: TokenType
    lexeme: str = ""
    line: int = 0
    column: int = 0
    filename: str = "<input>"

    def __repr__(self) -> str:
        if self.lexeme:
            return f"Token({self.type.name}, {self.lexeme!r}, {self.line}:{self.column})"
        return f"Token({self.type.name}, {self.line}:{self.column})"

    @property
    def location(self) -> SourceLocation:
        """Return a SourceLocation for error reporting."""
        return SourceLocation(self.filename, self.line, self.column)


# =============================================================================
# Token Stream Reader
# =============================================================================

_WORD = re.compile(r"\S+")


def _words(text: str) -> Iterator[tuple[str, int, int]]:
    """Yield (word, line, column) for every whitespace separated word."""
    for line_number, line in enumerate(text.splitlines(), start=1):
        for match in _WORD.finditer(line):
            yield match.group(), line_number, match.start() + 1


def read_token_stream(text: str, filename: str = "<input>") -> list[Token]:
    """
    Parse the ``<TYPE> <LEXEME>`` token-stream format.

    The location recorded for each token is the position of its type tag
    in the stream, which is the only position the stream knows about.

    Args:
        text: Token stream text
        filename: Name used in error locations

    Returns:
        The tokens, in input order

    Raises:
        AssemblySyntaxError: On an unrecognised type tag, or a type tag
            whose lexeme is missing at end of input
    """
    tokens: list[Token] = []
    words = _words(text)

    for tag, line, column in words:
        location = SourceLocation(filename, line, column)
        try:
            token_type = TokenType[tag]
        except KeyError:
            raise AssemblySyntaxError(
                f"invalid token type '{tag}'",
                location,
                hint="expected one of " + ", ".join(t.name for t in TokenType),
            ) from None

        lexeme = ""
        if token_type not in LEXEMELESS_TYPES:
            word = next(words, None)
            if word is None:
                raise AssemblySyntaxError(
                    f"missing lexeme for {tag} token at end of input",
                    location,
                )
            lexeme = word[0]

        tokens.append(Token(token_type, lexeme, line, column, filename))

    return tokens
