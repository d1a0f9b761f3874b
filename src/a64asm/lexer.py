"""
A64 Source Lexer
================

Converts raw assembly source into the token stream consumed by the
two-pass assembler, so plain ``.s`` text can be assembled without an
external tokenizer.

Lexical Rules
-------------
- ``name:`` at the start of a statement: LABEL (lexeme keeps the colon)
- ``.name``: DOTID (``.8byte``, and the ``.eq`` of ``b.eq``)
- ``x<digits>``: REG; ``xzr``: ZREG; any other identifier: ID
- ``0x1F``: HEXINT; ``42`` or ``-8``: INT
- ``,`` ``[`` ``]``: COMMA, LBRACK, RBRACK
- end of line: NEWLINE
- ``#`` before an immediate is skipped
- ``;`` and ``//`` start a comment that runs to the end of the line

Example
-------
>>> from a64asm.lexer import Lexer
>>> for token in Lexer("loop: \\n b.ne loop\\n").tokenize():
...     print(token)
Token(LABEL, 'loop:', 1:1)
Token(NEWLINE, 1:7)
Token(ID, 'b', 2:2)
Token(DOTID, '.ne', 2:3)
Token(ID, 'loop', 2:7)
Token(NEWLINE, 2:11)
"""

from typing import Iterator, Optional
import re
import string

from a64asm.errors import AssemblySyntaxError, SourceLocation
from a64asm.tokens import LEXEMELESS_TYPES, Token, TokenType


_REGISTER_NAME = re.compile(r"x\d+")


# =============================================================================
# Lexer Implementation
# =============================================================================

class Lexer:
    """
    Tokenizes A64 assembly source.

    Usage:
        lexer = Lexer(source_text, filename)
        tokens = list(lexer.tokenize())

    Attributes:
        source: The source code being tokenized
        filename: Name of the source file (for error reporting)
    """

    # Characters that can start an identifier
    IDENT_START = string.ascii_letters + "_"

    # Characters that can continue an identifier
    IDENT_CHARS = string.ascii_letters + string.digits + "_"

    SINGLE_CHAR_TOKENS = {
        ",": TokenType.COMMA,
        "[": TokenType.LBRACK,
        "]": TokenType.RBRACK,
    }

    def __init__(self, source: str, filename: str = "<input>"):
        self.source = source
        self.filename = filename

        self._pos = 0
        self._line = 1
        self._column = 1

        # A label is only recognised as the first token of a statement
        self._at_statement_start = True

    def tokenize(self) -> Iterator[Token]:
        """
        Generate tokens from the source code.

        Yields:
            Token objects in source order

        Raises:
            AssemblySyntaxError: On a character or literal that is not valid
        """
        while not self._at_end():
            if self._skip_whitespace():
                continue

            if self._skip_comment():
                continue

            token = self._scan_token()
            self._at_statement_start = token.type == TokenType.NEWLINE
            yield token

    # =========================================================================
    # Character Access Methods
    # =========================================================================

    def _at_end(self) -> bool:
        return self._pos >= len(self.source)

    def _peek(self, offset: int = 0) -> str:
        """Look ahead without advancing; empty string past the end."""
        pos = self._pos + offset
        if pos >= len(self.source):
            return ""
        return self.source[pos]

    def _advance(self) -> str:
        char = self.source[self._pos]
        self._pos += 1

        if char == "\n":
            self._line += 1
            self._column = 1
        else:
            self._column += 1

        return char

    # =========================================================================
    # Token Creation
    # =========================================================================

    def _make_token(self, token_type: TokenType, lexeme: str, line: int, column: int) -> Token:
        return Token(token_type, lexeme, line, column, self.filename)

    def _error(self, message: str) -> AssemblySyntaxError:
        location = SourceLocation(self.filename, self._line, self._column)
        return AssemblySyntaxError(message, location)

    # =========================================================================
    # Whitespace and Comment Handling
    # =========================================================================

    def _skip_whitespace(self) -> bool:
        skipped = False
        # Must check for non-empty string first because '' in ' \t\r' is True
        while self._peek() and self._peek() in " \t\r":
            self._advance()
            skipped = True
        return skipped

    def _skip_comment(self) -> bool:
        """Skip a ';' or '//' comment up to (not including) the newline."""
        if self._peek() == ";" or (self._peek() == "/" and self._peek(1) == "/"):
            while not self._at_end() and self._peek() != "\n":
                self._advance()
            return True
        return False

    # =========================================================================
    # Token Scanning
    # =========================================================================

    def _scan_token(self) -> Token:
        line = self._line
        column = self._column
        char = self._peek()

        if char == "\n":
            self._advance()
            return self._make_token(TokenType.NEWLINE, "", line, column)

        if char in self.SINGLE_CHAR_TOKENS:
            self._advance()
            return self._make_token(self.SINGLE_CHAR_TOKENS[char], char, line, column)

        # Immediate prefix: ldur x0, [x1, #8]
        if char == "#" and (self._peek(1).isdigit() or self._peek(1) == "-"):
            self._advance()
            return self._scan_number(self._line, self._column)

        if char in self.IDENT_START:
            return self._scan_identifier(line, column)

        if char == ".":
            return self._scan_dotid(line, column)

        if char.isdigit() or (char == "-" and self._peek(1).isdigit()):
            return self._scan_number(line, column)

        raise self._error(f"unexpected character {char!r}")

    def _read_while(self, allowed: str) -> str:
        start = self._pos
        # Must check for non-empty string first because '' in allowed is True
        while self._peek() and self._peek() in allowed:
            self._advance()
        return self.source[start:self._pos]

    def _scan_identifier(self, line: int, column: int) -> Token:
        name = self._read_while(self.IDENT_CHARS)

        if self._peek() == ":" and self._at_statement_start:
            self._advance()
            return self._make_token(TokenType.LABEL, name + ":", line, column)

        if name == "xzr":
            return self._make_token(TokenType.ZREG, name, line, column)
        if _REGISTER_NAME.fullmatch(name):
            return self._make_token(TokenType.REG, name, line, column)
        return self._make_token(TokenType.ID, name, line, column)

    def _scan_dotid(self, line: int, column: int) -> Token:
        self._advance()  # consume '.'
        name = self._read_while(self.IDENT_CHARS)
        if not name:
            raise self._error("expected a name after '.'")
        return self._make_token(TokenType.DOTID, "." + name, line, column)

    def _scan_number(self, line: int, column: int) -> Token:
        if self._peek() == "0" and self._peek(1) in ("x", "X"):
            self._advance()
            self._advance()
            digits = self._read_while(string.hexdigits)
            if not digits:
                raise self._error("hexadecimal literal needs at least one digit")
            token = self._make_token(TokenType.HEXINT, "0x" + digits, line, column)
        else:
            sign = self._advance() if self._peek() == "-" else ""
            digits = self._read_while(string.digits)
            if not digits:
                raise self._error("expected digits in integer literal")
            token = self._make_token(TokenType.INT, sign + digits, line, column)

        if self._peek() and self._peek() in self.IDENT_CHARS:
            raise self._error(f"invalid character {self._peek()!r} in integer literal")
        return token


# =============================================================================
# Convenience Functions
# =============================================================================

def tokenize(source: str, filename: str = "<input>") -> list[Token]:
    """Tokenize a complete source text."""
    return list(Lexer(source, filename).tokenize())


def format_token_stream(tokens: list[Token]) -> str:
    """
    Write tokens in the ``<TYPE> <LEXEME>`` stream format, one per line.

    The result can be read back with tokens.read_token_stream().
    """
    lines = []
    for token in tokens:
        if token.type in LEXEMELESS_TYPES:
            lines.append(token.type.name)
        else:
            lines.append(f"{token.type.name} {token.lexeme}")
    return "".join(f"{line}\n" for line in lines)


def lex_source(source: str, filename: Optional[str] = None) -> str:
    """Tokenize source text and return it in stream format."""
    return format_token_stream(tokenize(source, filename or "<input>"))
