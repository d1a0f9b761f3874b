"""
Statement Grouping
==================

Groups a flat token sequence into statements, so that both assembler
passes walk the same structure.

Statements
----------
- LabelDef: ``loop:`` on a line of its own
- Directive: ``.8byte <INT|HEXINT|ID>``
- Instruction: mnemonic and its operand tokens up to the next NEWLINE

Grammar rules enforced here:
- A label must be followed by NEWLINE or end of input
- ``.8byte`` takes exactly one literal or label operand and ends its line
- Conditional branches arrive as ID ``b`` followed by DOTID ``.cond``;
  a fused ``b.cond`` ID is rejected
- Any other token at the start of a statement is an error
"""

from dataclasses import dataclass, field
from typing import Union

from a64asm.emitter import QUAD_SIZE, WORD_SIZE
from a64asm.errors import AssemblySyntaxError, DirectiveError, SourceLocation
from a64asm.tokens import Token, TokenType


# The only supported directive
QUAD_DIRECTIVE = ".8byte"

# Token types accepted as the operand of .8byte
LITERAL_OPERAND_TYPES = frozenset({TokenType.INT, TokenType.HEXINT, TokenType.ID})


# =============================================================================
# Statement Types
# =============================================================================

@dataclass(frozen=True)
class LabelDef:
    """Label definition (name without the trailing colon)."""
    name: str
    location: SourceLocation
    size: int = field(default=0, init=False)


@dataclass(frozen=True)
class Directive:
    """
    ``.8byte`` directive.

    Attributes:
        name: Directive name including the dot
        operand: INT, HEXINT or ID (label reference) token
        location: Where the directive appeared
    """
    name: str
    operand: Token
    location: SourceLocation
    size: int = field(default=QUAD_SIZE, init=False)


@dataclass(frozen=True)
class Instruction:
    """
    Machine instruction.

    Attributes:
        mnemonic: Instruction name, with the condition fused for
            conditional branches ("b.eq")
        operands: Operand tokens, punctuation included
        location: Where the mnemonic appeared
    """
    mnemonic: str
    operands: tuple[Token, ...]
    location: SourceLocation
    size: int = field(default=WORD_SIZE, init=False)


Statement = Union[LabelDef, Directive, Instruction]


def label_name(lexeme: str) -> str:
    """Strip one trailing ':' from a LABEL lexeme."""
    return lexeme[:-1] if lexeme.endswith(":") else lexeme


# =============================================================================
# Grouping
# =============================================================================

class _StatementReader:
    """Single forward scan over a token list."""

    def __init__(self, tokens: list[Token]):
        self._tokens = tokens
        self._pos = 0

    def _peek(self) -> Token | None:
        if self._pos < len(self._tokens):
            return self._tokens[self._pos]
        return None

    def _advance(self) -> Token:
        token = self._tokens[self._pos]
        self._pos += 1
        return token

    def _end_statement(self, what: str) -> None:
        """Consume the NEWLINE that ends a statement (or accept end of input)."""
        token = self._peek()
        if token is None:
            return
        if token.type != TokenType.NEWLINE:
            raise AssemblySyntaxError(
                f"{what} must be followed by NEWLINE or be at end of input, "
                f"found {token.type.name} '{token.lexeme}'",
                token.location,
            )
        self._advance()

    def read(self) -> list[Statement]:
        statements: list[Statement] = []

        while (token := self._peek()) is not None:
            if token.type == TokenType.NEWLINE:
                self._advance()
            elif token.type == TokenType.LABEL:
                statements.append(self._read_label())
            elif token.type == TokenType.DOTID:
                statements.append(self._read_directive())
            elif token.type == TokenType.ID:
                statements.append(self._read_instruction())
            else:
                raise AssemblySyntaxError(
                    f"unexpected token {token.type.name} '{token.lexeme}' "
                    "at start of statement",
                    token.location,
                )

        return statements

    def _read_label(self) -> LabelDef:
        token = self._advance()
        self._end_statement("label")
        return LabelDef(label_name(token.lexeme), token.location)

    def _read_directive(self) -> Directive:
        token = self._advance()
        if token.lexeme != QUAD_DIRECTIVE:
            raise DirectiveError(
                f"unknown directive: {token.lexeme}",
                token.location,
                hint=f"the only supported directive is {QUAD_DIRECTIVE}",
            )

        operand = self._peek()
        if operand is None or operand.type not in LITERAL_OPERAND_TYPES:
            raise DirectiveError(
                f"expected integer or label after {QUAD_DIRECTIVE}",
                token.location,
            )
        self._advance()
        self._end_statement(QUAD_DIRECTIVE)
        return Directive(token.lexeme, operand, token.location)

    def _read_instruction(self) -> Instruction:
        token = self._advance()
        mnemonic = token.lexeme

        if len(mnemonic) > 2 and mnemonic.startswith("b."):
            raise AssemblySyntaxError(
                f"conditional branch '{mnemonic}' must be tokenized as "
                "ID b followed by DOTID .cond",
                token.location,
            )

        suffix = self._peek()
        if mnemonic == "b" and suffix is not None and suffix.type == TokenType.DOTID:
            mnemonic += self._advance().lexeme

        operands = []
        while (operand := self._peek()) is not None and operand.type != TokenType.NEWLINE:
            operands.append(self._advance())
        if operand is not None:
            self._advance()

        return Instruction(mnemonic, tuple(operands), token.location)


def parse_statements(tokens: list[Token]) -> list[Statement]:
    """
    Group tokens into statements.

    Raises:
        AssemblySyntaxError: On a malformed label line, a fused conditional
            branch, or an unexpected token at the start of a statement
        DirectiveError: On an unknown directive or a bad .8byte operand
    """
    return _StatementReader(tokens).read()
