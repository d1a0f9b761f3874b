"""
A64 Assembler - Main Interface
==============================

This module provides the Assembler class, which coordinates the front
ends, the two passes, the encoder and the byte emitter.

Front Ends
----------
- assemble_tokens(): a token list (from any source)
- assemble_token_text(): the ``<TYPE> <LEXEME>`` token-stream format
- assemble_source(): raw assembly text, tokenized by the built-in lexer
- assemble_lines(): line-oriented text (no labels or directives)

The first three share the two-pass pipeline:

1. **Pass 1**: group tokens into statements and record every label's
   byte offset
2. **Pass 2**: re-walk the statements from offset 0, resolve operands
   against the completed symbol table, encode and emit

Output is the concatenation of 4-byte little-endian instruction words
and 8-byte little-endian literals, with no header or trailer. When an
output stream is given, every item is written to it as soon as it is
encoded.

Example Usage
-------------
>>> from a64asm import Assembler
>>> asm = Assembler()
>>> asm.assemble_source('''
... loop:
...     add x0, x1, x2
...     b loop
... ''').hex()
'2060228bffffff17'
>>> asm.get_symbols()
{'loop': 0}
"""

import logging
from typing import BinaryIO, Iterable, Optional

from a64asm.config import AssemblerConfig
from a64asm.emitter import ByteEmitter
from a64asm.lexer import Lexer
from a64asm.lineparser import parse_lines
from a64asm.resolver import OperandResolver, ResolvedInstruction
from a64asm.statements import Directive, Instruction, Statement, parse_statements
from a64asm.symbols import SymbolTable, collect_symbols
from a64asm.tokens import Token, read_token_stream


logger = logging.getLogger(__name__)


class Assembler:
    """
    Two-pass assembler for the supported A64 subset.

    Each assemble_* call starts from an empty symbol table and a fresh
    output buffer; get_symbols() and get_code() describe the last call.

    Attributes:
        config: Assembler configuration
    """

    def __init__(
        self,
        config: Optional[AssemblerConfig] = None,
        stream: Optional[BinaryIO] = None,
    ):
        """
        Initialize the assembler.

        Args:
            config: Configuration (defaults to AssemblerConfig())
            stream: Binary stream that receives bytes as they are emitted
        """
        self.config = config or AssemblerConfig()
        self._stream = stream
        self._emitter = ByteEmitter(stream)
        self._symbols = SymbolTable()

    # =========================================================================
    # Assembly Methods
    # =========================================================================

    def assemble_tokens(self, tokens: list[Token]) -> bytes:
        """
        Assemble a token sequence.

        Args:
            tokens: Tokens in stream order

        Returns:
            The machine code

        Raises:
            A64Error: On the first error; bytes of earlier items have
                already been written to the stream
        """
        self._emitter = ByteEmitter(self._stream)
        self._symbols = SymbolTable()

        logger.debug(f"Pass 1 over {len(tokens)} tokens")
        statements = parse_statements(tokens)
        self._symbols = collect_symbols(statements, self.config.reject_duplicate_labels)

        if self.config.report_symbols:
            for line in self._symbols.report().splitlines():
                logger.info(line)

        logger.debug(f"Pass 2 over {len(statements)} statements")
        self._pass2(statements)

        logger.debug(f"Assembly complete: {self._emitter.bytes_written} bytes")
        return self._emitter.get_bytes()

    def assemble_token_text(self, text: str) -> bytes:
        """Assemble text in the ``<TYPE> <LEXEME>`` token-stream format."""
        return self.assemble_tokens(read_token_stream(text, self.config.filename))

    def assemble_source(self, source: str) -> bytes:
        """Assemble raw source text through the built-in lexer."""
        tokens = list(Lexer(source, self.config.filename).tokenize())
        return self.assemble_tokens(tokens)

    def assemble_lines(self, text: str) -> bytes:
        """
        Assemble line-oriented source, one instruction per line.

        Lines are parsed and emitted one at a time, so every line before
        a bad one has already been written to the stream.
        """
        self._emitter = ByteEmitter(self._stream)
        self._symbols = SymbolTable()
        self._emit_all(parse_lines(text, self.config.filename))
        return self._emitter.get_bytes()

    # =========================================================================
    # Pass 2: Code Generation
    # =========================================================================

    def _pass2(self, statements: list[Statement]) -> None:
        resolver = OperandResolver(self._symbols)
        offset = 0

        for stmt in statements:
            if isinstance(stmt, Instruction):
                self._emitter.emit_word(resolver.resolve(stmt, offset).encode())
            elif isinstance(stmt, Directive):
                self._emitter.emit_quad(resolver.resolve_literal(stmt))
            offset += stmt.size

    def _emit_all(self, instructions: Iterable[ResolvedInstruction]) -> None:
        for instruction in instructions:
            self._emitter.emit_word(instruction.encode())

    # =========================================================================
    # Output Methods
    # =========================================================================

    def get_code(self) -> bytes:
        """Bytes emitted by the last assembly, including a failed one's prefix."""
        return self._emitter.get_bytes()

    def get_symbols(self) -> dict[str, int]:
        """
        Get the symbol table of the last assembly.

        Returns:
            Dictionary mapping label names to byte offsets
        """
        return self._symbols.as_dict()

    def get_symbol_report(self) -> str:
        """``<label> <offset>`` lines in definition order."""
        return self._symbols.report()


# =============================================================================
# Convenience Functions
# =============================================================================

def assemble_source(source: str, filename: str = "<input>") -> bytes:
    """
    Convenience function to assemble raw source text.

    Raises:
        A64Error: If assembly fails
    """
    return Assembler(AssemblerConfig(filename=filename)).assemble_source(source)


def assemble_tokens(tokens: list[Token]) -> bytes:
    """
    Convenience function to assemble a token sequence.

    Raises:
        A64Error: If assembly fails
    """
    return Assembler().assemble_tokens(tokens)
