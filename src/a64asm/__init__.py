"""
a64asm - Two-Pass Assembler for an A64 Subset
=============================================

This package assembles a small, fixed subset of the 64-bit ARM (A64)
instruction set into raw little-endian machine code.

Supported Instructions
----------------------
- Arithmetic: add, sub, mul, smulh, umulh, sdiv, udiv, cmp
- Branch to register: br, blr
- Memory: ldur, stur, ldr (PC-relative literal)
- PC-relative branch: b, b.eq, b.ne, b.hs, b.lo, b.hi, b.ls, b.ge,
  b.lt, b.gt, b.le
- Directive: .8byte (64-bit literal or label offset)

Main Components
---------------
- **Assembler**: Orchestrates both passes and every front end
- **Lexer**: Tokenizes raw source into the token stream
- **SymbolTable**: Label offsets collected in pass one
- **OperandResolver**: Turns operand tokens into encoder inputs
- **encode**: The instruction encoder shared by every front end

Command-Line Tools
------------------
- a64asm: line-oriented assembler
- a64tokasm: token-stream assembler
- a64lex: source to token-stream converter

Example Usage
-------------
>>> from a64asm import assemble_source
>>> assemble_source("add x0, x1, x2").hex()
'2060228b'
"""

__version__ = "1.0.0"

from a64asm.assembler import Assembler, assemble_source, assemble_tokens
from a64asm.config import AssemblerConfig
from a64asm.encoder import CONDITION_CODES, OPERAND_PATTERNS, encode
from a64asm.emitter import ByteEmitter, to_little_endian
from a64asm.errors import (
    A64Error,
    AlignmentError,
    AssemblerError,
    AssemblySyntaxError,
    DirectiveError,
    DuplicateSymbolError,
    ImmediateRangeError,
    OperandError,
    RegisterError,
    SourceLocation,
    UndefinedSymbolError,
    UnknownInstructionError,
)
from a64asm.lexer import Lexer, format_token_stream
from a64asm.resolver import OperandResolver, ResolvedInstruction
from a64asm.symbols import SymbolTable, build_symbol_table
from a64asm.tokens import Token, TokenType, read_token_stream

__all__ = [
    "__version__",
    # Assembler
    "Assembler",
    "AssemblerConfig",
    "assemble_source",
    "assemble_tokens",
    # Pipeline
    "Lexer",
    "Token",
    "TokenType",
    "read_token_stream",
    "format_token_stream",
    "SymbolTable",
    "build_symbol_table",
    "OperandResolver",
    "ResolvedInstruction",
    "encode",
    "CONDITION_CODES",
    "OPERAND_PATTERNS",
    "ByteEmitter",
    "to_little_endian",
    # Errors
    "A64Error",
    "AssemblerError",
    "AssemblySyntaxError",
    "DirectiveError",
    "UnknownInstructionError",
    "UndefinedSymbolError",
    "DuplicateSymbolError",
    "RegisterError",
    "OperandError",
    "ImmediateRangeError",
    "AlignmentError",
    "SourceLocation",
]
