"""
a64asm Command-Line Interface
=============================

This package provides the command-line tools:

- **a64asm**: line-oriented assembler (cli.asm)
- **a64tokasm**: token-stream two-pass assembler (cli.tokasm)
- **a64lex**: source to token-stream lexer (cli.lex)

Each tool is a Click command writing raw output to stdout and a single
``ERROR: <message>`` line to stderr on failure.
"""

__all__ = ["asm", "tokasm", "lex"]
