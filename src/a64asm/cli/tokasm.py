"""
a64tokasm - Token-Stream Assembler Command-Line Interface
=========================================================

Two-pass assembler over the ``<TYPE> <LEXEME>`` token-stream format,
with labels, forward references, ``b.<cond>`` and ``.8byte``.

Usage Examples
--------------
Assemble a token stream:
    $ a64tokasm prog.tok > prog.bin

Lex and assemble in one pipeline:
    $ a64lex prog.s | a64tokasm > prog.bin

Assemble raw source directly and show the symbol table:
    $ a64tokasm -t -s prog.s > prog.bin
    loop 0
    done 12
"""

from typing import Optional

import click

from a64asm import __version__
from a64asm.assembler import Assembler
from a64asm.cli.common import input_name, read_input, setup_logging
from a64asm.cli.errors import handle_cli_exception
from a64asm.config import AssemblerConfig


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument("input_file", required=False, metavar="[FILE]")
@click.option(
    "-s", "--symbols",
    is_flag=True,
    help="Print the symbol table (label offset) to stderr",
)
@click.option(
    "-t", "--source",
    "raw_source",
    is_flag=True,
    help="Input is raw assembly source instead of a token stream",
)
@click.option(
    "--reject-duplicates",
    is_flag=True,
    help="Fail when a label is defined twice (default: last definition wins)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Debug logging on stderr",
)
@click.version_option(version=__version__, prog_name="a64tokasm")
def main(
    input_file: Optional[str],
    symbols: bool,
    raw_source: bool,
    reject_duplicates: bool,
    verbose: bool,
) -> None:
    """
    Assemble a tokenized A64 program.

    If FILE is unspecified or is `-`, read tokenized assembly from
    standard in. Otherwise, read tokenized assembly from FILE.

    Machine code goes to stdout; diagnostics and the optional symbol
    table go to stderr.
    """
    setup_logging(verbose)
    text = read_input(input_file)

    config = AssemblerConfig.from_env()
    config.filename = input_name(input_file)
    if reject_duplicates:
        config.reject_duplicate_labels = True

    asm = Assembler(config, stream=click.get_binary_stream("stdout"))

    try:
        try:
            if raw_source:
                asm.assemble_source(text)
            else:
                asm.assemble_token_text(text)
        finally:
            if symbols:
                click.echo(asm.get_symbol_report(), err=True, nl=False)
    except Exception as e:
        handle_cli_exception(e, verbose=verbose)


if __name__ == "__main__":
    main()
