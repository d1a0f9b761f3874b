"""
a64lex - Source Lexer Command-Line Interface
============================================

Converts raw A64 assembly source into the ``<TYPE> <LEXEME>`` token
stream read by a64tokasm.

Usage Examples
--------------
    $ echo "b.ne loop" | a64lex
    ID b
    DOTID .ne
    ID loop
    NEWLINE
"""

from typing import Optional

import click

from a64asm import __version__
from a64asm.cli.common import input_name, read_input, setup_logging
from a64asm.cli.errors import handle_cli_exception
from a64asm.lexer import format_token_stream, tokenize


@click.command()
@click.argument("input_file", required=False, metavar="[FILE]")
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Debug logging on stderr",
)
@click.version_option(version=__version__, prog_name="a64lex")
def main(input_file: Optional[str], verbose: bool) -> None:
    """
    Tokenize A64 assembly source.

    If FILE is unspecified or is `-`, read the source from standard in.
    """
    setup_logging(verbose)
    source = read_input(input_file)

    try:
        tokens = tokenize(source, input_name(input_file))
    except Exception as e:
        handle_cli_exception(e, verbose=verbose)

    click.echo(format_token_stream(tokens), nl=False)


if __name__ == "__main__":
    main()
