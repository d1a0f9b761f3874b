"""
a64asm - Line-Oriented Assembler Command-Line Interface
=======================================================

Assembles source written one instruction per line (no labels, no
directives) and writes the raw little-endian machine code to stdout.

Usage Examples
--------------
Assemble a file:
    $ a64asm prog.s > prog.bin

Read from standard input:
    $ echo "add x0, x1, x2" | a64asm | xxd
    00000000: 2060 228b                                 `".

On the first bad line, a64asm prints ``ERROR: <message>`` to stderr and
exits non-zero; the words of the lines before it are already written.
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
    "-v", "--verbose",
    is_flag=True,
    help="Debug logging on stderr",
)
@click.version_option(version=__version__, prog_name="a64asm")
def main(input_file: Optional[str], verbose: bool) -> None:
    """
    Assemble line-oriented A64 source.

    If FILE is unspecified or is `-`, read the assembly from standard
    in. Otherwise, read the assembly from FILE.

    \b
    Supported instructions:
        add sub mul smulh umulh sdiv udiv   rd, rn, rm
        cmp                                 rn, rm
        br blr                              rn
        ldur stur                           rt, [rn, imm]
        ldr                                 rt, distance
        b                                   distance
    """
    setup_logging(verbose)
    source = read_input(input_file)

    config = AssemblerConfig.from_env()
    config.filename = input_name(input_file)
    asm = Assembler(config, stream=click.get_binary_stream("stdout"))

    try:
        asm.assemble_lines(source)
    except Exception as e:
        handle_cli_exception(e, verbose=verbose)


if __name__ == "__main__":
    main()
