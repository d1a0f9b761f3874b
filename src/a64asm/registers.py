"""
Register and Immediate Parsing
==============================

The one place that decides what a register or integer lexeme means.

Registers
---------
- ``x0`` .. ``x30`` map to their number
- ``xzr`` maps to 31, but only where the zero register is allowed
- ``x31`` and above are rejected; register 31 is only reachable by name

Integers
--------
- ``0x``/``0X`` prefix: unsigned hexadecimal (``0x`` alone is 0)
- Otherwise: signed decimal
"""

from typing import Optional
import re

from a64asm.errors import AssemblySyntaxError, RegisterError, SourceLocation


# Register number shared by the zero register and the stack pointer
ZERO_REGISTER = 31

# Highest register reachable through an xN name
MAX_NAMED_REGISTER = 30

_REGISTER = re.compile(r"x(\d+)")
_HEX = re.compile(r"0[xX]([0-9a-fA-F]*)")
_DECIMAL = re.compile(r"[-+]?\d+")


def parse_register(
    lexeme: str,
    zero_allowed: bool = True,
    location: Optional[SourceLocation] = None,
) -> int:
    """
    Convert a register name to its 5-bit register number.

    Args:
        lexeme: Register name as written (x0..x30 or xzr)
        zero_allowed: Whether xzr is legal in this operand position
        location: Source location for error reporting

    Returns:
        Register number 0..31

    Raises:
        RegisterError: If the name is not a register, names x31 or above,
            or names xzr where it is not allowed
    """
    if lexeme == "xzr":
        if not zero_allowed:
            raise RegisterError(
                "register 'xzr' is not allowed in this operand position",
                location,
                hint="the zero register is only accepted as the last source register",
            )
        return ZERO_REGISTER

    match = _REGISTER.fullmatch(lexeme)
    if match is None:
        raise RegisterError(f"invalid register '{lexeme}'", location)

    number = int(match.group(1))
    if number > MAX_NAMED_REGISTER:
        raise RegisterError(
            f"register value '{lexeme}' is too large",
            location,
            hint="use x0-x30, or xzr for register 31",
        )
    return number


def parse_immediate(lexeme: str, location: Optional[SourceLocation] = None) -> int:
    """
    Convert an integer literal to its value.

    Raises:
        AssemblySyntaxError: If the lexeme is not an integer literal
    """
    if match := _HEX.fullmatch(lexeme):
        digits = match.group(1)
        return int(digits, 16) if digits else 0

    if _DECIMAL.fullmatch(lexeme):
        return int(lexeme)

    raise AssemblySyntaxError(f"expected integer, got '{lexeme}'", location)
