# =============================================================================
# test_resolver.py - Operand Resolver Tests
# =============================================================================
# Tests for pass-two operand resolution.
#
# Test coverage includes:
#   - Register, zero register and sp operands
#   - Decimal and hexadecimal immediates
#   - Label distances relative to the instruction offset
#   - Labels rejected for mnemonics that do not take them
#   - Extraneous operands and default zero operands
#   - .8byte literal resolution
# =============================================================================

import pytest

from a64asm.errors import (
    AssemblySyntaxError,
    ImmediateRangeError,
    OperandError,
    RegisterError,
    UndefinedSymbolError,
    UnknownInstructionError,
)
from a64asm.lexer import tokenize
from a64asm.resolver import (
    CONDITION_CODES,
    OperandResolver,
    ResolvedInstruction,
    accepts_label_operand,
)
from a64asm.statements import parse_statements
from a64asm.symbols import SymbolTable


def resolver_with(**labels: int) -> OperandResolver:
    table = SymbolTable()
    for name, offset in labels.items():
        table.define(name, offset)
    return OperandResolver(table)


def resolve(line: str, offset: int = 0, **labels: int) -> ResolvedInstruction:
    (instruction,) = parse_statements(tokenize(line))
    return resolver_with(**labels).resolve(instruction, offset)


# =============================================================================
# Registers and Immediates
# =============================================================================

class TestOperandValues:
    """Test conversion of operand tokens to integers."""

    def test_registers(self):
        assert resolve("add x0, x1, x2").operands == (0, 1, 2)

    def test_zero_register(self):
        assert resolve("add x0, x1, xzr").operands == (0, 1, 31)

    def test_sp_is_31(self):
        assert resolve("ldur x0, [sp, 8]").operands == (0, 31, 8)

    def test_hex_immediate(self):
        assert resolve("ldur x3, [x4, 0xFF]").operands == (3, 4, 255)

    def test_negative_immediate(self):
        assert resolve("stur x3, [x4, #-16]").operands == (3, 4, -16)

    def test_unused_operands_are_zero(self):
        assert resolve("br x7").operands == (7, 0, 0)

    def test_missing_operand(self):
        with pytest.raises(OperandError) as exc_info:
            resolve("br")
        assert "instruction 'br' is missing a register value" in str(exc_info.value)

    def test_missing_third_register(self):
        """add x0, x1 is not silently read as add x0, x1, x0."""
        with pytest.raises(OperandError) as exc_info:
            resolve("add x0, x1")
        assert "is missing a zeroable register value" in str(exc_info.value)

    def test_missing_memory_offset(self):
        with pytest.raises(OperandError) as exc_info:
            resolve("ldur x0, [x1]")
        assert "is missing an immediate value" in str(exc_info.value)

    def test_bare_branch(self):
        with pytest.raises(OperandError):
            resolve("b")

    def test_bare_conditional_branch(self):
        with pytest.raises(OperandError):
            resolve("b.eq")

    def test_extraneous_for_pattern(self):
        with pytest.raises(OperandError) as exc_info:
            resolve("br x1, x2")
        assert "extraneous operand 'x2'" in str(exc_info.value)
        assert exc_info.value.location.column == 8

    def test_unknown_condition(self):
        with pytest.raises(UnknownInstructionError):
            resolve("b.xx 8")

    def test_x31_rejected(self):
        with pytest.raises(RegisterError) as exc_info:
            resolve("add x0, x31, x1")
        assert "too large" in str(exc_info.value)

    def test_extraneous_operand(self):
        with pytest.raises(OperandError) as exc_info:
            resolve("add x0, x1, x2, x3")
        assert "extraneous" in str(exc_info.value)

    def test_resolved_carries_offset_and_location(self):
        resolved = resolve("br x1", offset=12)
        assert resolved.offset == 12
        assert resolved.location.line == 1
        assert resolved.mnemonic == "br"


# =============================================================================
# Labels
# =============================================================================

class TestLabelOperands:
    """Test label references."""

    def test_forward_distance(self):
        assert resolve("b target", offset=0, target=8).operands[0] == 8

    def test_backward_distance(self):
        assert resolve("b.eq loop", offset=8, loop=0).operands[0] == -8

    def test_conditional_mnemonic(self):
        assert resolve("b.hi loop", offset=4, loop=4).mnemonic == "b.hi"

    def test_undefined_label(self):
        with pytest.raises(UndefinedSymbolError):
            resolve("b nowhere")

    def test_label_in_non_branch(self):
        with pytest.raises(AssemblySyntaxError) as exc_info:
            resolve("add x0, x1, loop", loop=0)
        assert "while processing add" in str(exc_info.value)

    def test_sp_in_branch_is_a_label(self):
        """sp names a label for b, so an undefined 'sp' label fails."""
        with pytest.raises(UndefinedSymbolError):
            resolve("b sp")

    def test_sp_label_for_branch(self):
        assert resolve("b sp", offset=4, sp=12).operands[0] == 8

    def test_accepts_label_operand(self):
        assert accepts_label_operand("b")
        assert all(accepts_label_operand(f"b.{c}") for c in CONDITION_CODES)
        assert not accepts_label_operand("br")
        assert not accepts_label_operand("ldr")

    def test_dotid_operand_rejected(self):
        with pytest.raises(AssemblySyntaxError):
            resolve("br .eq")


# =============================================================================
# Encoding and Literals
# =============================================================================

class TestResolvedEncoding:
    """Test ResolvedInstruction.encode and .8byte resolution."""

    def test_encode(self):
        assert resolve("add x0, x1, x2").encode() == 0x8B226020

    def test_encode_branch(self):
        assert resolve("b.eq loop", offset=8, loop=0).encode() == 0x54FFFFC0

    def test_literal_integer(self):
        (directive,) = parse_statements(tokenize(".8byte 0x10"))
        assert resolver_with().resolve_literal(directive) == 16

    def test_literal_label(self):
        (directive,) = parse_statements(tokenize(".8byte data"))
        assert resolver_with(data=24).resolve_literal(directive) == 24

    def test_literal_undefined_label(self):
        (directive,) = parse_statements(tokenize(".8byte data"))
        with pytest.raises(UndefinedSymbolError):
            resolver_with().resolve_literal(directive)

    @pytest.mark.parametrize("literal, value", [
        ("0xFFFFFFFFFFFFFFFF", 2**64 - 1),
        ("-9223372036854775808", -(2**63)),
    ])
    def test_literal_limits_accepted(self, literal, value):
        (directive,) = parse_statements(tokenize(f".8byte {literal}"))
        assert resolver_with().resolve_literal(directive) == value

    @pytest.mark.parametrize("literal", [
        "0x10000000000000005",
        "18446744073709551616",
        "-9223372036854775809",
        "-18446744073709551617",
    ])
    def test_literal_too_wide(self, literal):
        (directive,) = parse_statements(tokenize(f".8byte {literal}"))
        with pytest.raises(ImmediateRangeError) as exc_info:
            resolver_with().resolve_literal(directive)
        assert exc_info.value.value == int(literal, 0)
        assert ".8byte immediate out of range" in str(exc_info.value)
