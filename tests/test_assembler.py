# =============================================================================
# test_assembler.py - Full Assembler Integration Tests
# =============================================================================
# End-to-end tests for the complete two-pass assembler.
#
# Test coverage includes:
#   - Reference scenarios (add, cmp, b, b.eq, ldur range, .8byte label)
#   - All three front ends: raw source, token stream, line-oriented
#   - Bytes written before an error stay written
#   - Symbol table access and reporting
#   - Configuration (duplicate labels, filename, environment)
# =============================================================================

import io
import logging

import pytest

from a64asm import Assembler, AssemblerConfig, assemble_source, assemble_tokens
from a64asm.errors import (
    A64Error,
    DuplicateSymbolError,
    ImmediateRangeError,
    OperandError,
    UndefinedSymbolError,
    UnknownInstructionError,
)
from a64asm.lexer import tokenize


# =============================================================================
# Reference Scenarios
# =============================================================================

class TestScenarios:
    """The reference programs and their exact bytes."""

    def test_add(self):
        assert assemble_source("add x0, x1, x2") == bytes([0x20, 0x60, 0x22, 0x8B])

    def test_cmp_is_subtract_with_discarded_result(self):
        code = assemble_source("cmp x3, x4")
        assert code == (0xEB24607F).to_bytes(4, "little")
        assert code[0] & 0x1F == 31

    def test_forward_branch(self):
        code = assemble_source("b target\nadd x0, x0, x0\ntarget:\n")
        assert code[:4] == bytes([0x02, 0x00, 0x00, 0x14])

    def test_conditional_branch_backwards(self):
        source = """
        loop:
            add x0, x0, x1
            sub x2, x2, x3
            b.eq loop
        """
        code = assemble_source(source)
        word = int.from_bytes(code[8:12], "little")
        assert (word >> 5) & (2**19 - 1) == (-2) % 2**19
        assert word & 0xF == 0
        assert word == 0x54FFFFC0

    def test_ldur_offset_out_of_range(self):
        with pytest.raises(ImmediateRangeError) as exc_info:
            assemble_source("ldur x0, [x1, #256]")
        assert exc_info.value.value == 256

    def test_quad_with_forward_label(self):
        code = assemble_source(".8byte data\nadd x0, x1, x2\ndata:\n")
        assert code[:8] == (12).to_bytes(8, "little")
        assert code[8:] == bytes([0x20, 0x60, 0x22, 0x8B])


# =============================================================================
# Full Pipeline
# =============================================================================

class TestFullPipeline:
    """Programs assembled through each front end."""

    PROGRAM = """
    ; sum words until the counter hits zero
    start:
        ldur x1, [x0, #0]
        add x2, x2, x1
        sub x3, x3, x4
        cmp x3, xzr
        b.ne start
        ldr x5, 8
        br x30
    value:
        .8byte -1
    """

    def test_output_length(self):
        assert len(assemble_source(self.PROGRAM)) == 7 * 4 + 8

    def test_output_is_little_endian_words(self):
        code = assemble_source(self.PROGRAM)
        words = [int.from_bytes(code[i:i + 4], "little") for i in range(0, 28, 4)]
        assert words[0] == 0xF8400001
        assert words[3] == 0xEB3F607F
        assert words[4] == 0x54FFFF81
        assert words[6] == 0xD61F03C0
        assert code[28:] == b"\xff" * 8

    def test_ldr_with_label_rejected(self):
        """Only b and b.<cond> take label operands."""
        with pytest.raises(A64Error):
            assemble_source("ldr x5, value\nvalue:\n")

    def test_label_same_offset_before_and_after_definition(self):
        """Pass one finishes before pass two, so both references agree."""
        code = assemble_source(".8byte mid\nmid:\n.8byte mid\n")
        assert code == (8).to_bytes(8, "little") * 2

    def test_branch_distances_around_definition(self):
        code = assemble_source("b mid\nmid:\nb mid\n")
        assert code[:4] == (0x14000001).to_bytes(4, "little")
        assert code[4:] == (0x14000000).to_bytes(4, "little")

    def test_empty_program(self):
        assert assemble_source("") == b""
        assert assemble_source("; nothing\n\n") == b""

    def test_token_text(self):
        text = "ID b\nDOTID .ne\nID loop\nNEWLINE\nLABEL loop:\nNEWLINE\n"
        code = Assembler().assemble_token_text(text)
        assert code == (0x54000021).to_bytes(4, "little")

    def test_token_text_sp(self):
        text = "ID ldur REG x0 COMMA , LBRACK [ ID sp COMMA , INT 8 RBRACK ] NEWLINE"
        assert Assembler().assemble_token_text(text) == (0xF84083E0).to_bytes(4, "little")

    def test_assemble_tokens(self):
        assert assemble_tokens(tokenize("br x3")) == (0xD61F0060).to_bytes(4, "little")

    def test_lines(self):
        code = Assembler().assemble_lines("add x0, x1, x2\nb 8 ; skip\n")
        assert code == bytes([0x20, 0x60, 0x22, 0x8B, 0x02, 0x00, 0x00, 0x14])

    def test_repeated_use_starts_fresh(self):
        asm = Assembler()
        asm.assemble_source("first:\nbr x1\n")
        asm.assemble_source("second:\nbr x2\n")
        assert asm.get_symbols() == {"second": 0}
        assert asm.get_code() == (0xD61F0040).to_bytes(4, "little")


# =============================================================================
# Error Behaviour
# =============================================================================

class TestErrors:
    """Errors stop assembly; earlier bytes stay emitted."""

    def test_undefined_label(self):
        with pytest.raises(UndefinedSymbolError) as exc_info:
            assemble_source("b nowhere\n", filename="prog.s")
        assert str(exc_info.value).startswith("prog.s:1:3:")

    def test_unknown_instruction(self):
        with pytest.raises(UnknownInstructionError):
            assemble_source("nop\n")

    def test_partial_output_on_stream(self):
        stream = io.BytesIO()
        asm = Assembler(stream=stream)
        with pytest.raises(UndefinedSymbolError):
            asm.assemble_source("add x0, x1, x2\nb.eq nowhere\nbr x1\n")
        assert stream.getvalue() == bytes([0x20, 0x60, 0x22, 0x8B])
        assert asm.get_code() == stream.getvalue()

    def test_pass_one_error_emits_nothing(self):
        stream = io.BytesIO()
        with pytest.raises(A64Error):
            Assembler(stream=stream).assemble_source("add x0, x1, x2\n.word 1\n")
        assert stream.getvalue() == b""

    def test_wide_literal_out_of_range(self):
        stream = io.BytesIO()
        with pytest.raises(ImmediateRangeError):
            Assembler(stream=stream).assemble_source("br x1\n.8byte 0x10000000000000005\n")
        assert stream.getvalue() == (0xD61F0020).to_bytes(4, "little")

    def test_missing_operand_in_token_stream(self):
        with pytest.raises(OperandError):
            Assembler().assemble_token_text("ID add REG x0 COMMA , REG x1 NEWLINE")

    def test_partial_output_lines(self):
        stream = io.BytesIO()
        with pytest.raises(A64Error):
            Assembler(stream=stream).assemble_lines("br x1\nbr x2\nnot valid\nbr x3\n")
        assert len(stream.getvalue()) == 8


# =============================================================================
# Symbols and Configuration
# =============================================================================

class TestSymbolsAndConfig:
    """Symbol access and configuration options."""

    SOURCE = "loop:\nbr x1\ndone:\n.8byte loop\nend:\n"

    def test_get_symbols(self):
        asm = Assembler()
        asm.assemble_source(self.SOURCE)
        assert asm.get_symbols() == {"loop": 0, "done": 4, "end": 12}

    def test_symbol_report(self):
        asm = Assembler()
        asm.assemble_source(self.SOURCE)
        assert asm.get_symbol_report() == "loop 0\ndone 4\nend 12\n"

    def test_duplicate_last_wins(self):
        code = assemble_source("x:\nbr x1\nx:\nb x\n")
        assert code[4:] == (0x14000000).to_bytes(4, "little")

    def test_duplicate_rejected(self):
        asm = Assembler(AssemblerConfig(reject_duplicate_labels=True))
        with pytest.raises(DuplicateSymbolError):
            asm.assemble_source("x:\nbr x1\nx:\n")

    def test_report_symbols_logs(self, caplog):
        asm = Assembler(AssemblerConfig(report_symbols=True))
        with caplog.at_level(logging.INFO, logger="a64asm.assembler"):
            asm.assemble_source(self.SOURCE)
        assert "done 4" in caplog.messages

    def test_config_defaults(self):
        config = AssemblerConfig()
        assert config.reject_duplicate_labels is False
        assert config.report_symbols is False
        assert config.filename == "<input>"

    def test_config_from_env(self, monkeypatch):
        monkeypatch.setenv("A64ASM_REJECT_DUPLICATES", "yes")
        monkeypatch.setenv("A64ASM_REPORT_SYMBOLS", "0")
        config = AssemblerConfig.from_env()
        assert config.reject_duplicate_labels is True
        assert config.report_symbols is False

    def test_config_from_empty_env(self, monkeypatch):
        monkeypatch.delenv("A64ASM_REJECT_DUPLICATES", raising=False)
        monkeypatch.delenv("A64ASM_REPORT_SYMBOLS", raising=False)
        assert AssemblerConfig.from_env() == AssemblerConfig()
