"""
a64asm Configuration
====================

Assembler configuration. Values can come from:
- Default values (defined here)
- Keyword arguments when constructing AssemblerConfig
- Environment variables (AssemblerConfig.from_env)

The defaults reproduce the classic behaviour of the tool: a label that
is defined twice silently takes its last offset, and the symbol table
is not reported.
"""

from dataclasses import dataclass
import os


# Strings accepted as "true" in environment variables
TRUTHY_VALUES = frozenset({"1", "true", "yes", "on"})


def _env_flag(value: str) -> bool:
    return value.strip().lower() in TRUTHY_VALUES


@dataclass
class AssemblerConfig:
    """
    Configuration for one assembler run.

    Attributes:
        reject_duplicate_labels: Raise DuplicateSymbolError when a label is
            defined twice instead of keeping the last offset (default: False)
        report_symbols: Log the symbol table at INFO level once pass one
            completes (default: False)
        filename: Name used in error locations (default: "<input>")
    """

    # ═══════════════════════════════════════════════════════════════════════════
    # SYMBOL HANDLING
    # ═══════════════════════════════════════════════════════════════════════════

    reject_duplicate_labels: bool = False
    report_symbols: bool = False

    # ═══════════════════════════════════════════════════════════════════════════
    # DIAGNOSTICS
    # ═══════════════════════════════════════════════════════════════════════════

    filename: str = "<input>"

    # ═══════════════════════════════════════════════════════════════════════════
    # FACTORY METHODS
    # ═══════════════════════════════════════════════════════════════════════════

    @classmethod
    def from_env(cls) -> "AssemblerConfig":
        """
        Create AssemblerConfig from environment variables.

        Environment variables (all optional):
            A64ASM_REJECT_DUPLICATES: Reject duplicate labels (1/true/yes/on)
            A64ASM_REPORT_SYMBOLS: Log the symbol table after pass one

        Returns:
            AssemblerConfig with values from environment variables
        """
        config = cls()

        if reject := os.environ.get("A64ASM_REJECT_DUPLICATES"):
            config.reject_duplicate_labels = _env_flag(reject)

        if report := os.environ.get("A64ASM_REPORT_SYMBOLS"):
            config.report_symbols = _env_flag(report)

        return config
