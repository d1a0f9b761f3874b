"""
Symbol Table
============

Pass one of the assembler: walks the statements once, advancing a
program counter (4 bytes per instruction, 8 per ``.8byte``) and recording
the byte offset of every label. Because the table is complete before
pass two starts, forward references resolve like backward ones.

By default a label defined twice keeps its last offset. With
``reject_duplicates=True`` the second definition raises
DuplicateSymbolError instead.
"""

import logging
from typing import Iterator, Optional

from a64asm.errors import DuplicateSymbolError, SourceLocation, UndefinedSymbolError
from a64asm.statements import LabelDef, Statement, parse_statements
from a64asm.tokens import Token


logger = logging.getLogger(__name__)


class SymbolTable:
    """
    Mapping from label name to byte offset from the start of the program.

    Attributes:
        reject_duplicates: Raise on a second definition of a label
    """

    def __init__(self, reject_duplicates: bool = False):
        self.reject_duplicates = reject_duplicates
        self._symbols: dict[str, int] = {}
        # Every definition in order, repeats included
        self._definitions: list[str] = []

    def __contains__(self, name: str) -> bool:
        return name in self._symbols

    def __len__(self) -> int:
        return len(self._symbols)

    def __iter__(self) -> Iterator[str]:
        return iter(self._symbols)

    def define(
        self,
        name: str,
        offset: int,
        location: Optional[SourceLocation] = None,
    ) -> None:
        """
        Record a label at the given offset.

        Raises:
            DuplicateSymbolError: If the label exists and duplicates are rejected
        """
        if name in self._symbols:
            previous = self._symbols[name]
            if self.reject_duplicates:
                raise DuplicateSymbolError(name, location, original_offset=previous)
            logger.debug(f"Label '{name}' redefined: {previous} -> {offset}")

        self._symbols[name] = offset
        self._definitions.append(name)
        logger.debug(f"Defined label '{name}' = {offset}")

    def lookup(self, name: str, location: Optional[SourceLocation] = None) -> int:
        """
        Return the offset of a label.

        Raises:
            UndefinedSymbolError: If the label was never defined
        """
        if name in self._symbols:
            return self._symbols[name]

        raise UndefinedSymbolError(
            name,
            location=location,
            similar_symbols=self._find_similar_symbols(name),
        )

    def as_dict(self) -> dict[str, int]:
        """Return a copy of the label to offset mapping."""
        return dict(self._symbols)

    @property
    def definitions(self) -> list[str]:
        """Label names in definition order (a redefined label appears twice)."""
        return list(self._definitions)

    def report(self) -> str:
        """
        Format the table as ``<label> <offset>`` lines in definition order.

        A redefined label is listed once per definition, each time with
        its final offset.
        """
        return "".join(f"{name} {self._symbols[name]}\n" for name in self._definitions)

    # =========================================================================
    # Similar Name Hints
    # =========================================================================

    def _find_similar_symbols(self, name: str) -> list[str]:
        """
        Find labels with similar names for error hints.

        Uses a simple edit distance heuristic.
        """
        name_lower = name.lower()
        similar = []

        for symbol in self._symbols:
            symbol_lower = symbol.lower()
            if (
                symbol_lower == name_lower or
                abs(len(symbol) - len(name)) <= 1 and
                _edit_distance(name_lower, symbol_lower) <= 2
            ):
                similar.append(symbol)

        return similar[:3]


def _edit_distance(s1: str, s2: str) -> int:
    """Levenshtein edit distance between two strings."""
    if len(s1) < len(s2):
        return _edit_distance(s2, s1)
    if not s2:
        return len(s1)

    previous_row = list(range(len(s2) + 1))
    for i, c1 in enumerate(s1):
        current_row = [i + 1]
        for j, c2 in enumerate(s2):
            insertions = previous_row[j + 1] + 1
            deletions = current_row[j] + 1
            substitutions = previous_row[j] + (c1 != c2)
            current_row.append(min(insertions, deletions, substitutions))
        previous_row = current_row

    return previous_row[-1]


# =============================================================================
# Pass One
# =============================================================================

def collect_symbols(
    statements: list[Statement],
    reject_duplicates: bool = False,
) -> SymbolTable:
    """
    Build the symbol table from grouped statements.

    Args:
        statements: Statements from parse_statements()
        reject_duplicates: Raise DuplicateSymbolError on a redefinition

    Returns:
        The completed symbol table
    """
    table = SymbolTable(reject_duplicates)
    offset = 0

    for stmt in statements:
        if isinstance(stmt, LabelDef):
            table.define(stmt.name, offset, stmt.location)
        offset += stmt.size

    logger.debug(f"Pass 1 complete: {len(table)} labels, {offset} bytes")
    return table


def build_symbol_table(tokens: list[Token], reject_duplicates: bool = False) -> SymbolTable:
    """
    Run pass one over a token sequence.

    Raises:
        AssemblySyntaxError: On malformed statements
        DirectiveError: On an unknown or malformed directive
        DuplicateSymbolError: On a redefinition when duplicates are rejected
    """
    return collect_symbols(parse_statements(tokens), reject_duplicates)
