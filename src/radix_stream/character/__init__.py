"""Character layer for radix stream conversion.

This module maps source characters to digits and digits to destination
characters, and decides what happens to characters outside the source alphabet.
"""

from .alphabet import (
    AlphabetTable,
    MappedSymbols,
    NumericSymbols,
    NumericTable,
    SymbolMode,
    SymbolTable,
    build_table,
    fold_case,
    resolve_case,
    symbol_width,
    symbols_for_side,
)
from .policy import (
    InvalidCharPolicy,
    OutcomeKind,
    PolicyOutcome,
)

__all__ = [
    "AlphabetTable",
    "MappedSymbols",
    "NumericSymbols",
    "NumericTable",
    "SymbolMode",
    "SymbolTable",
    "build_table",
    "fold_case",
    "resolve_case",
    "symbol_width",
    "symbols_for_side",
    "InvalidCharPolicy",
    "OutcomeKind",
    "PolicyOutcome",
]
