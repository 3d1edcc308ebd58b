"""Alphabet tables mapping characters to digits and back.

A side of a conversion is either alphabet-mapped (characters looked up in an
alphabet after case folding) or numeric (digits carried as raw integers). The
two are modelled as distinct symbol modes so a numeric side can never carry a
case-folding setting.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from ..shared.config import CaseMode, SideConfig
from ..shared.errors import UnmappedCharacterError

# Alphabets whose characters all fall below this code point use a dense table
DENSE_TABLE_SIZE = 256
BITS_PER_BYTE = 8


def fold_case(character: str, mode: CaseMode) -> str:
    """Apply ``mode`` to a single character.

    Characters whose folded form is not a single character (such as the German
    sharp s, which uppercases to two letters) are left unchanged.
    """
    if mode is CaseMode.FORCE_UPPER:
        folded = character.upper()
    elif mode is CaseMode.FORCE_LOWER:
        folded = character.lower()
    else:
        return character
    return folded if len(folded) == 1 else character


def _is_injective(alphabet: str, mode: CaseMode) -> bool:
    return len({fold_case(char, mode) for char in alphabet}) == len(alphabet)


def resolve_case(alphabet: str, mode: CaseMode, decoding: bool) -> CaseMode:
    """Resolve ``CaseMode.AUTO`` for one side.

    The decoding side folds to uppercase whenever that keeps the alphabet
    distinct, so ``ff`` and ``FF`` read the same; otherwise case carries
    information and is preserved. The encoding side renders the alphabet as
    given.
    """
    if mode is not CaseMode.AUTO:
        return mode
    if decoding and _is_injective(alphabet, CaseMode.FORCE_UPPER):
        return CaseMode.FORCE_UPPER
    return CaseMode.PRESERVE


def symbol_width(radix: int) -> int:
    """Bytes needed to carry one numeric digit of ``radix`` on a byte stream."""
    return max(1, -(-(radix - 1).bit_length() // BITS_PER_BYTE))


@dataclass(frozen=True)
class MappedSymbols:
    """Digits are characters of ``alphabet`` folded with ``case``."""

    alphabet: str
    case: CaseMode = CaseMode.PRESERVE


@dataclass(frozen=True)
class NumericSymbols:
    """Digits are raw integers carried in ``width`` big-endian bytes."""

    width: int = 1


SymbolMode = Union[MappedSymbols, NumericSymbols]


class AlphabetTable:
    """Bidirectional mapping between digit indices and alphabet characters.

    Lookups go through a dense list indexed by code point when every alphabet
    character is a byte-sized code point, and through a dictionary otherwise.

    Examples:
        >>> table = AlphabetTable(16, MappedSymbols("0123456789ABCDEF", CaseMode.FORCE_UPPER))
        >>> table.char_to_digit("f")
        15
        >>> table.digit_to_char(10)
        'A'
    """

    def __init__(self, radix: int, symbols: MappedSymbols) -> None:
        """Build the lookup tables.

        Args:
            radix: Number of digits; the first ``radix`` alphabet characters are used
            symbols: Alphabet and resolved case mode

        Raises:
            ValueError: If the alphabet is too short or not distinct after folding
        """
        if symbols.case is CaseMode.AUTO:
            raise ValueError("case mode must be resolved before building a table")
        if len(symbols.alphabet) < radix:
            raise ValueError(
                f"alphabet supplies {len(symbols.alphabet)} characters, "
                f"radix {radix} needs at least {radix}"
            )

        self.radix = radix
        self.case = symbols.case
        self._index_to_char: List[str] = [
            fold_case(char, self.case) for char in symbols.alphabet[:radix]
        ]
        self.alphabet = "".join(self._index_to_char)

        distinct = len(set(self._index_to_char))
        if distinct < radix:
            raise ValueError(
                f"alphabet has {distinct} distinct characters after case folding, "
                f"radix {radix} needs {radix}"
            )

        self._dense: Optional[List[Optional[int]]] = None
        self._sparse: Dict[str, int] = {}
        if all(ord(char) < DENSE_TABLE_SIZE for char in self._index_to_char):
            self._dense = [None] * DENSE_TABLE_SIZE
            for digit, char in enumerate(self._index_to_char):
                self._dense[ord(char)] = digit
        else:
            self._sparse = {char: digit for digit, char in enumerate(self._index_to_char)}

    @property
    def numeric(self) -> bool:
        return False

    def char_to_digit(self, character: Any) -> int:
        """Map a source character to its digit.

        Raises:
            UnmappedCharacterError: If the folded character is not in the alphabet
        """
        if not isinstance(character, str) or len(character) != 1:
            raise UnmappedCharacterError(character)
        folded = fold_case(character, self.case)

        digit: Optional[int]
        if self._dense is not None:
            code = ord(folded)
            digit = self._dense[code] if code < DENSE_TABLE_SIZE else None
        else:
            digit = self._sparse.get(folded)

        if digit is None:
            raise UnmappedCharacterError(character)
        return digit

    def digit_to_char(self, digit: int) -> str:
        """Map a digit in [0, radix) to its character."""
        return self._index_to_char[digit]

    def zero_char(self) -> str:
        """Character for digit 0, used to pad rendered chunks."""
        return self._index_to_char[0]

    def __contains__(self, character: object) -> bool:
        try:
            self.char_to_digit(character)
        except UnmappedCharacterError:
            return False
        return True

    def __repr__(self) -> str:
        return f"AlphabetTable(radix={self.radix}, case={self.case.name})"


class NumericTable:
    """Identity mapping for numeric mode: symbols are the digit values themselves."""

    def __init__(self, radix: int, symbols: Optional[NumericSymbols] = None) -> None:
        self.radix = radix
        self.width = symbols.width if symbols else symbol_width(radix)

    @property
    def numeric(self) -> bool:
        return True

    def char_to_digit(self, symbol: Any) -> int:
        """Accept an integer in [0, radix).

        Raises:
            UnmappedCharacterError: For values out of range or non-integers
        """
        if isinstance(symbol, bool) or not isinstance(symbol, int):
            raise UnmappedCharacterError(symbol)
        if not 0 <= symbol < self.radix:
            raise UnmappedCharacterError(symbol)
        return symbol

    def digit_to_char(self, digit: int) -> int:
        return digit

    def zero_char(self) -> int:
        return 0

    def pack(self, digits: List[int]) -> bytes:
        """Serialize digits as fixed-width big-endian integers."""
        return b"".join(digit.to_bytes(self.width, "big") for digit in digits)

    def unpack(self, data: bytes) -> List[int]:
        """Parse fixed-width big-endian integers; trailing partial bytes are ignored."""
        width = self.width
        usable = len(data) - len(data) % width
        return [
            int.from_bytes(data[offset:offset + width], "big")
            for offset in range(0, usable, width)
        ]

    def __repr__(self) -> str:
        return f"NumericTable(radix={self.radix}, width={self.width})"


SymbolTable = Union[AlphabetTable, NumericTable]


def symbols_for_side(side: SideConfig, decoding: bool) -> SymbolMode:
    """Turn a side configuration into its symbol mode, resolving ``AUTO`` case."""
    if side.numeric:
        return NumericSymbols(width=symbol_width(side.radix))
    alphabet = side.resolved_alphabet()
    return MappedSymbols(alphabet, resolve_case(alphabet, side.case, decoding))


def build_table(radix: int, symbols: SymbolMode) -> SymbolTable:
    """Create the lookup table for a symbol mode."""
    if isinstance(symbols, NumericSymbols):
        return NumericTable(radix, symbols)
    return AlphabetTable(radix, symbols)
