"""Tests for alphabet tables, case folding and numeric symbols."""

import pytest

from radix_stream.character.alphabet import (
    AlphabetTable,
    MappedSymbols,
    NumericSymbols,
    NumericTable,
    build_table,
    fold_case,
    resolve_case,
    symbol_width,
    symbols_for_side,
)
from radix_stream.shared.config import (
    BASE64,
    BYTE_ALPHABET,
    DEFAULT_ALPHABET,
    CaseMode,
    SideConfig,
)
from radix_stream.shared.errors import UnmappedCharacterError

HEX = DEFAULT_ALPHABET[:16]


class TestCaseFolding:
    """Test fold_case and AUTO resolution."""

    def test_fold_modes(self):
        assert fold_case("a", CaseMode.FORCE_UPPER) == "A"
        assert fold_case("A", CaseMode.FORCE_LOWER) == "a"
        assert fold_case("a", CaseMode.PRESERVE) == "a"
        assert fold_case("7", CaseMode.FORCE_UPPER) == "7"

    def test_multi_character_fold_left_unchanged(self):
        """Test that characters folding to two characters are kept as is."""
        assert fold_case("ß", CaseMode.FORCE_UPPER) == "ß"

    def test_auto_decoding_folds_when_distinct(self):
        assert resolve_case(HEX, CaseMode.AUTO, decoding=True) is CaseMode.FORCE_UPPER

    def test_auto_decoding_preserves_case_sensitive_alphabet(self):
        assert resolve_case(BASE64, CaseMode.AUTO, decoding=True) is CaseMode.PRESERVE

    def test_auto_encoding_preserves(self):
        assert resolve_case(HEX, CaseMode.AUTO, decoding=False) is CaseMode.PRESERVE

    def test_explicit_mode_kept(self):
        assert resolve_case(HEX, CaseMode.FORCE_LOWER, decoding=True) is CaseMode.FORCE_LOWER


class TestAlphabetTable:
    """Test AlphabetTable lookups."""

    def test_char_to_digit(self):
        table = AlphabetTable(16, MappedSymbols(HEX, CaseMode.FORCE_UPPER))

        assert table.char_to_digit("0") == 0
        assert table.char_to_digit("F") == 15
        assert table.char_to_digit("f") == 15
        assert table.numeric is False

    def test_unmapped_character(self):
        table = AlphabetTable(16, MappedSymbols(HEX, CaseMode.FORCE_UPPER))

        with pytest.raises(UnmappedCharacterError) as exc_info:
            table.char_to_digit("G")
        assert exc_info.value.character == "G"
        assert "G" not in table
        assert "a" in table

    def test_non_character_input_is_unmapped(self):
        table = AlphabetTable(16, MappedSymbols(HEX, CaseMode.PRESERVE))

        for symbol in ("AB", "", 10, None):
            with pytest.raises(UnmappedCharacterError):
                table.char_to_digit(symbol)

    def test_preserve_is_case_sensitive(self):
        table = AlphabetTable(16, MappedSymbols(HEX, CaseMode.PRESERVE))
        with pytest.raises(UnmappedCharacterError):
            table.char_to_digit("a")

    def test_digit_to_char_with_output_folding(self):
        table = AlphabetTable(16, MappedSymbols(HEX, CaseMode.FORCE_LOWER))

        assert table.digit_to_char(10) == "a"
        assert table.alphabet == "0123456789abcdef"
        assert table.zero_char() == "0"

    def test_zero_char_is_alphabet_digit_zero(self):
        table = AlphabetTable(4, MappedSymbols("acgt", CaseMode.FORCE_UPPER))
        assert table.zero_char() == "A"
        assert table.digit_to_char(3) == "T"

    def test_bijection(self):
        """Test digit -> char -> digit for every digit."""
        table = AlphabetTable(64, MappedSymbols(BASE64, CaseMode.PRESERVE))
        for digit in range(64):
            assert table.char_to_digit(table.digit_to_char(digit)) == digit

    def test_byte_alphabet_dense_table(self):
        table = AlphabetTable(256, MappedSymbols(BYTE_ALPHABET, CaseMode.PRESERVE))

        assert table.char_to_digit("\x00") == 0
        assert table.char_to_digit("A") == 65
        assert table.char_to_digit("\xff") == 255
        with pytest.raises(UnmappedCharacterError):
            table.char_to_digit("Ā")

    def test_sparse_table_for_wide_characters(self):
        alphabet = "αβγδ"
        table = AlphabetTable(4, MappedSymbols(alphabet, CaseMode.PRESERVE))

        assert table.char_to_digit("γ") == 2
        with pytest.raises(UnmappedCharacterError):
            table.char_to_digit("a")

    def test_alphabet_collapsing_under_folding(self):
        """Test that folding a case-sensitive alphabet is rejected."""
        with pytest.raises(ValueError, match="distinct characters after case folding"):
            AlphabetTable(64, MappedSymbols(BASE64, CaseMode.FORCE_UPPER))

    def test_duplicate_characters(self):
        with pytest.raises(ValueError, match="distinct"):
            AlphabetTable(3, MappedSymbols("aab", CaseMode.PRESERVE))

    def test_alphabet_too_short(self):
        with pytest.raises(ValueError, match="needs at least 16"):
            AlphabetTable(16, MappedSymbols("0123", CaseMode.PRESERVE))

    def test_unresolved_auto_rejected(self):
        with pytest.raises(ValueError, match="must be resolved"):
            AlphabetTable(16, MappedSymbols(HEX, CaseMode.AUTO))


class TestNumericTable:
    """Test numeric digit mode."""

    def test_symbol_width(self):
        assert symbol_width(2) == 1
        assert symbol_width(256) == 1
        assert symbol_width(257) == 2
        assert symbol_width(65536) == 2
        assert symbol_width(65537) == 3
        assert symbol_width(2 ** 32) == 4

    def test_identity_mapping(self):
        table = NumericTable(256)

        assert table.char_to_digit(0x41) == 0x41
        assert table.digit_to_char(7) == 7
        assert table.zero_char() == 0
        assert table.numeric is True

    def test_out_of_range_values(self):
        table = NumericTable(16)
        for symbol in (16, -1, "A", True, 1.0):
            with pytest.raises(UnmappedCharacterError):
                table.char_to_digit(symbol)

    def test_pack_and_unpack(self):
        table = NumericTable(65536)

        assert table.width == 2
        assert table.pack([1, 0x0203]) == b"\x00\x01\x02\x03"
        assert table.unpack(b"\x00\x01\x02\x03") == [1, 0x0203]

    def test_unpack_ignores_partial_symbol(self):
        table = NumericTable(65536)
        assert table.unpack(b"\x00\x01\x02") == [1]


class TestSymbolModes:
    """Test side configuration to symbol mode translation."""

    def test_mapped_side(self):
        symbols = symbols_for_side(SideConfig(radix=16), decoding=True)
        assert symbols == MappedSymbols(HEX, CaseMode.FORCE_UPPER)

    def test_numeric_side(self):
        symbols = symbols_for_side(SideConfig(radix=1000, numeric=True), decoding=True)
        assert symbols == NumericSymbols(width=2)

    def test_build_table(self):
        assert isinstance(build_table(16, MappedSymbols(HEX, CaseMode.PRESERVE)), AlphabetTable)
        numeric = build_table(1000, NumericSymbols(width=2))
        assert isinstance(numeric, NumericTable)
        assert numeric.width == 2
