"""Tests for conversion context construction."""

import pytest

from radix_stream.character.alphabet import AlphabetTable, MappedSymbols, NumericTable
from radix_stream.conversion.negotiation import ChunkSizes
from radix_stream.shared.config import (
    BASE64,
    CaseMode,
    ConverterConfig,
    InvalidCharAction,
    SideConfig,
)
from radix_stream.shared.errors import ConfigValidationError
from radix_stream.stream.context import ConversionContext


class TestConversionContextCreate:
    """Test ConversionContext.create."""

    def test_sizes_and_tables(self):
        context = ConversionContext.create(2, 16)

        assert context.sizes == ChunkSizes(reads=4, writes=1)
        assert context.read_size() == 4
        assert context.write_size() == 1
        assert context.from_radix == 2
        assert context.to_radix == 16
        assert isinstance(context.source, AlphabetTable)
        assert context.policy.action is InvalidCharAction.SKIP

    def test_numeric_source(self):
        context = ConversionContext.create(256, 16, from_numeric=True)

        assert isinstance(context.source, NumericTable)
        assert context.read_size() == 1
        assert context.write_size() == 2
        assert context.zero_char() == "0"

    def test_numeric_target_zero_char(self):
        context = ConversionContext.create(16, 256, to_numeric=True)
        assert context.zero_char() == 0

    def test_zero_char_follows_output_folding(self):
        context = ConversionContext.create(
            10, 4, to_alphabet="acgt", to_case=CaseMode.FORCE_UPPER
        )
        assert context.zero_char() == "A"

    def test_auto_case_resolution(self):
        context = ConversionContext.create(16, 10)

        assert context.source_symbols == MappedSymbols("0123456789ABCDEF", CaseMode.FORCE_UPPER)
        assert context.target_symbols.case is CaseMode.PRESERVE

    def test_case_sensitive_alphabet_preserved(self):
        context = ConversionContext.create(64, 2, from_alphabet=BASE64)

        assert context.source_symbols.case is CaseMode.PRESERVE
        assert context.source.char_to_digit("a") == 26
        assert context.source.char_to_digit("A") == 0

    def test_invalid_radix(self):
        with pytest.raises(ConfigValidationError) as exc_info:
            ConversionContext.create(1, 16)
        assert exc_info.value.field_name == "source"

        with pytest.raises(ConfigValidationError) as exc_info:
            ConversionContext.create(16, 0)
        assert exc_info.value.field_name == "target"

    def test_alphabet_too_small(self):
        with pytest.raises(ConfigValidationError, match="needs at least 8"):
            ConversionContext.create(8, 2, from_alphabet="0123")

    def test_alphabet_collapsing_after_folding(self):
        """Test that forcing case on a case-sensitive alphabet fails at construction."""
        with pytest.raises(ConfigValidationError) as exc_info:
            ConversionContext.create(
                64, 2, from_alphabet=BASE64, from_case=CaseMode.FORCE_LOWER
            )
        assert exc_info.value.field_name == "source"
        assert exc_info.value.suggestions

    def test_numeric_with_case_flag(self):
        with pytest.raises(ConfigValidationError, match="does not take a case mode"):
            ConversionContext.create(256, 16, from_case=CaseMode.FORCE_UPPER, from_numeric=True)


class TestConversionContextFromConfig:
    """Test ConversionContext.from_config."""

    def test_from_preset(self):
        context = ConversionContext.from_config(ConverterConfig.bytes_to_hex())

        assert context.config.name == "bytes_to_hex"
        assert context.sizes == ChunkSizes(reads=1, writes=2)
        assert context.target.digit_to_char(10) == "a"

    def test_target_collapsing_reports_target(self):
        config = ConverterConfig(
            source=SideConfig(radix=10),
            target=SideConfig(radix=64, alphabet=BASE64, case=CaseMode.FORCE_UPPER),
        )
        with pytest.raises(ConfigValidationError) as exc_info:
            ConversionContext.from_config(config)
        assert exc_info.value.field_name == "target"

    def test_context_is_immutable(self):
        context = ConversionContext.create(10, 16)
        with pytest.raises(AttributeError):
            context.sizes = ChunkSizes(1, 1)
