"""Tests for the converter API."""

import io
from unittest.mock import MagicMock

import pytest

from radix_stream.api import (
    RadixConverter,
    convert,
    convert_file,
    convert_string,
)
from radix_stream.shared.config import (
    BYTE_ALPHABET,
    ConverterConfig,
    InvalidCharAction,
    SideConfig,
)
from radix_stream.shared.errors import (
    ConfigValidationError,
    StreamAbortedError,
    UnmappedCharacterError,
)
from radix_stream.shared.result import DiagnosticSeverity


def stream_convert(config, data, **kwargs):
    source = io.BytesIO(data)
    sink = io.BytesIO()
    result = RadixConverter(config).convert_stream(source, sink, **kwargs)
    return result, sink.getvalue()


class TestInMemoryConversion:
    """Test RadixConverter.convert."""

    def test_text_input(self):
        result = RadixConverter(ConverterConfig.binary_to_hex()).convert("11111010")

        assert result.success is True
        assert result.aborted is False
        assert result.output == "FA"
        assert result.metrics.chunks_read == 2
        assert result.metrics.processing_time_ms >= 0

    def test_bytes_input_decoded_for_mapped_source(self):
        result = RadixConverter(ConverterConfig.binary_to_hex()).convert(b"1010")
        assert result.output == "A"

    def test_numeric_source_from_bytes(self):
        result = RadixConverter(ConverterConfig.bytes_to_hex()).convert(b"AB")
        assert result.output == "4142"

    def test_numeric_source_from_digit_values(self):
        result = RadixConverter(ConverterConfig.bytes_to_hex()).convert([0, 255])
        assert result.output == "00ff"

    def test_numeric_target_output_is_digit_list(self):
        result = RadixConverter(ConverterConfig.hex_to_bytes()).convert("4142")
        assert result.output == [0x41, 0x42]

    def test_numeric_partial_symbol_reported(self):
        config = ConverterConfig(
            source=SideConfig(radix=65536, numeric=True),
            target=SideConfig(radix=16),
        )
        result = RadixConverter(config).convert(b"\x01\x00\x02")

        assert result.output == "0100"
        assert result.warning_count == 1
        assert "incomplete numeric symbol" in result.diagnostics[0].message

    def test_mapped_source_rejects_digit_lists(self):
        with pytest.raises(TypeError, match="expects text or bytes"):
            RadixConverter(ConverterConfig.binary_to_hex()).convert([1, 0])

    def test_fail_fast_returns_aborted_result(self):
        config = ConverterConfig.decimal_to_hex().override(
            invalid_action=InvalidCharAction.FAIL_FAST
        )
        result = RadixConverter(config).convert("25x5")

        assert result.success is False
        assert result.aborted is True
        assert isinstance(result.error, StreamAbortedError)
        assert result.output == "19"
        assert result.diagnostics[-1].severity is DiagnosticSeverity.ERROR

    def test_propagate_raises(self):
        config = ConverterConfig.hex_to_binary().override(
            invalid_action=InvalidCharAction.PROPAGATE
        )
        with pytest.raises(UnmappedCharacterError) as exc_info:
            RadixConverter(config).convert("AZ")
        assert exc_info.value.position == 1

    def test_converter_is_reusable(self):
        converter = RadixConverter(ConverterConfig.hex_to_binary())

        assert converter.convert("F").output == "1111"
        assert converter.convert("1").output == "0001"

    def test_invalid_configuration(self):
        config = ConverterConfig(source=SideConfig(radix=256, alphabet=BYTE_ALPHABET[:255] + "\x00"))
        with pytest.raises(ConfigValidationError):
            RadixConverter(config)


class TestStreamConversion:
    """Test RadixConverter.convert_stream."""

    def test_stream_with_trailing_newline(self):
        result, output = stream_convert(ConverterConfig.binary_to_hex(), b"11111010")

        assert output == b"FA\n"
        assert result.success is True
        assert result.output == ""
        assert result.metrics.symbols_read == 8

    def test_chunks_span_read_blocks(self):
        """Chunks are assembled across buffer boundaries."""
        config = ConverterConfig.binary_to_hex().override(buffer_size=3)
        result, output = stream_convert(config, b"111110100001")

        assert output == b"FA1\n"
        assert result.metrics.chunks_read == 3

    def test_short_final_chunk(self):
        _, output = stream_convert(ConverterConfig.binary_to_hex(), b"111111")
        assert output == b"F3\n"

    def test_numeric_source_stream(self):
        result, output = stream_convert(ConverterConfig.bytes_to_hex(), b"AB\x00")

        assert output == b"414200\n"
        assert result.metrics.chunks_read == 3

    def test_numeric_target_has_no_newline(self):
        _, output = stream_convert(ConverterConfig.hex_to_bytes(), b"414243")
        assert output == b"ABC"

    def test_numeric_target_ignores_trailing_newline_flag(self):
        config = ConverterConfig.hex_to_bytes().override(trailing_newline=True)
        _, output = stream_convert(config, b"4142")
        assert output == b"AB"

    def test_no_trailing_newline(self):
        config = ConverterConfig.binary_to_hex().override(trailing_newline=False)
        _, output = stream_convert(config, b"1010")
        assert output == b"A"

    def test_empty_stream(self):
        result, output = stream_convert(ConverterConfig.binary_to_hex(), b"")

        assert output == b"\n"
        assert result.metrics.chunks_read == 0

    def test_newlines_in_input_are_skipped(self):
        _, output = stream_convert(ConverterConfig.hex_to_binary(), b"A\n")
        assert output == b"1010\n"

    def test_fail_fast_stops_output(self):
        config = ConverterConfig.hex_to_binary().override(
            invalid_action=InvalidCharAction.FAIL_FAST
        )
        result, output = stream_convert(config, b"FGF")

        assert result.aborted is True
        assert output == b"1111"

    def test_multibyte_encoding(self):
        config = ConverterConfig(
            source=SideConfig(radix=4, alphabet="αβγδ"),
            target=SideConfig(radix=16),
            encoding="utf-8",
            buffer_size=1,
        )
        _, output = stream_convert(config, "δδβ".encode("utf-8"))
        assert output == b"F1\n"

    def test_unencodable_target_alphabet(self):
        config = ConverterConfig(
            source=SideConfig(radix=16),
            target=SideConfig(radix=4, alphabet="αβγδ"),
        )
        with pytest.raises(ConfigValidationError) as exc_info:
            stream_convert(config, b"F")
        assert exc_info.value.field_name == "encoding"

    def test_progress_callback(self):
        callback = MagicMock(return_value=True)
        stream_convert(ConverterConfig.binary_to_hex(), b"111110101", progress_callback=callback)

        assert [call.args for call in callback.call_args_list] == [(1, 4), (2, 8), (3, 9)]

    def test_progress_callback_cancels(self):
        callback = MagicMock(return_value=False)
        result, output = stream_convert(
            ConverterConfig.binary_to_hex(), b"11111010", progress_callback=callback
        )

        assert output == b"F\n"
        assert callback.call_count == 1
        assert result.diagnostics[-1].severity is DiagnosticSeverity.INFO


class TestLevelOneFunctions:
    """Test module-level convenience functions."""

    def test_convert(self):
        assert convert("1010", ConverterConfig.binary_to_hex()).output == "A"

    def test_convert_default_config(self):
        result = convert("15")
        assert result.output == "F"

    def test_convert_string_scenarios(self):
        # one hex symbol per chunk, two decimal digits out
        assert convert_string("FG", 16, 10, invalid_action=InvalidCharAction.ZERO) == "1500"
        assert convert_string("FG", 16, 10, invalid_action=InvalidCharAction.SKIP) == "15"

    def test_convert_string_custom_alphabets(self):
        assert convert_string("tt", 4, 16, from_alphabet="acgt") == "F"

    def test_convert_string_raises_on_abort(self):
        with pytest.raises(StreamAbortedError):
            convert_string("1x", 2, 16, invalid_action=InvalidCharAction.FAIL_FAST)

    def test_convert_string_invalid_radix(self):
        with pytest.raises(ConfigValidationError):
            convert_string("1", 1, 16)

    def test_convert_file(self, tmp_path):
        input_path = tmp_path / "in.bin"
        output_path = tmp_path / "out.txt"
        input_path.write_bytes(b"\x00\x10\xff")

        result = convert_file(input_path, output_path, ConverterConfig.bytes_to_hex())

        assert result.success is True
        assert output_path.read_bytes() == b"0010ff\n"
