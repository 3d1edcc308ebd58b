"""Converter API with progressive disclosure for radix stream conversion.

This module provides simple module-level functions for one-off conversions and
the configurable RadixConverter class, which drives a stream engine over
in-memory data or binary file-like objects.
"""

import codecs
import time
from pathlib import Path
from typing import BinaryIO, Callable, Iterator, List, Optional, Sequence, Union

from ..character.alphabet import NumericTable
from ..shared.config import ConverterConfig, InvalidCharAction, SideConfig
from ..shared.errors import ConfigValidationError, StreamAbortedError
from ..shared.logging import get_logger
from ..shared.result import (
    ConversionResult,
    DiagnosticEntry,
    DiagnosticSeverity,
    RenderedOutput,
)
from ..stream.context import ConversionContext
from ..stream.engine import StreamEngine

# Type definitions for input data
InputType = Union[str, bytes, bytearray, Sequence[int]]
ProgressCallback = Callable[[int, int], bool]

MS_PER_SECOND = 1000
NEWLINE = "\n"


class RadixConverter:
    """Configurable radix converter.

    A converter builds its conversion context once and creates a fresh stream
    engine for every conversion, so one instance can convert any number of
    inputs, one after another.

    Examples:
        In-memory conversion:
        >>> converter = RadixConverter(ConverterConfig.binary_to_hex())
        >>> converter.convert("11111010").output
        'FA'

        Streams:
        >>> with open("in.bin", "rb") as src, open("out.txt", "wb") as dst:
        ...     result = RadixConverter(ConverterConfig.bytes_to_hex()).convert_stream(src, dst)
    """

    def __init__(self, config: Optional[ConverterConfig] = None,
                 correlation_id: Optional[str] = None) -> None:
        """Initialize the converter.

        Args:
            config: Conversion configuration; defaults to decimal to hexadecimal
            correlation_id: Optional correlation ID for request tracking

        Raises:
            ConfigValidationError: If the configuration cannot build a context
        """
        self.config = config or ConverterConfig()
        self.correlation_id = correlation_id or self.config.correlation_id
        self.context = ConversionContext.from_config(self.config)
        self.logger = get_logger(__name__, self.correlation_id, "radix_converter")

        self.logger.debug(
            "Radix converter initialized",
            extra={
                "from_radix": self.context.from_radix,
                "to_radix": self.context.to_radix,
                "reads": self.context.read_size(),
                "writes": self.context.write_size(),
                "invalid_action": self.config.invalid_action.name,
            },
        )

    def create_engine(self) -> StreamEngine:
        """Create a fresh engine bound to this converter's context."""
        return StreamEngine(self.context, self.correlation_id)

    def convert(self, data: InputType) -> ConversionResult:
        """Convert in-memory data.

        Mapped sources accept text, or bytes decoded with the configured
        encoding. Numeric sources accept a sequence of digit values, or bytes
        split into fixed-width big-endian symbols. The output is text for
        mapped targets and a list of digit values for numeric targets; no
        trailing newline is added.

        Args:
            data: Source symbols

        Returns:
            ConversionResult; ``aborted`` is set when the fail-fast policy
            stopped the conversion

        Raises:
            UnmappedCharacterError: Under the propagate policy
        """
        start_time = time.perf_counter()
        engine = self.create_engine()
        diagnostics: List[DiagnosticEntry] = []
        symbols = self._symbols_from_data(data, diagnostics)

        pieces: List[RenderedOutput] = []
        error: Optional[StreamAbortedError] = None
        try:
            for rendered in engine.feed(symbols):
                pieces.append(rendered)
        except StreamAbortedError as e:
            error = e

        return self._build_result(
            engine, self._join(pieces), diagnostics, error, start_time
        )

    def convert_stream(
        self,
        source: BinaryIO,
        sink: BinaryIO,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> ConversionResult:
        """Convert a binary stream chunk by chunk.

        Bytes are read in blocks of ``buffer_size`` and handed to the engine
        in chunks of exactly ``read_size()`` symbols; only the final chunk may
        be shorter. Rendered chunks are written to ``sink`` as they are
        produced, so the returned result carries metrics and diagnostics but
        an empty ``output``.

        Args:
            source: Binary file-like object to read from
            sink: Binary file-like object to write to
            progress_callback: Called with ``(chunks_processed, symbols_read)``
                after each chunk; returning False stops the conversion

        Returns:
            ConversionResult for the stream

        Raises:
            ConfigValidationError: If the target alphabet cannot be encoded
            UnmappedCharacterError: Under the propagate policy
        """
        start_time = time.perf_counter()
        self._check_target_encoding()
        engine = self.create_engine()
        diagnostics: List[DiagnosticEntry] = []
        reads = engine.read_size()
        numeric_target = self.context.target.numeric

        self.logger.info(
            "Starting stream conversion",
            extra={"reads": reads, "writes": engine.write_size()},
        )

        error: Optional[StreamAbortedError] = None
        cancelled = False
        chunks = 0
        pending: Union[str, List[int]] = [] if self.context.source.numeric else ""
        try:
            for block in self._read_symbols(source, diagnostics):
                # pending never holds more than one short chunk between blocks
                pending = pending + block
                usable = len(pending) - len(pending) % reads
                for offset in range(0, usable, reads):
                    chunk = pending[offset:offset + reads]
                    self._write(sink, engine.process_chunk(chunk))
                    chunks += 1
                    if progress_callback and not progress_callback(
                            chunks, engine.metrics.symbols_read):
                        cancelled = True
                        break
                if cancelled:
                    break
                pending = pending[usable:]
            if pending and not cancelled:
                self._write(sink, engine.process_chunk(pending))
                chunks += 1
                if progress_callback:
                    progress_callback(chunks, engine.metrics.symbols_read)
        except StreamAbortedError as e:
            error = e

        if cancelled:
            self.logger.info("Stream conversion cancelled", extra={"chunks": chunks})
            diagnostics.append(DiagnosticEntry(
                severity=DiagnosticSeverity.INFO,
                message="Conversion cancelled by progress callback",
                component="radix_converter",
                position=engine.metrics.symbols_read,
                correlation_id=self.correlation_id,
            ))

        if error is None and not numeric_target and self.config.trailing_newline:
            sink.write(NEWLINE.encode(self.config.encoding))
        if hasattr(sink, "flush"):
            sink.flush()

        return self._build_result(
            engine, engine.empty_output(), diagnostics, error, start_time
        )

    def convert_file(
        self,
        input_path: Union[str, Path],
        output_path: Union[str, Path],
        progress_callback: Optional[ProgressCallback] = None,
    ) -> ConversionResult:
        """Convert ``input_path`` into ``output_path``."""
        with Path(input_path).open("rb") as source, Path(output_path).open("wb") as sink:
            return self.convert_stream(source, sink, progress_callback)

    # Input handling

    def _symbols_from_data(self, data: InputType,
                           diagnostics: List[DiagnosticEntry]) -> Union[str, List[int]]:
        source = self.context.source
        if isinstance(source, NumericTable):
            if isinstance(data, str):
                data = data.encode(self.config.encoding)
            if isinstance(data, (bytes, bytearray)):
                self._note_partial_symbol(len(data) % source.width, diagnostics)
                return source.unpack(bytes(data))
            return list(data)

        if isinstance(data, (bytes, bytearray)):
            return bytes(data).decode(self.config.encoding, errors="replace")
        if isinstance(data, str):
            return data
        raise TypeError(
            f"Alphabet-mapped source expects text or bytes, got {type(data).__name__}"
        )

    def _read_symbols(self, source: BinaryIO,
                      diagnostics: List[DiagnosticEntry]) -> Iterator[Union[str, List[int]]]:
        """Yield decoded blocks of source symbols from a binary stream."""
        buffer_size = self.config.buffer_size
        table = self.context.source

        if isinstance(table, NumericTable):
            remainder = b""
            while True:
                data = source.read(buffer_size)
                if not data:
                    break
                data = remainder + data
                usable = len(data) - len(data) % table.width
                remainder = data[usable:]
                yield table.unpack(data[:usable])
            self._note_partial_symbol(len(remainder), diagnostics)
            return

        decoder = codecs.getincrementaldecoder(self.config.encoding)(errors="replace")
        while True:
            data = source.read(buffer_size)
            if not data:
                break
            text = decoder.decode(data)
            if text:
                yield text
        tail = decoder.decode(b"", final=True)
        if tail:
            yield tail

    def _note_partial_symbol(self, leftover: int,
                             diagnostics: List[DiagnosticEntry]) -> None:
        if not leftover:
            return
        message = f"Ignored {leftover} trailing byte(s) of an incomplete numeric symbol"
        self.logger.warning(message)
        diagnostics.append(DiagnosticEntry(
            severity=DiagnosticSeverity.WARNING,
            message=message,
            component="radix_converter",
            details={"width": self.context.source.width, "leftover": leftover},
            correlation_id=self.correlation_id,
        ))

    # Output handling

    def _check_target_encoding(self) -> None:
        target = self.context.target
        if target.numeric:
            return
        try:
            target.alphabet.encode(self.config.encoding)
        except UnicodeEncodeError as e:
            raise ConfigValidationError(
                f"Target alphabet cannot be encoded as {self.config.encoding}",
                field_name="encoding",
                suggestions=["utf-8"],
            ) from e

    def _write(self, sink: BinaryIO, rendered: RenderedOutput) -> None:
        if not rendered:
            return
        target = self.context.target
        if isinstance(target, NumericTable):
            sink.write(target.pack(rendered))
        else:
            sink.write(rendered.encode(self.config.encoding))

    def _join(self, pieces: List[RenderedOutput]) -> RenderedOutput:
        if self.context.target.numeric:
            return [digit for piece in pieces for digit in piece]
        return "".join(pieces)

    def _build_result(
        self,
        engine: StreamEngine,
        output: RenderedOutput,
        diagnostics: List[DiagnosticEntry],
        error: Optional[StreamAbortedError],
        start_time: float,
    ) -> ConversionResult:
        metrics = engine.metrics
        metrics.processing_time_ms = (time.perf_counter() - start_time) * MS_PER_SECOND
        result = ConversionResult(
            output=output,
            success=error is None,
            aborted=error is not None,
            diagnostics=diagnostics + engine.diagnostics,
            metrics=metrics,
            error=error,
        )

        self.logger.info(
            "Conversion completed",
            extra={
                "success": result.success,
                "chunks_read": metrics.chunks_read,
                "invalid_symbols": metrics.invalid_symbols,
                "processing_time_ms": metrics.processing_time_ms,
            },
        )
        return result


def convert(data: InputType, config: Optional[ConverterConfig] = None,
            correlation_id: Optional[str] = None) -> ConversionResult:
    """Convert in-memory data with an optional configuration.

    Examples:
        >>> convert("1010", ConverterConfig.binary_to_hex()).output
        'A'
    """
    return RadixConverter(config, correlation_id).convert(data)


def convert_string(
    text: str,
    from_radix: int,
    to_radix: int,
    from_alphabet: Optional[str] = None,
    to_alphabet: Optional[str] = None,
    invalid_action: InvalidCharAction = InvalidCharAction.SKIP,
) -> str:
    """Convert text between two alphabet-mapped radices and return the text.

    Raises:
        ConfigValidationError: If either side is invalid
        StreamAbortedError: If the fail-fast policy stopped the conversion
        UnmappedCharacterError: Under the propagate policy

    Examples:
        >>> convert_string("FG", 16, 10, invalid_action=InvalidCharAction.ZERO)
        '1500'
    """
    try:
        source = SideConfig(from_radix, from_alphabet)
        target = SideConfig(to_radix, to_alphabet)
    except ValueError as e:
        raise ConfigValidationError(str(e), field_name="radix") from e

    config = ConverterConfig(source=source, target=target, invalid_action=invalid_action)
    result = RadixConverter(config).convert(text)
    if result.error is not None:
        raise result.error
    return result.output


def convert_file(
    input_path: Union[str, Path],
    output_path: Union[str, Path],
    config: Optional[ConverterConfig] = None,
    progress_callback: Optional[ProgressCallback] = None,
) -> ConversionResult:
    """Convert a file into another file."""
    return RadixConverter(config).convert_file(input_path, output_path, progress_callback)
