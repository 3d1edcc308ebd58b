"""Stream engine: converts one chunk of source symbols at a time.

Per chunk the engine moves through ``READING_CHUNK -> MAPPING -> CONVERTING ->
RENDERING`` and back to ``IDLE``. No digit state survives a chunk boundary: the
chunk buffer is cleared before every chunk and only the immutable context is
shared between chunks.
"""

import time
from enum import Enum, auto
from typing import Any, Iterable, Iterator, List, Optional, Sequence

from ..character.policy import OutcomeKind
from ..conversion.converter import DigitArrayConverter
from ..shared.errors import StreamAbortedError, UnmappedCharacterError
from ..shared.logging import get_logger
from ..shared.result import (
    ConversionMetrics,
    DiagnosticEntry,
    DiagnosticSeverity,
    RenderedOutput,
)
from .context import ConversionContext

COMPONENT = "stream_engine"


class EngineState(Enum):
    """State machine states for chunk processing."""

    IDLE = auto()            # Waiting for the next chunk
    READING_CHUNK = auto()   # Chunk received from the caller
    MAPPING = auto()         # Symbols being mapped to digits
    CONVERTING = auto()      # Digits being converted
    RENDERING = auto()       # Digits being mapped to symbols and padded
    ABORTED = auto()         # Fail-fast policy stopped the stream


class StreamEngine:
    """Chunk-by-chunk radix converter.

    Examples:
        >>> engine = StreamEngine(ConversionContext.create(2, 16))
        >>> engine.process_chunk("1010")
        'A'
        >>> "".join(engine.feed("11111010"))
        'FA'
    """

    def __init__(self, context: ConversionContext,
                 correlation_id: Optional[str] = None) -> None:
        """Initialize the engine.

        Args:
            context: Conversion context shared by all chunks
            correlation_id: Optional correlation ID for logs and diagnostics
        """
        self.context = context
        self.correlation_id = correlation_id or context.config.correlation_id
        self.state = EngineState.IDLE
        self.metrics = ConversionMetrics()
        self.diagnostics: List[DiagnosticEntry] = []
        self.logger = get_logger(__name__, self.correlation_id, COMPONENT)

        self._converter = DigitArrayConverter(context.from_radix, context.to_radix)
        self._buffer: List[int] = []
        self._position = 0

    # Collaborator interface

    def read_size(self) -> int:
        return self.context.read_size()

    def write_size(self) -> int:
        return self.context.write_size()

    def zero_char(self) -> Any:
        return self.context.zero_char()

    @property
    def aborted(self) -> bool:
        return self.state is EngineState.ABORTED

    def empty_output(self) -> RenderedOutput:
        """Rendered form of a chunk that produced no digits."""
        return [] if self.context.target.numeric else ""

    def process_chunk(self, raw: Sequence[Any]) -> RenderedOutput:
        """Convert one chunk of source symbols.

        A chunk shorter than ``read_size()`` (the end of a stream) is converted
        as is. Output is left-padded with the zero symbol up to ``write_size()``
        and never truncated.

        Args:
            raw: Source symbols; characters for mapped sources, integers for
                numeric sources

        Returns:
            Rendered destination symbols; empty when no digits survived the
            invalid character policy

        Raises:
            StreamAbortedError: Under the fail-fast policy, or if the stream
                was already aborted
            UnmappedCharacterError: Under the propagate policy
        """
        if self.state is EngineState.ABORTED:
            raise StreamAbortedError(None, self._position)

        start_time = time.perf_counter()
        self.state = EngineState.READING_CHUNK
        self.metrics.chunks_read += 1
        self.metrics.symbols_read += len(raw)

        try:
            digits = self._map_symbols(raw)
        finally:
            self._position += len(raw)
            if self.state is not EngineState.ABORTED:
                self.state = EngineState.IDLE

        if not digits:
            self.metrics.empty_chunks += 1
            self._record_time(start_time)
            return self.empty_output()

        self.state = EngineState.CONVERTING
        converted = self._converter.convert(digits)

        self.state = EngineState.RENDERING
        rendered = self._render(converted)

        self.metrics.chunks_written += 1
        self.metrics.symbols_written += len(rendered)
        self._record_time(start_time)
        self.state = EngineState.IDLE
        return rendered

    def feed(self, symbols: Iterable[Any]) -> Iterator[RenderedOutput]:
        """Split ``symbols`` into ``read_size()`` chunks and convert each in order."""
        reads = self.read_size()
        chunk: List[Any] = []
        for symbol in symbols:
            chunk.append(symbol)
            if len(chunk) == reads:
                yield self._as_chunk(chunk)
                chunk = []
        if chunk:
            yield self._as_chunk(chunk)

    def reset(self) -> None:
        """Return to a fresh state for a new stream."""
        self.state = EngineState.IDLE
        self.metrics = ConversionMetrics()
        self.diagnostics = []
        self._buffer.clear()
        self._position = 0

    # Internal stages

    def _as_chunk(self, chunk: List[Any]) -> RenderedOutput:
        if chunk and all(isinstance(symbol, str) for symbol in chunk):
            return self.process_chunk("".join(chunk))
        return self.process_chunk(chunk)

    def _map_symbols(self, raw: Sequence[Any]) -> List[int]:
        """Map symbols to digits, applying the invalid character policy."""
        self.state = EngineState.MAPPING
        source = self.context.source
        policy = self.context.policy
        buffer = self._buffer
        buffer.clear()

        for offset, symbol in enumerate(raw):
            try:
                buffer.append(source.char_to_digit(symbol))
                continue
            except UnmappedCharacterError as e:
                position = self._position + offset
                self.metrics.invalid_symbols += 1
                outcome = policy.decide(symbol, position)
                lookup_error = e

            if outcome.kind is OutcomeKind.SUBSTITUTE:
                buffer.append(outcome.digit)
            elif outcome.kind is OutcomeKind.DROP:
                self.logger.debug(
                    "Dropped invalid symbol",
                    extra={"symbol": repr(symbol), "position": position},
                )
            elif outcome.kind is OutcomeKind.TRUNCATE:
                self.logger.debug(
                    "Truncated chunk at invalid symbol",
                    extra={"symbol": repr(symbol), "position": position},
                )
                break
            elif outcome.kind is OutcomeKind.REPORT_AND_DROP:
                self._report(outcome.message, symbol, position)
            elif outcome.kind is OutcomeKind.ABORT:
                self._abort(symbol, position)
                raise StreamAbortedError(symbol, position) from lookup_error
            else:
                lookup_error.position = position
                raise lookup_error

        return list(buffer)

    def _render(self, digits: List[int]) -> RenderedOutput:
        """Map digits to destination symbols, left-padding to the write size."""
        target = self.context.target
        padding = self.write_size() - len(digits)
        if target.numeric:
            return [target.zero_char()] * max(padding, 0) + digits
        rendered = "".join(target.digit_to_char(digit) for digit in digits)
        if padding > 0:
            rendered = target.zero_char() * padding + rendered
        return rendered

    def _report(self, message: Optional[str], symbol: Any, position: int) -> None:
        text = message or f"Invalid value: {symbol!r}"
        self.logger.warning(text, extra={"position": position})
        self.diagnostics.append(DiagnosticEntry(
            severity=DiagnosticSeverity.WARNING,
            message=text,
            component=COMPONENT,
            position=position,
            details={"symbol": repr(symbol)},
            correlation_id=self.correlation_id,
        ))

    def _abort(self, symbol: Any, position: int) -> None:
        self.state = EngineState.ABORTED
        message = f"Aborting stream on invalid value {symbol!r}"
        self.logger.error(message, extra={"position": position})
        self.diagnostics.append(DiagnosticEntry(
            severity=DiagnosticSeverity.ERROR,
            message=message,
            component=COMPONENT,
            position=position,
            details={"symbol": repr(symbol)},
            correlation_id=self.correlation_id,
        ))

    def _record_time(self, start_time: float) -> None:
        self.metrics.processing_time_ms += (time.perf_counter() - start_time) * 1000
