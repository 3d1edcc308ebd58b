"""Result objects and diagnostic types for radix stream conversion.

This module defines the result returned by stream conversions together with the
diagnostics and metrics collected while chunks were processed.
"""

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, List, Optional, Union

from .errors import RadixStreamError

# Rendered output of a conversion: text for alphabet-mapped targets, raw digit
# values for numeric targets.
RenderedOutput = Union[str, List[int]]


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostic entries."""

    DEBUG = auto()
    INFO = auto()
    WARNING = auto()    # Invalid character handled by policy
    ERROR = auto()      # Stream stopped
    CRITICAL = auto()


@dataclass
class DiagnosticEntry:
    """Single diagnostic entry with context information."""

    severity: DiagnosticSeverity
    message: str
    component: str
    position: Optional[int] = None
    details: Optional[Dict[str, Any]] = None
    timestamp: float = field(default_factory=time.time)
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate diagnostic entry."""
        if not self.message:
            raise ValueError("Diagnostic message cannot be empty")
        if not self.component:
            raise ValueError("Diagnostic component cannot be empty")


@dataclass
class ConversionMetrics:
    """Counters collected while a stream is converted."""

    chunks_read: int = 0
    chunks_written: int = 0
    empty_chunks: int = 0
    symbols_read: int = 0
    symbols_written: int = 0
    invalid_symbols: int = 0
    processing_time_ms: float = 0.0

    @property
    def symbols_per_second(self) -> float:
        """Source symbols consumed per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.symbols_read * 1000.0) / self.processing_time_ms

    @property
    def invalid_rate(self) -> float:
        """Fraction of source symbols that failed alphabet lookup."""
        if self.symbols_read == 0:
            return 0.0
        return self.invalid_symbols / self.symbols_read


@dataclass
class ConversionResult:
    """Outcome of converting a whole stream or in-memory input.

    Attributes:
        output: Converted symbols written so far (text or digit values)
        success: True when every chunk was converted
        aborted: True when the fail-fast policy stopped the stream
        diagnostics: Diagnostics recorded during conversion
        metrics: Conversion counters
        error: The error that stopped conversion, if any
    """

    output: RenderedOutput
    success: bool = True
    aborted: bool = False
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    metrics: ConversionMetrics = field(default_factory=ConversionMetrics)
    error: Optional[RadixStreamError] = None

    @property
    def warning_count(self) -> int:
        """Number of warning diagnostics."""
        return sum(
            1 for entry in self.diagnostics
            if entry.severity is DiagnosticSeverity.WARNING
        )

    def summary(self) -> Dict[str, Any]:
        """Plain-data summary suitable for JSON reports."""
        return {
            "success": self.success,
            "aborted": self.aborted,
            "chunks_read": self.metrics.chunks_read,
            "chunks_written": self.metrics.chunks_written,
            "symbols_read": self.metrics.symbols_read,
            "symbols_written": self.metrics.symbols_written,
            "invalid_symbols": self.metrics.invalid_symbols,
            "processing_time_ms": self.metrics.processing_time_ms,
            "error": str(self.error) if self.error else None,
        }
