"""Shared utilities for radix stream conversion.

This module provides configuration objects, result types, the exception
hierarchy and logging helpers used across all conversion layers.
"""

from .config import (
    ALPHABETS,
    DEFAULT_ALPHABET,
    CaseMode,
    ConverterConfig,
    InvalidCharAction,
    SideConfig,
)
from .errors import (
    ConfigError,
    ConfigValidationError,
    RadixStreamError,
    StreamAbortedError,
    UnmappedCharacterError,
)
from .logging import (
    CorrelationLogger,
    configure_logging,
    get_logger,
)
from .result import (
    ConversionMetrics,
    ConversionResult,
    DiagnosticEntry,
    DiagnosticSeverity,
    RenderedOutput,
)

__all__ = [
    "ALPHABETS",
    "DEFAULT_ALPHABET",
    "CaseMode",
    "ConverterConfig",
    "InvalidCharAction",
    "SideConfig",
    "ConfigError",
    "ConfigValidationError",
    "RadixStreamError",
    "StreamAbortedError",
    "UnmappedCharacterError",
    "CorrelationLogger",
    "configure_logging",
    "get_logger",
    "ConversionMetrics",
    "ConversionResult",
    "DiagnosticEntry",
    "DiagnosticSeverity",
    "RenderedOutput",
]
