"""Stream layer for radix stream conversion.

This module holds the immutable conversion context and the engine that converts
one chunk of source symbols at a time.
"""

from .context import ConversionContext
from .engine import EngineState, StreamEngine

__all__ = [
    "ConversionContext",
    "EngineState",
    "StreamEngine",
]
