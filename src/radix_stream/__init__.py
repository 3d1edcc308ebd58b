"""Radix Stream.

A chunked stream converter between positional numeral systems of any radix
from 2 up to 2**32, with configurable alphabets, case folding, numeric digit
mode and policies for characters outside the source alphabet.

Progressive API Disclosure:
- Level 1: Simple functions - convert(), convert_string(), convert_file()
- Level 2: Configured converter - RadixConverter class
- Level 3: Chunk engine - StreamEngine over a ConversionContext
"""

__version__ = "0.1.0"
__author__ = "Radix Stream Team"

# Progressive API disclosure - Level 1: Simple functions
# Progressive API disclosure - Level 2: Configured converter
from .api import RadixConverter, convert, convert_file, convert_string

# Configuration classes for advanced usage
from .shared.config import CaseMode, ConverterConfig, InvalidCharAction, SideConfig

# Core result objects for all API levels
from .shared.result import ConversionResult

# Level 3: Chunk engine
from .stream import ConversionContext, StreamEngine

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple conversion functions
    "convert",
    "convert_string",
    "convert_file",

    # Level 2: Configured converter
    "RadixConverter",

    # Level 3: Chunk engine
    "ConversionContext",
    "StreamEngine",

    # Result objects
    "ConversionResult",

    # Configuration classes
    "CaseMode",
    "ConverterConfig",
    "InvalidCharAction",
    "SideConfig",
]
