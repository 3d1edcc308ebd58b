"""Radix arithmetic layer.

Key Components:
    negotiate: Chunk sizes for a radix pair
    DigitArrayConverter: Multi-precision conversion of digit sequences
    DigitArray: Canonical digit sequence in a stated radix
"""

from .converter import (
    DigitArray,
    DigitArrayConverter,
    convert_digits,
    strip_leading_zeros,
)
from .negotiation import (
    ChunkSizes,
    chunk_size,
    negotiate,
    validate_radix,
)

__all__ = [
    "DigitArray",
    "DigitArrayConverter",
    "convert_digits",
    "strip_leading_zeros",
    "ChunkSizes",
    "chunk_size",
    "negotiate",
    "validate_radix",
]
