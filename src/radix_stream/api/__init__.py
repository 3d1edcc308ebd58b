"""Public conversion API.

Level 1 functions (``convert``, ``convert_string``, ``convert_file``) cover
one-off conversions; ``RadixConverter`` holds a configuration and converts
in-memory data or binary streams.
"""

from .converter import (
    InputType,
    ProgressCallback,
    RadixConverter,
    convert,
    convert_file,
    convert_string,
)

__all__ = [
    "InputType",
    "ProgressCallback",
    "RadixConverter",
    "convert",
    "convert_file",
    "convert_string",
]
