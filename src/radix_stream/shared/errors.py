"""Exception hierarchy for radix stream conversion.

Configuration errors are raised while a conversion context is being built.
Lookup failures are raised by alphabet tables and only reach callers under the
propagate policy. Aborts are raised by the stream engine when the fail-fast
policy stops a stream.
"""

from typing import Any, List, Optional


class RadixStreamError(Exception):
    """Base exception for all radix stream errors."""


class ConfigError(RadixStreamError):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


class UnmappedCharacterError(RadixStreamError):
    """A source symbol has no digit in the source alphabet."""

    def __init__(self, character: Any, position: Optional[int] = None):
        super().__init__(f"Invalid value: {character!r}")
        self.character = character
        self.position = position


class StreamAbortedError(RadixStreamError):
    """The fail-fast policy terminated stream processing."""

    def __init__(self, character: Any, position: Optional[int] = None):
        where = f" at position {position}" if position is not None else ""
        super().__init__(f"Stream aborted on invalid value {character!r}{where}")
        self.character = character
        self.position = position
