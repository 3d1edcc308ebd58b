"""Configuration classes for radix stream conversion.

This module provides immutable configuration objects describing both sides of a
conversion (radix, alphabet, case handling, numeric mode) and the policy for
characters that are not digits of the source alphabet.
"""

import codecs
import json
from dataclasses import dataclass, field, replace
from enum import Enum, auto
from typing import Any, Dict, List, Optional

from .errors import ConfigValidationError

# Radix limits
MIN_RADIX = 2
MAX_RADIX = 2 ** 32

# Stream buffering
DEFAULT_BUFFER_SIZE = 8192

# Alphabets
DEFAULT_ALPHABET = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"
BASE85 = (
    DEFAULT_ALPHABET
    + "abcdefghijklmnopqrstuvwxyz"
    + "!#$%&()*+-;<=>?@^_`{|}~"
)  # RFC 1924 ordering
BASE62 = BASE85[:62]
BASE32 = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"
BASE32HEX = BASE85[:32]
BASE64 = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"
BASE64URL = BASE64[:62] + "-_"
BYTE_ALPHABET = "".join(chr(code) for code in range(256))

ALPHABETS: Dict[str, str] = {
    "default": DEFAULT_ALPHABET,
    "base32": BASE32,
    "base32hex": BASE32HEX,
    "base62": BASE62,
    "base64": BASE64,
    "base64url": BASE64URL,
    "base85": BASE85,
    "bytes": BYTE_ALPHABET,
}


class CaseMode(Enum):
    """Case folding applied to one side of a conversion."""

    AUTO = auto()          # Resolved when the conversion context is built
    FORCE_LOWER = auto()   # Fold to lowercase
    FORCE_UPPER = auto()   # Fold to uppercase
    PRESERVE = auto()      # Case carries information, never fold


class InvalidCharAction(Enum):
    """Action taken for a source character missing from the source alphabet."""

    SKIP = auto()          # Drop the position
    ZERO = auto()          # Substitute digit 0
    STOP = auto()          # Truncate the current chunk here
    REPORT = auto()        # Log a diagnostic, then drop
    FAIL_FAST = auto()     # Abort the whole stream
    PROPAGATE = auto()     # Raise to the caller


@dataclass(frozen=True)
class SideConfig:
    """Configuration for one side (source or target) of a conversion.

    Attributes:
        radix: Number of digit values on this side
        alphabet: Characters for digits 0..radix-1; None selects the default
            36-character alphabet
        case: Case folding mode
        numeric: Digits travel as raw integers instead of alphabet characters
    """

    radix: int = 10
    alphabet: Optional[str] = None
    case: CaseMode = CaseMode.AUTO
    numeric: bool = False

    def __post_init__(self) -> None:
        """Validate side configuration."""
        if isinstance(self.radix, bool) or not isinstance(self.radix, int):
            raise ValueError(f"radix must be an integer, got {self.radix!r}")
        if self.radix < MIN_RADIX:
            raise ValueError(f"radix must be >= {MIN_RADIX}, got {self.radix}")
        if self.radix > MAX_RADIX:
            raise ValueError(f"radix must be <= {MAX_RADIX}, got {self.radix}")

        if self.numeric:
            if self.alphabet is not None:
                raise ValueError("numeric mode does not take an alphabet")
            if self.case is not CaseMode.AUTO:
                raise ValueError("numeric mode does not take a case mode")
            return

        if self.alphabet is None and self.radix > len(DEFAULT_ALPHABET):
            raise ValueError(
                f"radix {self.radix} exceeds the default alphabet; "
                "supply an alphabet or use numeric mode"
            )
        if len(self.resolved_alphabet()) < self.radix:
            raise ValueError(
                f"alphabet supplies {len(self.resolved_alphabet())} characters, "
                f"radix {self.radix} needs at least {self.radix}"
            )

    def resolved_alphabet(self) -> str:
        """Return the alphabet characters used for digits 0..radix-1."""
        if self.numeric:
            return ""
        if self.alphabet is None:
            return DEFAULT_ALPHABET[:self.radix]
        return self.alphabet[:self.radix]


@dataclass(frozen=True)
class ConverterConfig:
    """Complete configuration for a radix stream conversion.

    Immutable, so a single instance can back any number of conversion contexts.
    """

    source: SideConfig = field(default_factory=lambda: SideConfig(radix=10))
    target: SideConfig = field(default_factory=lambda: SideConfig(radix=16))
    invalid_action: InvalidCharAction = InvalidCharAction.SKIP

    # I/O collaborator settings
    encoding: str = "latin-1"
    trailing_newline: bool = True
    buffer_size: int = DEFAULT_BUFFER_SIZE

    correlation_id: Optional[str] = None
    name: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate cross-field settings."""
        if not isinstance(self.source, SideConfig):
            raise ConfigValidationError("source must be a SideConfig", "source")
        if not isinstance(self.target, SideConfig):
            raise ConfigValidationError("target must be a SideConfig", "target")
        if self.buffer_size <= 0:
            raise ConfigValidationError("buffer_size must be > 0", "buffer_size")
        try:
            codecs.lookup(self.encoding)
        except LookupError as e:
            raise ConfigValidationError(
                f"Unknown encoding: {self.encoding}",
                field_name="encoding",
                suggestions=["latin-1", "utf-8", "ascii"],
            ) from e

    def override(self, **kwargs: Any) -> "ConverterConfig":
        """Create a new configuration with specific overrides.

        Args:
            **kwargs: Fields to override; ``source__`` and ``target__`` prefixes
                address the side configurations

        Returns:
            New ConverterConfig instance with overrides applied

        Example:
            >>> config = ConverterConfig()
            >>> new_config = config.override(
            ...     source__radix=2,
            ...     invalid_action=InvalidCharAction.ZERO
            ... )
        """
        nested: Dict[str, Dict[str, Any]] = {}
        top_level: Dict[str, Any] = {}
        for key, value in kwargs.items():
            if "__" in key:
                side, field_name = key.split("__", 1)
                if side not in ("source", "target"):
                    raise ConfigValidationError(
                        f"Unknown configuration section: {side}", field_name=key
                    )
                nested.setdefault(side, {})[field_name] = value
            else:
                top_level[key] = value

        try:
            for side, values in nested.items():
                top_level[side] = replace(getattr(self, side), **values)
        except ValueError as e:
            raise ConfigValidationError(str(e), field_name=next(iter(nested))) from e

        return replace(self, **top_level)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        def _to_plain(obj: Any) -> Any:
            if hasattr(obj, "__dataclass_fields__"):
                return {
                    name: _to_plain(getattr(obj, name))
                    for name in obj.__dataclass_fields__
                }
            if isinstance(obj, Enum):
                return obj.name
            return obj

        return _to_plain(self)

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConverterConfig":
        """Create configuration from dictionary.

        Args:
            data: Dictionary as produced by ``to_dict``

        Returns:
            ConverterConfig instance

        Raises:
            ConfigValidationError: If a value is invalid
        """
        def _from_plain(values: Dict[str, Any], target_class: type) -> Any:
            kwargs: Dict[str, Any] = {}
            for field_name, field_info in target_class.__dataclass_fields__.items():
                if field_name not in values:
                    continue
                value = values[field_name]
                field_type = field_info.type
                if hasattr(field_type, "__dataclass_fields__"):
                    kwargs[field_name] = _from_plain(value, field_type)
                elif hasattr(field_type, "__members__") and isinstance(value, str):
                    try:
                        kwargs[field_name] = field_type[value]
                    except KeyError as e:
                        raise ConfigValidationError(
                            f"Unknown {field_type.__name__}: {value}",
                            field_name=field_name,
                            suggestions=list(field_type.__members__),
                        ) from e
                else:
                    kwargs[field_name] = value
            return target_class(**kwargs)

        try:
            return _from_plain(data, cls)
        except ValueError as e:
            raise ConfigValidationError(str(e)) from e

    @classmethod
    def from_json(cls, json_str: str) -> "ConverterConfig":
        """Create configuration from JSON string."""
        return cls.from_dict(json.loads(json_str))

    # Preset factory methods
    @classmethod
    def hex_to_binary(cls) -> "ConverterConfig":
        """Hexadecimal text to binary text."""
        return cls(
            source=SideConfig(radix=16),
            target=SideConfig(radix=2),
            name="hex_to_binary",
        )

    @classmethod
    def binary_to_hex(cls) -> "ConverterConfig":
        """Binary text to hexadecimal text."""
        return cls(
            source=SideConfig(radix=2),
            target=SideConfig(radix=16),
            name="binary_to_hex",
        )

    @classmethod
    def decimal_to_hex(cls) -> "ConverterConfig":
        """Decimal text to hexadecimal text."""
        return cls(
            source=SideConfig(radix=10),
            target=SideConfig(radix=16),
            name="decimal_to_hex",
        )

    @classmethod
    def bytes_to_hex(cls) -> "ConverterConfig":
        """Raw bytes to lowercase hexadecimal text (a hex dump)."""
        return cls(
            source=SideConfig(radix=256, numeric=True),
            target=SideConfig(radix=16, case=CaseMode.FORCE_LOWER),
            name="bytes_to_hex",
        )

    @classmethod
    def hex_to_bytes(cls) -> "ConverterConfig":
        """Hexadecimal text back to raw bytes."""
        return cls(
            source=SideConfig(radix=16),
            target=SideConfig(radix=256, numeric=True),
            trailing_newline=False,
            name="hex_to_bytes",
        )


def alphabet_names() -> List[str]:
    """Names accepted wherever a named alphabet may be given."""
    return sorted(ALPHABETS)
