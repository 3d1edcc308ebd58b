"""Conversion context: the immutable configuration a stream engine runs with.

The context is built once from validated configuration. Every construction
failure (bad radix, short alphabet, alphabet collapsing under case folding,
numeric side given a case mode) surfaces here as ConfigValidationError, before
any symbol is read.
"""

from dataclasses import dataclass
from typing import Optional, Union

from ..character.alphabet import (
    SymbolMode,
    SymbolTable,
    build_table,
    symbols_for_side,
)
from ..character.policy import InvalidCharPolicy
from ..conversion.negotiation import ChunkSizes, negotiate
from ..shared.config import (
    CaseMode,
    ConverterConfig,
    InvalidCharAction,
    SideConfig,
)
from ..shared.errors import ConfigValidationError


@dataclass(frozen=True)
class ConversionContext:
    """Everything needed to convert chunks, fixed for the life of a stream.

    Attributes:
        config: Validated configuration the context was built from
        sizes: Negotiated source/destination chunk widths
        source_symbols: Resolved symbol mode of the source side
        target_symbols: Resolved symbol mode of the target side
        source: Lookup table for decoding source symbols
        target: Lookup table for encoding destination digits
        policy: Invalid character policy
    """

    config: ConverterConfig
    sizes: ChunkSizes
    source_symbols: SymbolMode
    target_symbols: SymbolMode
    source: SymbolTable
    target: SymbolTable
    policy: InvalidCharPolicy

    @classmethod
    def from_config(cls, config: ConverterConfig) -> "ConversionContext":
        """Build a context from configuration.

        Raises:
            ConfigValidationError: If either side cannot be built
        """
        try:
            sizes = negotiate(config.source.radix, config.target.radix)
        except ValueError as e:
            raise ConfigValidationError(str(e), field_name="radix") from e

        source_symbols = symbols_for_side(config.source, decoding=True)
        target_symbols = symbols_for_side(config.target, decoding=False)
        try:
            source = build_table(config.source.radix, source_symbols)
        except ValueError as e:
            raise ConfigValidationError(
                f"Invalid source alphabet: {e}",
                field_name="source",
                suggestions=["Supply a longer alphabet", "Use a case-preserving mode"],
            ) from e
        try:
            target = build_table(config.target.radix, target_symbols)
        except ValueError as e:
            raise ConfigValidationError(
                f"Invalid target alphabet: {e}",
                field_name="target",
                suggestions=["Supply a longer alphabet", "Use a case-preserving mode"],
            ) from e

        return cls(
            config=config,
            sizes=sizes,
            source_symbols=source_symbols,
            target_symbols=target_symbols,
            source=source,
            target=target,
            policy=InvalidCharPolicy(config.invalid_action),
        )

    @classmethod
    def create(
        cls,
        from_radix: int,
        to_radix: int,
        from_alphabet: Optional[str] = None,
        to_alphabet: Optional[str] = None,
        from_case: CaseMode = CaseMode.AUTO,
        to_case: CaseMode = CaseMode.AUTO,
        invalid_action: InvalidCharAction = InvalidCharAction.SKIP,
        from_numeric: bool = False,
        to_numeric: bool = False,
    ) -> "ConversionContext":
        """Build a context from plain values.

        Examples:
            >>> context = ConversionContext.create(2, 16)
            >>> context.read_size(), context.write_size()
            (4, 1)
        """
        try:
            source = SideConfig(from_radix, from_alphabet, from_case, from_numeric)
        except ValueError as e:
            raise ConfigValidationError(str(e), field_name="source") from e
        try:
            target = SideConfig(to_radix, to_alphabet, to_case, to_numeric)
        except ValueError as e:
            raise ConfigValidationError(str(e), field_name="target") from e
        return cls.from_config(
            ConverterConfig(source=source, target=target, invalid_action=invalid_action)
        )

    @property
    def from_radix(self) -> int:
        return self.config.source.radix

    @property
    def to_radix(self) -> int:
        return self.config.target.radix

    def read_size(self) -> int:
        """Source symbols the caller must supply per chunk."""
        return self.sizes.reads

    def write_size(self) -> int:
        """Minimum destination symbols rendered per non-empty chunk."""
        return self.sizes.writes

    def zero_char(self) -> Union[str, int]:
        """Padding symbol: the destination alphabet's digit 0."""
        return self.target.zero_char()
