"""Chunk-size negotiation between a source and a destination radix.

Each chunk is converted on its own, so the number of source digits read per
step and the number of destination digits written per step must be chosen so
that a full chunk always fits. The chunk size is ``ceil(log(max) / log(min))``,
computed on integers so that exact powers (2 -> 16, 16 -> 256, ...) never
round up because of floating point error.
"""

from dataclasses import dataclass
from functools import lru_cache

from ..shared.config import MAX_RADIX, MIN_RADIX


@dataclass(frozen=True)
class ChunkSizes:
    """Source digits read and destination digits written per conversion step."""

    reads: int
    writes: int

    def __post_init__(self) -> None:
        """Validate chunk sizes."""
        if self.reads < 1 or self.writes < 1:
            raise ValueError("reads and writes must both be >= 1")

    def swapped(self) -> "ChunkSizes":
        """Chunk sizes for the reverse conversion."""
        return ChunkSizes(reads=self.writes, writes=self.reads)


def validate_radix(radix: int, label: str = "radix") -> None:
    """Raise ValueError unless ``radix`` is a supported radix."""
    if isinstance(radix, bool) or not isinstance(radix, int):
        raise ValueError(f"{label} must be an integer, got {radix!r}")
    if radix < MIN_RADIX:
        raise ValueError(f"{label} must be >= {MIN_RADIX}, got {radix}")
    if radix > MAX_RADIX:
        raise ValueError(f"{label} must be <= {MAX_RADIX}, got {radix}")


@lru_cache(maxsize=256)
def chunk_size(from_radix: int, to_radix: int) -> int:
    """Smallest k such that ``min(F, T) ** k >= max(F, T)``.

    Args:
        from_radix: Source radix
        to_radix: Destination radix

    Returns:
        Number of small-radix digits that cover one large-radix digit

    Raises:
        ValueError: If either radix is unsupported
    """
    validate_radix(from_radix, "from_radix")
    validate_radix(to_radix, "to_radix")

    low, high = sorted((from_radix, to_radix))
    size, capacity = 1, low
    while capacity < high:
        capacity *= low
        size += 1
    return size


def negotiate(from_radix: int, to_radix: int) -> ChunkSizes:
    """Compute the loss-free chunk sizes for converting ``from_radix`` to ``to_radix``.

    Many small-radix digits are read to produce one large-radix digit, and one
    large-radix digit expands into ``chunk_size`` small-radix digits.

    Examples:
        >>> negotiate(2, 16)
        ChunkSizes(reads=4, writes=1)
        >>> negotiate(256, 16)
        ChunkSizes(reads=1, writes=2)
        >>> negotiate(10, 10)
        ChunkSizes(reads=1, writes=1)
    """
    size = chunk_size(from_radix, to_radix)
    if from_radix < to_radix:
        return ChunkSizes(reads=size, writes=1)
    return ChunkSizes(reads=1, writes=size)
