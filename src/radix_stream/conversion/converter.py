"""Multi-precision digit array conversion between radices.

Digits are accumulated into the destination radix one source digit at a time:
each digit is multiplied by its positional weight and added into a destination
accumulator with carry propagation from the least significant position upward.
"""

from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

from .negotiation import ChunkSizes, negotiate, validate_radix


def strip_leading_zeros(digits: Sequence[int]) -> List[int]:
    """Drop leading zero digits, keeping the canonical zero ``[0]``."""
    start = 0
    last = len(digits) - 1
    while start < last and digits[start] == 0:
        start += 1
    stripped = list(digits[start:])
    return stripped or [0]


@dataclass(frozen=True)
class DigitArray:
    """Non-negative integer as most-significant-first digits in a stated radix.

    Attributes:
        digits: Digits in [0, radix), no leading zeros unless exactly ``(0,)``
        radix: Radix the digits are expressed in
    """

    digits: Tuple[int, ...]
    radix: int

    def __post_init__(self) -> None:
        """Validate digits and canonical form."""
        validate_radix(self.radix)
        if not self.digits:
            raise ValueError("DigitArray cannot be empty; zero is (0,)")
        if len(self.digits) > 1 and self.digits[0] == 0:
            raise ValueError("DigitArray must not have leading zero digits")
        for digit in self.digits:
            if not 0 <= digit < self.radix:
                raise ValueError(f"Digit {digit} out of range for radix {self.radix}")

    @classmethod
    def canonical(cls, digits: Iterable[int], radix: int) -> "DigitArray":
        """Build a DigitArray, trimming any leading zeros."""
        return cls(tuple(strip_leading_zeros(list(digits))), radix)

    @classmethod
    def from_int(cls, value: int, radix: int) -> "DigitArray":
        """Build the DigitArray for a non-negative integer."""
        if value < 0:
            raise ValueError("DigitArray values must be non-negative")
        validate_radix(radix)
        digits: List[int] = []
        while value:
            value, digit = divmod(value, radix)
            digits.append(digit)
        return cls(tuple(reversed(digits)) or (0,), radix)

    @property
    def value(self) -> int:
        """Integer value represented by the digits."""
        total = 0
        for digit in self.digits:
            total = total * self.radix + digit
        return total

    @property
    def is_zero(self) -> bool:
        return self.digits == (0,)

    def __len__(self) -> int:
        return len(self.digits)


class DigitArrayConverter:
    """Convert digit sequences from one radix to another.

    The destination accumulator is sized from the negotiated chunk sizes:
    ``len(input) * writes`` destination digits always hold ``len(input)`` source
    digits, because ``T ** writes >= F`` when ``F >= T`` and ``T > F`` otherwise.

    Examples:
        >>> DigitArrayConverter(10, 16).convert([2, 5, 5])
        [15, 15]
        >>> DigitArrayConverter(16, 2).convert([0])
        [0]
    """

    def __init__(self, from_radix: int, to_radix: int) -> None:
        """Initialize the converter.

        Args:
            from_radix: Radix of input digits
            to_radix: Radix of output digits

        Raises:
            ValueError: If either radix is unsupported
        """
        self.sizes: ChunkSizes = negotiate(from_radix, to_radix)
        self.from_radix = from_radix
        self.to_radix = to_radix

    def convert(self, digits: Sequence[int]) -> List[int]:
        """Convert most-significant-first ``digits`` to the destination radix.

        Args:
            digits: Source digits, each in [0, from_radix)

        Returns:
            Destination digits without leading zeros; ``[0]`` for zero

        Raises:
            ValueError: If a digit is outside [0, from_radix)
        """
        source = strip_leading_zeros(digits)
        for digit in source:
            if not 0 <= digit < self.from_radix:
                raise ValueError(
                    f"Digit {digit} out of range for radix {self.from_radix}"
                )

        to_radix = self.to_radix
        accumulator = [0] * (len(source) * self.sizes.writes)
        weight = 1
        for digit in reversed(source):
            carry = digit * weight
            position = len(accumulator) - 1
            while carry:
                carry += accumulator[position]
                carry, accumulator[position] = divmod(carry, to_radix)
                position -= 1
            weight *= self.from_radix

        return strip_leading_zeros(accumulator)

    def convert_array(self, array: DigitArray) -> DigitArray:
        """Convert a DigitArray expressed in ``from_radix``."""
        if array.radix != self.from_radix:
            raise ValueError(
                f"DigitArray radix {array.radix} does not match converter "
                f"radix {self.from_radix}"
            )
        return DigitArray(tuple(self.convert(array.digits)), self.to_radix)


def convert_digits(digits: Sequence[int], from_radix: int, to_radix: int) -> List[int]:
    """Convert ``digits`` from ``from_radix`` to ``to_radix`` in one call."""
    return DigitArrayConverter(from_radix, to_radix).convert(digits)
