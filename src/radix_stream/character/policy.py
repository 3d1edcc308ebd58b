"""Invalid character policy.

The policy is a pure decision function: given a source symbol that failed
alphabet lookup, it returns a tagged outcome. Acting on the outcome (dropping,
truncating, aborting the stream, raising) is left to the stream engine.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Optional

from ..shared.config import InvalidCharAction


class OutcomeKind(Enum):
    """What the engine must do with an invalid source symbol."""

    SUBSTITUTE = auto()       # Use ``digit`` at this position
    DROP = auto()             # Omit this position
    TRUNCATE = auto()         # Stop collecting digits for the current chunk
    REPORT_AND_DROP = auto()  # Emit ``message`` as a diagnostic, then omit
    ABORT = auto()            # Terminate the whole stream
    PROPAGATE = auto()        # Raise the lookup failure to the caller


@dataclass(frozen=True)
class PolicyOutcome:
    """Tagged decision returned by InvalidCharPolicy."""

    kind: OutcomeKind
    digit: Optional[int] = None
    message: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate outcome payload."""
        if self.kind is OutcomeKind.SUBSTITUTE and self.digit is None:
            raise ValueError("SUBSTITUTE outcome requires a digit")
        if self.kind is OutcomeKind.REPORT_AND_DROP and not self.message:
            raise ValueError("REPORT_AND_DROP outcome requires a message")

    @property
    def keeps_position(self) -> bool:
        """True when the chunk keeps its length at this position."""
        return self.kind is OutcomeKind.SUBSTITUTE


DROP = PolicyOutcome(OutcomeKind.DROP)
TRUNCATE = PolicyOutcome(OutcomeKind.TRUNCATE)
ABORT = PolicyOutcome(OutcomeKind.ABORT)
PROPAGATE = PolicyOutcome(OutcomeKind.PROPAGATE)


def describe_symbol(symbol: Any) -> str:
    """Render an offending symbol for diagnostics."""
    return f"Invalid value: {symbol!r}"


class InvalidCharPolicy:
    """Decide how to handle source symbols missing from the source alphabet.

    Exactly one action is active per conversion context; decisions depend only
    on the action and the symbol, so identical input always yields identical
    output.

    Examples:
        >>> InvalidCharPolicy(InvalidCharAction.ZERO).decide("G").digit
        0
        >>> InvalidCharPolicy(InvalidCharAction.SKIP).decide("G").kind
        <OutcomeKind.DROP: 2>
    """

    def __init__(self, action: InvalidCharAction = InvalidCharAction.SKIP,
                 substitute_digit: int = 0) -> None:
        """Initialize the policy.

        Args:
            action: Configured invalid character action
            substitute_digit: Digit used by the ZERO action
        """
        if not isinstance(action, InvalidCharAction):
            raise ValueError(f"Unknown invalid character action: {action!r}")
        self.action = action
        self._substitute = PolicyOutcome(OutcomeKind.SUBSTITUTE, digit=substitute_digit)

    def decide(self, symbol: Any, position: Optional[int] = None) -> PolicyOutcome:
        """Return the outcome for one invalid ``symbol``.

        Args:
            symbol: The source symbol that failed lookup
            position: Offset of the symbol in the stream, used in messages

        Returns:
            PolicyOutcome for the engine to apply
        """
        action = self.action
        if action is InvalidCharAction.SKIP:
            return DROP
        if action is InvalidCharAction.ZERO:
            return self._substitute
        if action is InvalidCharAction.STOP:
            return TRUNCATE
        if action is InvalidCharAction.REPORT:
            message = describe_symbol(symbol)
            if position is not None:
                message = f"{message} at position {position}"
            return PolicyOutcome(OutcomeKind.REPORT_AND_DROP, message=message)
        if action is InvalidCharAction.FAIL_FAST:
            return ABORT
        return PROPAGATE

    @property
    def is_fatal(self) -> bool:
        """True when an invalid symbol ends stream processing."""
        return self.action is InvalidCharAction.FAIL_FAST

    def __repr__(self) -> str:
        return f"InvalidCharPolicy({self.action.name})"
