"""Tests for the invalid character policy."""

import pytest

from radix_stream.character.policy import (
    InvalidCharPolicy,
    OutcomeKind,
    PolicyOutcome,
    describe_symbol,
)
from radix_stream.shared.config import InvalidCharAction


class TestInvalidCharPolicy:
    """Test policy decisions for each action."""

    @pytest.mark.parametrize("action,kind", [
        (InvalidCharAction.SKIP, OutcomeKind.DROP),
        (InvalidCharAction.ZERO, OutcomeKind.SUBSTITUTE),
        (InvalidCharAction.STOP, OutcomeKind.TRUNCATE),
        (InvalidCharAction.REPORT, OutcomeKind.REPORT_AND_DROP),
        (InvalidCharAction.FAIL_FAST, OutcomeKind.ABORT),
        (InvalidCharAction.PROPAGATE, OutcomeKind.PROPAGATE),
    ])
    def test_action_outcomes(self, action, kind):
        """Test that each action maps to its outcome kind."""
        assert InvalidCharPolicy(action).decide("G").kind is kind

    def test_default_action_is_skip(self):
        assert InvalidCharPolicy().action is InvalidCharAction.SKIP

    def test_zero_substitutes_digit_zero(self):
        outcome = InvalidCharPolicy(InvalidCharAction.ZERO).decide("G")

        assert outcome.digit == 0
        assert outcome.keeps_position is True

    def test_custom_substitute_digit(self):
        policy = InvalidCharPolicy(InvalidCharAction.ZERO, substitute_digit=5)
        assert policy.decide("?").digit == 5

    def test_report_message(self):
        policy = InvalidCharPolicy(InvalidCharAction.REPORT)

        assert policy.decide("G").message == "Invalid value: 'G'"
        assert policy.decide("G", 7).message == "Invalid value: 'G' at position 7"
        assert policy.decide("G").keeps_position is False

    def test_decisions_are_deterministic(self):
        """Test that identical input always yields identical outcomes."""
        for action in InvalidCharAction:
            policy = InvalidCharPolicy(action)
            first = [policy.decide(symbol, i) for i, symbol in enumerate("xyz")]
            second = [policy.decide(symbol, i) for i, symbol in enumerate("xyz")]
            assert first == second

    def test_is_fatal(self):
        assert InvalidCharPolicy(InvalidCharAction.FAIL_FAST).is_fatal is True
        assert InvalidCharPolicy(InvalidCharAction.PROPAGATE).is_fatal is False

    def test_unknown_action_rejected(self):
        with pytest.raises(ValueError, match="Unknown invalid character action"):
            InvalidCharPolicy("skip")

    def test_repr(self):
        assert repr(InvalidCharPolicy(InvalidCharAction.STOP)) == "InvalidCharPolicy(STOP)"


class TestPolicyOutcome:
    """Test outcome payload validation."""

    def test_substitute_requires_digit(self):
        with pytest.raises(ValueError, match="requires a digit"):
            PolicyOutcome(OutcomeKind.SUBSTITUTE)

    def test_report_requires_message(self):
        with pytest.raises(ValueError, match="requires a message"):
            PolicyOutcome(OutcomeKind.REPORT_AND_DROP)

    def test_describe_symbol(self):
        assert describe_symbol("\x00") == "Invalid value: '\\x00'"
        assert describe_symbol(300) == "Invalid value: 300"
