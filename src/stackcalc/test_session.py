"""
Tests for the keypad session (display and expression log).
"""

import math

import pytest
from structlog.testing import capture_logs

from stackcalc.models import Operator
from stackcalc.parsing import EntryError
from stackcalc.session import CalculatorSession, format_number


class TestFormatNumber:
    """Test display formatting."""

    def test_integer(self):
        assert format_number(14) == "14"

    def test_whole_float(self):
        assert format_number(2.0) == "2"

    def test_fraction(self):
        assert format_number(3.5) == "3.5"

    def test_rounding_noise(self):
        assert format_number(0.1 + 0.2) == "0.3"

    def test_precision(self):
        assert format_number(1 / 3, precision=4) == "0.3333"

    def test_infinity(self):
        assert format_number(math.inf) == "Infinity"
        assert format_number(-math.inf) == "-Infinity"

    def test_nan(self):
        assert format_number(math.nan) == "NaN"


class TestSession:
    """Test presses through a session."""

    def setup_method(self):
        self.session = CalculatorSession(precision=12, integer_input=False, trace=False)

    def test_run(self):
        outcome = self.session.run("1 + 2 + 3 * 4 - 1 =")
        assert outcome.display == "14"
        assert outcome.value == 14
        assert not outcome.invalid

    def test_running_display(self):
        self.session.press("2", "+")
        outcome = self.session.press("3", "*")
        assert outcome.display == "3"
        assert self.session.stack_snapshot() == ["2", "+", "3", "*"]

    def test_expression_log(self):
        self.session.run("2 * 3 + 4 =")
        assert self.session.expression.strip() == "2 * 3 + 4 ="

    def test_log_cleared_after_equals(self):
        self.session.run("2 + 2 =")
        self.session.press("5", Operator.MULTIPLY)
        assert self.session.expression.strip() == "5 *"

    def test_log_kept_without_equals(self):
        self.session.press("5", "+")
        self.session.press("6", "-")
        assert self.session.expression.strip() == "5 + 6 -"

    def test_invalid_entry(self):
        self.session.press("4", "+")
        outcome = self.session.press("abc", "=")
        assert outcome.invalid
        assert outcome.display == "NaN"
        assert self.session.stack_snapshot() == ["4", "+"]
        assert self.session.expression.strip() == "4 +"

    def test_run_stops_at_invalid_entry(self):
        outcome = self.session.run("1 + x * 2 =")
        assert outcome.invalid
        assert self.session.stack_snapshot() == ["1", "+"]

    def test_divide_by_zero_display(self):
        assert self.session.run("4 / 0 =").display == "Infinity"

    def test_all_clear(self):
        self.session.run("7 * 8 -")
        self.session.all_clear()
        assert self.session.display == ""
        assert self.session.expression == ""
        assert self.session.stack_snapshot() == []
        assert self.session.evaluator.last_was_equals is False

    def test_integer_input(self):
        session = CalculatorSession(integer_input=True)
        assert session.press("1.5", "=").invalid

    def test_trailing_entry(self):
        with pytest.raises(EntryError):
            self.session.run("1 +  2")

    def test_result_hides_non_finite_value(self):
        outcome = self.session.run("1 / 0 =")
        result = self.session.to_result(outcome)
        assert result.value is None
        assert result.display == "Infinity"
        assert result.last_was_equals is True
        assert result.stack_depth == 0

    def test_state(self):
        self.session.run("3 - 1 *")
        state = self.session.to_state()
        assert state.stack == ["3", "-", "1", "*"]
        assert state.expression == "3 - 1 *"
        assert state.display == "1"


class TestEntryRange:
    """Test negative and out-of-range entries through a session."""

    def setup_method(self):
        self.session = CalculatorSession(precision=12, integer_input=False, trace=False)

    def test_negative_entry(self):
        assert self.session.run("2 * -3 =").display == "-6"

    def test_negative_entry_log(self):
        self.session.run("-4 - -4 =")
        assert self.session.display == "0"
        assert self.session.expression.strip() == "-4 - -4 ="

    def test_alias_keys(self):
        assert self.session.run("6 x 2 ÷ 3 =").display == "4"

    def test_huge_entry_overflows(self):
        outcome = self.session.run("1" + "0" * 400 + " / 3 =")
        assert not outcome.invalid
        assert outcome.display == "Infinity"
        assert self.session.to_result(outcome).value is None

    def test_entry_past_digit_limit(self):
        outcome = self.session.press("9" * 5000, "=")
        assert outcome.display == "Infinity"

    def test_multiply_chain_overflows(self):
        for _ in range(5):
            self.session.press("9" * 60, "*")
        outcome = self.session.press("9" * 60, "=")
        assert outcome.display == "Infinity"
        assert self.session.to_result(outcome).value is None

    def test_stack_snapshot_with_infinity(self):
        self.session.press("9" * 500, "+")
        assert self.session.stack_snapshot() == ["Infinity", "+"]


class TestTrace:
    """Test stack tracing."""

    def test_trace_logs_at_debug(self):
        session = CalculatorSession(trace=True)
        with capture_logs() as logs:
            session.press("2", "+")
        traces = [entry for entry in logs if entry["event"] == "stack"]
        assert traces == [{"event": "stack", "stack": ["2", "+"], "log_level": "debug"}]

    def test_no_trace_by_default(self):
        session = CalculatorSession(trace=False)
        with capture_logs() as logs:
            session.press("2", "+")
        assert not [entry for entry in logs if entry["event"] == "stack"]
