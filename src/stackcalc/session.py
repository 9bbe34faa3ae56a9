"""
Keypad session: the evaluator wired to an entry field, a display and an
expression log, the way the browser calculator presents it.
"""

import math
from dataclasses import dataclass
from typing import Optional, Union

import structlog

from stackcalc.config import settings
from stackcalc.evaluator import Evaluator, InvalidOperandError, Number
from stackcalc.models import Operator, PressResult, SessionState
from stackcalc.parsing import parse_operand, parse_operator, split_keys

logger = structlog.get_logger()

INVALID_DISPLAY = "NaN"


def format_number(value: Number, precision: int = 12) -> str:
    """Render a value for the display."""
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer() and abs(value) < 10 ** precision:
            return str(int(value))
        return format(value, f".{precision}g")
    return str(value)


@dataclass
class PressOutcome:
    """What the display shows after one press."""
    display: str
    value: Optional[float] = None
    invalid: bool = False


class CalculatorSession:
    """
    One calculator: evaluator, display and expression log.

    The expression log is cosmetic. After an equals press the next
    successful press starts a fresh log line.
    """

    def __init__(
        self,
        precision: Optional[int] = None,
        integer_input: Optional[bool] = None,
        trace: Optional[bool] = None,
    ):
        self.precision = precision if precision is not None else settings.display_precision
        self.integer_input = integer_input if integer_input is not None else settings.integer_input
        self.trace = trace if trace is not None else settings.trace_stack
        self.evaluator = Evaluator()
        self.display: str = ""
        self.expression: str = ""

    def press(self, entry: str, operator: Union[Operator, str]) -> PressOutcome:
        """Read the entry, apply the operator key and update display and log."""
        operator = parse_operator(operator)
        operand = parse_operand(entry, integer_only=self.integer_input)
        clear_log = self.evaluator.last_was_equals

        try:
            result = self.evaluator.submit(operand.value, operator)
        except InvalidOperandError:
            logger.info("Invalid entry", entry=entry)
            self.display = INVALID_DISPLAY
            return PressOutcome(display=self.display, invalid=True)

        if clear_log:
            self.expression = ""
        self.expression += f"{format_number(operand.value, self.precision)} {operator.value} "
        self.display = format_number(result, self.precision)

        if self.trace:
            logger.debug("stack", stack=self.stack_snapshot())
        return PressOutcome(display=self.display, value=result)

    def run(self, keys: str) -> PressOutcome:
        """
        Feed a whole key sequence such as ``"1 + 2 * 3 ="``.

        Returns the outcome of the last press; an invalid entry stops the run.
        """
        outcome = PressOutcome(display=self.display)
        for key in split_keys(keys):
            outcome = self.press(key.entry, key.operator)
            if outcome.invalid:
                break
        return outcome

    def all_clear(self) -> None:
        """Clear the log, the entry field and the stack."""
        self.evaluator.reset()
        self.expression = ""
        self.display = ""
        if self.trace:
            logger.debug("stack", stack=self.stack_snapshot())

    def stack_snapshot(self) -> list[str]:
        """Stack entries formatted for display, bottom first."""
        return [
            item.value if isinstance(item, Operator) else format_number(item, self.precision)
            for item in self.evaluator.stack
        ]

    def to_result(self, outcome: PressOutcome) -> PressResult:
        value = outcome.value
        if value is not None and not math.isfinite(value):
            value = None
        return PressResult(
            display=outcome.display,
            value=value,
            invalid=outcome.invalid,
            expression=self.expression.strip(),
            last_was_equals=self.evaluator.last_was_equals,
            stack_depth=self.evaluator.depth,
        )

    def to_state(self, **kwargs) -> SessionState:
        return SessionState(
            display=self.display,
            expression=self.expression.strip(),
            stack=self.stack_snapshot(),
            last_was_equals=self.evaluator.last_was_equals,
            **kwargs,
        )
