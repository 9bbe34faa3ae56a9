"""
Incremental expression evaluator for a keypad calculator.

Operands and operators are pushed onto one stack in case a higher precedence
operation comes next. For example::

    1 + 2 + 3 * 4 - 1 =   is   1 + 2 + (3 * 4) - 1 =   which gives 14

Pressing an operator whose tier is lower than or equal to the pending one
collapses the stack first, so the stack never holds more than one pending
addition/subtraction below one pending multiplication/division. Collapsing
from the top outward therefore reproduces left-to-right order within a tier.
"""

import math
from numbers import Real
from typing import Union

import structlog

from stackcalc.models import Operator

logger = structlog.get_logger()

Number = Union[int, float]


class CalculatorError(Exception):
    """Base exception for calculator errors."""
    pass


class InvalidOperandError(CalculatorError):
    """Raised when the entered value is not a valid number."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Invalid operand: {value!r}")


class UnknownOperatorError(CalculatorError):
    """Raised when an operator outside the keypad set reaches the arithmetic."""

    def __init__(self, operator: object):
        self.operator = operator
        super().__init__(f"Unknown operator: {operator!r}")


# =============================================================================
# Arithmetic helpers
# =============================================================================

def to_float(value: Number) -> float:
    """Convert to a double; ints beyond float range become +/-inf."""
    try:
        return float(value)
    except OverflowError:
        return math.inf if value > 0 else -math.inf


def _divide(a: float, b: float) -> float:
    # IEEE-754 semantics instead of ZeroDivisionError
    if b == 0:
        if a == 0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


_ARITHMETIC = {
    Operator.ADD: lambda a, b: a + b,
    Operator.SUBTRACT: lambda a, b: a - b,
    Operator.MULTIPLY: lambda a, b: a * b,
    Operator.DIVIDE: _divide,
}


def apply_operator(a: Number, operator: Operator, b: Number) -> float:
    """Compute ``a <operator> b``."""
    try:
        fn = _ARITHMETIC[operator]
    except (KeyError, TypeError):
        raise UnknownOperatorError(operator) from None
    return fn(to_float(a), to_float(b))


def tier(operator: Operator) -> int:
    """Precedence tier: 0 for add/subtract, 1 for multiply/divide."""
    if not isinstance(operator, Operator) or operator.tier is None:
        raise UnknownOperatorError(operator)
    return operator.tier


def compare_precedence(op1: Operator, op2: Operator) -> int:
    """
    Compare two operators for precedence.

    Returns -1 if op1 binds looser than op2, 0 if they share a tier and
    1 if op1 binds tighter.
    """
    return tier(op1) - tier(op2)


def is_valid_operand(value: object) -> bool:
    """True for real numbers other than NaN; booleans are not operands."""
    if isinstance(value, bool) or not isinstance(value, Real):
        return False
    return not math.isnan(to_float(value))


# =============================================================================
# Evaluator
# =============================================================================

class Evaluator:
    """
    Owns the pending-operations stack of one calculator session.

    The stack alternates operand, operator, operand, operator... and is
    always empty or of even length with an operator on top.
    """

    def __init__(self):
        self._stack: list[float | Operator] = []
        self.last_was_equals: bool = False

    @property
    def stack(self) -> tuple[float | Operator, ...]:
        """Read-only snapshot of the stack, bottom first."""
        return tuple(self._stack)

    @property
    def depth(self) -> int:
        """Number of entries on the stack."""
        return len(self._stack)

    def submit(self, value: Number, operator: Operator | str) -> float:
        """
        Feed one operator press together with the value entered before it.

        Operands are held as doubles, so results past the float range
        overflow to infinity rather than raising.

        Returns the running value to display: the fully resolved result for
        EQUALS, otherwise the value as it stands after any collapse.

        Raises:
            InvalidOperandError: ``value`` is not a valid number. The stack
                is left untouched.
            UnknownOperatorError: ``operator`` is not a keypad operator.
        """
        if not is_valid_operand(value):
            logger.debug("Rejected operand", value=repr(value))
            raise InvalidOperandError(value)

        value = to_float(value)
        operator = self._coerce(operator)

        if operator is Operator.EQUALS:
            value = self._collapse(value)
            self.last_was_equals = True
            logger.debug("Resolved", result=value)
            return value

        self.last_was_equals = False
        if self._stack and compare_precedence(self._stack[-1], operator) >= 0:
            value = self._collapse(value)

        self._stack.append(value)
        self._stack.append(operator)
        logger.debug("Pushed", value=value, operator=operator.value, depth=len(self._stack))
        return value

    def reset(self) -> None:
        """All clear: drop every pending entry and the equals flag."""
        self._stack.clear()
        self.last_was_equals = False
        logger.debug("Stack reset")

    def _collapse(self, value: float) -> float:
        """Pop operator/operand pairs, folding them into ``value``."""
        while len(self._stack) > 1:
            pending = self._stack.pop()
            previous = self._stack.pop()
            value = apply_operator(previous, pending, value)
        return value

    @staticmethod
    def _coerce(operator: Operator | str) -> Operator:
        if isinstance(operator, Operator):
            return operator
        try:
            return Operator(operator)
        except ValueError:
            raise UnknownOperatorError(operator) from None
