"""
Input boundary: turns keypad text into typed operands and operators.

Parsing is strict. Anything that is not a plain decimal number becomes an
invalid ``Operand`` rather than a silently truncated value, and the
evaluator decides what to do with it.
"""

import re
from dataclasses import dataclass
from typing import Optional, Union

from stackcalc.evaluator import CalculatorError, UnknownOperatorError
from stackcalc.models import Operator


class EntryError(CalculatorError):
    """Raised when a key sequence cannot be split into presses."""
    pass


_DECIMAL_RE = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)$")
_INTEGER_RE = re.compile(r"^[+-]?\d+$")

# Entry text followed by one operator key. A sign directly in front of a
# digit belongs to the entry.
_KEYS = r"+\-*/=xX×÷−"
_PRESS_RE = re.compile(
    rf"\s*((?:[+\-](?=[\d.]))?[^{_KEYS}\s]*)\s*([{_KEYS}])"
)

_OPERATOR_ALIASES = {
    "+": Operator.ADD,
    "add": Operator.ADD,
    "plus": Operator.ADD,
    "-": Operator.SUBTRACT,
    "−": Operator.SUBTRACT,
    "sub": Operator.SUBTRACT,
    "subtract": Operator.SUBTRACT,
    "minus": Operator.SUBTRACT,
    "*": Operator.MULTIPLY,
    "x": Operator.MULTIPLY,
    "×": Operator.MULTIPLY,
    "mul": Operator.MULTIPLY,
    "multiply": Operator.MULTIPLY,
    "times": Operator.MULTIPLY,
    "/": Operator.DIVIDE,
    "÷": Operator.DIVIDE,
    "div": Operator.DIVIDE,
    "divide": Operator.DIVIDE,
    "=": Operator.EQUALS,
    "eq": Operator.EQUALS,
    "equals": Operator.EQUALS,
}


@dataclass(frozen=True)
class Operand:
    """A parsed entry: either a number or an invalid marker."""
    text: str
    value: Optional[float] = None

    @property
    def valid(self) -> bool:
        return self.value is not None


@dataclass(frozen=True)
class KeyPress:
    """One operator press together with the entry typed before it."""
    entry: str
    operator: Operator


def parse_operand(text: str, integer_only: bool = False) -> Operand:
    """
    Parse the entry field.

    Entries become doubles, so an entry too long for the float range reads
    as infinity. With ``integer_only`` a fractional entry is invalid.
    """
    cleaned = text.strip()
    pattern = _INTEGER_RE if integer_only else _DECIMAL_RE
    if not pattern.match(cleaned):
        return Operand(text=text)
    return Operand(text=text, value=float(cleaned))


def parse_operator(symbol: Union[str, Operator]) -> Operator:
    """Resolve a key symbol or name to an ``Operator``."""
    if isinstance(symbol, Operator):
        return symbol
    try:
        return _OPERATOR_ALIASES[symbol.strip().lower()]
    except (KeyError, AttributeError):
        raise UnknownOperatorError(symbol) from None


def split_keys(text: str) -> list[KeyPress]:
    """
    Split a one-shot key sequence such as ``"1 + 2 * 3 ="`` into presses.

    Entries are not validated here; an empty or malformed entry is passed
    through so the evaluator can reject it.
    """
    presses = []
    pos = 0
    for match in _PRESS_RE.finditer(text):
        if match.start() != pos:
            break
        presses.append(KeyPress(entry=match.group(1), operator=parse_operator(match.group(2))))
        pos = match.end()

    remainder = text[pos:].strip()
    if remainder:
        raise EntryError(f"Entry without an operator key: {remainder!r}")
    return presses
