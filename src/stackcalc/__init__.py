"""
stackcalc - Keypad Calculator Expression Evaluator

Evaluates a stream of numeric entries and operator presses the way a
four-function keypad calculator does: multiplication and division bind
tighter than addition and subtraction, and operators of the same tier are
applied left to right.
"""

__version__ = "1.0.0"
__author__ = "stackcalc contributors"
