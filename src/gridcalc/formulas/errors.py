"""Error types for formula classification and evaluation."""

from __future__ import annotations


class FormulaError(Exception):
    """Base class for all formula-related errors."""


class FormulaParseError(FormulaError):
    """Text handed to the evaluator is not a well-formed formula.

    Attributes:
        text: The rejected input.
    """

    def __init__(self, text: str) -> None:
        self.text = text
        super().__init__(f"Not a formula: {text!r}")


class FormulaDivisionByZero(FormulaError):
    """A divisor within the zero tolerance was reached during evaluation.

    Attributes:
        dividend: Left operand of the aborted division.
        divisor: The near-zero right operand.
    """

    def __init__(self, dividend: float, divisor: float) -> None:
        self.dividend = dividend
        self.divisor = divisor
        super().__init__(f"Division by zero: {dividend!r} / {divisor!r}")


class FormulaMathError(FormulaError):
    """An operand or operation gave no real, finite number (e.g. ``(-8)^0.5``).

    Attributes:
        left: The offending operand, or the left operand of the operation.
        operator: The operator being applied, None for a bare operand.
        right: Right operand of the operation, None for a bare operand.
    """

    def __init__(self, left: float, operator: str | None = None, right: float | None = None) -> None:
        self.left = left
        self.operator = operator
        self.right = right
        if operator is None:
            super().__init__(f"Number out of range: {left!r}")
        else:
            super().__init__(f"Invalid operation: {left!r} {operator} {right!r}")
