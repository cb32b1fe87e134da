"""Shunting-Yard evaluator for validated infix formulas.

A single left-to-right scan keeps an operand stack and an operator
stack. ``^`` binds tighter than ``*``/``/``, which bind tighter than
``+``/``-``. Ties are resolved left to right for every operator,
including ``^``: ``=2^3^2`` is ``(2^3)^2 = 64``.

References are resolved through an optional :class:`ReferenceResolver`;
without one every reference contributes ``0``.
"""

from __future__ import annotations

import math
from typing import Protocol

from pydantic import BaseModel, ConfigDict

from gridcalc.formulas.errors import (
    FormulaDivisionByZero,
    FormulaError,
    FormulaMathError,
    FormulaParseError,
)
from gridcalc.formulas.lexer import is_formula, is_math_operator

# Divisors (and rendered fractions) closer to zero than this count as zero.
ZERO_TOLERANCE = 0.001

PRECEDENCE: dict[str, int] = {
    "^": 4,
    "*": 3,
    "/": 3,
    "+": 2,
    "-": 2,
}


class ReferenceResolver(Protocol):
    """Anything that can turn ``R<row>C<col>`` into a number."""

    def evaluate_reference(self, ref: str) -> float:
        ...


class FormulaResult(BaseModel):
    """Outcome of one evaluation: a value, or the error that aborted it."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    value: float | None = None
    error: FormulaError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: float) -> FormulaResult:
        return cls(value=value)

    @classmethod
    def failure(cls, error: FormulaError) -> FormulaResult:
        return cls(error=error)


def evaluate_formula(
    text: str,
    resolver: ReferenceResolver | None = None,
) -> FormulaResult:
    """Evaluate a formula such as ``"=R1C1*2+3"``.

    Args:
        text: Formula text; must satisfy ``is_formula``.
        resolver: Source of reference values (usually a ``Grid``).

    Returns:
        ``FormulaResult.success(value)``, or ``FormulaResult.failure(exc)``
        when a division by zero, an invalid power or an out-of-range
        number aborted the scan.

    Raises:
        FormulaParseError: If *text* is not a formula.
    """
    if not is_formula(text):
        raise FormulaParseError(text)
    try:
        value = _scan(text, resolver)
    except (FormulaDivisionByZero, FormulaMathError) as exc:
        return FormulaResult.failure(exc)
    return FormulaResult.success(value)


def _scan(text: str, resolver: ReferenceResolver | None) -> float:
    operands: list[float] = []
    operators: list[str] = []
    start = 1

    for i in range(1, len(text)):
        ch = text[i]
        if not is_math_operator(ch):
            continue
        operands.append(_operand(text[start:i], resolver))
        start = i + 1
        while operators and PRECEDENCE[operators[-1]] >= PRECEDENCE[ch]:
            _apply_next(operands, operators)
        operators.append(ch)

    operands.append(_operand(text[start:], resolver))
    while operators:
        _apply_next(operands, operators)

    return operands[-1]


def _operand(span: str, resolver: ReferenceResolver | None) -> float:
    if span.startswith("R"):
        if resolver is None:
            return 0.0
        return float(resolver.evaluate_reference(span))
    value = float(span)
    if not math.isfinite(value):
        raise FormulaMathError(value)
    return value


def _apply_next(operands: list[float], operators: list[str]) -> None:
    """Pop one operator and two operands, push the result."""
    op = operators.pop()
    right = operands.pop()
    left = operands.pop()
    operands.append(apply_operator(op, left, right))


def apply_operator(op: str, left: float, right: float) -> float:
    """Apply a binary operator.

    Raises:
        FormulaDivisionByZero: If ``op`` is ``/`` and ``|right| < 0.001``.
        FormulaMathError: If the result is not a finite real number.
    """
    if op == "+":
        result = left + right
    elif op == "-":
        result = left - right
    elif op == "*":
        result = left * right
    elif op == "/":
        if abs(right) < ZERO_TOLERANCE:
            raise FormulaDivisionByZero(left, right)
        result = left / right
    elif op == "^":
        try:
            result = math.pow(left, right)
        except (ValueError, OverflowError) as exc:
            raise FormulaMathError(left, op, right) from exc
    else:
        raise FormulaError(f"Unknown operator: {op!r}")

    if not math.isfinite(result):
        raise FormulaMathError(left, op, right)
    return result
