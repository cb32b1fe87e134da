"""Cell variants stored in a :class:`~gridcalc.grid.Grid`.

A cell is exactly one of four immutable variants, discriminated by the
``kind`` field. Every variant answers two questions:

- ``evaluate()`` -- the numeric value used when a formula references it
- ``render()`` -- the raw display/storage string

Cells are built from raw text by ``Grid.create_cell``; editing a grid
replaces a cell wholesale, it never mutates one.
"""

from __future__ import annotations

import math
from typing import Literal

from pydantic import BaseModel, ConfigDict

from gridcalc.formulas.evaluator import ZERO_TOLERANCE
from gridcalc.formulas.lexer import is_number, unquote

ERROR_MARKER = "ERROR"


def _round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


class EmptyCell(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["empty"] = "empty"

    def evaluate(self) -> float:
        return 0.0

    def render(self) -> str:
        return ""


class NumberCell(BaseModel):
    """A plain number, including the frozen result of a formula."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["number"] = "number"
    value: float

    def evaluate(self) -> float:
        return self.value

    def render(self) -> str:
        """Integer form when within 0.001 of an integer, else 1-3 decimals.

        The precision is the smallest that keeps every non-zero digit of
        the value rounded to thousandths: ``2.5``, ``1.25``, ``3.142``.
        """
        value = self.value
        if not math.isfinite(value):
            return str(value)
        nearest = _round_half_away(value)
        if abs(value - nearest) < ZERO_TOLERANCE:
            return str(nearest)

        thousandths = _round_half_away(1000 * value)
        precision = 1
        if thousandths % 100 != 0:
            precision += 1
            if thousandths % 10 != 0:
                precision += 1
        return f"{value:.{precision}f}"


class TextCell(BaseModel):
    """Quoted text. ``raw`` keeps its surrounding ``"`` markers."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["text"] = "text"
    raw: str

    def evaluate(self) -> float:
        # Numeric content counts in formulas; anything else is 0.
        content = unquote(self.raw)
        if is_number(content):
            return float(content)
        return 0.0

    def render(self) -> str:
        return self.raw


class ErrorCell(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["error"] = "error"

    def evaluate(self) -> float:
        return 0.0

    def render(self) -> str:
        return ERROR_MARKER


Cell = EmptyCell | NumberCell | TextCell | ErrorCell

EMPTY = EmptyCell()
