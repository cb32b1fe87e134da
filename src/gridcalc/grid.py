"""Fixed-size grid of cells with a text-driven cell factory.

Coordinates are 1-based at every public method; cells are kept in one
flat row-major list indexed by ``(row - 1) * columns + (col - 1)``.

Usage::

    grid = Grid(3, 3)
    grid.edit_cell(1, 1, "4")
    grid.edit_cell(1, 2, "=R1C1*2.5")
    grid.get_cell(1, 2).render()   # "10"
"""

from __future__ import annotations

import math
from typing import Callable, Iterator

from gridcalc.cells import EMPTY, Cell, EmptyCell, ErrorCell, NumberCell, TextCell
from gridcalc.formulas.errors import FormulaDivisionByZero
from gridcalc.formulas.evaluator import FormulaResult, evaluate_formula
from gridcalc.formulas.lexer import (
    is_cell_reference,
    is_formula,
    is_number,
    is_quoted_text,
    split_reference,
    trim,
)
from gridcalc.logging import EventType, emit_info, emit_warning

MessageSink = Callable[[str], None]

INVALID_TYPE_MESSAGE = "Error in cell! Cell has invalid type! Error cell is produced!"
DIVISION_BY_ZERO_MESSAGE = "Error in cell! Division by zero is not allowed! Error cell is produced!"
INVALID_OPERATION_MESSAGE = "Error in cell! Invalid operation! Error cell is produced!"
EDIT_OK_MESSAGE = "Cell edited successfully!"
EDIT_OUT_OF_RANGE_MESSAGE = "Invalid cell! Editing unsuccessful"


class GridShapeError(ValueError):
    """Grid dimensions must both be positive.

    Attributes:
        rows: Requested row count.
        columns: Requested column count.
    """

    def __init__(self, rows: int, columns: int) -> None:
        self.rows = rows
        self.columns = columns
        super().__init__(f"Grid dimensions must be positive, got {rows}x{columns}")


class Grid:
    """A ``rows x columns`` table of cells, all Empty on construction.

    Parameters
    ----------
    rows, columns : int
        Fixed dimensions; both must be >= 1.
    messages : callable, optional
        Receives human-readable diagnostics ("invalid type", "division
        by zero", edit outcomes). Discarded when omitted.
    """

    def __init__(self, rows: int, columns: int, *, messages: MessageSink | None = None) -> None:
        if rows < 1 or columns < 1:
            raise GridShapeError(rows, columns)
        self.rows = rows
        self.columns = columns
        self._cells: list[Cell] = [EMPTY] * (rows * columns)
        self._messages = messages

    def __repr__(self) -> str:
        return f"Grid(rows={self.rows}, columns={self.columns})"

    @property
    def shape(self) -> tuple[int, int]:
        return self.rows, self.columns

    # ------------------------------------------------------------------
    # Addressing
    # ------------------------------------------------------------------

    def cell_exists(self, row: int, col: int) -> bool:
        return 0 < row <= self.rows and 0 < col <= self.columns

    def _index(self, row: int, col: int) -> int:
        return (row - 1) * self.columns + (col - 1)

    def get_cell(self, row: int, col: int) -> Cell:
        """Return the cell at (row, col).

        Raises:
            IndexError: If the coordinate is outside the grid.
        """
        if not self.cell_exists(row, col):
            raise IndexError(f"Cell R{row}C{col} is outside a {self.rows}x{self.columns} grid")
        return self._cells[self._index(row, col)]

    def iter_rows(self) -> Iterator[list[Cell]]:
        """Yield each row as a list of cells, top to bottom."""
        for start in range(0, len(self._cells), self.columns):
            yield self._cells[start:start + self.columns]

    # ------------------------------------------------------------------
    # Cell factory
    # ------------------------------------------------------------------

    def create_cell(self, text: str, *, quiet: bool = False) -> Cell:
        """Build a cell from raw text.

        Trimmed text is classified in order: empty, quoted text, number,
        formula. A formula is evaluated now and frozen into a Number
        cell. Anything unrecognized (including numbers beyond float
        range) and any formula that fails to evaluate becomes an Error
        cell. Never raises.
        """
        text = trim(text)

        if not text:
            return EmptyCell()
        if is_quoted_text(text):
            return TextCell(raw=text)
        if is_number(text) and math.isfinite(float(text)):
            return NumberCell(value=float(text))
        if is_formula(text):
            result = self.calculate_formula(text)
            if result.ok:
                return NumberCell(value=result.value)
            if isinstance(result.error, FormulaDivisionByZero):
                self._report(DIVISION_BY_ZERO_MESSAGE, quiet)
                emit_warning(
                    EventType.cell_division_by_zero,
                    str(result.error),
                    {"text": text},
                )
            else:
                self._report(INVALID_OPERATION_MESSAGE, quiet)
                emit_warning(
                    EventType.cell_invalid_operation,
                    str(result.error),
                    {"text": text},
                )
            return ErrorCell()

        self._report(INVALID_TYPE_MESSAGE, quiet)
        emit_warning(EventType.cell_invalid_type, "Unrecognized cell text", {"text": text})
        return ErrorCell()

    def edit_cell(self, row: int, col: int, text: str, *, quiet: bool = False) -> bool:
        """Replace the cell at (row, col) with one built from *text*.

        Returns:
            True if the cell was replaced, False if the coordinate is
            outside the grid (the grid is left unchanged).
        """
        if not self.cell_exists(row, col):
            self._report(EDIT_OUT_OF_RANGE_MESSAGE, quiet)
            emit_warning(
                EventType.edit_out_of_range,
                EDIT_OUT_OF_RANGE_MESSAGE,
                {"row": row, "col": col, "rows": self.rows, "columns": self.columns},
            )
            return False

        cell = self.create_cell(text, quiet=quiet)
        self._cells[self._index(row, col)] = cell
        self._report(EDIT_OK_MESSAGE, quiet)
        emit_info(EventType.cell_edited, EDIT_OK_MESSAGE, {"row": row, "col": col, "kind": cell.kind})
        return True

    # ------------------------------------------------------------------
    # Formula support
    # ------------------------------------------------------------------

    def evaluate_reference(self, ref: str) -> float:
        """Value of the cell named by ``R<row>C<col>``; 0.0 when out of range."""
        if not is_cell_reference(ref):
            return 0.0
        row, col = split_reference(ref)
        if self.cell_exists(row, col):
            return self._cells[self._index(row, col)].evaluate()
        return 0.0

    def calculate_formula(self, text: str) -> FormulaResult:
        """Evaluate a formula against the current contents of this grid."""
        return evaluate_formula(text, self)

    def _report(self, message: str, quiet: bool) -> None:
        if not quiet and self._messages is not None:
            self._messages(message)
