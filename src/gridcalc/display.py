"""Column-aligned text rendering of a grid.

Each column is as wide as its longest displayed cell. Cells are
right-aligned between ``|`` borders, and quoted text is shown without
its quote markers::

    |   1 | two |
    | 2.5 |     |
"""

from __future__ import annotations

from gridcalc.formulas.lexer import unquote
from gridcalc.grid import Grid


def display_rows(grid: Grid) -> list[list[str]]:
    """Displayed content of every cell, row by row."""
    return [[unquote(cell.render()) for cell in row] for row in grid.iter_rows()]


def column_widths(grid: Grid) -> list[int]:
    widths = [0] * grid.columns
    for row in display_rows(grid):
        for j, content in enumerate(row):
            widths[j] = max(widths[j], len(content))
    return widths


def render_lines(grid: Grid) -> list[str]:
    widths = column_widths(grid)
    lines = []
    for row in display_rows(grid):
        parts = [f"| {content.rjust(widths[j])} " for j, content in enumerate(row)]
        lines.append("".join(parts) + "|")
    return lines


def render_table(grid: Grid) -> str:
    """The whole grid as aligned text, one line per row."""
    return "\n".join(render_lines(grid))
