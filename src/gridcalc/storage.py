"""Delimited text format for grids.

One line per row; every cell is written as its ``render()`` string
followed by the delimiter, so a 2x2 grid looks like::

    1,"two",
    ERROR,,

Quoted text keeps its quote markers. There is no escaping: a delimiter
inside quoted text splits the cell.
"""

from __future__ import annotations

from pathlib import Path

from gridcalc.grid import Grid, MessageSink

DEFAULT_DELIMITER = ","
DEFAULT_ROWS = 10
DEFAULT_COLUMNS = 10


def dumps(grid: Grid, delimiter: str = DEFAULT_DELIMITER) -> str:
    """Serialize *grid* to delimited text."""
    lines = []
    for row in grid.iter_rows():
        lines.append("".join(cell.render() + delimiter for cell in row))
    return "\n".join(lines) + "\n"


def split_lines(text: str) -> list[str]:
    r"""Split *text* on ``\n`` only, dropping one trailing ``\r`` per line.

    Other line-break characters (form feed, ``\u2028``, ...) may appear
    inside quoted text and stay part of their line. A final newline
    does not start another line.
    """
    lines = [line[:-1] if line.endswith("\r") else line for line in text.split("\n")]
    if lines[-1] == "":
        lines.pop()
    return lines


def _split_line(line: str, delimiter: str) -> list[str]:
    if not line:
        return []
    tokens = line.split(delimiter)
    if line.endswith(delimiter):
        tokens.pop()
    return tokens


def loads(
    text: str,
    delimiter: str = DEFAULT_DELIMITER,
    *,
    default_rows: int = DEFAULT_ROWS,
    default_columns: int = DEFAULT_COLUMNS,
    messages: MessageSink | None = None,
) -> Grid:
    """Build a grid from delimited text.

    The grid has one row per line and as many columns as the widest
    line; short rows are padded with Empty cells. An empty document
    gives a ``default_rows x default_columns`` grid of Empty cells.
    """
    rows = [_split_line(line, delimiter) for line in split_lines(text)]
    if not rows:
        return Grid(default_rows, default_columns, messages=messages)

    columns = max((len(tokens) for tokens in rows), default=0) or 1
    grid = Grid(len(rows), columns, messages=messages)
    for r, tokens in enumerate(rows, start=1):
        for c, token in enumerate(tokens, start=1):
            if token:
                grid.edit_cell(r, c, token, quiet=True)
    return grid


def read_grid(
    path: Path,
    delimiter: str = DEFAULT_DELIMITER,
    *,
    default_rows: int = DEFAULT_ROWS,
    default_columns: int = DEFAULT_COLUMNS,
    messages: MessageSink | None = None,
) -> Grid:
    """Read a grid from *path*.

    Raises:
        OSError: If the file cannot be read.
        UnicodeDecodeError: If the file is not UTF-8 text.
    """
    return loads(
        Path(path).read_text(encoding="utf-8"),
        delimiter,
        default_rows=default_rows,
        default_columns=default_columns,
        messages=messages,
    )


def write_grid(grid: Grid, path: Path, delimiter: str = DEFAULT_DELIMITER) -> None:
    """Write *grid* to *path*, replacing its contents.

    Raises:
        OSError: If the file cannot be written.
    """
    Path(path).write_text(dumps(grid, delimiter), encoding="utf-8")
