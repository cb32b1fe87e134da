"""Command-line interface for gridcalc."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

import click

from gridcalc import __version__
from gridcalc.config import configure_logging, load_config, resolve_log_dir


@click.group()
@click.version_option(version=__version__, prog_name="gridcalc")
@click.option(
    "--config-dir",
    type=click.Path(exists=True, file_okay=False),
    default=None,
    help="Directory holding gridcalc.yaml (default: current directory).",
)
@click.pass_context
def main(ctx: click.Context, config_dir: str | None) -> None:
    """gridcalc -- a small spreadsheet with R<row>C<col> formulas."""
    base_dir = Path(config_dir) if config_dir else Path.cwd()
    try:
        config = load_config(base_dir)
    except ValueError as e:
        raise click.ClickException(f"Invalid gridcalc.yaml: {e}")
    config["log_dir"] = resolve_log_dir(config, base_dir)
    configure_logging(config, base_dir)
    ctx.obj = config


# ---------------------------------------------------------------------------
# helpers
# ---------------------------------------------------------------------------


def _read(path: Path, config: dict[str, Any], messages=None):
    from gridcalc.storage import read_grid

    try:
        return read_grid(
            path,
            config["delimiter"],
            default_rows=config["default_rows"],
            default_columns=config["default_columns"],
            messages=messages,
        )
    except (OSError, UnicodeDecodeError) as e:
        raise click.ClickException(f"Cannot read {path}: {e}")


# ---------------------------------------------------------------------------
# Shell
# ---------------------------------------------------------------------------


@main.command()
@click.argument("file", required=False)
@click.pass_obj
def shell(config: dict[str, Any], file: str | None) -> None:
    """Start the interactive console, optionally opening FILE (a .txt name)."""
    from gridcalc.console import Session, run_loop

    session = Session(config)
    if file:
        for message in session.execute(f"open {file}").output:
            click.echo(message)

    run_loop(session, (line.rstrip("\n") for line in sys.stdin), click.echo)


# ---------------------------------------------------------------------------
# Show / Edit
# ---------------------------------------------------------------------------


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--raw", is_flag=True, help="Print the delimited form instead of the aligned table.")
@click.pass_obj
def show(config: dict[str, Any], file: str, raw: bool) -> None:
    """Print the grid stored in FILE."""
    from gridcalc.display import render_table
    from gridcalc.storage import dumps

    grid = _read(Path(file), config)
    if raw:
        click.echo(dumps(grid, config["delimiter"]), nl=False)
    else:
        click.echo(render_table(grid))


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.argument("row", type=int)
@click.argument("col", type=int)
@click.argument("value")
@click.pass_obj
def edit(config: dict[str, Any], file: str, row: int, col: int, value: str) -> None:
    """Set the cell at ROW, COL in FILE to VALUE and save the file."""
    from gridcalc.storage import write_grid

    path = Path(file)
    messages: list[str] = []
    grid = _read(path, config, messages.append)
    edited = grid.edit_cell(row, col, value)
    for message in messages:
        click.echo(message)
    if not edited:
        raise click.ClickException(
            f"R{row}C{col} is outside the {grid.rows}x{grid.columns} grid"
        )
    try:
        write_grid(grid, path, config["delimiter"])
    except OSError as e:
        raise click.ClickException(f"Cannot write {path}: {e}")
    click.echo(grid.get_cell(row, col).render())


# ---------------------------------------------------------------------------
# Eval
# ---------------------------------------------------------------------------


@main.command("eval")
@click.argument("formula")
@click.option(
    "--file",
    "file",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Resolve R<row>C<col> references against the grid in this file.",
)
@click.pass_obj
def eval_formula(config: dict[str, Any], formula: str, file: str | None) -> None:
    """Evaluate FORMULA (e.g. "=R1C1*2+3") and print the rendered result."""
    from gridcalc.cells import NumberCell
    from gridcalc.formulas import evaluate_formula, is_formula, trim

    text = trim(formula)
    if not is_formula(text):
        raise click.ClickException(f"Not a formula: {formula!r}")

    grid = _read(Path(file), config) if file else None
    result = evaluate_formula(text, grid)
    if not result.ok:
        raise click.ClickException(str(result.error))
    click.echo(NumberCell(value=result.value).render())


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


@main.command("events")
@click.option("--level", default=None, type=click.Choice(["info", "warning", "error"]), help="Filter by level.")
@click.option("--type", "event_type", default=None, help="Filter by event type.")
@click.option("--limit", default=100, type=int, help="Maximum events to show.")
@click.pass_obj
def events_cmd(config: dict[str, Any], level: str | None, event_type: str | None, limit: int) -> None:
    """Show the structured event log configured by log_dir."""
    from gridcalc.logging.sink import EventSink

    log_dir = config["log_dir"]
    if log_dir is None:
        raise click.ClickException("No log_dir configured in gridcalc.yaml")

    events = EventSink(log_dir).read(level=level, event_type=event_type, limit=limit)
    if not events:
        click.echo("No events found.")
        return

    for evt in events:
        ts = evt.get("ts", "")
        lvl = evt.get("level", "").upper()
        etype = evt.get("event_type", "")
        msg = evt.get("message", "")
        click.echo(f"[{ts}] {lvl:7s} {etype}: {msg}")
