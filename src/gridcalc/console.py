"""Interactive command session over one grid file.

Commands::

    open <file>.txt              opens <file>
    close                        closes the current file
    save                         saves the current file
    saveas <file>.txt            saves the current grid to <file>
    help                         prints the command list
    print                        prints the current grid
    edit <row> <col> <value>     edits one cell
    exit                         ends the session

``Session.execute`` never exits the process; ``exit`` sets
``CommandResult.terminate`` and the driver loop stops.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Iterable

from pydantic import BaseModel, Field

from gridcalc.config import DEFAULT_CONFIG
from gridcalc.display import render_lines
from gridcalc.formulas.lexer import is_integer, trim
from gridcalc.grid import Grid
from gridcalc.logging import EventType, emit_error, emit_info
from gridcalc.storage import loads, split_lines, write_grid

FILE_EXTENSION = ".txt"
FORBIDDEN_NAME_CHARS = '/\\?%*:|"<>.'
MIN_COMMAND_LENGTH = 4

GREETING = "Open a text file (.txt) to read: (open <file>.txt)"

HELP_LINES = [
    "open <file>                  opens <file>",
    "close                        closes currently opened file",
    "save                         saves the currently open file",
    "saveas <file>                saves the currently open file in <file>",
    "help                         prints this information",
    "print                        print the current table",
    "edit <row> <col> <value>     edits the cell at <row> <col>",
    "exit                         exits the program",
]


class CommandResult(BaseModel):
    """Lines to show the user, and whether the session should end."""

    output: list[str] = Field(default_factory=list)
    terminate: bool = False


class Session:
    """One console session: at most one open file and its grid.

    Parameters
    ----------
    config : dict, optional
        Merged configuration (see ``gridcalc.config.load_config``).
    base_dir : Path, optional
        Directory that file names are resolved against (default: cwd).
    """

    def __init__(self, config: dict[str, Any] | None = None, base_dir: Path | None = None) -> None:
        self.config = dict(DEFAULT_CONFIG)
        if config:
            self.config.update(config)
        self.base_dir = base_dir or Path.cwd()
        self.grid: Grid | None = None
        self.file: Path | None = None
        self._output: list[str] = []
        self._commands: dict[str, Callable[[], bool]] = {
            "save": self._save,
            "print": self._print,
            "help": self._help,
            "close": self._close,
            "exit": self._exit,
        }

    @property
    def is_open(self) -> bool:
        return self.file is not None

    def execute(self, command: str) -> CommandResult:
        """Run one command line and collect everything it reports."""
        self._output = []
        terminate = self._dispatch(trim(command))
        return CommandResult(output=self._output, terminate=terminate)

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def _say(self, message: str) -> None:
        self._output.append(message)

    def _dispatch(self, command: str) -> bool:
        if len(command) < MIN_COMMAND_LENGTH:
            self._say("Command too short")
            return False

        if not self.is_open:
            if command.startswith("open "):
                name = command[len("open "):]
                if self._validate_file(name):
                    self._open(name)
            elif command in ("help", "exit"):
                return self._commands[command]()
            else:
                self._say("Invalid command!")
            return False

        if command in self._commands:
            return self._commands[command]()
        if command.startswith("saveas "):
            name = command[len("saveas "):]
            if self._validate_file(name):
                self._save_as(name)
        elif command.startswith("edit "):
            self._edit(command[len("edit "):])
        else:
            self._say("Invalid command! (Hint: type help to see available commands)")
        return False

    # ------------------------------------------------------------------
    # File names
    # ------------------------------------------------------------------

    def _validate_file(self, name: str) -> bool:
        if len(name) <= len(FILE_EXTENSION):
            self._say("Filename too short! (Hint: File format should be filename.txt)")
            return False
        stem, extension = name[:-len(FILE_EXTENSION)], name[-len(FILE_EXTENSION):]
        if extension != FILE_EXTENSION:
            self._say("Invalid file extension! (Hint: File should be .txt)")
            return False
        if any(ch in FORBIDDEN_NAME_CHARS for ch in stem):
            self._say("Invalid file name! (Hint: Check forbidden filename characters in Windows OS)")
            return False
        return True

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def _open(self, name: str) -> None:
        path = self.base_dir / name
        try:
            path.touch(exist_ok=True)
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            self._say("Error opening the file!")
            emit_error(EventType.file_error, str(exc), {"path": str(path), "action": "open"})
            return

        self._say(f"Successfully opened file {name}!")
        self.grid = loads(
            text,
            self.config["delimiter"],
            default_rows=self.config["default_rows"],
            default_columns=self.config["default_columns"],
            messages=self._say,
        )
        self.file = path
        if not split_lines(text):
            self._say(
                f"File empty! Generated default "
                f"{self.grid.rows}x{self.grid.columns} empty table"
            )
        emit_info(EventType.file_opened, f"Opened {name}", {"path": str(path), "shape": list(self.grid.shape)})

    def _write(self, grid: Grid, path: Path) -> bool:
        try:
            write_grid(grid, path, self.config["delimiter"])
        except OSError as exc:
            self._say("Error opening the file!")
            emit_error(EventType.file_error, str(exc), {"path": str(path), "action": "save"})
            return False
        emit_info(EventType.file_saved, f"Saved {path.name}", {"path": str(path)})
        return True

    def _save(self) -> bool:
        if self.grid is None or self.file is None:
            return False
        if self._write(self.grid, self.file):
            self._say("Table saved successfully!")
        return False

    def _save_as(self, name: str) -> None:
        if self.grid is not None and self._write(self.grid, self.base_dir / name):
            self._say(f"Table saved successfully as {name}!")

    def _close(self) -> bool:
        if self.file is not None:
            emit_info(EventType.file_closed, f"Closed {self.file.name}", {"path": str(self.file)})
        self.grid = None
        self.file = None
        self._say("Successfully closed current file!")
        return False

    def _print(self) -> bool:
        if self.grid is not None:
            self._output.extend(render_lines(self.grid))
        return False

    def _help(self) -> bool:
        self._output.extend(HELP_LINES)
        return False

    def _exit(self) -> bool:
        self._say("Program terminated successfully!")
        return True

    def _edit(self, args: str) -> None:
        if self.grid is None:
            return
        parts = args.split(" ", 2)
        if len(parts) == 3 and is_integer(parts[0]) and is_integer(parts[1]):
            self.grid.edit_cell(int(parts[0]), int(parts[1]), parts[2])
            return
        self._say("Invalid command! (Hint: Command should be: edit <row> <col> <value>)")


def run_loop(session: Session, lines: Iterable[str], echo: Callable[[str], None]) -> None:
    """Feed *lines* to *session* until it asks to terminate or input ends."""
    if not session.is_open:
        echo(GREETING)
    for line in lines:
        result = session.execute(line)
        for message in result.output:
            echo(message)
        if result.terminate:
            break
