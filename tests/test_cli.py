"""Tests for the gridcalc command-line interface."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from gridcalc.cli import main


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def table(tmp_path: Path) -> Path:
    path = tmp_path / "table.txt"
    path.write_text('4,"two",\n2.5,\n')
    return path


def _invoke(runner: CliRunner, tmp_path: Path, *args: str, **kwargs):
    return runner.invoke(main, ["--config-dir", str(tmp_path), *args], **kwargs)


class TestShow:
    def test_aligned(self, runner: CliRunner, tmp_path: Path, table: Path) -> None:
        result = _invoke(runner, tmp_path, "show", str(table))
        assert result.exit_code == 0, result.output
        assert result.output.splitlines() == [
            "|   4 | two |",
            "| 2.5 |     |",
        ]

    def test_raw(self, runner: CliRunner, tmp_path: Path, table: Path) -> None:
        result = _invoke(runner, tmp_path, "show", "--raw", str(table))
        assert result.exit_code == 0, result.output
        assert result.output == '4,"two",\n2.5,,\n'

    def test_missing_file(self, runner: CliRunner, tmp_path: Path) -> None:
        result = _invoke(runner, tmp_path, "show", str(tmp_path / "nope.txt"))
        assert result.exit_code != 0


    def test_non_utf8_file(self, runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "latin1.txt"
        path.write_bytes(b'"caf\xe9",\n')
        result = _invoke(runner, tmp_path, "show", str(path))
        assert result.exit_code == 1
        assert "Cannot read" in result.output
        assert result.exception is None or isinstance(result.exception, SystemExit)


class TestEdit:
    def test_edit_saves(self, runner: CliRunner, tmp_path: Path, table: Path) -> None:
        result = _invoke(runner, tmp_path, "edit", str(table), "2", "2", "=R1C1*R2C1")
        assert result.exit_code == 0, result.output
        assert "Cell edited successfully!" in result.output
        assert result.output.splitlines()[-1] == "10"
        assert table.read_text() == '4,"two",\n2.5,10,\n'

    def test_edit_reports_errors(self, runner: CliRunner, tmp_path: Path, table: Path) -> None:
        result = _invoke(runner, tmp_path, "edit", str(table), "1", "1", "=1/0")
        assert result.exit_code == 0, result.output
        assert "Division by zero" in result.output
        assert table.read_text().startswith("ERROR,")

    def test_edit_out_of_range(self, runner: CliRunner, tmp_path: Path, table: Path) -> None:
        before = table.read_text()
        result = _invoke(runner, tmp_path, "edit", str(table), "5", "5", "1")
        assert result.exit_code == 1
        assert "outside the 2x2 grid" in result.output
        assert table.read_text() == before


class TestEval:
    def test_precedence(self, runner: CliRunner, tmp_path: Path) -> None:
        result = _invoke(runner, tmp_path, "eval", "=2+3*4")
        assert result.exit_code == 0, result.output
        assert result.output == "14\n"

    def test_references_against_file(self, runner: CliRunner, tmp_path: Path, table: Path) -> None:
        result = _invoke(runner, tmp_path, "eval", "=R1C1/R2C1", "--file", str(table))
        assert result.exit_code == 0, result.output
        assert result.output == "1.6\n"

    def test_division_by_zero(self, runner: CliRunner, tmp_path: Path) -> None:
        result = _invoke(runner, tmp_path, "eval", "=10/0")
        assert result.exit_code == 1
        assert "Division by zero" in result.output

    def test_not_a_formula(self, runner: CliRunner, tmp_path: Path) -> None:
        result = _invoke(runner, tmp_path, "eval", "=3+")
        assert result.exit_code == 1
        assert "Not a formula" in result.output


class TestShell:
    def test_scripted_session(self, runner: CliRunner, tmp_path: Path) -> None:
        with runner.isolated_filesystem(temp_dir=tmp_path):
            result = runner.invoke(
                main,
                ["--config-dir", ".", "shell"],
                input="open s.txt\nedit 1 1 5\nsave\nexit\n",
            )
            assert result.exit_code == 0, result.output
            assert "Successfully opened file s.txt!" in result.output
            assert "Table saved successfully!" in result.output
            assert result.output.splitlines()[-1] == "Program terminated successfully!"
            assert Path("s.txt").read_text().startswith("5,")

    def test_shell_opens_file_argument(self, runner: CliRunner, tmp_path: Path) -> None:
        with runner.isolated_filesystem(temp_dir=tmp_path):
            Path("t.txt").write_text("1,2,\n")
            result = runner.invoke(main, ["--config-dir", ".", "shell", "t.txt"], input="print\nexit\n")
            assert result.exit_code == 0, result.output
            assert "| 1 | 2 |" in result.output

    def test_non_utf8_file_does_not_end_session(self, runner: CliRunner, tmp_path: Path) -> None:
        with runner.isolated_filesystem(temp_dir=tmp_path):
            Path("bad.txt").write_bytes(b'"caf\xe9",\n')
            result = runner.invoke(main, ["--config-dir", ".", "shell", "bad.txt"], input="help\nexit\n")
            assert result.exit_code == 0, result.output
            assert "Error opening the file!" in result.output
            assert result.output.splitlines()[-1] == "Program terminated successfully!"


# ────────────────────────────────────────────────────────────────
# Events
# ────────────────────────────────────────────────────────────────


class TestEvents:
    def test_events_after_edit(self, runner: CliRunner, tmp_path: Path, table: Path) -> None:
        (tmp_path / "gridcalc.yaml").write_text("log_dir: logs\n")
        assert _invoke(runner, tmp_path, "edit", str(table), "1", "1", "abc").exit_code == 0

        result = _invoke(runner, tmp_path, "events")
        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert "cell_edited" in lines[0]
        assert "INFO" in lines[0]
        assert any("WARNING cell_invalid_type" in line for line in lines)

    def test_filters(self, runner: CliRunner, tmp_path: Path, table: Path) -> None:
        (tmp_path / "gridcalc.yaml").write_text("log_dir: logs\n")
        _invoke(runner, tmp_path, "edit", str(table), "1", "1", "=1/0")
        _invoke(runner, tmp_path, "edit", str(table), "1", "2", "7")

        result = _invoke(runner, tmp_path, "events", "--level", "warning")
        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert len(lines) == 1
        assert "WARNING cell_division_by_zero" in lines[0]

        result = _invoke(runner, tmp_path, "events", "--type", "cell_edited", "--limit", "1")
        assert len(result.output.splitlines()) == 1
        assert "cell_edited" in result.output

    def test_no_events(self, runner: CliRunner, tmp_path: Path) -> None:
        (tmp_path / "gridcalc.yaml").write_text("log_dir: logs\n")
        result = _invoke(runner, tmp_path, "events")
        assert result.exit_code == 0, result.output
        assert result.output == "No events found.\n"

    def test_no_log_dir_configured(self, runner: CliRunner, tmp_path: Path) -> None:
        result = _invoke(runner, tmp_path, "events")
        assert result.exit_code == 1
        assert "No log_dir configured" in result.output


class TestConfig:
    def test_invalid_config(self, runner: CliRunner, tmp_path: Path) -> None:
        (tmp_path / "gridcalc.yaml").write_text("default_rows: 0\n")
        result = _invoke(runner, tmp_path, "eval", "=1")
        assert result.exit_code == 1
        assert "Invalid gridcalc.yaml" in result.output

    def test_custom_delimiter(self, runner: CliRunner, tmp_path: Path) -> None:
        (tmp_path / "gridcalc.yaml").write_text("delimiter: ';'\n")
        path = tmp_path / "semi.txt"
        path.write_text("1;2;\n")
        result = _invoke(runner, tmp_path, "show", "--raw", str(path))
        assert result.exit_code == 0, result.output
        assert result.output == "1;2;\n"
