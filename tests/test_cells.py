"""Tests for the cell variants."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from gridcalc.cells import ERROR_MARKER, EmptyCell, ErrorCell, NumberCell, TextCell


class TestEmptyAndError:
    def test_empty(self) -> None:
        cell = EmptyCell()
        assert cell.kind == "empty"
        assert cell.evaluate() == 0.0
        assert cell.render() == ""

    def test_error(self) -> None:
        cell = ErrorCell()
        assert cell.kind == "error"
        assert cell.evaluate() == 0.0
        assert cell.render() == ERROR_MARKER == "ERROR"


class TestNumberRender:
    @pytest.mark.parametrize(
        "value, expected",
        [
            (3.0001, "3"),
            (2.9996, "3"),
            (10.0, "10"),
            (-7.0, "-7"),
            (-0.0004, "0"),
            (3.14159, "3.142"),
            (2.5, "2.5"),
            (-2.5, "-2.5"),
            (1.25, "1.25"),
            (1.05, "1.05"),
            (0.1, "0.1"),
            (12.34, "12.34"),
        ],
    )
    def test_render(self, value: float, expected: str) -> None:
        assert NumberCell(value=value).render() == expected

    def test_evaluate_returns_stored_value(self) -> None:
        assert NumberCell(value=3.14159).evaluate() == 3.14159

    @pytest.mark.parametrize("text", ["3", "-3", "+3.5", "3.", "0.125", "1234.5678"])
    def test_render_reparses_to_same_value(self, text: str) -> None:
        """Rendered numbers read back within the display precision."""
        rendered = NumberCell(value=float(text)).render()
        assert float(rendered) == pytest.approx(float(text), abs=0.001)


class TestTextCell:
    def test_render_keeps_quotes(self) -> None:
        assert TextCell(raw='"hello"').render() == '"hello"'

    def test_numeric_content_evaluates(self) -> None:
        assert TextCell(raw='"12.5"').evaluate() == 12.5
        assert TextCell(raw='"-3"').evaluate() == -3.0

    def test_non_numeric_content_is_zero(self) -> None:
        assert TextCell(raw='"abc"').evaluate() == 0.0
        assert TextCell(raw='""').evaluate() == 0.0
        assert TextCell(raw='" 5"').evaluate() == 0.0


class TestImmutability:
    def test_cells_are_frozen(self) -> None:
        cell = NumberCell(value=1.0)
        with pytest.raises(ValidationError):
            cell.value = 2.0

    def test_equal_cells_compare_equal(self) -> None:
        assert NumberCell(value=1.0) == NumberCell(value=1.0)
        assert TextCell(raw='"a"') != TextCell(raw='"b"')
