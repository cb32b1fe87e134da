"""Lexical classification of raw cell text.

Pure predicates deciding whether a piece of text is a number, quoted
text, a cell reference (``R<row>C<col>``) or a formula. Formulas are
validated with a small Lark grammar:

- Operands: unsigned numbers (``3``, ``2.5``, ``7.``) and references
- Operators: ``+ - * / ^`` between every pair of operands
- No whitespace, parentheses or unary signs
"""

from __future__ import annotations

import re

from lark import Lark
from lark.exceptions import LarkError

MATH_OPERATORS = frozenset("+-*/^")
SIGNS = frozenset("+-")
WHITESPACE = " \t\f\v\n\r"

_NUMBER_RE = re.compile(r"[+-]?[0-9]+(\.[0-9]*)?")
_INTEGER_RE = re.compile(r"[+-]?[0-9]+")
_REFERENCE_RE = re.compile(r"R([1-9][0-9]*)C([1-9][0-9]*)")

GRAMMAR = r"""
start: "=" operand (OPERATOR operand)*

?operand: NUMBER
    | REFERENCE

OPERATOR: "+" | "-" | "*" | "/" | "^"

NUMBER: /[0-9]+(?:\.[0-9]*)?/
REFERENCE: /R[1-9][0-9]*C[1-9][0-9]*/
"""

_parser = Lark(GRAMMAR, parser="lalr", start="start")


def is_sign(ch: str) -> bool:
    return ch in SIGNS and len(ch) == 1


def is_digit(ch: str) -> bool:
    return len(ch) == 1 and "0" <= ch <= "9"


def is_math_operator(ch: str) -> bool:
    return ch in MATH_OPERATORS and len(ch) == 1


def trim(text: str) -> str:
    """Strip leading and trailing space, tab, form-feed, vertical-tab, CR and LF."""
    if not text:
        return text
    return text.strip(WHITESPACE)


def is_integer(text: str) -> bool:
    """True for an optionally signed run of digits."""
    return _INTEGER_RE.fullmatch(text) is not None


def is_number(text: str) -> bool:
    """True for ``(+|-)?[0-9]+(.[0-9]*)?``.

    No exponent notation and no bare leading dot: ``1e5`` and ``.5`` are
    not numbers, ``5.`` is.
    """
    return _NUMBER_RE.fullmatch(text) is not None


def is_cell_reference(text: str) -> bool:
    """True for ``R<row>C<col>`` with both indices positive and unpadded."""
    return _REFERENCE_RE.fullmatch(text) is not None


def split_reference(text: str) -> tuple[int, int]:
    """Split ``"R3C12"`` into ``(3, 12)``.

    Raises:
        ValueError: If *text* is not a cell reference.
    """
    m = _REFERENCE_RE.fullmatch(text)
    if m is None:
        raise ValueError(f"Not a cell reference: {text!r}")
    return int(m.group(1)), int(m.group(2))


def is_formula(text: str) -> bool:
    """True when *text* is ``=`` followed by operands joined by operators.

    Every operand must be an unsigned number or a cell reference, so
    ``=3+``, ``=-3+4`` and ``=3+-4`` are all rejected.
    """
    if len(text) < 2 or text[0] != "=" or not is_digit(text[-1]):
        return False
    try:
        _parser.parse(text)
    except LarkError:
        return False
    return True


def is_quoted_text(text: str) -> bool:
    """True when *text* starts and ends with ``"`` (inner quotes are taken verbatim)."""
    return len(text) > 1 and text[0] == '"' and text[-1] == '"'


def unquote(text: str) -> str:
    """Drop the outer quote pair from quoted text; other text is returned as-is."""
    if is_quoted_text(text):
        return text[1:-1]
    return text
