"""Infix formula classification and evaluation.

Public API::

    from gridcalc.formulas import is_formula, evaluate_formula
"""

from gridcalc.formulas.errors import (
    FormulaDivisionByZero,
    FormulaError,
    FormulaMathError,
    FormulaParseError,
)
from gridcalc.formulas.evaluator import (
    PRECEDENCE,
    ZERO_TOLERANCE,
    FormulaResult,
    ReferenceResolver,
    evaluate_formula,
)
from gridcalc.formulas.lexer import (
    is_cell_reference,
    is_digit,
    is_formula,
    is_integer,
    is_math_operator,
    is_number,
    is_quoted_text,
    is_sign,
    split_reference,
    trim,
    unquote,
)

__all__ = [
    "PRECEDENCE",
    "ZERO_TOLERANCE",
    "FormulaDivisionByZero",
    "FormulaError",
    "FormulaMathError",
    "FormulaParseError",
    "FormulaResult",
    "ReferenceResolver",
    "evaluate_formula",
    "is_cell_reference",
    "is_digit",
    "is_formula",
    "is_integer",
    "is_math_operator",
    "is_number",
    "is_quoted_text",
    "is_sign",
    "split_reference",
    "trim",
    "unquote",
]
