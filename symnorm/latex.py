"""
LaTeX rendering of SYMNORM expressions.

    to_latex(simplify(expr_of("2*(3+x)")))  # => "2 \\cdot 3 + 2 \\cdot x"

Subterms are parenthesized only when their precedence is lower than the
surrounding context requires.
"""

import math
from enum import IntEnum
from typing import Tuple

from .expression import (
    Expression, Number, Variable, Multiplication, Addition, Division,
    Negation, Exponentiation, Sqrt, Function,
    format_decimal,
)


class Precedence(IntEnum):
    ADD = 1
    MUL = 2
    UNARY = 3
    EXP = 4
    ATOM = 5


def format_number(value: float) -> str:
    """Render a number, using symbols for pi and e."""
    if value == math.pi:
        return "\\pi"
    if value == math.e:
        return "e"
    return format_decimal(value)


def _wrap(latex: str, prec: Precedence, required: Precedence) -> str:
    if prec < required:
        return f"({latex})"
    return latex


def _render(expr: Expression) -> Tuple[str, Precedence]:
    if isinstance(expr, Number):
        return format_number(expr.value), Precedence.ATOM

    if isinstance(expr, Variable):
        return expr.name, Precedence.ATOM

    if isinstance(expr, Multiplication):
        if not expr.terms:
            return "1", Precedence.ATOM
        terms = [_wrap(*_render(term), Precedence.MUL) for term in expr.terms]
        return " \\cdot ".join(terms), Precedence.MUL

    if isinstance(expr, Addition):
        if not expr.terms:
            return "0", Precedence.ATOM
        terms = [_wrap(*_render(term), Precedence.ADD) for term in expr.terms]
        return " + ".join(terms), Precedence.ADD

    if isinstance(expr, Division):
        numerator, _ = _render(expr.numerator)
        denominator, _ = _render(expr.denominator)
        return f"\\frac{{{numerator}}}{{{denominator}}}", Precedence.ATOM

    if isinstance(expr, Negation):
        inner = _wrap(*_render(expr.term), Precedence.UNARY)
        return f"-{inner}", Precedence.UNARY

    if isinstance(expr, Exponentiation):
        base = _wrap(*_render(expr.base), Precedence.EXP)
        exponent = _wrap(*_render(expr.exponent), Precedence.ATOM)
        return f"{base}^{{{exponent}}}", Precedence.EXP

    if isinstance(expr, Sqrt):
        arg, _ = _render(expr.arg)
        return f"\\sqrt{{{arg}}}", Precedence.ATOM

    if isinstance(expr, Function):
        arg, _ = _render(expr.arg)
        return f"\\{expr.name}({arg})", Precedence.ATOM

    raise TypeError(f"Not an expression: {expr!r}")


def to_latex(expr: Expression) -> str:
    """Render an expression as a LaTeX string."""
    latex, _ = _render(expr)
    return latex
