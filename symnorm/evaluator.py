"""
Numeric evaluation of SYMNORM expressions.

evaluate() folds an expression to a float. Anything without a real value
raises EvalError instead of producing NaN or infinity:

    evaluate(expr_of("5/0"))       # EvalError: Division by zero
    evaluate(expr_of("sqrt(-1)"))  # EvalError: Square root of a negative number
    try_evaluate(expr_of("x"))     # None
"""

import math
from typing import Callable, Dict, Optional

from .errors import EvalError
from .expression import (
    Expression, Number, Variable, Multiplication, Addition, Division,
    Negation, Exponentiation, Sqrt, Function,
)

UnaryHandler = Callable[[float], float]


# ============================================================
# Function Handlers
# ============================================================

def reciprocal(f: UnaryHandler, label: str) -> UnaryHandler:
    """Build 1/f(x), failing where f(x) is exactly zero."""
    def handler(x: float) -> float:
        denominator = f(x)
        if denominator == 0.0:
            raise EvalError(f"{label} undefined for this input")
        return 1.0 / denominator
    return handler


def inverse_reciprocal(f: UnaryHandler, label: str) -> UnaryHandler:
    """Build f(1/x), failing at x == 0."""
    def handler(x: float) -> float:
        if x == 0.0:
            raise EvalError(f"{label} undefined for zero")
        return f(1.0 / x)
    return handler


FUNCTIONS: Dict[str, UnaryHandler] = {
    "sin": math.sin,
    "cos": math.cos,
    "tan": math.tan,
    "csc": reciprocal(math.sin, "Cosecant"),
    "sec": reciprocal(math.cos, "Secant"),
    "cot": reciprocal(math.tan, "Cotangent"),
    "arcsin": math.asin,
    "arccos": math.acos,
    "arctan": math.atan,
    "arccsc": inverse_reciprocal(math.asin, "Arccosecant"),
    "arcsec": inverse_reciprocal(math.acos, "Arcsecant"),
    "arccot": inverse_reciprocal(math.atan, "Arccotangent"),
}


# ============================================================
# Evaluation
# ============================================================

def _finite(value: float, what: str) -> float:
    if not math.isfinite(value):
        raise EvalError(f"{what} is not a finite number")
    return value


def evaluate(expr: Expression) -> float:
    """
    Evaluate an expression to a float.

    Args:
        expr: Expression to evaluate, simplified or not

    Returns:
        The numeric value

    Raises:
        EvalError: For variables, division by zero, square roots of
            negative numbers, trig singularities, real-domain violations
            and overflow
    """
    if isinstance(expr, Number):
        return _finite(expr.value, "Number")

    if isinstance(expr, Variable):
        raise EvalError(f"Cannot evaluate variable {expr.name}")

    if isinstance(expr, Addition):
        total = 0.0
        for term in expr.terms:
            total += evaluate(term)
        return _finite(total, "Sum")

    if isinstance(expr, Multiplication):
        product = 1.0
        for term in expr.terms:
            product *= evaluate(term)
        return _finite(product, "Product")

    if isinstance(expr, Division):
        numerator = evaluate(expr.numerator)
        denominator = evaluate(expr.denominator)
        if denominator == 0.0:
            raise EvalError("Division by zero")
        return _finite(numerator / denominator, "Quotient")

    if isinstance(expr, Negation):
        return -evaluate(expr.term)

    if isinstance(expr, Exponentiation):
        base = evaluate(expr.base)
        exponent = evaluate(expr.exponent)
        try:
            return _finite(math.pow(base, exponent), "Power")
        except ValueError:
            raise EvalError(f"{base!r} ^ {exponent!r} has no real value")
        except OverflowError:
            raise EvalError(f"{base!r} ^ {exponent!r} is too large")

    if isinstance(expr, Sqrt):
        arg = evaluate(expr.arg)
        if arg < 0.0:
            raise EvalError("Square root of a negative number")
        return math.sqrt(arg)

    if isinstance(expr, Function):
        arg = evaluate(expr.arg)
        try:
            return _finite(FUNCTIONS[expr.name](arg), expr.name)
        except ValueError:
            raise EvalError(f"{expr.name}({arg!r}) is outside the function's domain")

    raise TypeError(f"Not an expression: {expr!r}")


def try_evaluate(expr: Expression) -> Optional[float]:
    """Evaluate, returning None when the expression has no numeric value."""
    try:
        return evaluate(expr)
    except EvalError:
        return None
