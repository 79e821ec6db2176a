"""
Exception types for SYMNORM.

Every fault raised by the pipeline derives from SymnormError, so front ends
can report any of them with a single except clause:

    try:
        results = process(text)
    except SymnormError as e:
        print(f"Error: {e}")

Lexing and parsing faults are fatal for the input being processed.
EvalError is recoverable and local to one evaluate() call.
ConvergenceError is raised when simplification exceeds its budget.
"""

from typing import Any, Optional


class SymnormError(Exception):
    """Base class for all SYMNORM faults."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class LexError(SymnormError):
    """
    Invalid character or malformed numeric literal.

    Attributes:
        remainder: The unconsumed input starting at the offending character
        position: Offset of the remainder in the (lowercased) input
    """

    def __init__(self, message: str, remainder: str = "", position: int = 0):
        super().__init__(message)
        self.remainder = remainder
        self.position = position


class ParseError(SymnormError):
    """Malformed token sequence: operand underflow or unbalanced parentheses."""


class EvalError(SymnormError):
    """An expression has no real numeric value."""


class ConvergenceError(SymnormError):
    """
    Simplification did not reach a fixed point within its budget.

    Attributes:
        expression: The tree as it stood when the budget ran out
        sweeps: Number of sweeps performed
        reason: "max_sweeps" or "max_nodes"
    """

    def __init__(self, message: str, expression: Any = None,
                 sweeps: int = 0, reason: Optional[str] = None):
        super().__init__(message)
        self.expression = expression
        self.sweeps = sweeps
        self.reason = reason
