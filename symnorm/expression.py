"""
Expression IR for SYMNORM.

The IR is the n-ary symbolic tree that the simplifier rewrites and that the
evaluator and LaTeX renderer consume. Unlike the parse tree, sums and
products hold any number of terms:

    Addition([Number(1.0), Variable('x'), Negation(Variable('y'))])

Each node owns its children exclusively. Rewrites build new nodes through
with_children() rather than mutating, and any subtree that must appear twice
is cloned with deep_copy().
"""

import math
from decimal import Decimal
from typing import List, Sequence

from .parser import (
    ASTNode, NumberNode, PiNode, VariableNode, BinaryOp, UnaryOp,
    BinaryOperator, UnaryOperator, parse,
)
from .tokenizer import Token

FUNCTION_NAMES = (
    "sin", "cos", "tan", "csc", "sec", "cot",
    "arcsin", "arccos", "arctan", "arccsc", "arcsec", "arccot",
)


# ============================================================
# Node Classes
# ============================================================

class Expression:
    """Base class for IR nodes."""

    __slots__ = ()

    def children(self) -> List['Expression']:
        """Direct subexpressions, in order."""
        return []

    def with_children(self, children: Sequence['Expression']) -> 'Expression':
        """Return a node of the same kind holding the given children."""
        return self

    def __eq__(self, other):
        if type(self) is not type(other):
            return False
        return all(getattr(self, s) == getattr(other, s) for s in self.__slots__)

    __hash__ = None

    def __repr__(self) -> str:
        return to_sexpr(self)


class Number(Expression):
    __slots__ = ('value',)

    def __init__(self, value: float):
        self.value = float(value)


class Variable(Expression):
    __slots__ = ('name',)

    def __init__(self, name: str):
        self.name = name


class Multiplication(Expression):
    __slots__ = ('terms',)

    def __init__(self, terms: Sequence[Expression]):
        self.terms = list(terms)

    def children(self):
        return list(self.terms)

    def with_children(self, children):
        return Multiplication(children)


class Addition(Expression):
    __slots__ = ('terms',)

    def __init__(self, terms: Sequence[Expression]):
        self.terms = list(terms)

    def children(self):
        return list(self.terms)

    def with_children(self, children):
        return Addition(children)


class Division(Expression):
    __slots__ = ('numerator', 'denominator')

    def __init__(self, numerator: Expression, denominator: Expression):
        self.numerator = numerator
        self.denominator = denominator

    def children(self):
        return [self.numerator, self.denominator]

    def with_children(self, children):
        numerator, denominator = children
        return Division(numerator, denominator)


class Negation(Expression):
    __slots__ = ('term',)

    def __init__(self, term: Expression):
        self.term = term

    def children(self):
        return [self.term]

    def with_children(self, children):
        (term,) = children
        return Negation(term)


class Exponentiation(Expression):
    __slots__ = ('base', 'exponent')

    def __init__(self, base: Expression, exponent: Expression):
        self.base = base
        self.exponent = exponent

    def children(self):
        return [self.base, self.exponent]

    def with_children(self, children):
        base, exponent = children
        return Exponentiation(base, exponent)


class Sqrt(Expression):
    __slots__ = ('arg',)

    def __init__(self, arg: Expression):
        self.arg = arg

    def children(self):
        return [self.arg]

    def with_children(self, children):
        (arg,) = children
        return Sqrt(arg)


class Function(Expression):
    """A named trig or inverse-trig function applied to one argument."""

    __slots__ = ('name', 'arg')

    def __init__(self, name: str, arg: Expression):
        if name not in FUNCTION_NAMES:
            raise ValueError(f"Unknown function: {name}")
        self.name = name
        self.arg = arg

    def children(self):
        return [self.arg]

    def with_children(self, children):
        (arg,) = children
        return Function(self.name, arg)


# ============================================================
# AST Conversion
# ============================================================

def convert_to_expression(ast: ASTNode) -> Expression:
    """
    Translate a parse tree into the IR.

    Subtraction becomes addition of a negation, and every binary sum or
    product becomes a two-term Addition or Multiplication. Flattening is
    left to the simplifier.
    """
    if isinstance(ast, NumberNode):
        return Number(ast.value)
    if isinstance(ast, PiNode):
        return Number(math.pi)
    if isinstance(ast, VariableNode):
        return Variable(ast.name)

    if isinstance(ast, BinaryOp):
        lhs = convert_to_expression(ast.left)
        rhs = convert_to_expression(ast.right)
        if ast.op == BinaryOperator.ADD:
            return Addition([lhs, rhs])
        if ast.op == BinaryOperator.SUBTRACT:
            return Addition([lhs, Negation(rhs)])
        if ast.op == BinaryOperator.MULTIPLY:
            return Multiplication([lhs, rhs])
        if ast.op == BinaryOperator.DIVIDE:
            return Division(lhs, rhs)
        return Exponentiation(lhs, rhs)

    if isinstance(ast, UnaryOp):
        arg = convert_to_expression(ast.operand)
        if ast.op == UnaryOperator.NEGATE:
            return Negation(arg)
        if ast.op == UnaryOperator.SQRT:
            return Sqrt(arg)
        return Function(ast.op.value, arg)

    raise TypeError(f"Not an AST node: {ast!r}")


def parse_expressions(tokens: List[Token]) -> List[Expression]:
    """Parse tokens and convert every segment to the IR."""
    return [convert_to_expression(ast) for ast in parse(tokens)]


# ============================================================
# Structural Utilities
# ============================================================

def deep_copy(expr: Expression) -> Expression:
    """
    Clone an expression tree.

    The copy shares no node with the original, so both can be rewritten
    independently.
    """
    if isinstance(expr, Number):
        return Number(expr.value)
    if isinstance(expr, Variable):
        return Variable(expr.name)
    return expr.with_children([deep_copy(child) for child in expr.children()])


def count_nodes(expr: Expression) -> int:
    """Number of nodes in the tree, including the root."""
    return 1 + sum(count_nodes(child) for child in expr.children())


def format_decimal(value: float) -> str:
    """
    Render a float in positional notation.

    Integral values drop the decimal point. Others use the shortest digits
    that round-trip, without an exponent:

        format_decimal(14.0)   -> "14"
        format_decimal(1e-07)  -> "0.0000001"
    """
    if not math.isfinite(value):
        return repr(value)
    if value.is_integer():
        return str(int(value))
    return format(Decimal(repr(value)), "f")


def node_label(expr: Expression) -> str:
    """Short name for a node, as used by to_sexpr."""
    if isinstance(expr, Number):
        return format_decimal(expr.value)
    if isinstance(expr, Variable):
        return expr.name
    if isinstance(expr, Multiplication):
        return "*"
    if isinstance(expr, Addition):
        return "+"
    if isinstance(expr, Division):
        return "/"
    if isinstance(expr, Negation):
        return "neg"
    if isinstance(expr, Exponentiation):
        return "^"
    if isinstance(expr, Sqrt):
        return "sqrt"
    if isinstance(expr, Function):
        return expr.name
    return type(expr).__name__


def to_sexpr(expr: Expression) -> str:
    """
    Format an expression as an S-expression string.

    Examples:
        Multiplication([1, 2, 3])          -> "(* 1 2 3)"
        Addition([x, Negation(y)])         -> "(+ x (neg y))"
        Function("sin", Variable("x"))     -> "(sin x)"
    """
    if isinstance(expr, (Number, Variable)):
        return node_label(expr)
    parts = [node_label(expr)] + [to_sexpr(child) for child in expr.children()]
    return "(" + " ".join(parts) + ")"


def format_tree(expr: Expression, indent: int = 0) -> str:
    """
    Render an indented outline of the tree, one node per line.

    Example:
        Addition
        | Number: 1
        | Variable: x
    """
    prefix = "| " * indent
    if isinstance(expr, Number):
        line = f"{prefix}Number: {format_decimal(expr.value)}"
    elif isinstance(expr, Variable):
        line = f"{prefix}Variable: {expr.name}"
    elif isinstance(expr, Function):
        line = f"{prefix}{expr.name.capitalize()}"
    else:
        line = f"{prefix}{type(expr).__name__}"
    lines = [line] + [format_tree(child, indent + 1) for child in expr.children()]
    return "\n".join(lines)
