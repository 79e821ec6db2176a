"""
SYMNORM - Symbolic Normalization of arithmetic and trigonometric expressions

Parses expression text and rewrites it to a normalized n-ary form by running
a set of rewrite passes to a fixed point.

Quick Start:
    from symnorm import process, evaluate, to_latex

    [expr] = process("2*(3+x)")
    to_latex(expr)          # => "2 \\cdot 3 + 2 \\cdot x"

    [lhs, rhs] = process("2+2=4")
    evaluate(lhs), evaluate(rhs)   # => (4.0, 4.0)

Pipeline:
    tokenize(text)            -> tokens
    parse(tokens)             -> one AST per "=" segment
    convert_to_expression(ast)-> IR
    Simplifier()(expr)        -> fixed point of the rewrite passes

Input Syntax:
    numbers         3, 2.5
    variables       single letters, x y z (case-insensitive)
    constants       pi
    operators       + - * / ^ (unary minus supported, ^ is right-associative)
    functions       sin cos tan csc sec cot, arcsin ... arccot, sqrt
                    always written with parentheses: sin(x)
    segments        a = b parses into two independent expressions
"""

from typing import List, Optional

__version__ = "0.1.0"

from .errors import (
    SymnormError,
    LexError,
    ParseError,
    EvalError,
    ConvergenceError,
)

from .tokenizer import Token, TokenType, tokenize

from .parser import (
    parse,
    ASTNode,
    NumberNode,
    PiNode,
    VariableNode,
    BinaryOp,
    UnaryOp,
    BinaryOperator,
    UnaryOperator,
    MAX_DEPTH,
)

from .expression import (
    Expression,
    Number,
    Variable,
    Multiplication,
    Division,
    Addition,
    Negation,
    Exponentiation,
    Sqrt,
    Function,
    FUNCTION_NAMES,
    convert_to_expression,
    parse_expressions,
    deep_copy,
    count_nodes,
    to_sexpr,
    format_tree,
    format_decimal,
)

from .passes import (
    RewritePass,
    CoalesceMultiplication,
    CoalesceAddition,
    DistributeMultiplication,
    CollapseTrivial,
    coalesce_multiplication,
    coalesce_addition,
    distribute_multiplication,
    collapse_trivial,
    DEFAULT_PASSES,
)

from .simplifier import (
    Simplifier,
    SimplifyStep,
    SimplifyTrace,
    simplify_expression,
    DEFAULT_MAX_SWEEPS,
    DEFAULT_MAX_NODES,
)

from .evaluator import evaluate, try_evaluate
from .latex import to_latex


def process(text: str, simplifier: Optional[Simplifier] = None) -> List[Expression]:
    """
    Tokenize, parse and simplify text.

    Args:
        text: Expression text, possibly with "=" separated segments
        simplifier: Simplifier to use (default: Simplifier())

    Returns:
        One simplified expression per segment

    Raises:
        LexError, ParseError: On malformed input
        ConvergenceError: If simplification exceeds its budget
    """
    simplifier = simplifier or Simplifier()
    return [simplifier.simplify(expr) for expr in parse_expressions(tokenize(text))]


# Public API
__all__ = [
    # Version
    "__version__",
    # Errors
    "SymnormError",
    "LexError",
    "ParseError",
    "EvalError",
    "ConvergenceError",
    # Tokenizer
    "Token",
    "TokenType",
    "tokenize",
    # Parser
    "parse",
    "ASTNode",
    "NumberNode",
    "PiNode",
    "VariableNode",
    "BinaryOp",
    "UnaryOp",
    "BinaryOperator",
    "UnaryOperator",
    "MAX_DEPTH",
    # Expression IR
    "Expression",
    "Number",
    "Variable",
    "Multiplication",
    "Division",
    "Addition",
    "Negation",
    "Exponentiation",
    "Sqrt",
    "Function",
    "FUNCTION_NAMES",
    "convert_to_expression",
    "parse_expressions",
    "deep_copy",
    "count_nodes",
    "to_sexpr",
    "format_tree",
    "format_decimal",
    # Passes
    "RewritePass",
    "CoalesceMultiplication",
    "CoalesceAddition",
    "DistributeMultiplication",
    "CollapseTrivial",
    "coalesce_multiplication",
    "coalesce_addition",
    "distribute_multiplication",
    "collapse_trivial",
    "DEFAULT_PASSES",
    # Simplifier
    "Simplifier",
    "SimplifyStep",
    "SimplifyTrace",
    "simplify_expression",
    "DEFAULT_MAX_SWEEPS",
    "DEFAULT_MAX_NODES",
    # Collaborators
    "evaluate",
    "try_evaluate",
    "to_latex",
    "process",
]
