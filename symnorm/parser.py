"""
Shunting-yard parser for SYMNORM.

Converts a token list into abstract syntax trees, one per "="-separated
segment:

    parse(tokenize("2+2=4")) -> [BinaryOp(Number(2), Number(2), ADD), Number(4)]

Precedence (low to high):
    + -     1   left-associative
    * /     2   left-associative
    ^       3   right-associative
    unary - 4

Functions (sin, ..., arccot, sqrt) must be written name(arg). The argument
is the single expression inside the parentheses.

Trees deeper than MAX_DEPTH are rejected with a ParseError. A flat chain
such as 1+1+...+1 parses to a left-deep tree, so it counts one level per
operator.
"""

from enum import Enum
from typing import List, Optional, Tuple, Union

from .errors import ParseError
from .tokenizer import Token, TokenType


# ============================================================
# AST Nodes
# ============================================================

class BinaryOperator(Enum):
    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"
    POW = "^"


class UnaryOperator(Enum):
    SIN = "sin"
    COS = "cos"
    TAN = "tan"
    CSC = "csc"
    SEC = "sec"
    COT = "cot"
    ARCSIN = "arcsin"
    ARCCOS = "arccos"
    ARCTAN = "arctan"
    ARCCSC = "arccsc"
    ARCSEC = "arcsec"
    ARCCOT = "arccot"
    SQRT = "sqrt"
    NEGATE = "neg"


class ASTNode:
    """Base class for parse tree nodes."""

    __slots__ = ()

    def __eq__(self, other):
        if type(self) is not type(other):
            return False
        return all(getattr(self, s) == getattr(other, s) for s in self.__slots__)


class NumberNode(ASTNode):
    __slots__ = ('value',)

    def __init__(self, value: float):
        self.value = value

    def __repr__(self) -> str:
        return f"Number({self.value})"


class PiNode(ASTNode):
    __slots__ = ()

    def __repr__(self) -> str:
        return "PI"


class VariableNode(ASTNode):
    __slots__ = ('name',)

    def __init__(self, name: str):
        self.name = name

    def __repr__(self) -> str:
        return f"Variable({self.name!r})"


class BinaryOp(ASTNode):
    __slots__ = ('left', 'right', 'op')

    def __init__(self, left: ASTNode, right: ASTNode, op: BinaryOperator):
        self.left = left
        self.right = right
        self.op = op

    def __repr__(self) -> str:
        return f"BinaryOp({self.left!r}, {self.right!r}, {self.op.name})"


class UnaryOp(ASTNode):
    __slots__ = ('operand', 'op')

    def __init__(self, operand: ASTNode, op: UnaryOperator):
        self.operand = operand
        self.op = op

    def __repr__(self) -> str:
        return f"UnaryOp({self.operand!r}, {self.op.name})"


# ============================================================
# Operator Stack
# ============================================================

# Stack markers that are not operators
PAREN = "("

BINARY_TOKENS = {
    TokenType.PLUS: BinaryOperator.ADD,
    TokenType.MINUS: BinaryOperator.SUBTRACT,
    TokenType.MULTIPLY: BinaryOperator.MULTIPLY,
    TokenType.DIVIDE: BinaryOperator.DIVIDE,
    TokenType.POW: BinaryOperator.POW,
}

FUNCTION_TOKENS = {
    TokenType.SIN: UnaryOperator.SIN,
    TokenType.COS: UnaryOperator.COS,
    TokenType.TAN: UnaryOperator.TAN,
    TokenType.CSC: UnaryOperator.CSC,
    TokenType.SEC: UnaryOperator.SEC,
    TokenType.COT: UnaryOperator.COT,
    TokenType.ARCSIN: UnaryOperator.ARCSIN,
    TokenType.ARCCOS: UnaryOperator.ARCCOS,
    TokenType.ARCTAN: UnaryOperator.ARCTAN,
    TokenType.ARCCSC: UnaryOperator.ARCCSC,
    TokenType.ARCSEC: UnaryOperator.ARCSEC,
    TokenType.ARCCOT: UnaryOperator.ARCCOT,
    TokenType.SQRT: UnaryOperator.SQRT,
}

PRECEDENCE = {
    BinaryOperator.ADD: 1,
    BinaryOperator.SUBTRACT: 1,
    BinaryOperator.MULTIPLY: 2,
    BinaryOperator.DIVIDE: 2,
    BinaryOperator.POW: 3,
    UnaryOperator.NEGATE: 4,
}

RIGHT_ASSOCIATIVE = frozenset({BinaryOperator.POW})

# Every later stage walks the tree recursively
MAX_DEPTH = 200

StackEntry = Union[BinaryOperator, UnaryOperator, str]


def precedence(entry: StackEntry) -> int:
    """Precedence of a stack entry. Parens and function markers are 0."""
    return PRECEDENCE.get(entry, 0)


def _is_unary_context(previous: Optional[Token]) -> bool:
    """A '-' is unary at segment start or after '(', an operator, or '='."""
    if previous is None:
        return True
    return (previous.type == TokenType.OPEN_PAREN
            or previous.type == TokenType.EQUALS
            or previous.is_operator())


# ============================================================
# Parser
# ============================================================

class _SegmentState:
    """Operator stack and output stack for one "="-delimited segment."""

    def __init__(self):
        self.stack: List[StackEntry] = []
        self.output: List[ASTNode] = []
        self.depths: List[int] = []

    def push_operand(self, node: ASTNode, depth: int = 1) -> None:
        if depth > MAX_DEPTH:
            raise ParseError("Expression nested too deeply")
        self.output.append(node)
        self.depths.append(depth)

    def pop_operand(self) -> Tuple[ASTNode, int]:
        if not self.output:
            raise ParseError("Malformed expression: missing operand")
        return self.output.pop(), self.depths.pop()

    def reduce(self, entry: StackEntry) -> None:
        """Apply one operator from the stack to the output stack."""
        if isinstance(entry, BinaryOperator):
            rhs, rhs_depth = self.pop_operand()
            lhs, lhs_depth = self.pop_operand()
            self.push_operand(BinaryOp(lhs, rhs, entry), 1 + max(lhs_depth, rhs_depth))
        elif isinstance(entry, UnaryOperator):
            operand, depth = self.pop_operand()
            self.push_operand(UnaryOp(operand, entry), 1 + depth)
        else:
            raise ParseError("Unmatched '('")

    def push_operator(self, op: BinaryOperator) -> None:
        """Pop higher-precedence operators, then push op."""
        op_prec = precedence(op)
        while self.stack:
            top_prec = precedence(self.stack[-1])
            if op in RIGHT_ASSOCIATIVE:
                should_pop = top_prec > op_prec
            else:
                should_pop = top_prec >= op_prec
            if not should_pop:
                break
            self.reduce(self.stack.pop())
        self.stack.append(op)

    def close_paren(self) -> None:
        """Reduce down to the matching '(' then apply a pending function."""
        while self.stack and self.stack[-1] != PAREN:
            self.reduce(self.stack.pop())
        if not self.stack:
            raise ParseError("Unmatched ')'")
        self.stack.pop()

        if self.stack and _is_function_marker(self.stack[-1]):
            self.reduce(self.stack.pop())

    def finish(self) -> ASTNode:
        """Flush the operator stack and return the completed tree."""
        while self.stack:
            entry = self.stack.pop()
            if entry == PAREN:
                raise ParseError("Unmatched '('")
            self.reduce(entry)
        if not self.output:
            raise ParseError("Empty expression")
        if len(self.output) > 1:
            raise ParseError("Malformed expression: missing operator")
        return self.output[0]


def _is_function_marker(entry: StackEntry) -> bool:
    return isinstance(entry, UnaryOperator) and entry is not UnaryOperator.NEGATE


def parse(tokens: List[Token]) -> List[ASTNode]:
    """
    Parse tokens into one AST per "="-separated segment.

    Args:
        tokens: Output of tokenize()

    Returns:
        List of ASTs. The list has one entry per segment. The parser does
        not relate the segments to each other.

    Raises:
        ParseError: On operand underflow, unbalanced parentheses, an empty
            segment, a function keyword not followed by '(', or a tree deeper
            than MAX_DEPTH
    """
    results: List[ASTNode] = []
    state = _SegmentState()
    previous: Optional[Token] = None

    for index, token in enumerate(tokens):
        kind = token.type

        if kind == TokenType.NUMBER:
            state.push_operand(NumberNode(token.value))
        elif kind == TokenType.VARIABLE:
            state.push_operand(VariableNode(token.value))
        elif kind == TokenType.PI:
            state.push_operand(PiNode())
        elif kind == TokenType.MINUS and _is_unary_context(previous):
            # Prefix operator: nothing to its left can be reduced yet
            state.stack.append(UnaryOperator.NEGATE)
        elif kind in BINARY_TOKENS:
            state.push_operator(BINARY_TOKENS[kind])
        elif kind in FUNCTION_TOKENS:
            following = tokens[index + 1] if index + 1 < len(tokens) else None
            if following is None or following.type != TokenType.OPEN_PAREN:
                raise ParseError(f"Expected '(' after {kind.value}")
            state.stack.append(FUNCTION_TOKENS[kind])
        elif kind == TokenType.OPEN_PAREN:
            state.stack.append(PAREN)
        elif kind == TokenType.CLOSE_PAREN:
            state.close_paren()
        elif kind == TokenType.EQUALS:
            results.append(state.finish())
            state = _SegmentState()
        else:
            raise ParseError(f"Unexpected token: {token!r}")

        previous = token

    results.append(state.finish())
    return results
