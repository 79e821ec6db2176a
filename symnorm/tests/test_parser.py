"""Tests for the shunting-yard parser."""

import pytest
from symnorm import (
    tokenize, parse, ParseError,
    NumberNode, PiNode, VariableNode, BinaryOp, UnaryOp,
    BinaryOperator, UnaryOperator, MAX_DEPTH,
)


def parse_one(text):
    trees = parse(tokenize(text))
    assert len(trees) == 1
    return trees[0]


def num(value):
    return NumberNode(float(value))


def var(name):
    return VariableNode(name)


def binop(lhs, op, rhs):
    return BinaryOp(lhs, rhs, op)


ADD = BinaryOperator.ADD
SUB = BinaryOperator.SUBTRACT
MUL = BinaryOperator.MULTIPLY
DIV = BinaryOperator.DIVIDE
POW = BinaryOperator.POW
NEG = UnaryOperator.NEGATE


class TestLeaves:
    """Tests for leaf nodes."""

    def test_number(self):
        """A lone number parses to a NumberNode."""
        assert parse_one("7") == num(7)

    def test_variable(self):
        """A lone letter parses to a VariableNode."""
        assert parse_one("x") == var("x")

    def test_pi(self):
        """pi parses to a PiNode."""
        assert parse_one("pi") == PiNode()


class TestPrecedence:
    """Tests for operator precedence."""

    def test_mul_over_add(self):
        """Multiplication binds tighter than addition."""
        assert parse_one("1+2*3") == binop(num(1), ADD, binop(num(2), MUL, num(3)))
        assert parse_one("1*2+3") == binop(binop(num(1), MUL, num(2)), ADD, num(3))

    def test_pow_over_mul(self):
        """Exponentiation binds tighter than multiplication."""
        assert parse_one("2*x^2") == binop(num(2), MUL, binop(var("x"), POW, num(2)))

    def test_parentheses_override(self):
        """Parentheses group first."""
        assert parse_one("(1+2)*3") == binop(binop(num(1), ADD, num(2)), MUL, num(3))

    def test_division_same_level_as_mul(self):
        """Division shares multiplication's precedence."""
        assert parse_one("6/2*3") == binop(binop(num(6), DIV, num(2)), MUL, num(3))


class TestAssociativity:
    """Tests for left and right associativity."""

    def test_subtraction_left(self):
        """a-b-c is (a-b)-c."""
        assert parse_one("5-3-1") == binop(binop(num(5), SUB, num(3)), SUB, num(1))

    def test_division_left(self):
        """a/b/c is (a/b)/c."""
        assert parse_one("8/4/2") == binop(binop(num(8), DIV, num(4)), DIV, num(2))

    def test_pow_right(self):
        """a^b^c is a^(b^c)."""
        assert parse_one("2^3^2") == binop(num(2), POW, binop(num(3), POW, num(2)))


class TestUnaryMinus:
    """Tests for unary minus disambiguation."""

    def test_leading_minus(self):
        """A leading minus is unary."""
        assert parse_one("-5+3") == binop(UnaryOp(num(5), NEG), ADD, num(3))

    def test_binary_minus(self):
        """A minus after an operand is binary."""
        assert parse_one("5-3") == binop(num(5), SUB, num(3))

    def test_minus_after_operator(self):
        """A minus after another operator is unary."""
        assert parse_one("3*-2") == binop(num(3), MUL, UnaryOp(num(2), NEG))

    def test_minus_after_open_paren(self):
        """A minus after '(' is unary."""
        assert parse_one("(-x)") == UnaryOp(var("x"), NEG)

    def test_minus_after_close_paren(self):
        """A minus after ')' is binary."""
        assert parse_one("(x)-1") == binop(var("x"), SUB, num(1))

    def test_double_negation(self):
        """Consecutive minuses nest."""
        assert parse_one("--x") == UnaryOp(UnaryOp(var("x"), NEG), NEG)

    def test_unary_binds_tighter_than_pow(self):
        """Unary minus has the highest precedence."""
        assert parse_one("-2^2") == binop(UnaryOp(num(2), NEG), POW, num(2))

    def test_minus_in_exponent(self):
        """A minus after ^ negates the exponent."""
        assert parse_one("2^-1") == binop(num(2), POW, UnaryOp(num(1), NEG))

    def test_minus_after_equals(self):
        """A minus after '=' is unary in the new segment."""
        trees = parse(tokenize("x=-1"))
        assert trees == [var("x"), UnaryOp(num(1), NEG)]


class TestFunctions:
    """Tests for function-call syntax."""

    def test_sin(self):
        """sin(x) parses to a UnaryOp."""
        assert parse_one("sin(x)") == UnaryOp(var("x"), UnaryOperator.SIN)

    def test_sqrt_of_sum(self):
        """The function takes the whole parenthesized expression."""
        assert parse_one("sqrt(1+x)") == UnaryOp(
            binop(num(1), ADD, var("x")), UnaryOperator.SQRT)

    def test_function_in_expression(self):
        """Functions combine with operators."""
        assert parse_one("2*cos(x)+1") == binop(
            binop(num(2), MUL, UnaryOp(var("x"), UnaryOperator.COS)), ADD, num(1))

    def test_nested_functions(self):
        """Functions nest."""
        assert parse_one("arcsin(sin(x))") == UnaryOp(
            UnaryOp(var("x"), UnaryOperator.SIN), UnaryOperator.ARCSIN)

    def test_inner_parens_do_not_close_function(self):
        """Only the function's own ')' applies it."""
        assert parse_one("tan((x))") == UnaryOp(var("x"), UnaryOperator.TAN)

    def test_negated_function(self):
        """Unary minus applies to the function result."""
        assert parse_one("-sin(x)") == UnaryOp(UnaryOp(var("x"), UnaryOperator.SIN), NEG)

    def test_function_requires_parens(self):
        """A function name without '(' is an error."""
        with pytest.raises(ParseError):
            parse(tokenize("sin x"))
        with pytest.raises(ParseError):
            parse(tokenize("sqrt"))

    def test_empty_argument(self):
        """sin() has no operand."""
        with pytest.raises(ParseError):
            parse(tokenize("sin()"))


class TestSegments:
    """Tests for '='-separated segments."""

    def test_two_segments(self):
        """Each side of '=' is its own tree."""
        trees = parse(tokenize("2+2=4"))
        assert trees == [binop(num(2), ADD, num(2)), num(4)]

    def test_three_segments(self):
        """Any number of segments is allowed."""
        assert len(parse(tokenize("1=1=1"))) == 3

    def test_empty_segment(self):
        """An empty side of '=' is an error."""
        with pytest.raises(ParseError):
            parse(tokenize("1="))
        with pytest.raises(ParseError):
            parse(tokenize("=1"))


class TestErrors:
    """Tests for malformed token sequences."""

    def test_empty_input(self):
        """No tokens at all is an error."""
        with pytest.raises(ParseError):
            parse([])

    def test_missing_operand(self):
        """A dangling operator underflows the output stack."""
        with pytest.raises(ParseError):
            parse(tokenize("1+"))
        with pytest.raises(ParseError):
            parse(tokenize("*2"))

    def test_unmatched_close(self):
        """An extra ')' is an error."""
        with pytest.raises(ParseError):
            parse(tokenize("1+2)"))

    def test_unmatched_open(self):
        """An unclosed '(' is an error."""
        with pytest.raises(ParseError):
            parse(tokenize("(1+2"))

    def test_missing_operator(self):
        """Two operands without an operator is an error."""
        with pytest.raises(ParseError):
            parse(tokenize("2 3"))


class TestDepthLimit:
    """Tests for the nesting limit."""

    def test_long_sum_at_limit(self):
        """A chain of exactly MAX_DEPTH terms parses."""
        tree = parse_one("+".join(["1"] * MAX_DEPTH))
        assert tree.op == ADD

    def test_long_sum_rejected(self):
        """A 1500-term sum is too deep for a left-leaning tree."""
        with pytest.raises(ParseError, match="nested too deeply"):
            parse(tokenize("+".join(["1"] * 1500)))

    def test_repeated_negation_rejected(self):
        """Long runs of unary minus count one level each."""
        with pytest.raises(ParseError, match="nested too deeply"):
            parse(tokenize("-" * 1200 + "1"))

    def test_nested_functions_rejected(self):
        """Nested function calls count one level each."""
        text = "sin(" * (MAX_DEPTH + 1) + "x" + ")" * (MAX_DEPTH + 1)
        with pytest.raises(ParseError, match="nested too deeply"):
            parse(tokenize(text))

    def test_parentheses_add_no_depth(self):
        """Redundant parentheses do not build tree levels."""
        text = "(" * 500 + "x" + ")" * 500
        assert parse_one(text) == var("x")

    def test_each_segment_counted_separately(self):
        """The limit applies per '=' segment."""
        side = "+".join(["1"] * MAX_DEPTH)
        assert len(parse(tokenize(side + "=" + side))) == 2
