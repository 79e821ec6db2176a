"""
Tokenizer for SYMNORM.

Turns raw text into a flat list of tokens:

    tokenize("2*sin(x)") -> [NUMBER(2.0), MULTIPLY, SIN, OPEN_PAREN,
                             VARIABLE('x'), CLOSE_PAREN]

Input is lowercased first, so keywords and variables are case-insensitive.
Identifiers are single letters: "xy" is the two variables x and y.
"""

from enum import Enum
from typing import List, Optional, Tuple, Union

from .errors import LexError


class TokenType(Enum):
    NUMBER = "number"
    VARIABLE = "variable"
    PI = "pi"
    PLUS = "+"
    MINUS = "-"
    MULTIPLY = "*"
    DIVIDE = "/"
    POW = "^"
    EQUALS = "="
    OPEN_PAREN = "("
    CLOSE_PAREN = ")"
    SQRT = "sqrt"
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


OPERATOR_TYPES = frozenset({
    TokenType.PLUS, TokenType.MINUS, TokenType.MULTIPLY,
    TokenType.DIVIDE, TokenType.POW,
})

FUNCTION_TYPES = frozenset({
    TokenType.SIN, TokenType.COS, TokenType.TAN,
    TokenType.CSC, TokenType.SEC, TokenType.COT,
    TokenType.ARCSIN, TokenType.ARCCOS, TokenType.ARCTAN,
    TokenType.ARCCSC, TokenType.ARCSEC, TokenType.ARCCOT,
    TokenType.SQRT,
})


class Token:
    """
    A single lexical token.

    Tokens are immutable. Only NUMBER (float) and VARIABLE (str) carry a value.
    """

    __slots__ = ('_type', '_value')

    def __init__(self, type: TokenType, value: Optional[Union[float, str]] = None):
        object.__setattr__(self, '_type', type)
        object.__setattr__(self, '_value', value)

    def __setattr__(self, name, value):
        raise AttributeError("Token is immutable")

    @property
    def type(self) -> TokenType:
        return self._type

    @property
    def value(self) -> Optional[Union[float, str]]:
        return self._value

    def is_operator(self) -> bool:
        """True for the binary operator symbols + - * / ^."""
        return self._type in OPERATOR_TYPES

    def is_function(self) -> bool:
        """True for the trig family and sqrt."""
        return self._type in FUNCTION_TYPES

    def __eq__(self, other):
        if isinstance(other, Token):
            return self._type == other._type and self._value == other._value
        return False

    def __hash__(self):
        return hash((self._type, self._value))

    def __repr__(self) -> str:
        if self._value is None:
            return f"Token({self._type.name})"
        return f"Token({self._type.name}, {self._value!r})"


# Literal tokens, tried in order as prefix matches.
# arc* must come before the plain trig names they contain.
STATIC_TOKENS: List[Tuple[str, TokenType]] = [
    ("+", TokenType.PLUS),
    ("-", TokenType.MINUS),
    ("*", TokenType.MULTIPLY),
    ("/", TokenType.DIVIDE),
    ("(", TokenType.OPEN_PAREN),
    (")", TokenType.CLOSE_PAREN),
    ("^", TokenType.POW),
    ("=", TokenType.EQUALS),
    ("arcsin", TokenType.ARCSIN),
    ("arccos", TokenType.ARCCOS),
    ("arctan", TokenType.ARCTAN),
    ("arccsc", TokenType.ARCCSC),
    ("arcsec", TokenType.ARCSEC),
    ("arccot", TokenType.ARCCOT),
    ("sin", TokenType.SIN),
    ("cos", TokenType.COS),
    ("tan", TokenType.TAN),
    ("csc", TokenType.CSC),
    ("sec", TokenType.SEC),
    ("cot", TokenType.COT),
    ("sqrt", TokenType.SQRT),
    ("pi", TokenType.PI),
]

WHITESPACE = " \t\n\r"


def _is_number_char(c: str) -> bool:
    return c.isdigit() or c == '.'


def tokenize(text: str) -> List[Token]:
    """
    Convert an input string into a list of tokens.

    Args:
        text: Expression text, e.g. "3*-2 + sin(pi/2)"

    Returns:
        Tokens in input order

    Raises:
        LexError: On an unrecognised character or a malformed number
            such as "1.2.3"
    """
    source = text.lower()
    tokens: List[Token] = []
    i = 0
    n = len(source)

    while i < n:
        if source[i] in WHITESPACE:
            i += 1
            continue

        static = _match_static(source, i)
        if static is not None:
            token_str, token_type = static
            tokens.append(Token(token_type))
            i += len(token_str)
            continue

        if _is_number_char(source[i]):
            start = i
            while i < n and _is_number_char(source[i]):
                i += 1
            literal = source[start:i]
            try:
                value = float(literal)
            except ValueError:
                raise LexError(f"Malformed number: {literal}",
                               remainder=source[start:], position=start)
            tokens.append(Token(TokenType.NUMBER, value))
            continue

        if source[i].isalpha():
            tokens.append(Token(TokenType.VARIABLE, source[i]))
            i += 1
            continue

        raise LexError(f"Invalid token: {source[i:]}",
                       remainder=source[i:], position=i)

    return tokens


def _match_static(source: str, pos: int) -> Optional[Tuple[str, TokenType]]:
    """Return the first static token that prefixes source[pos:], if any."""
    for token_str, token_type in STATIC_TOKENS:
        if source.startswith(token_str, pos):
            return token_str, token_type
    return None
