"""Tokenizer and infix-to-postfix conversion for `+ - * /` arithmetic."""
import enum
import logging
import operator
import re
from types import MappingProxyType
from typing import Callable, NamedTuple

logger = logging.getLogger(__name__)

DIGITS = frozenset("0123456789.")


class TokenKind(enum.Enum):
    NUMBER = "number"
    OPERATOR = "operator"
    PAREN = "paren"
    UNKNOWN = "unknown"  # rejected by both later stages


class Token(NamedTuple):
    kind: TokenKind
    text: str
    pos: int

    def __repr__(self):
        return f"tok({self.text!r}@{self.pos})"

    @property
    def value(self):
        assert self.kind is TokenKind.NUMBER
        return float(self.text)


class Op(NamedTuple):
    op: str
    prec: int
    fun: Callable

    def __call__(self, a, b):
        return self.fun(a, b)

    def __repr__(self):
        return f"op({self.op!r:})"

    def left_first(self, other):
        """True if `self`, already stacked, must be applied before `other`."""
        return self.prec >= other.prec


OP_GROUPS = """
add+ sub-
mul* truediv/
""".strip()
OPS = MappingProxyType(
    {
        o: Op(o, prec, getattr(operator, fun))
        for prec, op_group in enumerate(OP_GROUPS.split("\n"), start=1)
        for [(fun, o)] in map(re.compile(r"^(\w+)(\W)$").findall, op_group.split())
    }
)
PARENS = frozenset("()")


class ExpressionError(ValueError):
    """Base class of every error `calc.evaluate` can raise."""


class EmptyExpression(ExpressionError):
    def __init__(self, expression):
        self.expression = expression
        super().__init__(f"empty expression: {expression!r}")


class UnknownToken(ExpressionError):
    def __init__(self, token):
        self.token = token
        super().__init__(f"unknown token {token.text!r} at position {token.pos}")


class MismatchedParenthesis(ExpressionError):
    def __init__(self, token):
        self.token = token
        super().__init__(f"mismatched parenthesis at position {token.pos}")


class InsufficientOperands(ExpressionError):
    def __init__(self, token, available):
        self.token = token
        self.available = available
        super().__init__(
            f"operator {token.text!r} at position {token.pos} needs 2 operands,"
            f" got {available}"
        )


class DivisionByZero(ExpressionError):
    def __init__(self, token):
        self.token = token
        super().__init__(f"division by zero at position {token.pos}")


class MalformedExpression(ExpressionError):
    def __init__(self, depth):
        self.depth = depth
        super().__init__(f"malformed expression: {depth} values left, expected 1")


def classify(text, pos):
    if text[0] in DIGITS:
        try:
            float(text)
        except ValueError:
            return Token(TokenKind.UNKNOWN, text, pos)
        return Token(TokenKind.NUMBER, text, pos)
    if text in OPS:
        return Token(TokenKind.OPERATOR, text, pos)
    if text in PARENS:
        return Token(TokenKind.PAREN, text, pos)
    return Token(TokenKind.UNKNOWN, text, pos)


def tokenize(expression):
    """Split `expression` into tokens, dropping whitespace. Never raises.

    >>> [t.text for t in tokenize("(1.5+ 2)*x")]
    ['(', '1.5', '+', '2', ')', '*', 'x']
    >>> tokenize("1.2.3")
    [tok('1.2.3'@0)]
    >>> tokenize("1.2.3")[0].kind
    <TokenKind.UNKNOWN: 'unknown'>
    """
    tokens = []
    start = None
    for pos, char in enumerate(expression):
        if char in DIGITS:
            if start is None:
                start = pos
            continue
        if start is not None:
            tokens.append(classify(expression[start:pos], start))
            start = None
        if not char.isspace():
            tokens.append(classify(char, pos))
    if start is not None:
        tokens.append(classify(expression[start:], start))
    return tokens


def to_postfix(tokens):
    """Reorder infix `tokens` into postfix (RPN) order via shunting-yard.

    Parentheses are consumed, so they never reach the output unless a `(`
    is left unclosed, in which case it is flushed like any stacked operator.

    >>> [t.text for t in to_postfix(tokenize("2 * (3 + 4) - 5"))]
    ['2', '3', '4', '+', '*', '5', '-']
    >>> [t.text for t in to_postfix(tokenize("10 / 2 / 5"))]
    ['10', '2', '/', '5', '/']
    """
    output = []
    stack = []
    for token in tokens:
        if token.kind is TokenKind.NUMBER:
            output.append(token)
        elif token.kind is TokenKind.OPERATOR:
            op = OPS[token.text]
            while (
                stack
                and stack[-1].kind is TokenKind.OPERATOR
                and OPS[stack[-1].text].left_first(op)
            ):
                output.append(stack.pop())
            stack.append(token)
        elif token.text == "(":
            stack.append(token)
        elif token.text == ")":
            while stack and stack[-1].text != "(":
                output.append(stack.pop())
            if not stack:
                raise MismatchedParenthesis(token)
            stack.pop()
        else:
            raise UnknownToken(token)
    # No check for a leftover "(" here; the evaluator rejects it.
    output.extend(reversed(stack))
    return output
