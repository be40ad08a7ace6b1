"""Evaluate `+ - * /` arithmetic expressions with floating point semantics.

The expression text goes through three stages: `tokenize`, `to_postfix`
(shunting-yard) and `evaluate_postfix` (an operand stack). Every stage either
returns its result or raises an `ExpressionError` subclass; `evaluate` lets
the first one propagate unchanged.
"""
import argparse
import logging
import os
import sys

from calc_parser import (
    OPS,
    DivisionByZero,
    EmptyExpression,
    ExpressionError,
    InsufficientOperands,
    MalformedExpression,
    TokenKind,
    UnknownToken,
    to_postfix,
    tokenize,
)

logger = logging.getLogger(__name__)

DEBUG = bool(os.getenv("DEBUG", False))


def evaluate_postfix(tokens):
    """Compute the value of postfix `tokens`.

    >>> evaluate_postfix(to_postfix(tokenize("7 - 2 - 1")))
    4.0
    """
    stack = []
    for token in tokens:
        if token.kind is TokenKind.NUMBER:
            stack.append(token.value)
        elif token.kind is TokenKind.OPERATOR:
            if len(stack) < 2:
                raise InsufficientOperands(token, len(stack))
            b, a = stack.pop(), stack.pop()
            if token.text == "/" and b == 0:
                raise DivisionByZero(token)
            stack.append(OPS[token.text](a, b))
        else:
            raise UnknownToken(token)
    if len(stack) != 1:
        raise MalformedExpression(len(stack))
    return stack[0]


def evaluate(expression):
    """Evaluate the infix arithmetic `expression` and return a float.

    Examples:

    >>> evaluate("2 + 3 * 4")
    14.0
    >>> evaluate("(2 + 3) * 4")
    20.0
    >>> evaluate("5 / 0")
    Traceback (most recent call last):
    ...
    calc_parser.DivisionByZero: division by zero at position 2
    """
    tokens = tokenize(expression)
    if not tokens:
        raise EmptyExpression(expression)
    logger.debug("tokens: %s", tokens)
    postfix = to_postfix(tokens)
    logger.debug("postfix: %s", " ".join(t.text for t in postfix))
    ans = evaluate_postfix(postfix)
    logger.debug("%r = %r", expression, ans)
    return ans


def main(argv=None):
    arg_parser = argparse.ArgumentParser(description=__doc__.split("\n")[0])
    arg_parser.add_argument(
        "expression", nargs="*", default=["3 + 2"], help="expressions to evaluate"
    )
    arg_parser.add_argument("-v", "--verbose", action="store_true")
    args = arg_parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose or DEBUG else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    status = 0
    for expression in args.expression:
        try:
            print(f"Result: {evaluate(expression)}")
        except ExpressionError as e:
            print(f"Error: {e}")
            status = 1
    return status


if __name__ == "__main__":
    sys.exit(main())
