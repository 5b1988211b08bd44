"""
Infix to postfix (RPN) conversion using the shunting-yard algorithm.

The operator stack only ever holds operators and left parentheses. Operators
with an equal or smaller precedence number are popped before a new operator is
pushed, which makes every operator left-associative, exponentiation included:
"2^3^2" is read as "(2^3)^2".
"""

from __future__ import annotations

from typing import Sequence

from ..errors import ParseError, ParseErrorKind
from .tokens import Constant, Operator, Parenthesis, Token, Variable


def to_rpn(input: str, tokens: Sequence[Token]) -> list[Token]:
    """
    Reorder an infix token sequence into RPN order.

    Args:
        input: The original input string, used for error reporting
        tokens: Tokens in infix order, as produced by the tokenizer

    Returns:
        Tokens in RPN order, without parentheses

    Raises:
        ParseError: MISMATCHED_PARENTHESES for a closer without an opener or
            an opener that is never closed
    """
    output: list[Token] = []
    operators: list[Operator | Parenthesis] = []

    for token in tokens:
        if isinstance(token, (Constant, Variable)):
            output.append(token)

        elif token is Parenthesis.LEFT:
            operators.append(token)

        elif token is Parenthesis.RIGHT:
            while operators:
                top = operators.pop()
                if top is Parenthesis.LEFT:
                    break
                output.append(top)
            else:
                raise ParseError(
                    ParseErrorKind.MISMATCHED_PARENTHESES, input, "mismatched parentheses"
                )

        elif isinstance(token, Operator):
            while operators:
                top = operators[-1]
                if top is Parenthesis.LEFT or top.precedence > token.precedence:
                    break
                output.append(operators.pop())
            operators.append(token)

        else:
            raise TypeError(f"Unknown token type: {token!r}")

    # Any opener still on the stack was never closed, even one buried under
    # operators as in "(1+(2)"
    while operators:
        top = operators.pop()
        if top is Parenthesis.LEFT:
            raise ParseError(
                ParseErrorKind.MISMATCHED_PARENTHESES, input, "mismatched parentheses"
            )
        output.append(top)

    return output
