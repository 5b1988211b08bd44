"""RPN stack machine."""

from __future__ import annotations

from typing import Iterable

from .errors import ComputeError, ComputeErrorKind
from .parser.tokens import Constant, Operator, Token


def evaluate(tokens: Iterable[Token]) -> float:
    """
    Reduce a variable-free RPN token sequence to a single number.

    Args:
        tokens: Tokens in RPN order, containing only constants and operators

    Returns:
        The result of the expression

    Raises:
        ComputeError: MALFORMED_EXPRESSION if an operator lacks operands or
            the sequence does not reduce to exactly one value
    """
    stack: list[float] = []

    for token in tokens:
        if isinstance(token, Operator):
            # The top of the stack is the right-hand operand
            if len(stack) < 2:
                raise ComputeError(
                    ComputeErrorKind.MALFORMED_EXPRESSION, "input equation was not well formed"
                )
            second = stack.pop()
            first = stack.pop()
            stack.append(token.apply(first, second))

        elif isinstance(token, Constant):
            stack.append(token.value)

        else:
            raise RuntimeError(f"Unknown value in internal RPN tokens: {token!r}")

    if len(stack) != 1:
        raise ComputeError(
            ComputeErrorKind.MALFORMED_EXPRESSION, "input equation was not well formed"
        )

    return stack[0]
