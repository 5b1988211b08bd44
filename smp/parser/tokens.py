"""
Token model shared by the tokenizer, the shunting-yard converter and the
evaluator.

A token is one of four closed shapes:
- Operator: one of the five fixed binary operators
- Parenthesis: structural only, never present in RPN output
- Constant: a literal number
- Variable: a named reference resolved through a provider

Precedence numbers are inverted compared to most grammars: a smaller number
binds tighter.
"""

from __future__ import annotations

import math
import operator
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Union


class Operator(Enum):
    """The binary operators, as (symbol, precedence, operation)."""

    PLUS = ("+", 2, operator.add)
    MINUS = ("-", 2, operator.sub)
    TIMES = ("*", 1, operator.mul)
    DIVIDE = ("/", 1, lambda first, second: _divide(first, second))
    POWER = ("^", 0, lambda first, second: _power(first, second))

    def __init__(
        self,
        symbol: str,
        precedence: int,
        operation: Callable[[float, float], float],
    ):
        self.symbol = symbol
        self.precedence = precedence
        self.operation = operation

    def apply(self, first: float, second: float) -> float:
        """Apply this operator to two operands, ``first`` being the left one."""
        return float(self.operation(first, second))

    def __str__(self) -> str:
        return self.symbol


class Parenthesis(Enum):
    """Grouping symbols."""

    LEFT = "("
    RIGHT = ")"

    @property
    def symbol(self) -> str:
        return self.value

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Constant:
    """A literal number."""

    value: float

    @staticmethod
    def is_valid_symbol(symbol: str) -> bool:
        return symbol.isdecimal() or symbol in ".,"

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Variable:
    """A variable that needs to be resolved before computing."""

    name: str

    @staticmethod
    def is_valid_symbol(symbol: str) -> bool:
        return symbol.isalpha() or symbol == "_"

    def __str__(self) -> str:
        return self.name


Value = Union[Constant, Variable]
Token = Union[Operator, Parenthesis, Constant, Variable]

# Single-character lookup for everything that is not a value
SYMBOLS: dict[str, Operator | Parenthesis] = {
    member.symbol: member for member in (*Operator, *Parenthesis)
}


def _divide(first: float, second: float) -> float:
    # IEEE semantics: x/0 is a signed infinity, 0/0 is NaN
    try:
        return first / second
    except ZeroDivisionError:
        if first == 0 or math.isnan(first):
            return math.nan
        return math.copysign(1.0, first) * math.copysign(math.inf, second)


def _power(first: float, second: float) -> float:
    try:
        result = first ** second
    except OverflowError:
        return math.inf
    except ZeroDivisionError:
        # 0 raised to a negative power
        return math.inf
    if isinstance(result, complex):
        # Negative base with fractional exponent has no real result
        return math.nan
    return result
