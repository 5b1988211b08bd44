"""
Tokenizer for arithmetic expressions.

This module scans an input string one character at a time. Operators and
parentheses are looked up in a single-character symbol table; everything else
is collected by a value accumulator whose kind (constant or variable) is
decided by the first character it sees.
"""

from __future__ import annotations

from typing import Callable

from ..errors import ParseError, ParseErrorKind
from .tokens import SYMBOLS, Constant, Token, Value, Variable


class ValueAccumulator:
    """
    Collects the characters of a single value token.

    Attributes:
        name: Kind of value being built ("constant" or "variable")
        input: Full input string, used for error reporting
        start: Index of the first character of the value
    """

    def __init__(
        self,
        name: str,
        input: str,
        start: int,
        accepts: Callable[[str], bool],
        finisher: Callable[[str], Value],
    ):
        self.name = name
        self.input = input
        self.start = start
        self._accepts = accepts
        self._finisher = finisher
        self._chars: list[str] = []
        self._last = start - 1

    @classmethod
    def open(cls, input: str, index: int, symbol: str) -> "ValueAccumulator | None":
        """
        Open an accumulator suited to the given starting symbol.

        Args:
            input: The input string
            index: Index of the starting symbol
            symbol: The starting symbol

        Returns:
            A new accumulator, or None if the symbol cannot start a value
        """
        if Variable.is_valid_symbol(symbol):
            return cls("variable", input, index, Variable.is_valid_symbol, Variable)
        if Constant.is_valid_symbol(symbol):
            return cls("constant", input, index, Constant.is_valid_symbol, _to_constant)
        return None

    @property
    def end(self) -> int:
        """Index just past the last accepted character."""
        return self._last + 1

    def accept(self, symbol: str, index: int) -> None:
        """
        Append the symbol found at ``index`` to the value.

        Raises:
            ParseError: If the symbol is not valid for this kind of value
        """
        if not self._accepts(symbol):
            raise ParseError(
                ParseErrorKind.MALFORMED_VALUE,
                self.input,
                f"invalid {self.name} symbol '{symbol}'",
                index,
            )
        self._chars.append(symbol)
        self._last = index

    def finish(self) -> Value:
        """
        Close the accumulator and build its token.

        Raises:
            ParseError: If the collected text is not a valid value
        """
        try:
            return self._finisher("".join(self._chars))
        except ValueError as exc:
            raise ParseError(
                ParseErrorKind.MALFORMED_VALUE,
                self.input,
                f"couldn't finish {self.name} token",
                self.end,
            ) from exc


def _to_constant(text: str) -> Constant:
    return Constant(float(text))


class Tokenizer:
    """
    Splits an expression into a flat list of tokens.

    Whitespace is ignored everywhere, including between the characters of a
    single value ("1 2" tokenizes as the constant 12). A character that cannot
    continue the current value is an error, not a token boundary, so "2x"
    fails rather than becoming "2 * x".
    """

    def tokenize(self, input: str) -> list[Token]:
        """
        Tokenize an expression.

        Args:
            input: The expression to tokenize

        Returns:
            List of tokens in input order

        Raises:
            ParseError: UNKNOWN_SYMBOL for a character that is neither a symbol
                nor the start of a value, MALFORMED_VALUE for a value that is
                broken off by an invalid character or cannot be parsed
        """
        tokens: list[Token] = []
        accumulator: ValueAccumulator | None = None

        for index, symbol in enumerate(input):
            if symbol.isspace():
                continue

            symbol_token = SYMBOLS.get(symbol)
            if symbol_token is not None:
                if accumulator is not None:
                    tokens.append(accumulator.finish())
                    accumulator = None
                tokens.append(symbol_token)
                continue

            if accumulator is None:
                accumulator = ValueAccumulator.open(input, index, symbol)
                if accumulator is None:
                    raise ParseError(
                        ParseErrorKind.UNKNOWN_SYMBOL,
                        input,
                        f"unknown symbol '{symbol}'",
                        index,
                    )

            accumulator.accept(symbol, index)

        if accumulator is not None:
            tokens.append(accumulator.finish())

        return tokens
