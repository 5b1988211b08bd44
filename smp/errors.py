"""
Library exceptions.

Every failure raised across the public API is an SMPError. Each carries a
human-readable reason, a kind discriminator and a details dict; the original
failure, if any, is chained as ``__cause__``.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ParseErrorKind(str, Enum):
    """Why an input string could not be parsed."""

    UNKNOWN_SYMBOL = "unknown_symbol"
    MALFORMED_VALUE = "malformed_value"
    MISMATCHED_PARENTHESES = "mismatched_parentheses"


class ComputeErrorKind(str, Enum):
    """Why an expression could not be computed."""

    UNRESOLVED_VARIABLE = "unresolved_variable"
    MALFORMED_EXPRESSION = "malformed_expression"


class ResolveErrorKind(str, Enum):
    """Why variable resolution failed."""

    VARIABLE_LOOKUP_FAILED = "variable_lookup_failed"
    UNKNOWN = "unknown"


class SMPError(Exception):
    """Base exception for all library errors"""

    def __init__(
        self,
        reason: str,
        kind: Enum,
        details: dict[str, Any] | None = None,
    ):
        self.reason = reason
        self.kind = kind
        self.details = details or {}
        super().__init__(self.message)

    @property
    def message(self) -> str:
        return self.reason

    def __str__(self) -> str:
        return self.message


class ParseError(SMPError, ValueError):
    """
    Raised when an input string cannot be turned into an expression.

    When the offending index is known the message shows the input with a
    caret under the failing character:

        An error occurred while parsing!

            1+$
              ^

        The reason for the failure was: unknown symbol '$'.
    """

    def __init__(
        self,
        kind: ParseErrorKind,
        input: str,
        reason: str,
        index: int | None = None,
    ):
        self.input = input
        self.index = index
        details: dict[str, Any] = {"input": input}
        if index is not None:
            details["index"] = index
        super().__init__(reason, kind, details)

    @property
    def message(self) -> str:
        if self.index is None:
            return f"An error occurred while parsing: {self.reason}!"

        caret = " " * self.index + "^"
        return (
            "An error occurred while parsing!\n"
            "\n"
            f"    {self.input}\n"
            f"    {caret}\n"
            "\n"
            f"The reason for the failure was: {self.reason}."
        )


class ComputeError(SMPError):
    """Raised when an expression cannot be reduced to a number"""

    def __init__(self, kind: ComputeErrorKind, reason: str):
        super().__init__(reason, kind)

    @property
    def message(self) -> str:
        return f"An error occurred whilst computing an expression: {self.reason}!"


class ResolveError(SMPError):
    """Raised when the variables of an expression cannot be resolved"""

    def __init__(
        self,
        kind: ResolveErrorKind,
        reason: str,
        variable: str | None = None,
    ):
        self.variable = variable
        details = {"variable": variable} if variable is not None else {}
        super().__init__(reason, kind, details)

    @classmethod
    def lookup_failed(cls, variable: str) -> "ResolveError":
        """Build the error raised when the provider fails for ``variable``."""
        return cls(
            ResolveErrorKind.VARIABLE_LOOKUP_FAILED,
            f"An error occurred whilst resolving variable '{variable}'!",
            variable=variable,
        )

    @classmethod
    def unknown(cls) -> "ResolveError":
        return cls(
            ResolveErrorKind.UNKNOWN,
            "An unknown error occurred whilst resolving!",
        )
