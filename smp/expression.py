"""
Parsed expressions.

An Expression is an immutable RPN token sequence bound to the SMP instance
that parsed it. Computing it takes one of three routes:
- compute_unresolved(): evaluate directly; fails if any variable remains
- compute(): resolve every variable through the provider, then evaluate
- compute_cache_only(): substitute values the provider already holds (or a
  fallback) without awaiting anything, then evaluate
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

from .core.logging import get_logger
from .errors import ComputeError, ComputeErrorKind
from .evaluator import evaluate
from .parser.tokens import Constant, Token, Variable
from .providers import CachedValueProvider
from .resolver import resolve_expression

if TYPE_CHECKING:
    from .instance import SMP

logger = get_logger(__name__)


class Expression:
    """
    A parsed expression in RPN order.

    Attributes:
        tokens: The RPN tokens, never containing parentheses
    """

    __slots__ = ("_smp", "_tokens")

    def __init__(self, smp: "SMP", tokens: Iterable[Token]):
        self._smp = smp
        self._tokens: tuple[Token, ...] = tuple(tokens)

    @property
    def tokens(self) -> tuple[Token, ...]:
        return self._tokens

    @property
    def variables(self) -> list[str]:
        """Names of all variable occurrences, in RPN order, duplicates included."""
        return [token.name for token in self._tokens if isinstance(token, Variable)]

    @property
    def is_resolved(self) -> bool:
        return not any(isinstance(token, Variable) for token in self._tokens)

    def with_tokens(self, tokens: Iterable[Token]) -> "Expression":
        """Return a new expression bound to the same SMP instance."""
        return Expression(self._smp, tokens)

    async def resolve(self) -> "Expression":
        """
        Resolve all variables in this expression.

        Returns:
            This expression if it has no variables, otherwise a copy with every
            variable replaced by its value

        Raises:
            ResolveError: If any lookup fails
        """
        return await resolve_expression(
            self,
            self._smp.provider,
            self._smp.scope_factory,
            self._smp.max_concurrent_lookups,
        )

    def compute_unresolved(self) -> float:
        """
        Compute the result without resolving variables.

        Raises:
            ComputeError: UNRESOLVED_VARIABLE if any variable remains, or
                MALFORMED_EXPRESSION if the tokens do not reduce to one value
        """
        if not self.is_resolved:
            raise ComputeError(
                ComputeErrorKind.UNRESOLVED_VARIABLE, "expression contained unresolved variables"
            )
        return evaluate(self._tokens)

    async def compute(self) -> float:
        """Resolve variables through the provider, then compute the result."""
        resolved = await self.resolve()
        return evaluate(resolved.tokens)

    def compute_cache_only(self, fallback: float | None = None) -> float:
        """
        Compute the result using only values the provider already holds.

        Variables the provider has no cached value for (or every variable,
        when the provider keeps no cache) take ``fallback``.

        Args:
            fallback: Value for uncached variables (defaults to the
                ``CACHE_FALLBACK`` setting)

        Returns:
            The result of the expression
        """
        if fallback is None:
            fallback = self._smp.cache_fallback

        provider = self._smp.provider
        cached = provider if isinstance(provider, CachedValueProvider) else None

        tokens: list[Token] = []
        for token in self._tokens:
            if isinstance(token, Variable):
                value = cached.get_cached_value(token.name) if cached is not None else None
                if value is None:
                    logger.debug("No cached value for %s, using fallback %s", token.name, fallback)
                    value = fallback
                token = Constant(float(value))
            tokens.append(token)

        return evaluate(tokens)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Expression) and self._tokens == other._tokens

    def __hash__(self) -> int:
        return hash(self._tokens)

    def __str__(self) -> str:
        return " ".join(str(token) for token in self._tokens)

    def __repr__(self) -> str:
        return f"Expression('{self}')"
