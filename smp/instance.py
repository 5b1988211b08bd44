"""
The SMP entry point.

There are three steps to using this library:
1. Parse: turn the input string into an Expression (RPN tokens)
2. Resolve (optional): replace variables with values from the provider
3. Compute: reduce the expression to a float

Most callers use the module level helpers in ``smp``, which share one default
instance. create() builds an instance with its own provider or task scope.
"""

from __future__ import annotations

import asyncio
import threading
from typing import Optional

from .core.config import get_settings
from .core.logging import get_logger
from .expression import Expression
from .parser.shunting_yard import to_rpn
from .parser.tokenizer import Tokenizer
from .providers import NoOpVariableValueProvider, VariableValueProvider
from .resolver import ScopeFactory

logger = get_logger(__name__)


class SMP:
    """
    Parses expressions and computes them against a variable value provider.

    Attributes:
        provider: Source of variable values
        scope_factory: Creates the task scope variable lookups run in
        max_concurrent_lookups: Upper bound on in-flight lookups per resolve
        cache_fallback: Default value for variables in cache-only computes
    """

    def __init__(
        self,
        provider: Optional[VariableValueProvider] = None,
        scope_factory: ScopeFactory = asyncio.TaskGroup,
        max_concurrent_lookups: Optional[int] = None,
        cache_fallback: Optional[float] = None,
    ):
        settings = get_settings()
        self.provider = provider if provider is not None else NoOpVariableValueProvider()
        self.scope_factory = scope_factory
        self.max_concurrent_lookups = (
            max_concurrent_lookups
            if max_concurrent_lookups is not None
            else settings.MAX_CONCURRENT_LOOKUPS
        )
        if self.max_concurrent_lookups is not None and self.max_concurrent_lookups <= 0:
            raise ValueError(
                f"max_concurrent_lookups must be positive, got {self.max_concurrent_lookups}"
            )
        self.cache_fallback = (
            cache_fallback if cache_fallback is not None else settings.CACHE_FALLBACK
        )
        self._tokenizer = Tokenizer()

    def parse(self, input: str) -> Expression:
        """
        Parse the input into an expression.

        Args:
            input: The expression string

        Returns:
            The parsed expression

        Raises:
            ParseError: If the input is not a valid expression
        """
        tokens = self._tokenizer.tokenize(input)
        expression = Expression(self, to_rpn(input, tokens))
        logger.debug("Parsed %r as RPN [%s]", input, expression)
        return expression

    def compute_unresolved(self, input: str) -> float:
        """Parse the input and compute it without resolving variables."""
        return self.parse(input).compute_unresolved()

    async def compute(self, input: str) -> float:
        """Parse the input, resolve its variables and compute it."""
        return await self.parse(input).compute()

    def compute_cache_only(self, input: str, fallback: Optional[float] = None) -> float:
        """Parse the input and compute it using only cached variable values."""
        return self.parse(input).compute_cache_only(fallback)

    def __repr__(self) -> str:
        return f"SMP(provider={self.provider!r})"


def create(
    provider: Optional[VariableValueProvider] = None,
    scope_factory: ScopeFactory = asyncio.TaskGroup,
    max_concurrent_lookups: Optional[int] = None,
    cache_fallback: Optional[float] = None,
) -> SMP:
    """
    Create a new SMP instance.

    Args:
        provider: The variable value provider. Defaults to a provider that
            rejects every variable, so only variable-free expressions compute.
        scope_factory: Factory for the task scope used when resolving
        max_concurrent_lookups: Bound on in-flight lookups (defaults to the
            ``MAX_CONCURRENT_LOOKUPS`` setting)
        cache_fallback: Default fallback for cache-only computes (defaults to
            the ``CACHE_FALLBACK`` setting)

    Raises:
        ValueError: If max_concurrent_lookups is not positive
    """
    return SMP(provider, scope_factory, max_concurrent_lookups, cache_fallback)


_default_instance: Optional[SMP] = None
_default_instance_lock = threading.Lock()


def default_instance() -> SMP:
    """Get the shared instance created with the default settings, building it once."""
    global _default_instance
    if _default_instance is None:
        with _default_instance_lock:
            if _default_instance is None:
                _default_instance = create()
    return _default_instance
