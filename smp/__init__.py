"""
SMP: a simple math parser.

Parses arithmetic expressions (+ - * / ^, parentheses, numbers and named
variables), resolves variables through a possibly asynchronous provider and
computes the result as a float.

    >>> import smp
    >>> smp.compute_unresolved("(2+3)*4")
    20.0
    >>> import asyncio
    >>> calc = smp.create(smp.MapVariableValueProvider(values={"x": 5}))
    >>> asyncio.run(calc.compute("x+1"))
    6.0
"""

import logging
from typing import Optional

from .errors import (
    ComputeError,
    ComputeErrorKind,
    ParseError,
    ParseErrorKind,
    ResolveError,
    ResolveErrorKind,
    SMPError,
)
from .expression import Expression
from .providers import (
    CachedValueProvider,
    MapVariableValueProvider,
    NoOpVariableValueProvider,
    UnsupportedVariableError,
    VariableValueProvider,
)
from .instance import SMP, create, default_instance

__version__ = "1.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())


def parse(input: str) -> Expression:
    """Parse the input with the default instance."""
    return default_instance().parse(input)


def compute_unresolved(input: str) -> float:
    """Parse and compute the input with the default instance, without resolving."""
    return default_instance().compute_unresolved(input)


async def compute(input: str) -> float:
    """Parse, resolve and compute the input with the default instance."""
    return await default_instance().compute(input)


def compute_cache_only(input: str, fallback: Optional[float] = None) -> float:
    """Parse and compute the input with the default instance using cached values only."""
    return default_instance().compute_cache_only(input, fallback)


__all__ = [
    "SMP",
    "Expression",
    "create",
    "default_instance",
    "parse",
    "compute",
    "compute_unresolved",
    "compute_cache_only",
    "VariableValueProvider",
    "CachedValueProvider",
    "NoOpVariableValueProvider",
    "MapVariableValueProvider",
    "UnsupportedVariableError",
    "SMPError",
    "ParseError",
    "ParseErrorKind",
    "ComputeError",
    "ComputeErrorKind",
    "ResolveError",
    "ResolveErrorKind",
]
