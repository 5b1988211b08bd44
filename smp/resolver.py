"""
Concurrent variable resolution.

Every variable occurrence in an expression is looked up through the provider
as its own task inside one concurrency scope (an ``asyncio.TaskGroup`` unless
the caller supplies another factory). The scope is all-or-nothing: the first
failing lookup cancels its siblings and no partial result is ever returned.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Callable, Optional

from .core.logging import get_context_logger
from .errors import ResolveError
from .parser.tokens import Constant, Token, Variable
from .providers import VariableValueProvider

if TYPE_CHECKING:
    from .expression import Expression

ScopeFactory = Callable[[], asyncio.TaskGroup]

logger = get_context_logger(__name__, component="resolver")


async def resolve_expression(
    expression: "Expression",
    provider: VariableValueProvider,
    scope_factory: ScopeFactory = asyncio.TaskGroup,
    max_concurrent_lookups: Optional[int] = None,
) -> "Expression":
    """
    Resolve every variable of an expression.

    Args:
        expression: The expression to resolve
        provider: Source of variable values
        scope_factory: Creates the task scope the lookups run in
        max_concurrent_lookups: Upper bound on in-flight lookups (None for no bound)

    Returns:
        The same expression when it has no variables, otherwise a new
        expression with each variable replaced by a constant

    Raises:
        ResolveError: VARIABLE_LOOKUP_FAILED naming the variable whose lookup
            failed, or UNKNOWN when the failure cannot be traced to one
    """
    variables = [token for token in expression.tokens if isinstance(token, Variable)]

    if not variables:
        return expression

    semaphore = (
        asyncio.Semaphore(max_concurrent_lookups) if max_concurrent_lookups is not None else None
    )

    async def lookup(variable: Variable) -> tuple[str, float]:
        try:
            if semaphore is None:
                value = await provider.get_value(variable.name)
            else:
                async with semaphore:
                    value = await provider.get_value(variable.name)
            return variable.name, float(value)
        except Exception as exc:
            logger.warning(
                "Variable lookup failed",
                extra_data={"variable": variable.name, "error": repr(exc)},
            )
            raise ResolveError.lookup_failed(variable.name) from exc

    logger.debug("Resolving variables", extra_data={"lookups": len(variables)})

    try:
        async with scope_factory() as scope:
            tasks = [scope.create_task(lookup(variable)) for variable in variables]
    except ResolveError:
        raise
    except asyncio.CancelledError as exc:
        if _cancelling():
            raise
        raise ResolveError.unknown() from exc
    except BaseExceptionGroup as group:
        error = _find_resolve_error(group)
        if error is None:
            raise ResolveError.unknown() from group
        raise error
    except Exception as exc:
        raise ResolveError.unknown() from exc

    # A lookup cancelled from outside leaves the scope exiting cleanly.
    cancelled = [variable.name for variable, task in zip(variables, tasks) if task.cancelled()]
    if cancelled:
        logger.warning("Variable lookups were cancelled", extra_data={"variables": cancelled})
        raise ResolveError.unknown()

    values = dict(task.result() for task in tasks)
    logger.debug("Resolved variables", extra_data={"values": values})

    return expression.with_tokens(_substitute(expression.tokens, values))


def _cancelling() -> bool:
    """Whether the running task itself has a pending cancellation request."""
    task = asyncio.current_task()
    return task is not None and task.cancelling() > 0


def _find_resolve_error(group: BaseExceptionGroup) -> ResolveError | None:
    """Return the first ResolveError in a (possibly nested) exception group."""
    for exc in group.exceptions:
        if isinstance(exc, ResolveError):
            return exc
        if isinstance(exc, BaseExceptionGroup):
            found = _find_resolve_error(exc)
            if found is not None:
                return found
    return None


def _substitute(tokens: tuple[Token, ...], values: dict[str, float]) -> list[Token]:
    return [
        Constant(values[token.name]) if isinstance(token, Variable) else token
        for token in tokens
    ]
