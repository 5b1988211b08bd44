"""
Variable value providers.

A provider supplies values for the variables of an expression. Lookups are
awaited concurrently, one per variable occurrence, so implementations must be
safe to call from several tasks at once. Any exception raised by a provider
surfaces to the caller wrapped in a ResolveError.

Providers may also implement ``get_cached_value`` to take part in cache-only
computes, which never await a lookup.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

import yaml
from pydantic import BaseModel, ConfigDict, Field


@runtime_checkable
class VariableValueProvider(Protocol):
    """Source of values for variables."""

    async def get_value(self, name: str) -> float:
        """
        Return the value of the variable with the given name.

        Args:
            name: The variable name

        Returns:
            The variable value
        """
        ...


@runtime_checkable
class CachedValueProvider(Protocol):
    """A provider that can answer from values it already holds, without awaiting."""

    def get_cached_value(self, name: str) -> float | None:
        ...


class UnsupportedVariableError(LookupError):
    """Raised by a provider that does not support variables at all."""


class NoOpVariableValueProvider:
    """A provider that rejects every lookup, so only variable-free expressions compute."""

    async def get_value(self, name: str) -> float:
        raise UnsupportedVariableError("Variables are not supported in this parser!")

    def get_cached_value(self, name: str) -> float | None:
        return None

    def __repr__(self) -> str:
        return "NoOpVariableValueProvider()"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, NoOpVariableValueProvider)

    def __hash__(self) -> int:
        return hash(NoOpVariableValueProvider)


class MapVariableValueProvider(BaseModel):
    """
    A provider backed by a fixed name to value table.

    Looking up a name that is not in the table raises KeyError, which the
    resolver reports as a failed lookup for that variable.

    Example:
        >>> provider = MapVariableValueProvider(values={"x": 5, "rate": 0.25})
        >>> provider.values["x"]
        5.0
    """

    model_config = ConfigDict(frozen=True)

    values: dict[str, float] = Field(default_factory=dict)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "MapVariableValueProvider":
        """
        Load the table from a YAML mapping of variable names to numbers.

        Args:
            path: Path to the YAML file

        Returns:
            MapVariableValueProvider instance
        """
        with open(path, "r") as f:
            data = yaml.safe_load(f)

        return cls(values=data or {})

    async def get_value(self, name: str) -> float:
        return self.values[name]

    def get_cached_value(self, name: str) -> float | None:
        return self.values.get(name)
