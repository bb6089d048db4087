"""Result type for storage and other fallible boundaries.

Operations that touch the outside world (the snapshot file, the config
file) return either ``Ok(value)`` or ``Err(message)`` instead of raising,
so callers decide explicitly whether a failure is fatal. The task registry
never treats it as fatal: it logs the error and keeps working in memory.

Example usage:
    >>> result = repository.load()
    >>> if isinstance(result, Ok):
    ...     snapshot = result.value
    ... else:
    ...     logger.error("load failed: %s", result.error)
"""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """A successful outcome carrying ``value``."""

    value: T


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """A failed outcome carrying ``error`` (usually a message string)."""

    error: E


# Using Union here as TypeVar aliases don't work with | syntax at runtime
Result = Union[Ok[T], Err[E]]  # noqa: UP007

