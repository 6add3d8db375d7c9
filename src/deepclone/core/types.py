"""Core type definitions for deepclone."""

from typing import TypeAlias, TypeVar

T = TypeVar("T")

Copy: TypeAlias = T
"""Type alias indicating a value is an independent deep copy.

When you see `Copy[T]` in a return type, the returned value shares no mutable
storage with the value it was copied from. Terminal values (numbers, strings,
enum members, classes, ...) are the exception: they are returned as-is.
"""


def qualified_name(cls: type) -> str:
    """Return the fully qualified name used in error messages and records."""
    return f"{cls.__module__}.{cls.__qualname__}"
