"""Identity registry service.

IdentityRegistry is a stateful service mapping source objects to their copies
for the lifetime of one top-level copy call.
"""

from __future__ import annotations

from typing import Any, Final


class _Missing:
    """Lookup result for an identity with no registered copy."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Final = _Missing()


class IdentityRegistry:
    """Maps source object identity to the copy produced for it.

    Keys compare by identity (``id``), never by equality: two equal but
    distinct sources get two copies, one source reached twice gets one.
    Sources are held alive alongside their copies so an ``id`` cannot be
    recycled by a temporary object while the call is running.
    """

    __slots__ = ("_entries", "_hits")

    def __init__(self) -> None:
        """Initialize empty identity registry."""
        self._entries: dict[int, tuple[Any, Any]] = {}
        self._hits = 0

    def lookup(self, source: Any) -> Any:
        """Return the copy registered for source.

        Args:
            source: Object whose copy is requested.

        Returns:
            The registered copy, or MISSING if source has none yet.
        """
        entry = self._entries.get(id(source))
        if entry is None:
            return MISSING
        self._hits += 1
        return entry[1]

    def register(self, source: Any, copy: Any) -> None:
        """Record copy as the copy of source.

        Args:
            source: Object being copied.
            copy: Its copy, possibly not yet populated.

        Raises:
            ValueError: If source already has a registered copy.
        """
        key = id(source)
        if key in self._entries:
            raise ValueError(
                f"{type(source).__name__} object at {key:#x} already has a registered copy"
            )
        self._entries[key] = (source, copy)

    def __contains__(self, source: Any) -> bool:
        return id(source) in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def hits(self) -> int:
        """Number of lookups that found an existing copy."""
        return self._hits
