"""Category models: the copy-strategy buckets a value can fall into."""

from __future__ import annotations

from enum import Enum, auto


class Category(Enum):
    """Copy strategy bucket. Every value belongs to exactly one."""

    TERMINAL = auto()  # Returned as-is, never duplicated
    ARRAY = auto()  # Fixed-length indexed storage, filled slot by slot
    SEQUENCE = auto()  # Ordered or unordered collection, filled by appending
    ASSOCIATIVE = auto()  # Mapping, keys and values both copied
    COMPOSITE = auto()  # Record with named slots across its class hierarchy

    @property
    def label(self) -> str:
        """Lowercase name used as a key in copy records."""
        return self.name.lower()
