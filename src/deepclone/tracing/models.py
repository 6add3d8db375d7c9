"""Data models for tracing infrastructure.

These models are storage-agnostic and serialize to plain JSON-compatible
dictionaries.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(slots=True)
class CopyRecord:
    """Summary of a single top-level deep copy call.

    Attributes:
        root_type: Fully qualified name of the copied root value's type.
        copied: Number of new instances created, per category label.
        registry_hits: Encounters resolved from the identity registry
            (shared references and cycles).
        raw_allocations: Instances allocated without running their initializer.
        duration_ms: Wall time of the call in milliseconds.

    Example:
        record = CopyRecord(
            root_type="app.models.Order",
            copied={"composite": 3, "sequence": 2},
            registry_hits=1,
            raw_allocations=3,
            duration_ms=0.4,
        )
    """

    root_type: str
    copied: dict[str, int] = field(default_factory=dict)
    registry_hits: int = 0
    raw_allocations: int = 0
    duration_ms: float = 0.0

    @property
    def total_copied(self) -> int:
        """Number of new instances created across all categories."""
        return sum(self.copied.values())

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dictionary."""
        return {
            "root_type": self.root_type,
            "copied": dict(self.copied),
            "registry_hits": self.registry_hits,
            "raw_allocations": self.raw_allocations,
            "duration_ms": self.duration_ms,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CopyRecord:
        """Create from dictionary (for deserialization)."""
        return cls(
            root_type=data["root_type"],
            copied=dict(data.get("copied", {})),
            registry_hits=data.get("registry_hits", 0),
            raw_allocations=data.get("raw_allocations", 0),
            duration_ms=data.get("duration_ms", 0.0),
        )
