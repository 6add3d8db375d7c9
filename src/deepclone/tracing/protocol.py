"""Protocols for tracing infrastructure.

These protocols define the interface for copy history backends, allowing
different implementations (in-memory, file, metrics exporters).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from deepclone.tracing.models import CopyRecord


@runtime_checkable
class CopyHistory(Protocol):
    """Protocol for collecting records of completed copy calls.

    The copier reports one CopyRecord per successful top-level call. Failed
    calls are not reported.

    Usage:
        history = MyHistory()
        copier = DeepCopier(history=history)
        copier.copy(value)
        history.get_records()[-1].total_copied
    """

    def record_copy(self, record: CopyRecord) -> None:
        """Store the record of a finished copy call.

        Args:
            record: Summary of the call.
        """
        ...

    def get_records(self) -> list[CopyRecord]:
        """Return stored records, oldest first."""
        ...

    def clear(self) -> None:
        """Drop all stored records."""
        ...
