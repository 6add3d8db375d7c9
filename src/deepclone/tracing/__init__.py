"""Tracing infrastructure for observing copy calls.

Usage:
    from deepclone.tracing import CopyHistory, CopyRecord

    # Implement CopyHistory for your storage backend
    class MyHistory:
        def record_copy(self, record: CopyRecord) -> None:
            ...
"""

from deepclone.tracing.models import CopyRecord
from deepclone.tracing.protocol import CopyHistory

__all__ = [
    "CopyHistory",
    "CopyRecord",
]
