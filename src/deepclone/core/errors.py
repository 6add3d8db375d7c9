"""Exception hierarchy for deep-copy failures.

Every error names the runtime type that could not be copied, and AccessError
also names the slot. None of them are recovered internally: a partially copied
graph would share storage with its source, so the whole call fails instead.
"""

from __future__ import annotations

from deepclone.core.types import qualified_name


class DeepCopyError(Exception):
    """Base type for all errors raised while deep copying a value.

    Attributes:
        type_name: Fully qualified name of the offending runtime type.
    """

    def __init__(self, message: str, type_name: str) -> None:
        super().__init__(message)
        self.type_name = type_name


class InstantiationError(DeepCopyError):
    """Raised when no construction path can produce an instance of a type."""

    def __init__(self, cls: type, reason: str) -> None:
        name = qualified_name(cls)
        super().__init__(f"Can't create instance of {name}: {reason}", name)


class AccessError(DeepCopyError):
    """Raised when a storage slot cannot be read or written.

    Attributes:
        slot: Name of the slot that failed.
    """

    def __init__(self, cls: type, slot: str, reason: str) -> None:
        name = qualified_name(cls)
        super().__init__(f"Can't access slot {slot!r} of {name}: {reason}", name)
        self.slot = slot


class TraversalDepthError(DeepCopyError):
    """Raised when a value is nested deeper than the traversal can follow.

    Attributes:
        depth: Nesting depth reached when the traversal gave up.
    """

    def __init__(self, cls: type, depth: int, reason: str) -> None:
        name = qualified_name(cls)
        super().__init__(f"Can't copy {name} at depth {depth}: {reason}", name)
        self.depth = depth
