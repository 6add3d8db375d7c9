"""deepclone: deep copies of arbitrary, possibly cyclic object graphs.

Usage:
    from dataclasses import dataclass, field
    from deepclone import deep_copy

    @dataclass
    class Node:
        name: str
        children: list["Node"] = field(default_factory=list)
        parent: "Node | None" = None

    root = Node("root")
    root.children.append(Node("leaf", parent=root))

    clone = deep_copy(root)
    assert clone is not root
    assert clone.children[0].parent is clone
"""

import logging

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

# Configuration
from deepclone.config import CopySettings

# Core primitives
from deepclone.core import (
    AccessError,
    AllocationPolicy,
    Category,
    Copy,
    DeepCopyError,
    Introspectable,
    InstantiationError,
    Slot,
    TraversalDepthError,
    allow_raw_allocation,
    classify,
    introspectable,
    slots_of,
)

# Registry
from deepclone.registry import IdentityRegistry

# Tracing (optional)
from deepclone.tracing import (
    CopyHistory,
    CopyRecord,
)

# Traversal
from deepclone.traversal import (
    DeepCopier,
    deep_copy,
)

__all__ = [
    # Version
    "__version__",
    # Entry points
    "deep_copy",
    "DeepCopier",
    "Copy",
    # Errors
    "DeepCopyError",
    "InstantiationError",
    "AccessError",
    "TraversalDepthError",
    # Core
    "Category",
    "classify",
    "Slot",
    "slots_of",
    "Introspectable",
    "introspectable",
    "allow_raw_allocation",
    "AllocationPolicy",
    "IdentityRegistry",
    # Configuration
    "CopySettings",
    # Tracing
    "CopyHistory",
    "CopyRecord",
]
