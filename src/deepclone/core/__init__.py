"""Core functionalities: stateless classification, construction, and introspection.

Architecture Note:
    core/ contains pure, stateless functionalities. The only state is the
    process-local introspection registry that types opt into.
    For per-call state, see registry/ and traversal/.
"""

from deepclone.core.category import Category, classify, is_terminal
from deepclone.core.errors import (
    AccessError,
    DeepCopyError,
    InstantiationError,
    TraversalDepthError,
)
from deepclone.core.factory import AllocationPolicy, create_instance
from deepclone.core.introspection import (
    UNSET,
    Introspectable,
    IntrospectionRegistry,
    Slot,
    allow_raw_allocation,
    get_registry,
    instance_slots,
    introspectable,
    slots_of,
)
from deepclone.core.types import Copy

__all__ = [
    # Types
    "Copy",
    # Errors
    "DeepCopyError",
    "InstantiationError",
    "AccessError",
    "TraversalDepthError",
    # Category
    "Category",
    "classify",
    "is_terminal",
    # Factory
    "AllocationPolicy",
    "create_instance",
    # Introspection
    "Slot",
    "UNSET",
    "Introspectable",
    "IntrospectionRegistry",
    "get_registry",
    "introspectable",
    "allow_raw_allocation",
    "slots_of",
    "instance_slots",
]
