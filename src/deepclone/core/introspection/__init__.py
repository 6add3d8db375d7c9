"""Introspection functionality: slot discovery, forced access, and opt-in metadata."""

from deepclone.core.introspection.core import (
    IntrospectionRegistry,
    allow_raw_allocation,
    declared_slot_names,
    get_registry,
    has_plain_layout,
    instance_slots,
    introspectable,
    layout_base,
    slots_of,
)
from deepclone.core.introspection.models import (
    UNSET,
    Introspectable,
    IntrospectionMeta,
    Slot,
)

__all__ = [
    # Models
    "Slot",
    "UNSET",
    "Introspectable",
    "IntrospectionMeta",
    # Core
    "IntrospectionRegistry",
    "get_registry",
    "introspectable",
    "allow_raw_allocation",
    "declared_slot_names",
    "layout_base",
    "has_plain_layout",
    "slots_of",
    "instance_slots",
]
