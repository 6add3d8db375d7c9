"""Traversal engine and per-category populate strategies."""

from deepclone.traversal.engine import DeepCopier, deep_copy
from deepclone.traversal.strategies import (
    STRATEGIES,
    build_immutable_sequence,
    get_strategy,
    populate_array,
    populate_composite,
    populate_instance_state,
    populate_mapping,
    populate_missing_state,
    populate_sequence,
)

__all__ = [
    "DeepCopier",
    "deep_copy",
    "STRATEGIES",
    "get_strategy",
    "populate_array",
    "populate_sequence",
    "populate_mapping",
    "populate_composite",
    "populate_instance_state",
    "populate_missing_state",
    "build_immutable_sequence",
]
