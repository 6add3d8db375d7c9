"""Category functionality: copy-strategy buckets and the classifier."""

from deepclone.core.category.core import (
    ARRAY_TYPES,
    TERMINAL_TYPES,
    classify,
    is_immutable_sequence,
    is_bound_method,
    is_scalar,
    is_terminal,
)
from deepclone.core.category.models import Category

__all__ = [
    "Category",
    "classify",
    "is_terminal",
    "is_scalar",
    "is_bound_method",
    "is_immutable_sequence",
    "TERMINAL_TYPES",
    "ARRAY_TYPES",
]
