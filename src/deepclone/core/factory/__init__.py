"""Factory functionality: allocation policy and construction paths."""

from deepclone.core.factory.core import create_instance
from deepclone.core.factory.models import AllocationPolicy
from deepclone.core.factory.operations import (
    SHAPE_TEMPLATES,
    accepts_no_arguments,
    allocate_raw,
    instantiate,
    rebind_method,
    rebuild_scalar,
)

__all__ = [
    # Models
    "AllocationPolicy",
    # Operations
    "SHAPE_TEMPLATES",
    "accepts_no_arguments",
    "instantiate",
    "allocate_raw",
    "rebind_method",
    "rebuild_scalar",
    # Core
    "create_instance",
]
