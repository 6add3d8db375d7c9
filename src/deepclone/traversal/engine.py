"""Traversal engine: the recursive deep copy driver.

Usage:
    copier = DeepCopier()
    order_copy = copier.copy(order)

    # Or the module-level shortcut
    order_copy = deep_copy(order)

    # With explicit settings and history
    copier = DeepCopier(CopySettings(allocation_policy="opt_in"), history=my_history)

Each call to copy() gets its own IdentityRegistry, so a copier can be reused
and shared between threads. Within one call, every non-terminal source object
is copied exactly once: it is registered before its contents are filled in,
so cycles and shared references resolve to the same copy.
"""

from __future__ import annotations

import logging
import time
from collections import Counter
from typing import Any, TypeVar

from deepclone.config import CopySettings, get_settings
from deepclone.core.category import (
    Category,
    classify,
    is_bound_method,
    is_immutable_sequence,
    is_scalar,
)
from deepclone.core.errors import AccessError, DeepCopyError, TraversalDepthError
from deepclone.core.factory import (
    AllocationPolicy,
    create_instance,
    rebind_method,
    rebuild_scalar,
)
from deepclone.core.introspection import has_plain_layout, layout_base
from deepclone.core.types import Copy, qualified_name
from deepclone.registry import MISSING, IdentityRegistry
from deepclone.tracing import CopyHistory, CopyRecord
from deepclone.traversal.strategies import (
    CopyFunction,
    build_immutable_sequence,
    get_strategy,
    populate_composite,
    populate_instance_state,
    populate_missing_state,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class _Traversal:
    """State of one top-level copy call. Discarded when the call returns."""

    __slots__ = (
        "registry",
        "copied",
        "raw_allocations",
        "current",
        "depth",
        "_policy",
        "_max_depth",
        "_terminals",
    )

    def __init__(
        self,
        policy: AllocationPolicy,
        max_depth: int | None,
        terminals: tuple[type, ...],
    ) -> None:
        self.registry = IdentityRegistry()
        self.copied: Counter[str] = Counter()
        self.raw_allocations = 0
        self.current: type | None = None
        self.depth = 0
        self._policy = policy
        self._max_depth = max_depth
        self._terminals = terminals

    def copy(self, value: Any, depth: int = 0) -> Any:
        """Copy value, consulting and filling the identity registry."""
        if value is None:
            return None

        category = classify(value, self._terminals)
        if category is Category.TERMINAL:
            return value

        existing = self.registry.lookup(value)
        if existing is not MISSING:
            return existing

        cls = type(value)
        self.current = cls
        self.depth = depth
        if self._max_depth is not None and depth > self._max_depth:
            raise TraversalDepthError(cls, depth, f"nesting exceeds max_depth {self._max_depth}")

        def copy_child(item: Any) -> Any:
            return self.copy(item, depth + 1)

        if category is Category.SEQUENCE and is_immutable_sequence(value):
            return self._copy_immutable(value, copy_child)
        if category is Category.COMPOSITE and is_bound_method(value):
            return self._copy_method(value, copy_child)
        if category is Category.COMPOSITE and is_scalar(value):
            return self._copy_scalar(value, copy_child)

        raw_before = self.raw_allocations
        target = create_instance(
            cls,
            value,
            policy=self._policy,
            on_raw_allocation=self._count_raw_allocation,
        )
        # Register before populating so cycles back to value find target
        self.registry.register(value, target)
        self.copied[category.label] += 1

        if category is Category.COMPOSITE:
            populate_composite(value, target, copy_child)
            return target

        if layout_base(cls) is cls:
            self._populate_elements(category, value, target, copy_child)
        elif not has_plain_layout(cls):
            # Elements live in native storage, attributes on top of it
            self._populate_elements(category, value, target, copy_child)
            populate_instance_state(value, target, copy_child)
        elif self.raw_allocations > raw_before:
            # No initializer created the backing storage, so it is copied as state
            populate_composite(value, target, copy_child)
        else:
            self._populate_elements(category, value, target, copy_child)
            populate_missing_state(value, target, copy_child)
        return target

    def _populate_elements(
        self,
        category: Category,
        value: Any,
        target: Any,
        copy_child: CopyFunction,
    ) -> None:
        try:
            get_strategy(category)(value, target, copy_child)
        except (DeepCopyError, RecursionError):
            raise
        except Exception as e:
            raise AccessError(type(value), "<elements>", f"element insertion failed: {e}") from e

    def _copy_immutable(self, value: Any, copy_child: CopyFunction) -> Any:
        """Copy a tuple/frozenset, which can only be built after its elements."""
        target = build_immutable_sequence(value, copy_child)
        # A cycle through a mutable element may have copied value already
        existing = self.registry.lookup(value)
        if existing is not MISSING:
            return existing

        self.registry.register(value, target)
        self.copied[Category.SEQUENCE.label] += 1
        if layout_base(type(value)) is not type(value):
            populate_instance_state(value, target, copy_child)
        return target

    def _copy_method(self, value: Any, copy_child: CopyFunction) -> Any:
        """Rebind a method to the copy of its receiver."""
        receiver = copy_child(value.__self__)
        # The receiver may hold this very method
        existing = self.registry.lookup(value)
        if existing is not MISSING:
            return existing

        target = rebind_method(value, receiver)
        self.registry.register(value, target)
        self.copied[Category.COMPOSITE.label] += 1
        return target

    def _copy_scalar(self, value: Any, copy_child: CopyFunction) -> Any:
        """Copy a str/int/... subclass instance that carries attributes."""
        target = rebuild_scalar(type(value), value)
        self.registry.register(value, target)
        self.copied[Category.COMPOSITE.label] += 1
        populate_instance_state(value, target, copy_child)
        return target

    def _count_raw_allocation(self, cls: type) -> None:
        self.raw_allocations += 1

    def to_record(self, root_type: type, duration_ms: float) -> CopyRecord:
        return CopyRecord(
            root_type=qualified_name(root_type),
            copied=dict(self.copied),
            registry_hits=self.registry.hits,
            raw_allocations=self.raw_allocations,
            duration_ms=duration_ms,
        )


class DeepCopier:
    """Deep copy engine producing independent copies of arbitrary object graphs.

    Args:
        settings: Copy configuration. Defaults to settings loaded from the
            environment.
        history: Optional sink receiving one CopyRecord per successful call.
    """

    def __init__(
        self,
        settings: CopySettings | None = None,
        history: CopyHistory | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._terminals = self._settings.terminal_types()
        self._history = history

    @property
    def settings(self) -> CopySettings:
        """Settings this copier was created with."""
        return self._settings

    def copy(self, value: T) -> Copy[T]:
        """Produce a deep copy of value.

        Args:
            value: Any value, including None.

        Returns:
            A value of the same runtime type sharing no mutable storage with
            value. Terminal values are returned as-is.

        Raises:
            InstantiationError: If a type in the graph cannot be instantiated.
            AccessError: If a slot in the graph cannot be read or written.
            TraversalDepthError: If the graph is nested too deeply.
        """
        traversal = _Traversal(
            self._settings.allocation_policy,
            self._settings.max_depth,
            self._terminals,
        )
        logger.debug("Copying %s", type(value).__qualname__)
        started = time.perf_counter()
        try:
            result = traversal.copy(value)
        except RecursionError as e:
            raise _recursion_limit_error(traversal, value) from e
        except DeepCopyError as e:
            # Slot accessors and initializers wrap whatever they hit, including the limit
            if isinstance(e.__cause__, RecursionError):
                raise _recursion_limit_error(traversal, value) from e.__cause__
            raise
        duration_ms = (time.perf_counter() - started) * 1000

        logger.debug(
            "Copied %s: %d new objects, %d registry hits, %d raw allocations",
            type(value).__qualname__,
            len(traversal.registry),
            traversal.registry.hits,
            traversal.raw_allocations,
        )
        if self._history is not None and self._settings.record_history:
            self._history.record_copy(traversal.to_record(type(value), duration_ms))
        return result


def _recursion_limit_error(traversal: _Traversal, root: Any) -> TraversalDepthError:
    cls = traversal.current or type(root)
    return TraversalDepthError(cls, traversal.depth, "interpreter recursion limit reached")


def deep_copy(value: T, *, settings: CopySettings | None = None) -> Copy[T]:
    """Produce a deep copy of value with a fresh DeepCopier.

    Args:
        value: Any value, including None.
        settings: Optional copy configuration.

    Returns:
        Independent copy of value.
    """
    return DeepCopier(settings).copy(value)
