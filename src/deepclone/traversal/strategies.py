"""Pure functions for populating copies, one per category.

Each strategy receives the source, a blank target of the same type, and the
recursive copy function the traversal engine threads through. They never
touch the identity registry themselves.
"""

from __future__ import annotations

from collections.abc import Callable, MutableSet
from typing import Any

from deepclone.core.category import Category
from deepclone.core.introspection import UNSET, Slot, instance_slots

CopyFunction = Callable[[Any], Any]
"""Signature: (source_value) -> copied_value"""

PopulateFunction = Callable[[Any, Any, CopyFunction], None]
"""Signature: (source, target, copy) -> None"""


def populate_array(source: Any, target: Any, copy: CopyFunction) -> None:
    """Fill a pre-sized array index by index.

    Args:
        source: Array to copy from.
        target: Blank array of the same length.
        copy: Recursive copy function.
    """
    for i in range(len(source)):
        target[i] = copy(source[i])


def populate_sequence(source: Any, target: Any, copy: CopyFunction) -> None:
    """Append copied elements in iteration order.

    Mutable sets are filled with ``add``, everything else with ``append``.

    Args:
        source: Collection to copy from.
        target: Empty collection of the same type.
        copy: Recursive copy function.
    """
    add = target.add if isinstance(target, MutableSet) else target.append
    for item in source:
        add(copy(item))


def populate_mapping(source: Any, target: Any, copy: CopyFunction) -> None:
    """Insert copied key/value pairs in iteration order.

    Keys are copied too. If two source keys produce equal copies, the target
    mapping's own collision behavior decides which value survives.

    Args:
        source: Mapping to copy from.
        target: Empty mapping of the same type.
        copy: Recursive copy function.
    """
    for key, value in source.items():
        new_key = copy(key)
        target[new_key] = copy(value)


def populate_composite(source: Any, target: Any, copy: CopyFunction) -> None:
    """Copy every slot across the source's class hierarchy.

    Slots unset on the source stay unset on the target.

    Args:
        source: Record to copy from.
        target: Blank record of the same type.
        copy: Recursive copy function.

    Raises:
        AccessError: If a slot cannot be read or written, or the source keeps
            state in a built-in layout introspection cannot reach.
    """
    _copy_slots(instance_slots(source), source, target, copy)


def populate_instance_state(source: Any, target: Any, copy: CopyFunction) -> None:
    """Copy attributes carried by a container subclass on top of its elements.

    Args:
        source: Container instance to copy from.
        target: Already populated container of the same type.
        copy: Recursive copy function.
    """
    _copy_slots(instance_slots(source, require_plain_layout=False), source, target, copy)


def populate_missing_state(source: Any, target: Any, copy: CopyFunction) -> None:
    """Copy attributes of a pure-Python container its initializer did not set.

    Attributes the initializer already created on target hold the container's
    own storage, which is filled through the container protocol instead.

    Args:
        source: Container instance to copy from.
        target: Already populated container of the same type.
        copy: Recursive copy function.
    """
    missing = tuple(slot for slot in instance_slots(source) if not slot.is_set(target))
    _copy_slots(missing, source, target, copy)


def build_immutable_sequence(source: Any, copy: CopyFunction) -> Any:
    """Build a tuple or frozenset (or subclass) from copied elements.

    Bypasses any Python-level ``__new__`` of subclasses (namedtuples take
    positional fields there) by calling the built-in constructor directly.

    Args:
        source: Immutable sequence to copy from.
        copy: Recursive copy function.

    Returns:
        New instance of source's type holding the copied elements.
    """
    items = [copy(item) for item in source]
    base = tuple if isinstance(source, tuple) else frozenset
    return base.__new__(type(source), items)


STRATEGIES: dict[Category, PopulateFunction] = {
    Category.ARRAY: populate_array,
    Category.SEQUENCE: populate_sequence,
    Category.ASSOCIATIVE: populate_mapping,
    Category.COMPOSITE: populate_composite,
}
"""Populate strategy per non-terminal category."""


def get_strategy(category: Category) -> PopulateFunction:
    """Get the populate strategy for a category.

    Raises:
        ValueError: For TERMINAL, which is never populated.
    """
    strategy = STRATEGIES.get(category)
    if strategy is None:
        raise ValueError(f"No populate strategy for category {category.name}")
    return strategy


def _copy_slots(slots: tuple[Slot, ...], source: Any, target: Any, copy: CopyFunction) -> None:
    for slot in slots:
        value = slot.read(source)
        if value is UNSET:
            continue
        slot.write(target, copy(value))
