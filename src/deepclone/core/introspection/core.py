"""Field introspector: storage slots across a class hierarchy.

Usage:
    @dataclass(slots=True)
    class Base:
        id: int

    @dataclass(slots=True)
    class Child(Base):
        name: str

    [s.name for s in slots_of(Child)]   # ["name", "id"]

    # Opt in explicitly, restricting the copied state:
    @introspectable(slots=("payload",))
    class Envelope:
        ...

Slots are read and written through the declaring class's member descriptor
and the instance ``__dict__`` directly, so class-level ``__setattr__`` and
``__getattribute__`` overrides (frozen dataclasses, proxies) do not interfere.
"""

from __future__ import annotations

import functools
import types
from collections.abc import Callable
from typing import Any, TypeVar, overload

from deepclone.core.errors import AccessError
from deepclone.core.introspection.models import IntrospectionMeta, Slot

_HEAPTYPE_FLAG = 1 << 9
_SLOT_CACHE_SIZE = 512
_SKIPPED_SLOT_NAMES = frozenset({"__dict__", "__weakref__"})

# Built-in types whose whole state lives in the instance __dict__
_DICT_BACKED_BUILTINS: tuple[type, ...] = (object, types.SimpleNamespace)


class IntrospectionRegistry:
    """Process-local registry of types that opted into explicit copy metadata.

    Runtime counterpart of the Introspectable protocol, for types whose source
    cannot be changed to add ``__copy_slots__``.
    """

    def __init__(self) -> None:
        """Initialize empty introspection registry."""
        self._by_type: dict[type, IntrospectionMeta] = {}

    def register(
        self,
        cls: type,
        slots: tuple[str, ...] | None = None,
        raw_allocation: bool = False,
    ) -> IntrospectionMeta:
        """Register copy metadata for a type, replacing any earlier entry.

        Args:
            cls: Class to register.
            slots: Attribute names making up the copied state, or None to keep
                automatic slot discovery.
            raw_allocation: If True, the type may be allocated without running
                its initializer when it has no zero-argument constructor.

        Returns:
            The stored metadata.
        """
        meta = IntrospectionMeta(
            slots=tuple(slots) if slots is not None else None,
            raw_allocation=raw_allocation,
        )
        self._by_type[cls] = meta
        return meta

    def get_meta(self, cls: type) -> IntrospectionMeta | None:
        """Get metadata for a registered type, None if not registered."""
        return self._by_type.get(cls)

    def is_registered(self, cls: type) -> bool:
        """Check if a type has registered copy metadata."""
        return cls in self._by_type

    def unregister(self, cls: type) -> bool:
        """Remove a type's metadata. Returns True if it existed."""
        return self._by_type.pop(cls, None) is not None


# Module-level registry instance
_registry = IntrospectionRegistry()


def get_registry() -> IntrospectionRegistry:
    """Access the global introspection registry."""
    return _registry


@overload
def introspectable(cls: type) -> type: ...


@overload
def introspectable(
    cls: None = None,
    *,
    slots: tuple[str, ...] | None = None,
    raw_allocation: bool = False,
) -> Callable[[type], type]: ...


def introspectable(
    cls: type | None = None,
    *,
    slots: tuple[str, ...] | None = None,
    raw_allocation: bool = False,
) -> type | Callable[[type], type]:
    """Register explicit copy metadata for a class.

    Supports three forms:
        @introspectable                          # bare decorator
        @introspectable()                        # parenthesized, no args
        @introspectable(slots=("a", "b"))        # factory with args

    Args:
        cls: The class to register, or None if called with arguments.
        slots: Attribute names making up the copied state.
        raw_allocation: Allow allocation without running the initializer.

    Returns:
        Decorated class or decorator function.
    """

    def decorator(c: type) -> type:
        _registry.register(c, slots=slots, raw_allocation=raw_allocation)
        return c

    if cls is None:
        return decorator
    return decorator(cls)


C = TypeVar("C", bound=type)


def allow_raw_allocation(cls: C) -> C:
    """Mark a class as safe to allocate without running its initializer.

    Keeps any slot list registered earlier. Needed only when the copier runs
    with ``AllocationPolicy.OPT_IN``.
    """
    existing = _registry.get_meta(cls)
    _registry.register(cls, slots=existing.slots if existing else None, raw_allocation=True)
    return cls


def layout_base(cls: type) -> type:
    """Return the nearest built-in class in cls's MRO.

    The built-in base decides the memory layout of instances: ``object`` for
    plain classes, ``list`` for list subclasses, and so on.
    """
    for base in cls.__mro__:
        if not base.__flags__ & _HEAPTYPE_FLAG:
            return base
    return object


def has_plain_layout(cls: type) -> bool:
    """Check if all state of cls instances lives in slots and the instance ``__dict__``."""
    return layout_base(cls) in _DICT_BACKED_BUILTINS


def declared_slot_names(cls: type) -> tuple[str, ...] | None:
    """Return explicitly declared copy slot names, None if the type did not opt in.

    Registry metadata wins over ``__copy_slots__``, which may be a classmethod
    or a plain tuple of names.
    """
    meta = _registry.get_meta(cls)
    if meta is not None and meta.slots is not None:
        return meta.slots
    hook = getattr(cls, "__copy_slots__", None)
    if hook is None:
        return None
    return tuple(hook() if callable(hook) else hook)


def slots_of(cls: type) -> tuple[Slot, ...]:
    """Enumerate the declared slots of a type and all its ancestors.

    Own slots come first, then each ancestor's in MRO order. Types that opted
    in through the registry or ``__copy_slots__`` get exactly their declared
    names instead.

    Args:
        cls: Type to inspect.

    Returns:
        Ordered slot accessors, stable for a given type.
    """
    names = declared_slot_names(cls)
    if names is not None:
        return tuple(_attribute_slot(cls, name) for name in names)
    return _declared_slots(cls)


def instance_slots(obj: Any, *, require_plain_layout: bool = True) -> tuple[Slot, ...]:
    """Enumerate every slot holding state on a specific instance.

    Declared slots across the hierarchy, followed by the instance's
    ``__dict__`` entries in insertion order.

    Args:
        obj: Instance to inspect.
        require_plain_layout: Reject instances whose built-in base keeps state
            outside any slot. Container subclasses pass False since their
            elements are copied separately.

    Returns:
        Ordered slot accessors.

    Raises:
        AccessError: If the instance keeps state introspection cannot reach.
    """
    cls = type(obj)
    if declared_slot_names(cls) is not None:
        return slots_of(cls)

    if require_plain_layout:
        base = layout_base(cls)
        if base not in _DICT_BACKED_BUILTINS:
            raise AccessError(
                cls,
                "<native>",
                f"state held by built-in base {base.__name__} is not introspectable",
            )

    declared = _declared_slots(cls)
    state = _instance_dict(obj)
    if not state:
        return declared
    return declared + tuple(_dict_slot(cls, name) for name in state)


@functools.lru_cache(maxsize=_SLOT_CACHE_SIZE)
def _declared_slots(cls: type) -> tuple[Slot, ...]:
    """Walk the MRO collecting ``__slots__`` descriptors.

    Cached per type. The cache is bounded so classes created at runtime can
    still be collected once they fall out of it.
    """
    slots: list[Slot] = []
    seen: set[str] = set()
    for owner in cls.__mro__:
        if owner is object:
            continue
        for name in _own_slot_names(owner):
            if name in seen:
                continue
            seen.add(name)
            slots.append(_descriptor_slot(owner, name))
    return tuple(slots)


def _own_slot_names(owner: type) -> tuple[str, ...]:
    """Slot names declared directly on owner, with private names mangled."""
    declared = owner.__dict__.get("__slots__", ())
    if isinstance(declared, str):
        declared = (declared,)
    return tuple(_mangle(owner, name) for name in declared if name not in _SKIPPED_SLOT_NAMES)


def _mangle(owner: type, name: str) -> str:
    """Apply private name mangling the way the compiler does for ``__name``."""
    if not name.startswith("__") or name.endswith("__"):
        return name
    stripped = owner.__name__.lstrip("_")
    if not stripped:
        return name
    return f"_{stripped}{name}"


def _descriptor_slot(owner: type, name: str) -> Slot:
    descriptor = owner.__dict__.get(name)
    if descriptor is None or not hasattr(descriptor, "__set__"):
        return _attribute_slot(owner, name, optional=True)
    return Slot(
        name=name,
        owner=owner,
        reader=lambda obj: descriptor.__get__(obj, owner),
        writer=descriptor.__set__,
    )


def _attribute_slot(owner: type, name: str, *, optional: bool = False) -> Slot:
    return Slot(
        name=name,
        owner=owner,
        reader=lambda obj: getattr(obj, name),
        writer=lambda obj, value: object.__setattr__(obj, name, value),
        optional=optional,
    )


def _dict_slot(owner: type, name: str) -> Slot:
    def read(obj: Any) -> Any:
        state = _instance_dict(obj)
        if state is None or name not in state:
            raise AttributeError(name)
        return state[name]

    def write(obj: Any, value: Any) -> None:
        state = _instance_dict(obj)
        if state is None:
            raise TypeError(f"{type(obj).__name__} instance has no __dict__")
        state[name] = value

    return Slot(name=name, owner=owner, reader=read, writer=write)


def _instance_dict(obj: Any) -> dict[str, Any] | None:
    """Fetch the instance ``__dict__`` without going through overridden lookups."""
    try:
        return object.__getattribute__(obj, "__dict__")
    except AttributeError:
        return None
