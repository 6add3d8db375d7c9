"""Pure functions for constructing blank instances.

These are the individual construction paths the factory tries in order:
shape templates for built-in containers, the zero-argument initializer, and
raw allocation bypassing all initialization. Immutable scalar subclasses and
bound methods are rebuilt from their source instead.
"""

from __future__ import annotations

import array
import inspect
import types
from collections import defaultdict, deque
from collections.abc import Callable
from typing import Any

from deepclone.core.errors import InstantiationError
from deepclone.core.introspection import layout_base


# Shape templates


def blank_array(cls: type, prototype: Any) -> Any:
    """Zero-filled array with the prototype's typecode and length."""
    return array.array.__new__(cls, prototype.typecode, bytes(len(prototype) * prototype.itemsize))


def blank_bytearray(cls: type, prototype: Any) -> Any:
    """Zero-filled bytearray with the prototype's length."""
    target = bytearray.__new__(cls)
    bytearray.__init__(target, len(prototype))
    return target


def blank_deque(cls: type, prototype: Any) -> Any:
    """Empty deque with the prototype's maxlen."""
    target = deque.__new__(cls)
    deque.__init__(target, (), prototype.maxlen)
    return target


def blank_defaultdict(cls: type, prototype: Any) -> Any:
    """Empty defaultdict with the prototype's default_factory."""
    target = defaultdict.__new__(cls)
    defaultdict.__init__(target, prototype.default_factory)
    return target


SHAPE_TEMPLATES: dict[type, Callable[[type, Any], Any]] = {
    array.array: blank_array,
    bytearray: blank_bytearray,
    deque: blank_deque,
    defaultdict: blank_defaultdict,
}
"""Built-in containers whose blank instance depends on the source's shape."""


def find_template(cls: type) -> Callable[[type, Any], Any] | None:
    """Find the shape template for cls or its nearest templated ancestor."""
    for base in cls.__mro__:
        template = SHAPE_TEMPLATES.get(base)
        if template is not None:
            return template
    return None


def from_template(cls: type, prototype: Any) -> Any | None:
    """Build a blank instance shaped like prototype.

    Returns:
        The blank instance, or None if cls has no shape template.

    Raises:
        InstantiationError: If the template fails.
    """
    template = find_template(cls)
    if template is None:
        return None
    try:
        return template(cls, prototype)
    except Exception as e:
        raise InstantiationError(cls, f"shape template failed: {e}") from e


# Initializer path


def accepts_no_arguments(cls: type) -> bool | None:
    """Check if cls can be called without arguments.

    Returns:
        True or False from the signature, None if the signature is unavailable.
    """
    try:
        signature = inspect.signature(cls)
    except (TypeError, ValueError):
        return None
    try:
        signature.bind()
    except TypeError:
        return False
    return True


def instantiate(cls: type) -> Any:
    """Call the zero-argument initializer of cls.

    Raises:
        InstantiationError: If the initializer raises.
    """
    try:
        return cls()
    except Exception as e:
        raise InstantiationError(cls, f"zero-argument initializer failed: {e}") from e


# Raw allocation path


def allocate_raw(cls: type) -> Any:
    """Allocate an instance of cls without running ``__init__`` or a Python ``__new__``.

    Uses ``__new__`` of the nearest built-in base, the one that decides the
    instance layout. Every slot is unset until written.

    Raises:
        InstantiationError: If the built-in allocator rejects cls.
    """
    base = layout_base(cls)
    try:
        return base.__new__(cls)
    except Exception as e:
        raise InstantiationError(cls, f"raw allocation via {base.__name__}.__new__ failed: {e}") from e


# Immutable scalar subclasses


def rebuild_scalar(cls: type, value: Any) -> Any:
    """Create a new instance of a scalar subclass holding value's payload.

    The payload of ``str``, ``int`` and the other scalars is fixed at
    construction, so it is passed to the built-in ``__new__``. Instance
    attributes are left for the caller to copy.

    Raises:
        InstantiationError: If the built-in constructor rejects value.
    """
    base = layout_base(cls)
    try:
        return base.__new__(cls, value)
    except Exception as e:
        raise InstantiationError(cls, f"rebuild via {base.__name__}.__new__ failed: {e}") from e


# Bound methods


def rebind_method(method: Any, receiver: Any) -> Any:
    """Bind method's function to a different receiver.

    Python methods are rebuilt from ``__func__``. Methods of built-in types
    have no separate function object and are looked up on the receiver.

    Raises:
        InstantiationError: If the method cannot be found on receiver.
    """
    if isinstance(method, types.MethodType):
        return types.MethodType(method.__func__, receiver)
    try:
        return getattr(receiver, method.__name__)
    except AttributeError as e:
        raise InstantiationError(type(method), f"cannot rebind {method.__name__!r}: {e}") from e
