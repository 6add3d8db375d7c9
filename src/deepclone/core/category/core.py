"""Category classifier.

Usage:
    classify(42)            # Category.TERMINAL
    classify([1, 2])        # Category.SEQUENCE
    classify({"a": 1})      # Category.ASSOCIATIVE
    classify(Point(1, 2))   # Category.COMPOSITE

Precedence is terminal, array, associative, sequence, composite. Anything
not recognised as a container is treated as a mutable record and copied slot
by slot.
"""

from __future__ import annotations

import array
import datetime
import functools
import io
import re
import socket
import threading
import types
import uuid
import weakref
from collections.abc import MutableMapping, MutableSequence, MutableSet
from decimal import Decimal
from enum import Enum
from fractions import Fraction
from pathlib import PurePath
from typing import Any

from deepclone.core.category.models import Category

SCALAR_TYPES: tuple[type, ...] = (
    type(None),
    bool,
    int,
    float,
    complex,
    str,
    bytes,
)
"""Immutable scalars. Python has no separate char type, a char is a 1-length str."""

VALUE_TYPES: tuple[type, ...] = (
    Decimal,
    Fraction,
    datetime.date,
    datetime.time,
    datetime.timedelta,
    datetime.tzinfo,
    uuid.UUID,
    PurePath,
    range,
    re.Pattern,
    types.EllipsisType,
    types.NotImplementedType,
)
"""Immutable value objects whose state lives outside any introspectable slot."""

IDENTITY_TYPES: tuple[type, ...] = (
    type,
    Enum,
    types.FunctionType,
    types.BuiltinFunctionType,
    types.ModuleType,
    functools.partial,
)
"""Objects that are meaningful only by identity: classes, functions, modules, enum members.

Bound methods are not included, they carry their receiver and are copied with it.
"""

OPAQUE_TYPES: tuple[type, ...] = (
    io.IOBase,
    socket.socket,
    type(threading.Lock()),
    type(threading.RLock()),
    weakref.ref,
    types.GeneratorType,
    types.CoroutineType,
    types.AsyncGeneratorType,
    types.FrameType,
    types.TracebackType,
    types.CodeType,
)
"""External resource handles and runtime internals, passed through as opaque values."""

TERMINAL_TYPES: tuple[type, ...] = SCALAR_TYPES + VALUE_TYPES + IDENTITY_TYPES + OPAQUE_TYPES

_NON_SCALAR_TERMINALS: tuple[type, ...] = VALUE_TYPES + IDENTITY_TYPES + OPAQUE_TYPES

ARRAY_TYPES: tuple[type, ...] = (array.array, bytearray)

IMMUTABLE_SEQUENCE_TYPES: tuple[type, ...] = (tuple, frozenset)


def is_terminal(value: Any, extra_terminals: tuple[type, ...] = ()) -> bool:
    """Check if value is returned as-is instead of being copied.

    Args:
        value: Value to check.
        extra_terminals: Additional types configured as terminal.

    Returns:
        True if value belongs to the terminal set.
    """
    if isinstance(value, types.BuiltinMethodType) and not _is_unbound(value, extra_terminals):
        return False
    if type(value) in SCALAR_TYPES or isinstance(value, _NON_SCALAR_TERMINALS):
        return True
    if extra_terminals and isinstance(value, extra_terminals):
        return True
    # Subclasses of scalars are values unless instances carry attributes of their own
    return is_scalar(value) and not _carries_state(value)


def classify(value: Any, extra_terminals: tuple[type, ...] = ()) -> Category:
    """Decide the copy category of a value from its runtime type.

    Args:
        value: Value to classify.
        extra_terminals: Additional types configured as terminal.

    Returns:
        The single Category the value belongs to.
    """
    if is_terminal(value, extra_terminals):
        return Category.TERMINAL
    if isinstance(value, ARRAY_TYPES):
        return Category.ARRAY
    if isinstance(value, MutableMapping):
        return Category.ASSOCIATIVE
    if isinstance(value, (MutableSequence, MutableSet, *IMMUTABLE_SEQUENCE_TYPES)):
        return Category.SEQUENCE
    return Category.COMPOSITE


def is_immutable_sequence(value: Any) -> bool:
    """Check if value is a sequence that can only be built from its finished elements."""
    return isinstance(value, IMMUTABLE_SEQUENCE_TYPES)


def is_scalar(value: Any) -> bool:
    """Check if value is a scalar or an instance of a scalar subclass."""
    return isinstance(value, SCALAR_TYPES)


def _carries_state(value: Any) -> bool:
    """Check if an instance holds attributes beyond its built-in payload."""
    try:
        if object.__getattribute__(value, "__dict__"):
            return True
    except AttributeError:
        pass
    return any(
        owner.__dict__.get("__slots__")
        for owner in type(value).__mro__
        if owner not in SCALAR_TYPES and owner is not object
    )


def is_bound_method(value: Any) -> bool:
    """Check if value is a method bound to a receiver that is itself copied."""
    if isinstance(value, types.MethodType):
        return True
    return isinstance(value, types.BuiltinMethodType) and not _is_unbound(value)


def _is_unbound(value: Any, extra_terminals: tuple[type, ...] = ()) -> bool:
    """Built-in functions of modules and classes have a terminal ``__self__``."""
    receiver = getattr(value, "__self__", None)
    return receiver is None or is_terminal(receiver, extra_terminals)
