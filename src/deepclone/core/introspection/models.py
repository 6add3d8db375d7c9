"""Introspection models: slot accessors, opt-in metadata, and protocols."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Final, Protocol, runtime_checkable

from deepclone.core.errors import AccessError


class _Unset:
    """Marker for a slot that holds no value on a particular instance."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "UNSET"


UNSET: Final = _Unset()


@dataclass(frozen=True, slots=True)
class Slot:
    """Named storage slot with forced read/write access.

    Attributes:
        name: Attribute name as stored (private names already mangled).
        owner: Class that declares the slot. For instance attributes, the
            runtime type of the instance.
        reader: Returns the slot value, raises AttributeError if unset.
        writer: Stores a value into the slot.
        optional: Whether the slot may legitimately be unset. Declared copy
            slots are required, so a failing read is an error.
    """

    name: str
    owner: type
    reader: Callable[[Any], Any]
    writer: Callable[[Any, Any], None]
    optional: bool = True

    def read(self, obj: Any) -> Any:
        """Read slot value from obj.

        Returns:
            The stored value, or UNSET if an optional slot was never assigned.

        Raises:
            AccessError: If a required slot is missing, or reading fails for
                any other reason.
        """
        try:
            return self.reader(obj)
        except AttributeError as e:
            if self.optional:
                return UNSET
            raise AccessError(type(obj), self.name, f"required slot is missing: {e}") from e
        except Exception as e:
            raise AccessError(type(obj), self.name, f"read failed: {e}") from e

    def is_set(self, obj: Any) -> bool:
        """Check if obj holds a value in this slot."""
        try:
            self.reader(obj)
        except AttributeError:
            return False
        except Exception as e:
            raise AccessError(type(obj), self.name, f"read failed: {e}") from e
        return True

    def write(self, obj: Any, value: Any) -> None:
        """Write value into the slot of obj.

        Raises:
            AccessError: If the slot cannot be written.
        """
        try:
            self.writer(obj, value)
        except Exception as e:
            raise AccessError(type(obj), self.name, f"write failed: {e}") from e


@dataclass(slots=True, frozen=True)
class IntrospectionMeta:
    """Opt-in copy metadata for a registered type."""

    slots: tuple[str, ...] | None
    raw_allocation: bool


@runtime_checkable
class Introspectable(Protocol):
    """Type that declares its own copyable slots.

    Implementing types list the attribute names that make up their state.
    Only those attributes are copied, in the declared order.
    """

    @classmethod
    def __copy_slots__(cls) -> tuple[str, ...]: ...
