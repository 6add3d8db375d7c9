"""Instance factory: produce a blank instance of an arbitrary type.

Usage:
    blank = create_instance(Point)                         # Point() or raw allocation
    blank = create_instance(deque, prototype=source_deque)  # keeps maxlen
    blank = create_instance(Point, policy=AllocationPolicy.NEVER)

Construction paths, tried in order:
    1. Shape template, for built-in containers whose blank form depends on
       the source (array typecode, deque maxlen, ...). Needs a prototype.
    2. Zero-argument initializer.
    3. Raw allocation, bypassing the initializer. Gated by AllocationPolicy.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from deepclone.core.errors import InstantiationError
from deepclone.core.factory.models import AllocationPolicy
from deepclone.core.factory.operations import (
    accepts_no_arguments,
    allocate_raw,
    from_template,
    instantiate,
)

logger = logging.getLogger(__name__)

_NO_PROTOTYPE = object()


def create_instance(
    cls: type,
    prototype: Any = _NO_PROTOTYPE,
    *,
    policy: AllocationPolicy = AllocationPolicy.FALLBACK,
    on_raw_allocation: Callable[[type], None] | None = None,
) -> Any:
    """Create an empty instance of cls.

    Args:
        cls: Type to instantiate.
        prototype: Source value the blank instance will be filled from. Only
            used to shape built-in containers.
        policy: When raw allocation is allowed as a fallback.
        on_raw_allocation: Called with cls whenever the raw path is taken.

    Returns:
        A blank instance whose runtime type is exactly cls.

    Raises:
        InstantiationError: If every available construction path fails.
    """
    if prototype is not _NO_PROTOTYPE:
        blank = from_template(cls, prototype)
        if blank is not None:
            return blank

    no_args = accepts_no_arguments(cls)
    if no_args:
        return instantiate(cls)
    if no_args is None:
        # No signature to inspect, the call itself tells us
        try:
            return cls()
        except TypeError as e:
            if _raised_inside_call(e):
                raise InstantiationError(cls, f"zero-argument initializer failed: {e}") from e
        except Exception as e:
            raise InstantiationError(cls, f"zero-argument initializer failed: {e}") from e

    if not policy.permits(cls):
        raise InstantiationError(
            cls,
            f"no zero-argument initializer and raw allocation not permitted "
            f"by policy {policy.value}",
        )

    logger.debug("Allocating %s without initializer", cls.__qualname__)
    instance = allocate_raw(cls)
    if on_raw_allocation is not None:
        on_raw_allocation(cls)
    return instance


def _raised_inside_call(error: BaseException) -> bool:
    """Check if error came from code running inside the call, not from binding its arguments.

    Argument binding fails before any frame of the callee starts, so the
    traceback then ends in the calling frame.
    """
    tb = error.__traceback__
    return tb is not None and tb.tb_next is not None
