"""Factory models: allocation policy for types without a usable constructor."""

from __future__ import annotations

from enum import Enum


class AllocationPolicy(Enum):
    """When the factory may allocate an instance without running its initializer.

    Values are strings so the policy can be set from the environment.
    """

    FALLBACK = "fallback"
    """Raw allocation whenever no zero-argument initializer exists. Default."""

    OPT_IN = "opt_in"
    """Raw allocation only for types marked with allow_raw_allocation."""

    NEVER = "never"
    """Never bypass the initializer. Types needing arguments fail to copy."""

    def permits(self, cls: type) -> bool:
        """Check if this policy allows raw allocation of cls.

        Args:
            cls: Type the factory wants to allocate.

        Returns:
            True if raw allocation is allowed for cls.
        """
        if self is AllocationPolicy.FALLBACK:
            return True
        if self is AllocationPolicy.NEVER:
            return False
        # Late import to avoid circular dependency
        from deepclone.core.introspection import get_registry

        meta = get_registry().get_meta(cls)
        return meta is not None and meta.raw_allocation
