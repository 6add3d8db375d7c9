"""Per-call identity tracking."""

from deepclone.registry.identity import MISSING, IdentityRegistry

__all__ = [
    "IdentityRegistry",
    "MISSING",
]
