"""Configuration settings using Pydantic Settings.

Provides typed configuration for the copier with environment variable support.

Usage:
    from deepclone.config import CopySettings

    # Load from environment variables (DEEPCLONE_*)
    settings = CopySettings()

    # Or override with explicit values
    settings = CopySettings(allocation_policy="opt_in", max_depth=500)
"""

from __future__ import annotations

import functools
import importlib

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from deepclone.core.factory import AllocationPolicy


def resolve_type(path: str) -> type:
    """Import a type from a dotted path.

    Accepts ``package.module.Name`` and ``package.module:Outer.Inner``.

    Args:
        path: Dotted path to a class.

    Returns:
        The resolved class.

    Raises:
        ValueError: If the path cannot be imported or does not name a class.
    """
    if ":" in path:
        module_name, _, attr_path = path.partition(":")
    else:
        module_name, _, attr_path = path.rpartition(".")
    if not module_name or not attr_path:
        raise ValueError(f"Invalid type path {path!r}, expected 'module.Name'")

    try:
        target: object = importlib.import_module(module_name)
        for part in attr_path.split("."):
            target = getattr(target, part)
    except (ImportError, AttributeError) as e:
        raise ValueError(f"Cannot resolve type path {path!r}: {e}") from e

    if not isinstance(target, type):
        raise ValueError(f"Type path {path!r} resolves to {type(target).__name__}, not a class")
    return target


class CopySettings(BaseSettings):  # type: ignore[misc]
    """Configuration for deep copy behavior.

    Attributes:
        allocation_policy: When types without a zero-argument initializer may
            be allocated raw (fallback, opt_in, never).
        max_depth: Nesting depth at which copying fails (None = interpreter
            recursion limit only).
        extra_terminal_types: Dotted paths of additional types returned as-is.
        record_history: Report a CopyRecord per call to the configured history.

    Environment Variables:
        DEEPCLONE_ALLOCATION_POLICY
        DEEPCLONE_MAX_DEPTH
        DEEPCLONE_EXTRA_TERMINAL_TYPES (JSON list)
        DEEPCLONE_RECORD_HISTORY
    """

    model_config = SettingsConfigDict(
        env_prefix="DEEPCLONE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    allocation_policy: AllocationPolicy = AllocationPolicy.FALLBACK
    max_depth: int | None = None
    extra_terminal_types: list[str] = []
    record_history: bool = True

    @field_validator("max_depth")
    @classmethod
    def check_max_depth(cls, value: int | None) -> int | None:
        if value is not None and value < 1:
            raise ValueError(f"max_depth must be at least 1, got {value}")
        return value

    @field_validator("extra_terminal_types")
    @classmethod
    def check_terminal_types(cls, value: list[str]) -> list[str]:
        for path in value:
            resolve_type(path)
        return value

    def terminal_types(self) -> tuple[type, ...]:
        """Resolve the configured extra terminal types."""
        return tuple(resolve_type(path) for path in self.extra_terminal_types)


@functools.cache
def get_settings() -> CopySettings:
    """Settings loaded once from the environment, shared by default copiers."""
    return CopySettings()
