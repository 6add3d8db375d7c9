"""Configuration module using Pydantic Settings.

Provides typed configuration for the copier with environment variable support.

Usage:
    from deepclone.config import CopySettings

    settings = CopySettings(max_depth=200)
"""

from deepclone.config.settings import CopySettings, get_settings, resolve_type

__all__ = [
    "CopySettings",
    "get_settings",
    "resolve_type",
]
