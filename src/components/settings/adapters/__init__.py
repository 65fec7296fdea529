"""Adapters for the settings component."""

from .filesystem import (
    LocalFileSystemAdapter,
    YamlSettingsSource,
    default_filesystem,
    load_settings,
)

__all__ = [
    "LocalFileSystemAdapter",
    "YamlSettingsSource",
    "default_filesystem",
    "load_settings",
]
