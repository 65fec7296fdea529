"""
File system adapters for the settings component.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from ..models import MetaConfigError, MetaSettings, ValidationError
from .._impl import validate_settings_data
from ..ports import FileSystemPort


class LocalFileSystemAdapter:
    """Adapter for local file system operations."""

    def read_yaml(self, path: Path) -> Any:
        """Read and parse a YAML file."""
        with open(path) as f:
            return yaml.safe_load(f)

    def exists(self, path: Path) -> bool:
        """Check if a file exists."""
        return path.exists()


default_filesystem = LocalFileSystemAdapter()


def load_settings(path: Path, filesystem: FileSystemPort | None = None) -> MetaSettings:
    """
    Load and validate the settings file.

    Raises MetaConfigError if the file is missing, is not valid YAML or does
    not match the settings schema. An empty file yields the default settings.
    """
    fs = filesystem or default_filesystem

    if not fs.exists(path):
        raise MetaConfigError(
            f"Settings file not found at: {path}",
            [ValidationError(field="_file", code="not_found", message=f"Missing {path}")],
        )

    try:
        data = fs.read_yaml(path)
    except yaml.YAMLError as e:
        raise MetaConfigError(f"Invalid YAML syntax in settings file: {e}") from e

    return validate_settings_data(data)


class YamlSettingsSource:
    """Settings source backed by a YAML file, parsed once on first use."""

    def __init__(self, path: Path, filesystem: FileSystemPort | None = None) -> None:
        self._path = path
        self._filesystem = filesystem
        self._settings: MetaSettings | None = None

    def get(self) -> MetaSettings | None:
        if self._settings is None:
            self._settings = load_settings(self._path, self._filesystem)
        return self._settings
