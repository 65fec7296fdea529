"""
Settings component port definitions.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Protocol

from .models import MetaSettings


class SettingsSourcePort(Protocol):
    """Where base settings come from (config file, database row, test fixture)."""

    def get(self) -> MetaSettings | None:
        """Get configured settings, or None if nothing is configured."""
        ...


class FileSystemPort(Protocol):
    """Port for reading configuration files."""

    def read_yaml(self, path: Path) -> Any:
        """Read and parse a YAML file."""
        ...

    def exists(self, path: Path) -> bool:
        """Check if a file exists."""
        ...
