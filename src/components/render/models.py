"""
Render component input/output models.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from src.components.settings import MetaSettings


@dataclass(frozen=True)
class HeadLink:
    """<link> tag for the document head."""

    rel: str
    href: str
    hreflang: str | None = None


@dataclass(frozen=True)
class RenderHeadInput:
    """Input for rendering head markup from a resolved meta bag."""

    meta: Mapping[str, Any]
    settings: MetaSettings
    element: Any = None


@dataclass(frozen=True)
class RenderHeadOutput:
    """Rendered head markup."""

    html: str
    tags: tuple[str, ...] = ()
    links: tuple[HeadLink, ...] = ()
    canonical_url: str = ""
    warnings: list[str] = field(default_factory=list)
