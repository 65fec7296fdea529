"""
Meta component port definitions.

Collaborators the pipeline talks to: routing, elements, templates, the image
transformer, the meta cache and the current site.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol


class TemplateRenderError(Exception):
    """A template string failed to render."""


class ImageTransformError(Exception):
    """The image transformer could not produce a URL."""


class SiteNotFoundError(Exception):
    """No current site could be determined."""


class ElementPort(Protocol):
    """Content item exposing field values by handle."""

    @property
    def id(self) -> str: ...

    @property
    def site_handle(self) -> str: ...

    @property
    def section_handle(self) -> str | None: ...

    @property
    def type_handle(self) -> str | None: ...

    def get_field_value(self, handle: str) -> Any:
        """Raw value of a field or attribute, None when the element has no such handle."""
        ...


class RoutingPort(Protocol):
    """Port for asking the host which element the current request matched."""

    def get_matched_element(self) -> ElementPort | None:
        """Get the routed element, or None on non-element routes."""
        ...


class TemplateRendererPort(Protocol):
    """Port for rendering template strings against a context."""

    def render(self, template: str, context: Mapping[str, Any]) -> str:
        """Render `template`. Raises TemplateRenderError on failure."""
        ...


class ImageTransformPort(Protocol):
    """Port for the external image transformation service."""

    def transform(self, asset: Any, options: Mapping[str, Any]) -> str | None:
        """
        Transform an asset (or image URL) and return the resulting URL.

        Options include width, height, format and position when configured.
        """
        ...


class MetaCachePort(Protocol):
    """Key/value store for resolved meta bags."""

    def get(self, key: str) -> dict[str, Any] | None:
        """Cached bag for `key`, or None on a miss."""
        ...

    def set(self, key: str, meta: dict[str, Any], ttl: int | None = None) -> None:
        """Store a bag. `ttl` in seconds, None or 0 for no expiry."""
        ...


class SitePort(Protocol):
    """Port for the host's current site and its configured site name."""

    def current_site_handle(self) -> str:
        """Handle of the current site. Raises SiteNotFoundError if there is none."""
        ...

    def current_site_name(self) -> str | None:
        """Display name of the current site."""
        ...

    def configured_site_name(self) -> str | dict[str, str] | None:
        """Site name from general config, either one string or per-site handle."""
        ...
