"""
Static site and routing adapters.

Implement SitePort and RoutingPort from fixed values, for single-site hosts,
the preview API, the CLI and tests.
"""

from __future__ import annotations

from src.components.meta.ports import ElementPort, SiteNotFoundError


class StaticSiteProvider:
    """Current site taken from configuration."""

    def __init__(
        self,
        current_handle: str | None = "default",
        site_names: dict[str, str] | None = None,
        configured_name: str | dict[str, str] | None = None,
    ) -> None:
        """
        Args:
            current_handle: Handle of the current site, None when there is no site
            site_names: Display name per site handle
            configured_name: Site name from general config (string or per-site map)
        """
        self._current_handle = current_handle
        self._site_names = site_names or {}
        self._configured_name = configured_name

    def current_site_handle(self) -> str:
        if self._current_handle is None:
            raise SiteNotFoundError("No current site")
        return self._current_handle

    def current_site_name(self) -> str | None:
        return self._site_names.get(self.current_site_handle())

    def configured_site_name(self) -> str | dict[str, str] | None:
        return self._configured_name


class StaticRouter:
    """Router that always matches the same element (or none)."""

    def __init__(self, element: ElementPort | None = None) -> None:
        self._element = element

    def get_matched_element(self) -> ElementPort | None:
        return self._element
