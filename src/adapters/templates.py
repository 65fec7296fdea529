"""
Jinja2 template renderer.

Implements TemplateRendererPort for additional meta, site names and meta tag
templates. Undefined variables render as empty strings, so a template that
refers to a missing global ("{{ globals.seo.title }}") renders '' instead of
failing. Any compile or render error is raised as TemplateRenderError.
"""

from __future__ import annotations

from collections.abc import Mapping
from functools import lru_cache
from typing import Any

from jinja2 import ChainableUndefined, Environment

from src.components.meta.ports import TemplateRenderError

_MARKUP_START = ("{{", "{%", "{#")

DEFAULT_CACHE_SIZE = 256


class JinjaTemplateRenderer:
    """Render template strings with a shared, non-autoescaping environment."""

    def __init__(
        self,
        environment: Environment | None = None,
        cache_size: int = DEFAULT_CACHE_SIZE,
    ) -> None:
        """
        Args:
            environment: Jinja environment, a non-autoescaping one by default
            cache_size: Number of compiled templates kept (least recently used evicted)
        """
        self._env = environment or Environment(
            autoescape=False,
            undefined=ChainableUndefined,
            keep_trailing_newline=False,
        )
        self._compile = lru_cache(maxsize=cache_size)(self._env.from_string)

    def render(self, template: str, context: Mapping[str, Any]) -> str:
        if not any(marker in template for marker in _MARKUP_START):
            return template

        try:
            return self._compile(template).render(dict(context)).strip()
        except Exception as e:
            # Runtime errors inside templates surface as arbitrary exceptions
            raise TemplateRenderError(f"{type(e).__name__}: {e}") from e
