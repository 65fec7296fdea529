"""
Head markup rendering for resolved meta bags.

Key behaviors:
- One tag per meta value (one per item for list values)
- Tag templates looked up by exact key, then /regex/ keys, then "default"
- Values are already entity-encoded by the meta pipeline and are not escaped again
- Canonical and hreflang alternate links built from the element URL(s)
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from typing import Any

from src.components.meta.ports import TemplateRenderError, TemplateRendererPort
from src.components.settings import MetaSettings, expand_map
from src.domain.canonical import CanonicalConfig, build_canonical_url
from src.domain.entities import ImageAsset
from src.domain.sanitize import encode_text

from .models import HeadLink

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE_KEY = "default"


# --- Tag Templates ---


def _is_pattern(key: str) -> bool:
    return len(key) > 2 and key.startswith("/") and key.endswith("/")


class TagTemplateMap:
    """Expanded `tag_template_map`: exact keys, /regex/ keys and a default."""

    def __init__(self, mapping: Mapping[str, str]) -> None:
        expanded = expand_map(mapping)
        self._exact = {key: tpl for key, tpl in expanded.items() if not _is_pattern(key)}
        self._patterns = [
            (re.compile(key[1:-1]), tpl) for key, tpl in expanded.items() if _is_pattern(key)
        ]

    def template_for(self, key: str) -> str | None:
        if key in self._exact and key != DEFAULT_TEMPLATE_KEY:
            return self._exact[key]
        for pattern, template in self._patterns:
            if pattern.search(key):
                return template
        return self._exact.get(DEFAULT_TEMPLATE_KEY)


def _tag_values(value: Any) -> Iterable[str]:
    if value is None:
        return []
    if isinstance(value, list | tuple):
        return [str(item) for item in value if item not in (None, "")]
    if isinstance(value, ImageAsset):
        return [value.url]
    text = str(value)
    return [text] if text else []


def render_meta_tags(
    meta: Mapping[str, Any],
    tag_templates: TagTemplateMap,
    renderer: TemplateRendererPort,
) -> list[str]:
    """Render each meta value through its tag template. Empty values are skipped."""
    tags: list[str] = []
    for key, value in meta.items():
        template = tag_templates.template_for(key)
        if template is None:
            continue
        for item in _tag_values(value):
            try:
                tags.append(renderer.render(template, {"key": key, "value": item}))
            except TemplateRenderError as e:
                logger.warning("Failed to render tag for %r: %s", key, e)
    return tags


# --- Links ---


def canonical_url_for(element: Any, settings: MetaSettings) -> str:
    """Absolute, normalized URL of the element ('' without element or URL)."""
    url = getattr(element, "url", None)
    if element is None or not url:
        return ""
    return build_canonical_url(url, CanonicalConfig(site_url=settings.site_url))


def build_head_links(element: Any, settings: MetaSettings) -> list[HeadLink]:
    links: list[HeadLink] = []
    canonical = canonical_url_for(element, settings)
    if canonical:
        links.append(HeadLink(rel="canonical", href=canonical))

    if settings.output_alternate and element is not None:
        config = CanonicalConfig(site_url=settings.site_url)
        alternates: Mapping[str, str] = getattr(element, "alternates", None) or {}
        for language, url in alternates.items():
            href = build_canonical_url(url, config)
            if href:
                links.append(HeadLink(rel="alternate", href=href, hreflang=language))

    return links


def render_link_tag(link: HeadLink) -> str:
    attrs = f'rel="{encode_text(link.rel)}" href="{encode_text(link.href)}"'
    if link.hreflang:
        attrs += f' hreflang="{encode_text(link.hreflang)}"'
    return f"<link {attrs}>"


# --- Head ---


def render_head(
    meta: Mapping[str, Any],
    settings: MetaSettings,
    renderer: TemplateRendererPort,
    element: Any = None,
) -> tuple[list[str], list[HeadLink]]:
    """Meta tags and head links for a resolved bag."""
    tags = render_meta_tags(meta, TagTemplateMap(settings.tag_template_map), renderer)
    links = build_head_links(element, settings)
    return tags, links
