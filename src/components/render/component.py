"""
Render component - head markup for resolved meta.

Turns a meta bag into <title>, <meta> and <link> tags using the configured
tag templates.

Invariants:
- I1: Meta values are emitted as resolved (no second round of escaping)
- I2: Link hrefs are absolute and attribute-encoded
"""

from __future__ import annotations

from src.components.meta.ports import TemplateRendererPort

from ._impl import render_head, render_link_tag
from .models import RenderHeadInput, RenderHeadOutput


def run(inp: RenderHeadInput, *, renderer: TemplateRendererPort) -> RenderHeadOutput:
    """
    Render head markup.

    Args:
        inp: Input containing the meta bag, settings and optional element.
        renderer: Template renderer for tag templates.

    Returns:
        RenderHeadOutput with the joined HTML, individual tags and links.
    """
    tags, links = render_head(inp.meta, inp.settings, renderer, inp.element)
    link_tags = [render_link_tag(link) for link in links]
    canonical = next((link.href for link in links if link.rel == "canonical"), "")

    warnings: list[str] = []
    if inp.meta and not tags:
        warnings.append("No meta tags rendered; check tag_template_map")

    return RenderHeadOutput(
        html="\n".join([*tags, *link_tags]),
        tags=tuple(tags),
        links=tuple(links),
        canonical_url=canonical,
        warnings=warnings,
    )
