"""
Render component - head markup for resolved meta.
"""

from ._impl import (
    TagTemplateMap,
    build_head_links,
    canonical_url_for,
    render_head,
    render_link_tag,
    render_meta_tags,
)
from .component import run
from .models import HeadLink, RenderHeadInput, RenderHeadOutput

__all__ = [
    # Entry point
    "run",
    # Models
    "HeadLink",
    "RenderHeadInput",
    "RenderHeadOutput",
    # Functions
    "TagTemplateMap",
    "build_head_links",
    "canonical_url_for",
    "render_head",
    "render_link_tag",
    "render_meta_tags",
]
