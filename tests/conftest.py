from collections.abc import Mapping
from typing import Any

import pytest

from src.adapters.cache import InMemoryMetaCache
from src.adapters.sites import StaticRouter, StaticSiteProvider
from src.adapters.templates import JinjaTemplateRenderer
from src.components.meta import ImageTransformError, MetaService
from src.components.settings import MetaSettings
from src.domain.entities import Element, ImageAsset

# --- Fakes ---


class RecordingTransformer:
    """Image transformer returning predictable URLs and recording every call."""

    def __init__(self, fail_for: set[str] | None = None) -> None:
        self.calls: list[tuple[Any, dict[str, Any]]] = []
        self._fail_for = fail_for or set()

    def transform(self, asset: Any, options: Mapping[str, Any]) -> str | None:
        self.calls.append((asset, dict(options)))
        url = asset if isinstance(asset, str) else asset.url
        if url in self._fail_for:
            raise ImageTransformError(f"cannot transform {url}")
        width = options.get("width", "auto")
        height = options.get("height", "auto")
        fmt = options.get("format", "orig")
        return f"{url}?w={width}&h={height}&fm={fmt}"


# --- Fixtures ---


@pytest.fixture
def renderer() -> JinjaTemplateRenderer:
    return JinjaTemplateRenderer()


@pytest.fixture
def transformer() -> RecordingTransformer:
    return RecordingTransformer()


@pytest.fixture
def imager() -> RecordingTransformer:
    """Alternate transformer standing in for an installed imager plugin."""
    return RecordingTransformer()


@pytest.fixture
def failing_transformer() -> RecordingTransformer:
    return RecordingTransformer(fail_for={"https://cdn.example.com/hero.png"})


@pytest.fixture
def cache() -> InMemoryMetaCache:
    return InMemoryMetaCache()


@pytest.fixture
def sites() -> StaticSiteProvider:
    return StaticSiteProvider(current_handle="default", site_names={"default": "Acme"})


@pytest.fixture
def hero_image() -> ImageAsset:
    return ImageAsset(
        id="img-1",
        url="https://cdn.example.com/hero.png",
        title="Hero",
        focal_point=(0.5, 0.25),
        attributes={"altText": "A hero image"},
    )


@pytest.fixture
def article(hero_image: ImageAsset) -> Element:
    return Element(
        id="42",
        section_handle="news",
        type_handle="article",
        title="Launch day",
        url="https://www.example.com/news/launch-day",
        fields={
            "seoTitle": "",
            "heading": "Launch <em>day</em> is here",
            "summary": "Everything you need to know about launch day.",
            "heroImage": [hero_image],
            "tags": ["launch", "news"],
        },
    )


@pytest.fixture
def settings() -> MetaSettings:
    return MetaSettings(
        default_profile="standard",
        field_profiles={
            "standard": {
                "title": ["seoTitle", "heading", "title"],
                "description": ["seoDescription", "summary"],
                "image": ["seoImage", "heroImage"],
            },
            "minimal": {"title": ["title"]},
        },
        alt_text_field_handle="altText",
        include_sitename_in_title=False,
    )


@pytest.fixture
def make_service(renderer, transformer, cache, sites):
    """Build a MetaService around the shared fakes, routed to `element`."""

    def _make(settings: MetaSettings, element: Element | None = None, **kwargs: Any) -> MetaService:
        options: dict[str, Any] = {
            "renderer": renderer,
            "transformer": transformer,
            "routing": StaticRouter(element),
            "cache": cache,
            "sites": sites,
        }
        options.update(kwargs)
        return MetaService(settings, **options)

    return _make
