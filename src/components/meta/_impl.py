"""
MetaService - per-page SEO/social meta resolution.

Builds the meta bag for a request from field profiles, context, overrides and
configuration. Every stage is a module-level function; MetaService wires them
together with the collaborators in a fixed order:

1. settings override     6. explicit overrides     11. filtering/encoding
2. element resolution    7. default meta           12. sitename decoration
3. cache check           8. autofill               13. cache store
4. element meta          9. asset materialization
5. additional meta      10. restrictions

Collaborator failures (transforms, template renders, recipes, site lookup)
are logged and degrade the affected key; they never abort resolution.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from src.components.settings import (
    AutofillMap,
    MetaSettings,
    RestrictionMap,
    apply_settings_patch,
    expand_profile_map,
    expand_transform_map,
)
from src.domain.canonical import ensure_absolute_url
from src.domain.entities import ImageAsset
from src.domain.sanitize import encode_meta_value

from ._fields import (
    get_context_property_data_by_fields,
    get_element_property_data_by_fields,
    is_empty,
)
from .models import (
    OVERRIDE_CONTEXT_KEY,
    ListValue,
    MetaBag,
    MetaOverrides,
    Recipe,
    StaticValue,
    classify_additional_value,
)
from .ports import (
    ElementPort,
    ImageTransformPort,
    MetaCachePort,
    RoutingPort,
    SiteNotFoundError,
    SitePort,
    TemplateRenderError,
    TemplateRendererPort,
)

logger = logging.getLogger(__name__)

OG_IMAGE_KEY = "og:image"
TWITTER_IMAGE_KEY = "twitter:image"


# --- Helpers ---


def element_cache_key(element: Any) -> str:
    """Cache key identifying an element (site-scoped when the element has a site)."""
    key = getattr(element, "cache_key", None)
    if isinstance(key, str) and key:
        return key
    site = getattr(element, "site_handle", None)
    return f"{site}:{element.id}" if site else str(element.id)


def render_template(
    renderer: TemplateRendererPort,
    template: str,
    context: Mapping[str, Any],
) -> str:
    """Render a template string, logging and returning '' on failure."""
    if not template:
        return ""
    try:
        return renderer.render(template, context)
    except TemplateRenderError as e:
        logger.warning("Failed to render meta template %r: %s", template, e)
        return ""


def mime_type_for_format(image_format: str) -> str:
    return "image/" + ("jpeg" if image_format == "jpg" else image_format)


# --- Profiles & Element Meta ---


def get_element_profile(element: ElementPort, settings: MetaSettings) -> str | None:
    """Profile mapped to the element's section handle, then its type handle."""
    profile_map = expand_profile_map(settings)
    for handle in (element.section_handle, element.type_handle):
        if handle and handle in profile_map:
            return profile_map[handle]
    return None


def resolve_profile_name(
    element: ElementPort,
    settings: MetaSettings,
    override_profile: str | None = None,
) -> str | None:
    if override_profile:
        return override_profile
    return get_element_profile(element, settings) or settings.default_profile


def generate_element_meta_by_profile(
    element: ElementPort,
    profile: Mapping[str, list[str]],
    restrictions: RestrictionMap,
) -> MetaBag:
    """Cascade each profile key over its candidate fields ('' when none has a value)."""
    meta: MetaBag = {}
    for key, fields in profile.items():
        meta[key] = get_element_property_data_by_fields(
            element, restrictions.type_for(key), fields
        )
    return meta


def generate_element_meta(
    element: ElementPort,
    settings: MetaSettings,
    override_profile: str | None = None,
) -> MetaBag:
    """Element meta for the element's profile. Unknown or missing profile -> {}."""
    profile_name = resolve_profile_name(element, settings, override_profile)
    if not profile_name or profile_name not in settings.field_profiles:
        if profile_name:
            logger.debug("Meta profile %r is not configured", profile_name)
        return {}
    return generate_element_meta_by_profile(
        element,
        settings.field_profiles[profile_name],
        RestrictionMap.from_settings(settings),
    )


# --- Additional, Override & Default Meta ---


def process_additional_meta(
    meta: MetaBag,
    context: Mapping[str, Any],
    settings: MetaSettings,
    renderer: TemplateRendererPort,
) -> MetaBag:
    """Render configured additional meta against the context."""
    for key, configured in settings.additional_meta.items():
        value = classify_additional_value(configured)

        if isinstance(value, Recipe):
            try:
                value = classify_additional_value(value.fn(context))
            except Exception:
                logger.exception("Additional meta recipe for %r failed", key)
                continue

        if isinstance(value, ListValue):
            for template in value.templates:
                rendered = render_template(renderer, template, context)
                if rendered:
                    existing = meta.get(key)
                    if not isinstance(existing, list):
                        existing = []
                        meta[key] = existing
                    existing.append(rendered)
        elif isinstance(value, StaticValue):
            meta[key] = render_template(renderer, value.template, context)
        else:
            # Recipe returning a recipe
            logger.warning("Additional meta recipe for %r returned a callable", key)

    return meta


def override_meta(meta: MetaBag, overrides: Mapping[str, Any] | None) -> MetaBag:
    """Replace values with explicit per-call overrides."""
    if overrides:
        for key, value in overrides.items():
            meta[key] = value
    return meta


def process_default_meta(
    meta: MetaBag,
    context: Mapping[str, Any],
    settings: MetaSettings,
) -> MetaBag:
    """Fill unset, None or '' keys from candidate paths into the context."""
    restrictions = RestrictionMap.from_settings(settings)
    for key, fields in settings.default_meta.items():
        current = meta.get(key)
        if current is None or current == "":
            meta[key] = get_context_property_data_by_fields(
                context, restrictions.type_for(key), fields
            )
    return meta


def autofill_meta(meta: MetaBag, settings: MetaSettings) -> MetaBag:
    """
    Fill missing keys from set siblings in their alias group.

    Only keys that are absent or None are filled; '' counts as set.
    """
    for group in AutofillMap.from_settings(settings).groups:
        source = next((key for key in group.keys if meta.get(key) is not None), None)
        if source is None:
            continue
        for key in group.keys:
            if meta.get(key) is None:
                meta[key] = meta[source]
    return meta


# --- Assets ---


def get_transformed_url(
    asset: Any,
    options: Mapping[str, Any],
    transformer: ImageTransformPort,
    settings: MetaSettings,
) -> str:
    """
    Transform an asset or image URL and return an absolute URL.

    Returns '' when the transformer fails or produces nothing.
    """
    options = dict(options)
    if isinstance(asset, ImageAsset) and "position" not in options and asset.position:
        options["position"] = asset.position

    try:
        url = transformer.transform(asset, options)
    except Exception as e:
        logger.error("Image transform failed for %r: %s", getattr(asset, "url", asset), e)
        return ""

    if not url:
        return ""
    return ensure_absolute_url(url, settings.site_url)


def get_asset_alt_text(asset: Any, settings: MetaSettings) -> str | None:
    handle = settings.alt_text_field_handle
    if not handle or not isinstance(asset, ImageAsset):
        return None
    alt = asset.get_field_value(handle)
    if alt is None or str(alt) == "":
        return None
    return str(alt)


def transform_meta_assets(
    meta: MetaBag,
    settings: MetaSettings,
    transformer: ImageTransformPort,
) -> MetaBag:
    """Replace image references with transformed URLs and add og/twitter image companions."""
    for key, transform in expand_transform_map(settings).items():
        asset = meta.get(key)
        if is_empty(asset):
            continue

        options = transform.to_options()
        meta[key] = get_transformed_url(asset, options, transformer, settings)
        alt = get_asset_alt_text(asset, settings)

        if key == OG_IMAGE_KEY:
            if alt:
                meta[f"{key}:alt"] = alt
            if transform.format:
                meta[f"{key}:type"] = mime_type_for_format(transform.format)
            # Requested dimensions; the transformer may letterbox or crop differently.
            if transform.width:
                meta[f"{key}:width"] = str(transform.width)
            if transform.height:
                meta[f"{key}:height"] = str(transform.height)
        elif key == TWITTER_IMAGE_KEY and alt:
            meta[f"{key}:alt"] = alt

    return meta


# --- Restrictions & Filters ---


def truncate_text(value: str, max_length: int, suffix: str) -> str:
    """Cut `value` so that value + suffix is exactly `max_length` characters."""
    if len(value) <= max_length:
        return value
    keep = max(max_length - len(suffix), 0)
    return value[:keep] + suffix


def apply_meta_restrictions(meta: MetaBag, settings: MetaSettings) -> MetaBag:
    """Enforce max_length on free-text keys."""
    restrictions = RestrictionMap.from_settings(settings)
    for key, value in meta.items():
        max_length = restrictions.max_length_for(key)
        if max_length is not None and isinstance(value, str):
            meta[key] = truncate_text(value, max_length, settings.truncate_suffix)
    return meta


def apply_meta_filters(meta: MetaBag) -> MetaBag:
    """HTML-encode every string value that is not a URL."""
    for key, value in meta.items():
        meta[key] = encode_meta_value(value)
    return meta


# --- Sitename ---


def resolve_site_name(settings: MetaSettings, sites: SitePort | None) -> str:
    """
    Effective site name.

    Resolution order:
    1. Per-site map in settings (no further fallback when the site is missing)
    2. Site name string in settings
    3. Per-site map in site config (first entry when the site is missing)
    4. Site name string in site config
    5. Current site display name
    """
    try:
        if isinstance(settings.site_name, dict):
            if sites is None:
                return ""
            return settings.site_name.get(sites.current_site_handle(), "")
        if settings.site_name:
            return settings.site_name
        if sites is None:
            return ""

        configured = sites.configured_site_name()
        if isinstance(configured, dict):
            handle = sites.current_site_handle()
            if handle in configured:
                return configured[handle] or ""
            return next(iter(configured.values()), "") or ""
        if configured:
            return configured
        return sites.current_site_name() or ""
    except SiteNotFoundError as e:
        logger.error("Could not resolve site name: %s", e)
        return ""


def add_sitename(
    meta: MetaBag,
    context: Mapping[str, Any],
    settings: MetaSettings,
    renderer: TemplateRendererPort,
    sites: SitePort | None = None,
) -> MetaBag:
    """Prepend or append the site name to title-like keys."""
    site_name = resolve_site_name(settings, sites)
    if site_name == "":
        return meta

    try:
        site_name = renderer.render(site_name, context)
    except TemplateRenderError:
        pass  # keep the raw site name

    separator = settings.sitename_separator
    before = f"{site_name} {separator} " if settings.sitename_position == "before" else ""
    after = f" {separator} {site_name}" if settings.sitename_position == "after" else ""
    strip_chars = " " + separator

    for key in settings.sitename_title_properties:
        current = meta.get(key)
        if current is not None and not isinstance(current, str):
            continue
        meta[key] = f"{before}{current or ''}{after}".strip(strip_chars)

    return meta


# --- Main Meta Service ---


class MetaService:
    """
    Meta resolver.

    Settings passed in are the base configuration; a per-call patch builds a
    new settings value for that call only.
    """

    def __init__(
        self,
        settings: MetaSettings,
        renderer: TemplateRendererPort,
        transformer: ImageTransformPort,
        routing: RoutingPort | None = None,
        cache: MetaCachePort | None = None,
        sites: SitePort | None = None,
        imager: ImageTransformPort | None = None,
    ) -> None:
        """
        Initialize meta service.

        Args:
            settings: Base meta settings
            renderer: Template renderer for additional meta and site names
            transformer: Default image transformer
            routing: Source of the routed element when none is passed explicitly
            cache: Meta bag cache
            sites: Current site lookup for the site name
            imager: Alternate transformer used when `use_imager_if_installed` is set
        """
        self._settings = settings
        self._renderer = renderer
        self._transformer = transformer
        self._routing = routing
        self._cache = cache
        self._sites = sites
        self._imager = imager

    @property
    def settings(self) -> MetaSettings:
        return self._settings

    def resolve(
        self,
        context: Mapping[str, Any] | None = None,
        overrides: MetaOverrides | None = None,
    ) -> MetaBag:
        """
        Resolve the meta bag for the current request.

        Overrides come from the argument or, when absent, from the context's
        override block. Raises MetaConfigError if the override config patch
        is invalid; nothing else raises.
        """
        context = context or {}
        if overrides is None:
            overrides = MetaOverrides.from_mapping(context.get(OVERRIDE_CONTEXT_KEY))
        overrides = overrides or MetaOverrides()

        settings = apply_settings_patch(self._settings, overrides.config)
        element = self._resolve_element(overrides)

        cache_key: str | None = None
        if element is not None and settings.cache_enabled and self._cache is not None:
            cache_key = element_cache_key(element)
            cached = self._cache.get(cache_key)
            if cached is not None:
                logger.debug("Meta cache hit for %s", cache_key)
                return cached

        meta: MetaBag = {}

        if element is not None:
            meta = generate_element_meta(element, settings, overrides.profile)

        if settings.additional_meta:
            meta = process_additional_meta(meta, context, settings, self._renderer)

        meta = override_meta(meta, overrides.meta)

        if settings.default_meta:
            meta = process_default_meta(meta, context, settings)

        meta = autofill_meta(meta, settings)

        if not settings.return_image_asset:
            meta = transform_meta_assets(meta, settings, self._transformer_for(settings))

        if settings.apply_restrictions:
            meta = apply_meta_restrictions(meta, settings)

        meta = apply_meta_filters(meta)

        if settings.include_sitename_in_title:
            meta = add_sitename(meta, context, settings, self._renderer, self._sites)

        if cache_key is not None and self._cache is not None:
            self._cache.set(cache_key, meta, ttl=settings.cache_duration)

        return meta

    def _resolve_element(self, overrides: MetaOverrides) -> ElementPort | None:
        if overrides.element is not None:
            return overrides.element
        if self._routing is None:
            return None
        return self._routing.get_matched_element()

    def _transformer_for(self, settings: MetaSettings) -> ImageTransformPort:
        if settings.use_imager_if_installed and self._imager is not None:
            return self._imager
        return self._transformer


# --- Factory ---


def create_meta_service(
    settings: MetaSettings,
    renderer: TemplateRendererPort,
    transformer: ImageTransformPort,
    routing: RoutingPort | None = None,
    cache: MetaCachePort | None = None,
    sites: SitePort | None = None,
    imager: ImageTransformPort | None = None,
) -> MetaService:
    """Create a meta service."""
    return MetaService(
        settings=settings,
        renderer=renderer,
        transformer=transformer,
        routing=routing,
        cache=cache,
        sites=sites,
        imager=imager,
    )
