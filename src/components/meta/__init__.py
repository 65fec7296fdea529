"""
Meta component - per-page SEO/social meta resolution.
"""

from ._fields import (
    coerce_image,
    coerce_list,
    coerce_text,
    get_context_property_data_by_fields,
    get_element_property_data_by_fields,
    get_property_data,
    reduce_scope_and_handle,
)
from ._impl import (
    MetaService,
    add_sitename,
    apply_meta_filters,
    apply_meta_restrictions,
    autofill_meta,
    create_meta_service,
    element_cache_key,
    generate_element_meta,
    mime_type_for_format,
    override_meta,
    process_additional_meta,
    process_default_meta,
    resolve_site_name,
    transform_meta_assets,
    truncate_text,
)
from .component import run
from .models import (
    OVERRIDE_CONTEXT_KEY,
    ListValue,
    MetaBag,
    MetaOverrides,
    MetaValidationError,
    MetaValue,
    Recipe,
    ResolveMetaInput,
    ResolveMetaOutput,
    StaticValue,
    classify_additional_value,
)
from .ports import (
    ElementPort,
    ImageTransformError,
    ImageTransformPort,
    MetaCachePort,
    RoutingPort,
    SiteNotFoundError,
    SitePort,
    TemplateRenderError,
    TemplateRendererPort,
)

__all__ = [
    # Entry point
    "run",
    # Service
    "MetaService",
    "create_meta_service",
    # Models
    "MetaBag",
    "MetaValue",
    "MetaOverrides",
    "MetaValidationError",
    "ResolveMetaInput",
    "ResolveMetaOutput",
    "OVERRIDE_CONTEXT_KEY",
    # Additional meta variants
    "StaticValue",
    "ListValue",
    "Recipe",
    "classify_additional_value",
    # Pipeline stages
    "generate_element_meta",
    "process_additional_meta",
    "override_meta",
    "process_default_meta",
    "autofill_meta",
    "transform_meta_assets",
    "apply_meta_restrictions",
    "apply_meta_filters",
    "add_sitename",
    "resolve_site_name",
    "element_cache_key",
    "mime_type_for_format",
    "truncate_text",
    # Field resolution
    "coerce_image",
    "coerce_list",
    "coerce_text",
    "get_property_data",
    "get_element_property_data_by_fields",
    "get_context_property_data_by_fields",
    "reduce_scope_and_handle",
    # Ports
    "ElementPort",
    "RoutingPort",
    "TemplateRendererPort",
    "ImageTransformPort",
    "MetaCachePort",
    "SitePort",
    # Errors
    "TemplateRenderError",
    "ImageTransformError",
    "SiteNotFoundError",
]
