"""
Meta preview route.

Resolves meta for an element posted in the request body, the way a page
render would, and returns the bag together with the head markup. Caching is
always disabled for previews.
"""

from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException, status

from src.adapters.images import QueryStringImageTransformer
from src.adapters.sites import StaticSiteProvider
from src.adapters.templates import JinjaTemplateRenderer
from src.api.deps import (
    get_renderer,
    get_settings_service,
    get_site_provider,
    get_transformer,
)
from src.api.schemas import MetaPreviewRequest, MetaPreviewResponse
from src.components.meta import MetaOverrides, ResolveMetaInput, create_meta_service
from src.components.meta import run as run_resolve
from src.components.render import RenderHeadInput
from src.components.render import run as run_render
from src.components.settings import MetaConfigError, SettingsService

router = APIRouter()


@router.post(
    "/preview",
    response_model=MetaPreviewResponse,
    summary="Preview page meta",
    description="Resolve meta and head markup for an element without touching the cache.",
)
def preview_meta(
    payload: MetaPreviewRequest,
    settings_service: SettingsService = Depends(get_settings_service),
    renderer: JinjaTemplateRenderer = Depends(get_renderer),
    transformer: QueryStringImageTransformer = Depends(get_transformer),
    sites: StaticSiteProvider = Depends(get_site_provider),
) -> MetaPreviewResponse:
    try:
        settings = settings_service.for_call({**payload.config, "cache_enabled": False})
    except MetaConfigError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=[asdict(err) for err in e.errors] or str(e),
        ) from e

    element = payload.element.to_entity() if payload.element else None
    service = create_meta_service(settings, renderer, transformer, sites=sites)

    resolved = run_resolve(
        ResolveMetaInput(
            context={**payload.context, "element": element},
            overrides=MetaOverrides(element=element, profile=payload.profile, meta=payload.meta),
        ),
        service=service,
    )
    head = run_render(
        RenderHeadInput(meta=resolved.meta, settings=settings, element=element),
        renderer=renderer,
    )

    return MetaPreviewResponse(
        meta=resolved.meta,
        head_html=head.html,
        canonical_url=head.canonical_url,
        warnings=head.warnings,
    )
