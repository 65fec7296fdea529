import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from src.adapters.images import QueryStringImageTransformer
from src.adapters.sites import StaticSiteProvider
from src.adapters.templates import JinjaTemplateRenderer
from src.api.schemas import ElementModel
from src.components.meta import MetaOverrides, ResolveMetaInput, create_meta_service
from src.components.meta import run as run_resolve
from src.components.render import RenderHeadInput
from src.components.render import run as run_render
from src.components.settings import (
    MetaConfigError,
    MetaSettings,
    get_default_settings,
    load_settings,
)

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("cli")

SETTINGS_PATH = "seo.yaml"


def get_settings(path: str) -> MetaSettings:
    settings_path = Path(path)
    if not settings_path.exists():
        logger.info(f"Settings file {path} not found, using defaults.")
        return get_default_settings()
    return load_settings(settings_path)


def read_yaml(path: str) -> Any:
    with open(path) as f:
        return yaml.safe_load(f)


def _json_default(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump()
    return str(value)


def handle_resolve(settings: MetaSettings, args: argparse.Namespace) -> int:
    element = ElementModel.model_validate(read_yaml(args.element) or {}).to_entity()
    context = read_yaml(args.context) if args.context else {}

    renderer = JinjaTemplateRenderer()
    service = create_meta_service(
        settings,
        renderer,
        QueryStringImageTransformer(),
        sites=StaticSiteProvider(current_handle=element.site_handle),
    )
    output = run_resolve(
        ResolveMetaInput(
            context={**(context or {}), "element": element},
            overrides=MetaOverrides(element=element, profile=args.profile),
        ),
        service=service,
    )
    if not output.success:
        for error in output.errors:
            logger.error(error.message)
        return 1

    if args.head:
        head = run_render(
            RenderHeadInput(meta=output.meta, settings=settings, element=element),
            renderer=renderer,
        )
        print(head.html)
    else:
        print(json.dumps(output.meta, indent=2, ensure_ascii=False, default=_json_default))
    return 0


def handle_check(settings: MetaSettings, args: argparse.Namespace) -> int:
    print(f"Settings OK: {len(settings.field_profiles)} profile(s).")
    for name, profile in settings.field_profiles.items():
        print(f"  {name}: {', '.join(profile)}")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="SEO meta resolver CLI")
    parser.add_argument("--config", default=SETTINGS_PATH, help="Path to settings YAML")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # resolve
    resolve_parser = subparsers.add_parser("resolve", help="Resolve meta for an element")
    resolve_parser.add_argument("element", help="Path to element YAML")
    resolve_parser.add_argument("--context", help="Path to context YAML")
    resolve_parser.add_argument("--profile", help="Profile to use instead of the mapped one")
    resolve_parser.add_argument("--head", action="store_true", help="Print head HTML")

    # check
    subparsers.add_parser("check", help="Validate the settings file")

    args = parser.parse_args(argv)

    try:
        settings = get_settings(args.config)
    except MetaConfigError as e:
        logger.error(str(e))
        return 1

    try:
        if args.command == "resolve":
            return handle_resolve(settings, args)
        return handle_check(settings, args)
    except (OSError, yaml.YAMLError, PydanticValidationError) as e:
        logger.error(f"Could not read input: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
