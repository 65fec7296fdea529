import os
from functools import lru_cache
from pathlib import Path

from src.adapters.images import QueryStringImageTransformer
from src.adapters.sites import StaticSiteProvider
from src.adapters.templates import JinjaTemplateRenderer
from src.components.settings import SettingsService, YamlSettingsSource


# --- Settings ---
class AppConfig:
    def __init__(self) -> None:
        self.base_dir = Path(os.getcwd())
        self.settings_path = Path(
            os.environ.get("SEO_CONFIG_PATH", str(self.base_dir / "seo.yaml"))
        )
        self.site_handle = os.environ.get("SEO_SITE_HANDLE", "default")
        self.site_name = os.environ.get("SEO_SITE_NAME", "")


@lru_cache
def get_app_config() -> AppConfig:
    return AppConfig()


@lru_cache
def get_settings_service() -> SettingsService:
    config = get_app_config()
    if not config.settings_path.exists():
        # No config file: run on built-in defaults
        return SettingsService()
    return SettingsService(YamlSettingsSource(config.settings_path))


# --- Collaborators ---
@lru_cache
def get_renderer() -> JinjaTemplateRenderer:
    return JinjaTemplateRenderer()


def get_transformer() -> QueryStringImageTransformer:
    return QueryStringImageTransformer()


def get_site_provider() -> StaticSiteProvider:
    config = get_app_config()
    names = {config.site_handle: config.site_name} if config.site_name else {}
    return StaticSiteProvider(current_handle=config.site_handle, site_names=names)
