"""
Settings component - meta pipeline configuration.
"""

from ._impl import (
    AliasGroup,
    AutofillMap,
    RestrictionMap,
    SettingsService,
    apply_settings_patch,
    create_settings_service,
    expand_map,
    expand_profile_map,
    expand_transform_map,
    get_default_settings,
    parse_pydantic_errors,
    validate_settings_data,
)
from .adapters import YamlSettingsSource, load_settings
from .models import (
    ImageTransform,
    MetaConfigError,
    MetaPropertyType,
    MetaSettings,
    MetaValueType,
    ValidationError,
)
from .ports import FileSystemPort, SettingsSourcePort

__all__ = [
    # Models
    "ImageTransform",
    "MetaPropertyType",
    "MetaSettings",
    "MetaValueType",
    "ValidationError",
    "MetaConfigError",
    # Ports
    "FileSystemPort",
    "SettingsSourcePort",
    # Service
    "SettingsService",
    "create_settings_service",
    "get_default_settings",
    # Patching / validation
    "apply_settings_patch",
    "validate_settings_data",
    "parse_pydantic_errors",
    # Map expansion
    "AliasGroup",
    "AutofillMap",
    "RestrictionMap",
    "expand_map",
    "expand_profile_map",
    "expand_transform_map",
    # Loading
    "YamlSettingsSource",
    "load_settings",
]
