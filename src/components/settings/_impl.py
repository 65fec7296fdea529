"""
SettingsService - meta pipeline configuration.

Key behaviors:
- GET always returns settings (fallback to defaults if nothing is configured)
- Per-call patches are shallow merges producing a new validated value
- Sparse "a,b,c" keyed tables are expanded into explicit per-key mappings
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, TypeVar

from pydantic import ValidationError as PydanticValidationError

from .models import (
    ImageTransform,
    MetaConfigError,
    MetaPropertyType,
    MetaSettings,
    MetaValueType,
    ValidationError,
)
from .ports import SettingsSourcePort

T = TypeVar("T")


# --- Default Settings ---


def get_default_settings() -> MetaSettings:
    """Fallback settings used when no source is configured."""
    return MetaSettings()


# --- Validation Errors ---


def parse_pydantic_errors(exc: PydanticValidationError) -> list[ValidationError]:
    """Flatten a pydantic ValidationError into field-specific errors."""
    errors: list[ValidationError] = []
    for error in exc.errors():
        loc = error.get("loc", ())
        field = ".".join(str(part) for part in loc) if loc else "_schema"

        error_type = error.get("type", "unknown")
        code = "invalid_value"
        if "missing" in error_type:
            code = "required"
        elif "extra_forbidden" in error_type:
            code = "unknown_setting"
        elif "type" in error_type or "parsing" in error_type:
            code = "invalid_type"

        errors.append(
            ValidationError(
                field=field,
                code=code,
                message=f"Field '{field}': {error.get('msg', 'Invalid value')}",
            )
        )
    return errors


def validate_settings_data(data: Any) -> MetaSettings:
    """Validate raw configuration data, raising MetaConfigError on failure."""
    if data is None:
        data = {}
    if not isinstance(data, Mapping):
        raise MetaConfigError(
            "Settings must be a mapping",
            [ValidationError(field="_schema", code="invalid_type", message="Expected a mapping")],
        )
    try:
        return MetaSettings.model_validate(dict(data))
    except PydanticValidationError as e:
        errors = parse_pydantic_errors(e)
        raise MetaConfigError(f"Settings validation failed:\n{e}", errors) from e


def apply_settings_patch(
    settings: MetaSettings,
    patch: Mapping[str, Any] | None,
) -> MetaSettings:
    """
    Shallow-merge `patch` over `settings`.

    Top-level keys replace whole values (a patched `field_profiles` replaces
    every profile). The original settings value is never modified.
    """
    if not patch:
        return settings

    merged = settings.model_dump()
    merged.update(patch)
    return validate_settings_data(merged)


# --- Map Expansion ---


def expand_map(mapping: Mapping[str, T]) -> dict[str, T]:
    """
    Expand comma-separated keys into one entry per key.

    {"title,og:title": x} -> {"title": x, "og:title": x}. Later entries win.
    """
    expanded: dict[str, T] = {}
    for keys, value in mapping.items():
        for key in keys.split(","):
            key = key.strip()
            if key:
                expanded[key] = value
    return expanded


@dataclass(frozen=True)
class AliasGroup:
    """Meta keys that stand in for each other, canonical key first."""

    canonical: str
    aliases: tuple[str, ...]

    @property
    def keys(self) -> tuple[str, ...]:
        return (self.canonical, *self.aliases)


class AutofillMap:
    """Alias groups built from the `autofill_map` setting (target -> source)."""

    def __init__(self, groups: list[AliasGroup]) -> None:
        self._groups = tuple(groups)

    @classmethod
    def from_config(cls, autofill_map: Mapping[str, str]) -> AutofillMap:
        aliases: dict[str, list[str]] = {}
        for target, source in expand_map(autofill_map).items():
            members = aliases.setdefault(source, [])
            if target != source and target not in members:
                members.append(target)
        return cls([AliasGroup(canonical=src, aliases=tuple(keys)) for src, keys in aliases.items()])

    @classmethod
    def from_settings(cls, settings: MetaSettings) -> AutofillMap:
        return cls.from_config(settings.autofill_map)

    @property
    def groups(self) -> tuple[AliasGroup, ...]:
        return self._groups


class RestrictionMap:
    """Per-key type and length rules built from `meta_property_types`."""

    def __init__(self, rules: Mapping[str, MetaPropertyType]) -> None:
        self._rules = dict(rules)

    @classmethod
    def from_settings(cls, settings: MetaSettings) -> RestrictionMap:
        return cls(expand_map(settings.meta_property_types))

    def get(self, key: str) -> MetaPropertyType | None:
        return self._rules.get(key)

    def type_for(self, key: str) -> MetaValueType:
        rule = self._rules.get(key)
        return rule.type if rule else MetaValueType.TEXT

    def max_length_for(self, key: str) -> int | None:
        """Max length of a free-text key, None when the key is not length-limited text."""
        rule = self._rules.get(key)
        if rule is None or rule.type != MetaValueType.TEXT:
            return None
        return rule.max_length


def expand_transform_map(settings: MetaSettings) -> dict[str, ImageTransform]:
    return expand_map(settings.image_transform_map)


def expand_profile_map(settings: MetaSettings) -> dict[str, str]:
    return expand_map(settings.profile_map)


# --- Settings Service ---


class SettingsService:
    """
    Meta settings service.

    Provides:
    - Base settings with fallback defaults
    - Per-call settings (base + shallow patch)
    """

    def __init__(self, source: SettingsSourcePort | None = None) -> None:
        self._source = source

    def get(self) -> MetaSettings:
        settings = self._source.get() if self._source else None
        if settings is None:
            return get_default_settings()
        return settings

    def for_call(self, patch: Mapping[str, Any] | None = None) -> MetaSettings:
        """Settings for a single resolution call. Raises MetaConfigError on a bad patch."""
        return apply_settings_patch(self.get(), patch)


# --- Factory ---


def create_settings_service(source: SettingsSourcePort | None = None) -> SettingsService:
    return SettingsService(source)
