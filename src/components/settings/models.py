"""
Settings component models.

MetaSettings is the whole configuration surface of the meta pipeline. It is
frozen: per-call patches build a new value instead of mutating this one.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

# --- Errors ---


@dataclass(frozen=True)
class ValidationError:
    """Validation error with actionable message."""

    field: str
    code: str
    message: str


class MetaConfigError(ValueError):
    """Raised when configuration (file or per-call patch) is malformed."""

    def __init__(self, message: str, errors: list[ValidationError] | None = None) -> None:
        super().__init__(message)
        self.errors: list[ValidationError] = errors or []


# --- Value Types ---


class MetaValueType(str, Enum):
    """How a meta key's raw field value is coerced."""

    TEXT = "text"
    IMAGE = "image"
    LIST = "list"


class MetaPropertyType(BaseModel):
    """Declared type and length limits of a meta key."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    type: MetaValueType = MetaValueType.TEXT
    min_length: int | None = Field(default=None, ge=0)
    max_length: int | None = Field(default=None, gt=0)


class ImageTransform(BaseModel):
    """
    Transform options handed to the image transformer.

    Unknown options (quality, fit, effects...) are passed through untouched.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    width: int | None = Field(default=None, gt=0)
    height: int | None = Field(default=None, gt=0)
    format: str | None = None
    mode: str | None = None
    position: str | None = None

    @field_validator("format")
    @classmethod
    def _lowercase_format(cls, value: str | None) -> str | None:
        return value.lower() if value else value

    def to_options(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


# --- Defaults (mirror the stock plugin configuration) ---


def _default_meta_property_types() -> dict[str, MetaPropertyType]:
    return {
        "title,og:title,twitter:title": MetaPropertyType(
            type=MetaValueType.TEXT, min_length=10, max_length=60
        ),
        "description,og:description,twitter:description": MetaPropertyType(
            type=MetaValueType.TEXT, min_length=50, max_length=300
        ),
        "image,og:image,twitter:image": MetaPropertyType(type=MetaValueType.IMAGE),
    }


def _default_image_transform_map() -> dict[str, ImageTransform]:
    return {
        "image": ImageTransform(width=1200, height=675, format="jpg"),
        "og:image": ImageTransform(width=1200, height=630, format="jpg"),
        "twitter:image": ImageTransform(width=1200, height=600, format="jpg"),
    }


def _default_autofill_map() -> dict[str, str]:
    return {
        "og:title": "title",
        "og:description": "description",
        "og:image": "image",
        "twitter:title": "title",
        "twitter:description": "description",
        "twitter:image": "image",
    }


def _default_tag_template_map() -> dict[str, str]:
    return {
        "default": '<meta name="{{ key }}" content="{{ value }}">',
        "title": "<title>{{ value }}</title>",
        "/^og:/,/^fb:/": '<meta property="{{ key }}" content="{{ value }}">',
    }


def _as_candidate_list(value: Any) -> Any:
    if isinstance(value, str):
        return [value]
    return value


# --- Settings ---


class MetaSettings(BaseModel):
    """Meta pipeline configuration."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    cache_enabled: bool = True
    cache_duration: int = Field(default=3600, ge=0)  # seconds, 0 = no expiry

    default_profile: str | None = None
    field_profiles: dict[str, dict[str, list[str]]] = Field(default_factory=dict)
    profile_map: dict[str, str] = Field(default_factory=dict)  # section/type handle -> profile

    default_meta: dict[str, list[str]] = Field(default_factory=dict)
    additional_meta: dict[str, Any] = Field(default_factory=dict)

    meta_property_types: dict[str, MetaPropertyType] = Field(
        default_factory=_default_meta_property_types
    )
    image_transform_map: dict[str, ImageTransform] = Field(
        default_factory=_default_image_transform_map
    )
    autofill_map: dict[str, str] = Field(default_factory=_default_autofill_map)
    tag_template_map: dict[str, str] = Field(default_factory=_default_tag_template_map)

    alt_text_field_handle: str | None = None
    truncate_suffix: str = "…"
    apply_restrictions: bool = False
    return_image_asset: bool = False
    use_imager_if_installed: bool = True

    include_sitename_in_title: bool = True
    site_name: str | dict[str, str] | None = None
    sitename_position: Literal["before", "after"] = "after"
    sitename_separator: str = "|"
    sitename_title_properties: list[str] = Field(default_factory=lambda: ["title"])

    site_url: str = ""
    output_alternate: bool = True

    @field_validator("field_profiles", mode="before")
    @classmethod
    def _normalize_profiles(cls, value: Any) -> Any:
        if not isinstance(value, dict):
            return value
        return {
            name: (
                {key: _as_candidate_list(fields) for key, fields in profile.items()}
                if isinstance(profile, dict)
                else profile
            )
            for name, profile in value.items()
        }

    @field_validator("default_meta", mode="before")
    @classmethod
    def _normalize_default_meta(cls, value: Any) -> Any:
        if not isinstance(value, dict):
            return value
        return {key: _as_candidate_list(fields) for key, fields in value.items()}

    @field_validator("additional_meta")
    @classmethod
    def _check_additional_meta(cls, value: dict[str, Any]) -> dict[str, Any]:
        for key, item in value.items():
            if callable(item) or isinstance(item, str):
                continue
            if isinstance(item, list | tuple) and all(isinstance(sub, str) for sub in item):
                continue
            raise ValueError(
                f"additional_meta['{key}'] must be a template string, "
                "a list of template strings or a callable"
            )
        return value
