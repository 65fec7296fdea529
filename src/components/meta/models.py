"""
Meta component input/output models.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from src.domain.entities import ImageAsset

logger = logging.getLogger(__name__)

# A meta bag maps meta keys ("title", "og:image", ...) to str, list[str] or,
# before materialization, an ImageAsset. Insertion order is output order.
MetaValue = str | list[str] | ImageAsset
MetaBag = dict[str, Any]

# Context key carrying a per-call override block.
OVERRIDE_CONTEXT_KEY = "seo"


# --- Validation Error ---


@dataclass(frozen=True)
class MetaValidationError:
    """Meta resolution error reported by the component entry point."""

    code: str
    message: str
    field: str | None = None


# --- Overrides ---


@dataclass(frozen=True)
class MetaOverrides:
    """
    Per-call override block.

    - config: settings patch, shallow-merged for this call only
    - element: element to use instead of the routed one
    - profile: profile name to use instead of the element's
    - meta: values that replace whatever the pipeline produced for a key
    """

    config: Mapping[str, Any] | None = None
    element: Any = None
    profile: str | None = None
    meta: Mapping[str, Any] | None = None

    @classmethod
    def from_mapping(cls, data: Any) -> MetaOverrides | None:
        """Override block from a context value. Anything but a mapping is ignored."""
        if not data:
            return None
        if not isinstance(data, Mapping):
            logger.warning("Ignoring override block of type %s", type(data).__name__)
            return None
        return cls(
            config=data.get("config"),
            element=data.get("element"),
            profile=data.get("profile"),
            meta=data.get("meta"),
        )


# --- Additional Meta Values ---


@dataclass(frozen=True)
class StaticValue:
    """Single template string."""

    template: str


@dataclass(frozen=True)
class ListValue:
    """Template strings rendered one by one; empty renders are dropped."""

    templates: tuple[str, ...]


@dataclass(frozen=True)
class Recipe:
    """Callable computing a value (or list of values) from the context."""

    fn: Callable[[Mapping[str, Any]], Any]


AdditionalMetaValue = StaticValue | ListValue | Recipe


def classify_additional_value(value: Any) -> AdditionalMetaValue:
    """Turn a configured additional-meta value into its tagged variant."""
    if isinstance(value, StaticValue | ListValue | Recipe):
        return value
    if callable(value):
        return Recipe(fn=value)
    if isinstance(value, list | tuple):
        return ListValue(templates=tuple("" if item is None else str(item) for item in value))
    return StaticValue(template="" if value is None else str(value))


# --- Component Input/Output ---


@dataclass(frozen=True)
class ResolveMetaInput:
    """Input for resolving page meta."""

    context: Mapping[str, Any] = field(default_factory=dict)
    overrides: MetaOverrides | None = None


@dataclass(frozen=True)
class ResolveMetaOutput:
    """Output containing the resolved meta bag."""

    meta: MetaBag
    errors: list[MetaValidationError] = field(default_factory=list)
    success: bool = True
