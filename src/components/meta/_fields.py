"""
Field/value resolution for meta keys.

Reads a (possibly dotted) handle from a scope - an element, a mapping or a
plain object - and coerces the raw value by the meta key's declared type.
Absent or empty raw values resolve to None so cascades can tell "nothing
here" apart from a value that coerces to an empty string.
"""

from __future__ import annotations

import html
import re
from collections.abc import Iterable, Mapping
from typing import Any

from src.components.settings import MetaValueType
from src.domain.entities import ImageAsset

_TAG_RE = re.compile(r"<[^>]*>")
_WHITESPACE_RE = re.compile(r"\s+")


# --- Scope Access ---


def read_scope_value(scope: Any, key: str) -> Any:
    """Read one (undotted) key from a scope. Missing keys read as None."""
    if scope is None or not key:
        return None
    if isinstance(scope, Mapping):
        return scope.get(key)
    getter = getattr(scope, "get_field_value", None)
    if callable(getter):
        return getter(key)
    return getattr(scope, key, None)


def reduce_scope_and_handle(scope: Any, handle: str) -> tuple[Any, str]:
    """
    Narrow `scope` along a dotted handle.

    Walks segments while the current scope holds the next one, returning the
    deepest scope reached and the handle left to read from it:
    ({"entry": e}, "entry.seoTitle") -> (e, "seoTitle").
    """
    parts = handle.split(".")
    while len(parts) > 1:
        nested = read_scope_value(scope, parts[0])
        if nested is None:
            break
        scope = nested
        parts = parts[1:]
    return scope, ".".join(parts)


def is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str | list | tuple | dict | set):
        return len(value) == 0
    return False


# --- Coercion ---


def _is_sequence(value: Any) -> bool:
    return isinstance(value, list | tuple)


def coerce_text(value: Any) -> str:
    """Plain text for a raw field value (HTML stripped, whitespace collapsed)."""
    if isinstance(value, str):
        stripped = html.unescape(_TAG_RE.sub("", value))
        return _WHITESPACE_RE.sub(" ", stripped).strip()
    if isinstance(value, bool):
        return "1" if value else ""
    if isinstance(value, int | float):
        return str(value)
    if _is_sequence(value):
        for item in value:
            text = coerce_text(item)
            if text:
                return text
        return ""
    if hasattr(value, "__html__"):
        return coerce_text(value.__html__())
    title = getattr(value, "title", None)
    if isinstance(title, str):
        return coerce_text(title)
    return coerce_text(str(value))


def coerce_image(value: Any) -> ImageAsset | str | None:
    """Image reference for a raw field value: an image asset or a URL string."""
    if isinstance(value, ImageAsset):
        return value if value.kind == "image" else None
    if isinstance(value, str):
        return value.strip() or None
    if _is_sequence(value):
        for item in value:
            image = coerce_image(item)
            if image is not None:
                return image
    return None


def coerce_list(value: Any) -> list[str]:
    """List of non-empty text values for a raw field value."""
    items: Iterable[Any] = value if _is_sequence(value) else [value]
    texts = (coerce_text(item) for item in items)
    return [text for text in texts if text]


def coerce_value(value: Any, meta_type: MetaValueType) -> Any:
    if meta_type == MetaValueType.IMAGE:
        return coerce_image(value)
    if meta_type == MetaValueType.LIST:
        return coerce_list(value)
    return coerce_text(value)


# --- Lookups ---


def get_property_data(scope: Any, handle: str, meta_type: MetaValueType) -> Any:
    """Typed value of `handle` in `scope`, or None when there is nothing there."""
    value = read_scope_value(scope, handle)
    if is_empty(value):
        return None
    return coerce_value(value, meta_type)


def get_element_property_data_by_fields(
    element: Any,
    meta_type: MetaValueType,
    fields: Iterable[str],
) -> Any:
    """First non-None value among candidate field handles of an element, else ''."""
    for handle in fields:
        scope, remaining = reduce_scope_and_handle(element, handle)
        value = get_property_data(scope, remaining, meta_type)
        if value is not None:
            return value
    return ""


def get_context_property_data_by_fields(
    context: Mapping[str, Any],
    meta_type: MetaValueType,
    fields: Iterable[str],
) -> Any:
    """First non-None value among dotted candidate paths into the context, else ''."""
    for path in fields:
        scope, handle = reduce_scope_and_handle(context, path)
        value = get_property_data(scope, handle, meta_type)
        if value is not None:
            return value
    return ""
