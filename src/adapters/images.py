"""
Query-string image transformer.

Implements ImageTransformPort for image services that resize on the fly from
URL parameters (imgix, Cloudinary fetch, thumbor-style proxies). No pixels
are touched here: the transform is described in the returned URL.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlparse, urlunparse

from src.components.meta.ports import ImageTransformError

# Transform option -> query parameter
DEFAULT_PARAM_MAP = {
    "width": "w",
    "height": "h",
    "format": "fm",
    "mode": "fit",
    "position": "crop",
    "quality": "q",
}


class QueryStringImageTransformer:
    """Append transform options to the asset URL as query parameters."""

    def __init__(self, param_map: Mapping[str, str] | None = None) -> None:
        self._param_map = dict(param_map or DEFAULT_PARAM_MAP)

    def transform(self, asset: Any, options: Mapping[str, Any]) -> str | None:
        url = asset if isinstance(asset, str) else getattr(asset, "url", None)
        if not url:
            raise ImageTransformError(f"Asset has no URL: {asset!r}")

        parsed = urlparse(url)
        query = dict(parse_qsl(parsed.query))
        for option, value in options.items():
            param = self._param_map.get(option)
            if param is not None and value is not None:
                query[param] = str(value)

        return urlunparse(parsed._replace(query=urlencode(query)))


class PassthroughImageTransformer:
    """Return the original asset URL untouched (no transform service available)."""

    def transform(self, asset: Any, options: Mapping[str, Any]) -> str | None:
        if isinstance(asset, str):
            return asset
        return getattr(asset, "url", None)
