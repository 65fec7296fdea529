"""
Site URL helpers - absolute and canonical URLs for meta output.

Key behaviors:
- Make transform/asset URLs absolute against the configured site URL
- Give protocol-relative URLs a scheme (the site's, else https)
- Normalize canonical URLs (scheme, trailing slash, index files)
"""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urljoin, urlparse

# --- Configuration ---


@dataclass(frozen=True)
class CanonicalConfig:
    """Canonical URL configuration."""

    site_url: str = ""
    enforce_https: bool = True
    lowercase_paths: bool = False
    strip_trailing_slash: bool = True
    strip_index_files: bool = True
    preserve_query_params: bool = False


DEFAULT_CONFIG = CanonicalConfig()

_INDEX_FILES = ("/index.html", "/index.htm", "/index.php")


# --- Absolute URLs ---


def is_absolute_url(url: str) -> bool:
    parsed = urlparse(url)
    return bool(parsed.scheme and parsed.netloc)


def ensure_absolute_url(url: str, site_url: str = "") -> str:
    """
    Return an absolute version of `url`.

    - Absolute URLs are returned unchanged
    - Protocol-relative URLs get the site scheme (https when unknown)
    - Relative paths are joined onto `site_url`; without one they are returned as-is
    """
    if not url or is_absolute_url(url):
        return url

    if url.startswith("//"):
        scheme = urlparse(site_url).scheme or "https"
        return f"{scheme}:{url}"

    if not site_url:
        return url

    return urljoin(site_url.rstrip("/") + "/", url.lstrip("/"))


# --- Normalization ---


def normalize_path(path: str, config: CanonicalConfig = DEFAULT_CONFIG) -> str:
    """Normalize a URL path (leading slash, index files, trailing slash)."""
    if not path:
        return "/"

    normalized = path if path.startswith("/") else "/" + path

    if config.lowercase_paths:
        normalized = normalized.lower()

    if config.strip_index_files:
        for index in _INDEX_FILES:
            if normalized.endswith(index):
                normalized = normalized[: -len(index)] or "/"
                break

    if config.strip_trailing_slash and len(normalized) > 1:
        normalized = normalized.rstrip("/")

    return normalized


def normalize_url(url: str, config: CanonicalConfig = DEFAULT_CONFIG) -> str:
    """Normalize a full URL. Fragments are always dropped."""
    parsed = urlparse(url)

    scheme = parsed.scheme
    if config.enforce_https and scheme == "http":
        scheme = "https"

    path = normalize_path(parsed.path, config)
    netloc = parsed.netloc.lower()

    if config.preserve_query_params and parsed.query:
        return f"{scheme}://{netloc}{path}?{parsed.query}"

    return f"{scheme}://{netloc}{path}"


def build_canonical_url(url: str | None, config: CanonicalConfig = DEFAULT_CONFIG) -> str:
    """
    Build the canonical URL for an element URL.

    Returns '' when there is nothing to build from (no URL and no site URL).
    """
    absolute = ensure_absolute_url(url or "/", config.site_url)
    if not is_absolute_url(absolute):
        return ""
    return normalize_url(absolute, config)
