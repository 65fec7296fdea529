import html
import re
from typing import Any

# "&amp;" produced by html.escape in front of an entity that was already there.
_ESCAPED_ENTITY = re.compile(r"&amp;(?=(?:[A-Za-z][A-Za-z0-9]*|#[0-9]+|#[xX][0-9A-Fa-f]+);)")


def is_url_value(value: str) -> bool:
    """URL-looking values (absolute or protocol-relative) are passed through unescaped."""
    return value.startswith("http") or value.startswith("//")


def encode_text(text: str) -> str:
    """
    Entity-encode display text for use inside a meta tag attribute.

    Quotes are encoded, and entities already present are left as they are so a
    value that went through encoding once does not get double-encoded.
    """
    escaped = html.escape(text, quote=True).replace("&#x27;", "&#039;")
    return _ESCAPED_ENTITY.sub("&", escaped)


def encode_meta_value(value: Any) -> Any:
    """Encode a single meta value. Non-string values are returned untouched."""
    if isinstance(value, str):
        return value if is_url_value(value) else encode_text(value)
    if isinstance(value, list):
        return [encode_meta_value(item) for item in value]
    return value
