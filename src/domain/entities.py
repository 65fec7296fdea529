from typing import Any, Literal
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

# --- Enums / Literals ---
AssetKind = Literal["image", "video", "pdf", "other"]

# --- Assets ---

class ImageAsset(BaseModel):
    """Image reference carried through the meta pipeline until materialized."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid4()))
    url: str
    kind: AssetKind = "image"
    title: str = ""
    filename: str = ""
    focal_point: tuple[float, float] | None = None  # (x, y) in 0..1
    attributes: dict[str, Any] = Field(default_factory=dict)

    def get_field_value(self, handle: str) -> Any:
        if handle in self.attributes:
            return self.attributes[handle]
        if handle in type(self).model_fields:
            return getattr(self, handle)
        return None

    @property
    def position(self) -> str | None:
        """Focal point as a transform position string ("50% 25%")."""
        if self.focal_point is None:
            return None
        x, y = self.focal_point
        return f"{x * 100:g}% {y * 100:g}%"

# --- Content ---

class Element(BaseModel):
    """
    Content item (entry, page, category) rendered by the host.

    Custom fields live in `fields`; built-in attributes are readable by handle too.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid4()))
    site_handle: str = "default"
    section_handle: str | None = None
    type_handle: str | None = None
    title: str = ""
    slug: str = ""
    url: str | None = None
    alternates: dict[str, str] = Field(default_factory=dict)  # site handle -> url
    fields: dict[str, Any] = Field(default_factory=dict)

    def get_field_value(self, handle: str) -> Any:
        if handle in self.fields:
            return self.fields[handle]
        if handle in type(self).model_fields and handle != "fields":
            return getattr(self, handle)
        return None

    @property
    def cache_key(self) -> str:
        return f"{self.site_handle}:{self.id}"
