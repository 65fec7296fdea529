from typing import Any

from pydantic import BaseModel, Field

from src.domain.entities import AssetKind, Element, ImageAsset


# --- Elements ---
class ImageAssetModel(BaseModel):
    url: str
    id: str | None = None
    kind: AssetKind = "image"
    title: str = ""
    focal_point: tuple[float, float] | None = None
    attributes: dict[str, Any] = Field(default_factory=dict)

    def to_entity(self) -> ImageAsset:
        data = self.model_dump(exclude_none=True)
        return ImageAsset(**data)


class ElementModel(BaseModel):
    id: str | None = None
    site_handle: str = "default"
    section_handle: str | None = None
    type_handle: str | None = None
    title: str = ""
    slug: str = ""
    url: str | None = None
    alternates: dict[str, str] = Field(default_factory=dict)
    fields: dict[str, Any] = Field(default_factory=dict)
    # Image fields: handle -> assets (kept apart so plain dicts in `fields` stay dicts)
    images: dict[str, list[ImageAssetModel]] = Field(default_factory=dict)

    def to_entity(self) -> Element:
        data = self.model_dump(exclude={"images"}, exclude_none=True)
        fields = dict(data.pop("fields", {}))
        for handle, assets in self.images.items():
            fields[handle] = [asset.to_entity() for asset in assets]
        return Element(**data, fields=fields)


# --- Preview ---
class MetaPreviewRequest(BaseModel):
    element: ElementModel | None = None
    context: dict[str, Any] = Field(default_factory=dict)
    config: dict[str, Any] = Field(default_factory=dict)
    profile: str | None = None
    meta: dict[str, Any] = Field(default_factory=dict)


class MetaPreviewResponse(BaseModel):
    meta: dict[str, Any]
    head_html: str
    canonical_url: str = ""
    warnings: list[str] = Field(default_factory=list)
