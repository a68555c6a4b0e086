"""Content, gallery and visibility schemas."""

from datetime import datetime
from enum import Enum

from pydantic import Field

from library_api.schemas.base import ApiModel, Visibility

GALLERY_PLACEHOLDER_IMAGE = "/images/catalog/placeholder.svg"


class ContentType(str, Enum):
    GALLERY = "GALLERY"
    NEWS = "NEWS"
    EVENT = "EVENT"
    ANNOUNCEMENT = "ANNOUNCEMENT"
    RESOURCE = "RESOURCE"


class ContentKind(str, Enum):
    """Collections whose visibility can be moderated."""

    BOOKS = "books"
    NEWS = "news"
    CONTENT = "content"


class ContentItem(ApiModel):
    id: str
    type: ContentType
    title: str
    description: str | None = None
    image_url: str | None = None
    category: str | None = None
    tags: list[str] = Field(default_factory=list)
    is_published: bool
    visibility: Visibility
    created_at: datetime


class CreateContentRequest(ApiModel):
    type: ContentType
    title: str = Field(min_length=1)
    description: str | None = None
    image_url: str | None = None
    category: str | None = None
    tags: list[str] = Field(default_factory=list)
    is_published: bool = False
    visibility: Visibility = Visibility.PUBLIC


class ContentEnvelope(ApiModel):
    item: ContentItem


class VisibilityUpdateRequest(ApiModel):
    visibility: Visibility


class GalleryItem(ApiModel):
    id: str
    title: str
    description: str = ""
    image_url: str = GALLERY_PLACEHOLDER_IMAGE
    created_at: datetime
    category: str = "General"
    tags: list[str] = Field(default_factory=list)


class GalleryResponse(ApiModel):
    items: list[GalleryItem]
