"""News and event schemas."""

from datetime import datetime
from enum import Enum

from pydantic import Field

from library_api.schemas.base import ApiModel, Visibility


class NewsType(str, Enum):
    NEWS = "NEWS"
    EVENT = "EVENT"
    ANNOUNCEMENT = "ANNOUNCEMENT"


class NewsEvent(ApiModel):
    id: str
    title: str
    content: str
    type: NewsType
    image_url: str | None = None
    is_published: bool
    visibility: Visibility
    event_date: datetime | None = None
    created_at: datetime


class AdminNewsSummary(ApiModel):
    id: str
    title: str
    type: NewsType
    is_published: bool
    visibility: Visibility
    event_date: datetime | None = None
    created_at: datetime


class CreateNewsRequest(ApiModel):
    title: str = Field(min_length=1)
    content: str = Field(min_length=1)
    type: NewsType = NewsType.NEWS
    image_url: str | None = None
    is_published: bool = False
    visibility: Visibility = Visibility.PUBLIC
    event_date: datetime | None = None


class UpdateNewsRequest(ApiModel):
    title: str | None = Field(default=None, min_length=1)
    content: str | None = None
    type: NewsType | None = None
    image_url: str | None = None
    is_published: bool | None = None
    visibility: Visibility | None = None
    event_date: datetime | None = None


class NewsEnvelope(ApiModel):
    item: NewsEvent


class PublicNewsItem(ApiModel):
    id: str
    title: str
    date: datetime
    image_url: str
    content: str
    type: NewsType


class NewsPage(ApiModel):
    items: list[PublicNewsItem]
    page: int = 1
    total: int
    page_count: int = 1
