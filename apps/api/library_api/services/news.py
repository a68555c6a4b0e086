"""News and events service layer."""

from datetime import UTC, datetime
from typing import Any

from library_api.errors import bad_request, not_found
from library_api.repositories.memory import InMemoryStore, NewsEventRecord
from library_api.schemas.content import GALLERY_PLACEHOLDER_IMAGE
from library_api.schemas.news import (
    AdminNewsSummary,
    CreateNewsRequest,
    NewsEvent,
    NewsPage,
    PublicNewsItem,
    UpdateNewsRequest,
)

_NON_NULLABLE_FIELDS = frozenset({"title", "content", "type", "is_published", "visibility"})


def empty_news_page() -> NewsPage:
    return NewsPage(items=[], total=0)


def _as_utc(value: datetime | None) -> datetime | None:
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=UTC)


class NewsService:
    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    def list_admin_news(self) -> list[AdminNewsSummary]:
        return [
            AdminNewsSummary(
                id=record.id,
                title=record.title,
                type=record.type,
                is_published=record.is_published,
                visibility=record.visibility,
                event_date=record.event_date,
                created_at=record.created_at,
            )
            for record in self._store.list_news_events()
        ]

    def create_news(self, payload: CreateNewsRequest) -> NewsEvent:
        fields = payload.model_dump()
        fields["event_date"] = _as_utc(fields["event_date"])
        return self._to_news(self._store.create_news_event(**fields))

    def update_news(self, *, news_id: str, payload: UpdateNewsRequest) -> NewsEvent:
        changes: dict[str, Any] = payload.model_dump(exclude_unset=True)
        if not changes:
            raise bad_request("No fields to update")
        null_fields = sorted(key for key, value in changes.items() if value is None and key in _NON_NULLABLE_FIELDS)
        if null_fields:
            raise bad_request("Fields cannot be null", details={"fields": null_fields})
        if "event_date" in changes:
            changes["event_date"] = _as_utc(changes["event_date"])

        record = self._store.update_news_event(news_id, changes)
        if record is None:
            raise not_found("News item not found")
        return self._to_news(record)

    def delete_news(self, *, news_id: str) -> None:
        if not self._store.delete_news_event(news_id):
            raise not_found("News item not found")

    def list_public_news(self) -> NewsPage:
        items = [
            PublicNewsItem(
                id=record.id,
                title=record.title,
                date=record.event_date or record.created_at,
                image_url=record.image_url or GALLERY_PLACEHOLDER_IMAGE,
                content=record.content,
                type=record.type,
            )
            for record in self._store.list_public_news()
        ]
        return NewsPage(items=items, total=len(items))

    @staticmethod
    def _to_news(record: NewsEventRecord) -> NewsEvent:
        return NewsEvent(
            id=record.id,
            title=record.title,
            content=record.content,
            type=record.type,
            image_url=record.image_url,
            is_published=record.is_published,
            visibility=record.visibility,
            event_date=record.event_date,
            created_at=record.created_at,
        )
