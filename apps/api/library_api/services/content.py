"""Content moderation and gallery service layer."""

from library_api.errors import not_found
from library_api.repositories.memory import ContentRecord, InMemoryStore
from library_api.schemas.base import StatusMessage, Visibility
from library_api.schemas.content import (
    GALLERY_PLACEHOLDER_IMAGE,
    ContentItem,
    ContentKind,
    ContentType,
    CreateContentRequest,
    GalleryItem,
    GalleryResponse,
)


class ContentService:
    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    def create_content(self, payload: CreateContentRequest) -> ContentItem:
        record = self._store.create_content(**payload.model_dump())
        return self._to_item(record)

    def delete_content(self, *, content_id: str) -> None:
        if not self._store.delete_content(content_id):
            raise not_found("Content not found")

    def set_visibility(self, *, kind: ContentKind, record_id: str, visibility: Visibility) -> StatusMessage:
        if not self._store.set_visibility(kind.value, record_id, visibility):
            raise not_found("Content not found")
        return StatusMessage(message=f"{kind.value} visibility updated to {visibility.value}")

    def list_gallery(self) -> GalleryResponse:
        items = [
            GalleryItem(
                id=record.id,
                title=record.title,
                description=record.description or "",
                image_url=record.image_url or GALLERY_PLACEHOLDER_IMAGE,
                created_at=record.created_at,
                category=record.category or "General",
                tags=list(record.tags),
            )
            for record in self._store.list_published_content(ContentType.GALLERY)
        ]
        return GalleryResponse(items=items)

    @staticmethod
    def _to_item(record: ContentRecord) -> ContentItem:
        return ContentItem(
            id=record.id,
            type=record.type,
            title=record.title,
            description=record.description,
            image_url=record.image_url,
            category=record.category,
            tags=list(record.tags),
            is_published=record.is_published,
            visibility=record.visibility,
            created_at=record.created_at,
        )
