"""Book catalog and e-book service layer."""

from typing import Any

from library_api.errors import bad_request, not_found
from library_api.repositories.memory import BookRecord, InMemoryStore
from library_api.schemas.book import (
    Book,
    BookPage,
    CreateBookRequest,
    Ebook,
    UpdateBookRequest,
)

CATALOG_PAGE_SIZE_DEFAULT = 9
CATALOG_PAGE_SIZE_MAX = 24

_NON_NULLABLE_FIELDS = frozenset(
    {
        "title",
        "author",
        "genre",
        "dewey_decimal",
        "total_copies",
        "available_copies",
        "is_electronic",
        "is_digital",
        "is_locked",
        "visibility",
        "language",
    }
)


def empty_catalog_page() -> BookPage:
    return BookPage(books=[], page=1, total=0, page_count=1)


class BookService:
    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    def create_book(self, payload: CreateBookRequest) -> Book:
        fields = payload.model_dump()
        if fields["available_copies"] is None:
            fields["available_copies"] = fields["total_copies"]
        record = self._store.create_book(**fields)
        return self._to_book(record)

    def update_book(self, *, book_id: str, payload: UpdateBookRequest) -> Book:
        changes: dict[str, Any] = payload.model_dump(exclude_unset=True)
        if not changes:
            raise bad_request("No fields to update")
        null_fields = sorted(key for key, value in changes.items() if value is None and key in _NON_NULLABLE_FIELDS)
        if null_fields:
            raise bad_request("Fields cannot be null", details={"fields": null_fields})

        record = self._store.update_book(book_id, changes)
        if record is None:
            raise not_found("Book not found")
        return self._to_book(record)

    def delete_book(self, *, book_id: str) -> None:
        if not self._store.delete_book(book_id):
            raise not_found("Book not found")

    def list_catalog(self, *, page: int, limit: int, search: str = "", genre: str = "") -> BookPage:
        page = max(1, page)
        limit = max(1, min(CATALOG_PAGE_SIZE_MAX, limit))
        records, total = self._store.list_catalog_books(
            search=search.strip(),
            genre=genre.strip(),
            offset=(page - 1) * limit,
            limit=limit,
        )
        return BookPage(
            books=[self._to_book(record) for record in records],
            page=page,
            total=total,
            page_count=max(1, -(-total // limit)),
        )

    def get_ebook(self, *, book_id: str) -> Ebook:
        record = self._store.find_ebook(book_id)
        if record is None:
            raise not_found("Ebook not found")
        return Ebook(
            id=record.id,
            title=record.title,
            author=record.author,
            cover_image=record.cover_image,
            summary=record.summary,
            digital_file=record.digital_file,
            published_year=record.published_year,
            publisher=record.publisher,
            language=record.language,
            pages=record.pages,
        )

    @staticmethod
    def _to_book(record: BookRecord) -> Book:
        return Book(
            id=record.id,
            title=record.title,
            author=record.author,
            isbn=record.isbn,
            summary=record.summary,
            genre=record.genre,
            dewey_decimal=record.dewey_decimal,
            total_copies=record.total_copies,
            available_copies=record.available_copies,
            is_electronic=record.is_electronic,
            is_digital=record.is_digital,
            is_locked=record.is_locked,
            visibility=record.visibility,
            cover_image=record.cover_image,
            digital_file=record.digital_file,
            published_year=record.published_year,
            publisher=record.publisher,
            language=record.language,
            pages=record.pages,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )
