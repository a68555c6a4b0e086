"""Book API schemas."""

from datetime import datetime

from pydantic import Field

from library_api.schemas.base import ApiModel, Visibility


class Book(ApiModel):
    id: str
    title: str
    author: str
    isbn: str | None = None
    summary: str | None = None
    genre: str
    dewey_decimal: str
    total_copies: int
    available_copies: int
    is_electronic: bool
    is_digital: bool
    is_locked: bool
    visibility: Visibility
    cover_image: str | None = None
    digital_file: str | None = None
    published_year: int | None = None
    publisher: str | None = None
    language: str
    pages: int | None = None
    created_at: datetime
    updated_at: datetime | None = None


class CreateBookRequest(ApiModel):
    title: str = Field(min_length=1)
    author: str = Field(min_length=1)
    isbn: str | None = None
    summary: str | None = None
    genre: str = "General"
    dewey_decimal: str = "000"
    total_copies: int = Field(default=1, ge=0)
    available_copies: int | None = Field(default=None, ge=0)
    is_electronic: bool = False
    is_digital: bool = False
    is_locked: bool = True
    visibility: Visibility = Visibility.PUBLIC
    cover_image: str | None = None
    digital_file: str | None = None
    published_year: int | None = None
    publisher: str | None = None
    language: str = "English"
    pages: int | None = Field(default=None, ge=1)


class UpdateBookRequest(ApiModel):
    """Partial update; only fields present in the request body are applied."""

    title: str | None = Field(default=None, min_length=1)
    author: str | None = Field(default=None, min_length=1)
    isbn: str | None = None
    summary: str | None = None
    genre: str | None = None
    dewey_decimal: str | None = None
    total_copies: int | None = Field(default=None, ge=0)
    available_copies: int | None = Field(default=None, ge=0)
    is_electronic: bool | None = None
    is_digital: bool | None = None
    is_locked: bool | None = None
    visibility: Visibility | None = None
    cover_image: str | None = None
    digital_file: str | None = None
    published_year: int | None = None
    publisher: str | None = None
    language: str | None = None
    pages: int | None = Field(default=None, ge=1)


class BookEnvelope(ApiModel):
    book: Book


class BookPage(ApiModel):
    books: list[Book]
    page: int
    total: int
    page_count: int


class Ebook(ApiModel):
    id: str
    title: str
    author: str
    cover_image: str | None = None
    summary: str | None = None
    digital_file: str | None = None
    published_year: int | None = None
    publisher: str | None = None
    language: str
    pages: int | None = None


class EbookResponse(ApiModel):
    success: bool = True
    ebook: Ebook
