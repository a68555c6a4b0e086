"""Book catalog routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, status

from library_api.routes.dependencies import get_book_service, get_resource_handler, json_body, require_staff
from library_api.schemas.auth import AuthPrincipal
from library_api.schemas.base import OkResponse
from library_api.schemas.book import BookEnvelope, BookPage, CreateBookRequest, UpdateBookRequest
from library_api.schemas.error import GUARDED, error_responses
from library_api.services.books import CATALOG_PAGE_SIZE_DEFAULT, BookService, empty_catalog_page
from library_api.services.handler import ResourceHandler

router = APIRouter(tags=["Books"])


@router.get("/books", response_model=BookPage)
async def list_catalog(
    service: Annotated[BookService, Depends(get_book_service)],
    handler: Annotated[ResourceHandler, Depends(get_resource_handler)],
    page: Annotated[int, Query()] = 1,
    limit: Annotated[int, Query()] = CATALOG_PAGE_SIZE_DEFAULT,
    search: str = "",
    genre: str = "",
) -> BookPage:
    return await handler.run_with_fallback(
        "books.list_catalog",
        empty_catalog_page,
        service.list_catalog,
        page=page,
        limit=limit,
        search=search,
        genre=genre,
    )


@router.post(
    "/admin/books",
    response_model=BookEnvelope,
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(*GUARDED),
)
async def create_book(
    _: Annotated[AuthPrincipal, Depends(require_staff)],
    payload: Annotated[CreateBookRequest, Depends(json_body(CreateBookRequest))],
    service: Annotated[BookService, Depends(get_book_service)],
    handler: Annotated[ResourceHandler, Depends(get_resource_handler)],
) -> BookEnvelope:
    book = await handler.run("books.create", service.create_book, payload)
    return BookEnvelope(book=book)


@router.patch("/books/{bookId}", response_model=BookEnvelope, responses=error_responses(*GUARDED, 404))
async def update_book(
    _: Annotated[AuthPrincipal, Depends(require_staff)],
    book_id: Annotated[str, Path(alias="bookId")],
    payload: Annotated[UpdateBookRequest, Depends(json_body(UpdateBookRequest))],
    service: Annotated[BookService, Depends(get_book_service)],
    handler: Annotated[ResourceHandler, Depends(get_resource_handler)],
) -> BookEnvelope:
    book = await handler.run("books.update", service.update_book, book_id=book_id, payload=payload)
    return BookEnvelope(book=book)


@router.delete("/books/{bookId}", response_model=OkResponse, responses=error_responses(*GUARDED, 404))
async def delete_book(
    _: Annotated[AuthPrincipal, Depends(require_staff)],
    book_id: Annotated[str, Path(alias="bookId")],
    service: Annotated[BookService, Depends(get_book_service)],
    handler: Annotated[ResourceHandler, Depends(get_resource_handler)],
) -> OkResponse:
    await handler.run("books.delete", service.delete_book, book_id=book_id)
    return OkResponse()
