"""Member-only routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path

from library_api.routes.dependencies import (
    get_book_service,
    get_reservation_service,
    get_resource_handler,
    require_member,
)
from library_api.schemas.auth import AuthPrincipal
from library_api.schemas.book import EbookResponse
from library_api.schemas.error import GUARDED, error_responses
from library_api.schemas.reservation import MemberReservationList
from library_api.services.books import BookService
from library_api.services.handler import ResourceHandler
from library_api.services.reservations import ReservationService

router = APIRouter(prefix="/member", tags=["Member"])


@router.get("/ebooks/{ebookId}", response_model=EbookResponse, responses=error_responses(*GUARDED, 404))
async def get_ebook(
    _: Annotated[AuthPrincipal, Depends(require_member)],
    ebook_id: Annotated[str, Path(alias="ebookId")],
    service: Annotated[BookService, Depends(get_book_service)],
    handler: Annotated[ResourceHandler, Depends(get_resource_handler)],
) -> EbookResponse:
    ebook = await handler.run("books.get_ebook", service.get_ebook, book_id=ebook_id)
    return EbookResponse(ebook=ebook)


@router.get("/reservations", response_model=MemberReservationList, responses=error_responses(*GUARDED))
async def list_my_reservations(
    principal: Annotated[AuthPrincipal, Depends(require_member)],
    service: Annotated[ReservationService, Depends(get_reservation_service)],
    handler: Annotated[ResourceHandler, Depends(get_resource_handler)],
) -> MemberReservationList:
    return await handler.run("reservations.list_member", service.list_member_reservations, principal=principal)
