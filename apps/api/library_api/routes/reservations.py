"""Reservation routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, status

from library_api.routes.dependencies import (
    get_reservation_service,
    get_resource_handler,
    json_body,
    require_authenticated,
    require_staff,
)
from library_api.schemas.auth import AuthPrincipal
from library_api.schemas.error import GUARDED, TransitionError, error_responses
from library_api.schemas.reservation import (
    CreateReservationRequest,
    ReservationCreated,
    ReservationEnvelope,
    UpdateReservationRequest,
)
from library_api.services.handler import ResourceHandler
from library_api.services.reservations import ReservationService

router = APIRouter(prefix="/reservations", tags=["Reservations"])


@router.post(
    "",
    response_model=ReservationCreated,
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(*GUARDED, 404),
)
async def create_reservation(
    principal: Annotated[AuthPrincipal, Depends(require_authenticated)],
    payload: Annotated[CreateReservationRequest, Depends(json_body(CreateReservationRequest))],
    service: Annotated[ReservationService, Depends(get_reservation_service)],
    handler: Annotated[ResourceHandler, Depends(get_resource_handler)],
) -> ReservationCreated:
    return await handler.run(
        "reservations.create",
        service.create_reservation,
        principal=principal,
        book_id=payload.book_id,
        notes=payload.notes,
    )


@router.patch(
    "/{reservationId}",
    response_model=ReservationEnvelope,
    responses={**error_responses(*GUARDED, 404), 400: {"model": TransitionError}},
)
async def update_reservation_status(
    principal: Annotated[AuthPrincipal, Depends(require_staff)],
    reservation_id: Annotated[str, Path(alias="reservationId")],
    payload: Annotated[UpdateReservationRequest, Depends(json_body(UpdateReservationRequest))],
    service: Annotated[ReservationService, Depends(get_reservation_service)],
    handler: Annotated[ResourceHandler, Depends(get_resource_handler)],
) -> ReservationEnvelope:
    return await handler.run(
        "reservations.update_status",
        service.update_status,
        principal=principal,
        reservation_id=reservation_id,
        status=payload.status,
    )
