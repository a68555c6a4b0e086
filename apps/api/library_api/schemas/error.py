"""API error response schemas."""

from typing import Any

from pydantic import BaseModel

from library_api.schemas.reservation import ReservationStatus


class ErrorResponse(BaseModel):
    error: str
    details: dict[str, Any] | None = None


class TransitionErrorDetails(BaseModel):
    current_status: ReservationStatus
    attempted_status: ReservationStatus
    allowed_next_statuses: list[ReservationStatus]


class TransitionError(BaseModel):
    error: str
    details: TransitionErrorDetails


def error_responses(*status_codes: int) -> dict[int | str, dict[str, Any]]:
    """OpenAPI ``responses`` entries documenting ``ErrorResponse`` for each status."""
    return {code: {"model": ErrorResponse} for code in status_codes}


GUARDED = (400, 401, 403, 500, 504)
