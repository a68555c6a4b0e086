"""Reservation schemas."""

from datetime import datetime
from enum import Enum

from pydantic import Field

from library_api.schemas.base import ApiModel


class ReservationStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"
    CHECKED_OUT = "CHECKED_OUT"
    RETURNED = "RETURNED"


class CreateReservationRequest(ApiModel):
    book_id: str = Field(min_length=1)
    notes: str | None = None


class ReservationCreated(ApiModel):
    ok: bool = True
    id: str


class UpdateReservationRequest(ApiModel):
    status: ReservationStatus


class Reservation(ApiModel):
    id: str
    user_id: str
    book_id: str
    book_title: str | None = None
    book_author: str | None = None
    status: ReservationStatus
    reserved_at: datetime
    approved_by: str | None = None
    approved_at: datetime | None = None
    due_date: datetime | None = None
    returned_at: datetime | None = None
    notes: str | None = None


class ReservationEnvelope(ApiModel):
    message: str
    reservation: Reservation


class MemberReservation(ApiModel):
    id: str
    book_id: str
    book_title: str | None = None
    book_author: str | None = None
    book_cover: str | None = None
    book_isbn: str | None = None
    status: ReservationStatus
    reserved_at: datetime
    approved_at: datetime | None = None
    due_date: datetime | None = None
    returned_at: datetime | None = None
    notes: str | None = None


class MemberReservationList(ApiModel):
    reservations: list[MemberReservation]
