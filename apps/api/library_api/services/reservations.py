"""Reservation service layer."""

from datetime import UTC, datetime, timedelta
import logging
from typing import Any

from library_api.core.logging_config import safe_log_identifier
from library_api.domain.reservation_fsm import ensure_transition
from library_api.errors import bad_request, not_found
from library_api.repositories.memory import ActiveReservationExists, InMemoryStore, ReservationRecord
from library_api.schemas.auth import AuthPrincipal
from library_api.schemas.reservation import (
    MemberReservation,
    MemberReservationList,
    Reservation,
    ReservationCreated,
    ReservationEnvelope,
    ReservationStatus,
)

logger = logging.getLogger(__name__)


class ReservationService:
    def __init__(self, store: InMemoryStore, *, loan_days: int = 14) -> None:
        self._store = store
        self._loan_days = loan_days

    def create_reservation(self, *, principal: AuthPrincipal, book_id: str, notes: str | None = None) -> ReservationCreated:
        try:
            record = self._store.create_reservation(user_id=principal.user_id, book_id=book_id, notes=notes)
        except ActiveReservationExists as exc:
            raise bad_request("You already have an active reservation for this book") from exc
        if record is None:
            raise not_found("Book not found")
        logger.info(
            "reservation.created reservation_id=%s principal_id=%s",
            safe_log_identifier(record.id, prefix="rid"),
            safe_log_identifier(principal.user_id, prefix="pid"),
        )
        return ReservationCreated(id=record.id)

    def list_member_reservations(self, *, principal: AuthPrincipal) -> MemberReservationList:
        return MemberReservationList(
            reservations=[
                MemberReservation(
                    id=record.id,
                    book_id=record.book_id,
                    book_title=book.title if book else None,
                    book_author=book.author if book else None,
                    book_cover=book.cover_image if book else None,
                    book_isbn=book.isbn if book else None,
                    status=record.status,
                    reserved_at=record.reserved_at,
                    approved_at=record.approved_at,
                    due_date=record.due_date,
                    returned_at=record.returned_at,
                    notes=record.notes,
                )
                for record, book in self._store.list_reservations_for_user(principal.user_id)
            ]
        )

    def update_status(
        self,
        *,
        principal: AuthPrincipal,
        reservation_id: str,
        status: ReservationStatus,
    ) -> ReservationEnvelope:
        record = self._store.get_reservation(reservation_id)
        if record is None:
            raise not_found("Reservation not found")

        previous_status = record.status
        ensure_transition(record.status, status)

        now = datetime.now(UTC)
        changes: dict[str, Any] = {}
        unlock_book = False
        if status in (ReservationStatus.APPROVED, ReservationStatus.REJECTED, ReservationStatus.CANCELLED):
            changes["approved_by"] = principal.user_id
            changes["approved_at"] = now
        if status is ReservationStatus.APPROVED:
            changes["due_date"] = now + timedelta(days=self._loan_days)
            book = self._store.get_book(record.book_id)
            unlock_book = book is not None and book.is_digital
        if status is ReservationStatus.RETURNED:
            changes["returned_at"] = now

        updated = self._store.apply_reservation_status(
            reservation=record,
            status=status,
            changes=changes,
            unlock_book=unlock_book,
        )
        logger.info(
            "reservation.transition reservation_id=%s prev_status=%s new_status=%s",
            safe_log_identifier(updated.id, prefix="rid"),
            previous_status.value,
            status.value,
        )
        return ReservationEnvelope(
            message=f"Reservation {status.value.lower().replace('_', ' ')} successfully",
            reservation=self._to_reservation(updated),
        )

    def _to_reservation(self, record: ReservationRecord) -> Reservation:
        book = self._store.get_book(record.book_id)
        return Reservation(
            id=record.id,
            user_id=record.user_id,
            book_id=record.book_id,
            book_title=book.title if book else None,
            book_author=book.author if book else None,
            status=record.status,
            reserved_at=record.reserved_at,
            approved_by=record.approved_by,
            approved_at=record.approved_at,
            due_date=record.due_date,
            returned_at=record.returned_at,
            notes=record.notes,
        )
