"""Reservation lifecycle transition rules."""

from library_api.errors import ApiError
from library_api.schemas.reservation import ReservationStatus

_TERMINAL_STATES: set[ReservationStatus] = {
    ReservationStatus.REJECTED,
    ReservationStatus.CANCELLED,
    ReservationStatus.RETURNED,
}

_ALLOWED_TRANSITIONS: dict[ReservationStatus, set[ReservationStatus]] = {
    ReservationStatus.PENDING: {
        ReservationStatus.APPROVED,
        ReservationStatus.REJECTED,
        ReservationStatus.CANCELLED,
    },
    ReservationStatus.APPROVED: {ReservationStatus.CHECKED_OUT, ReservationStatus.CANCELLED},
    ReservationStatus.CHECKED_OUT: {ReservationStatus.RETURNED},
    ReservationStatus.REJECTED: set(),
    ReservationStatus.CANCELLED: set(),
    ReservationStatus.RETURNED: set(),
}


def allowed_next_statuses(status: ReservationStatus) -> list[ReservationStatus]:
    """Return deterministically ordered allowed successors for a status."""
    return sorted(_ALLOWED_TRANSITIONS.get(status, set()), key=lambda s: s.value)


def is_terminal(status: ReservationStatus) -> bool:
    return status in _TERMINAL_STATES


def ensure_transition(old_status: ReservationStatus, new_status: ReservationStatus) -> None:
    """Validate a reservation status change; invalid moves are client errors."""
    details = {
        "current_status": old_status.value,
        "attempted_status": new_status.value,
        "allowed_next_statuses": [s.value for s in allowed_next_statuses(old_status)],
    }
    if is_terminal(old_status):
        raise ApiError(
            status_code=400,
            message="Reservation is already closed",
            details=details,
        )

    if new_status not in _ALLOWED_TRANSITIONS.get(old_status, set()):
        raise ApiError(
            status_code=400,
            message="Invalid reservation status transition",
            details=details,
        )
