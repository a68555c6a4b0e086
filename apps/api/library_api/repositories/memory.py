"""In-memory repositories used by the API scaffold and tests."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from typing import Any
from uuid import uuid4

from library_api.core.operation_guard import guarded_commit
from library_api.domain.reservation_fsm import is_terminal
from library_api.schemas.auth import Role
from library_api.schemas.base import Visibility
from library_api.schemas.content import ContentType
from library_api.schemas.membership import ApplicationStatus
from library_api.schemas.news import NewsType
from library_api.schemas.reservation import ReservationStatus

GLOBAL_THEME_KEY = "global"
DEFAULT_THEME: dict[str, Any] = {
    "id": "mahogany-brown",
    "name": "Mahogany Brown",
    "primary": "#8B4513",
    "secondary": "#800020",
    "accent": "#CD853F",
    "background": "#2D1810",
    "text": "#F5F5DC",
}


def _now() -> datetime:
    return datetime.now(UTC)


def _new_id() -> str:
    return str(uuid4())


class ActiveReservationExists(Exception):
    """Raised when a user already holds a non-terminal reservation for a book."""


@dataclass(slots=True)
class ProfileRecord:
    first_name: str | None = None
    last_name: str | None = None
    profile_picture: str | None = None
    city: str | None = None
    state: str | None = None
    preferred_genres: list[str] = field(default_factory=list)


@dataclass(slots=True)
class UserRecord:
    id: str
    email: str
    role: Role
    created_at: datetime
    name: str | None = None
    is_active: bool = True
    profile: ProfileRecord | None = None
    temporary_admin_until: datetime | None = None

    def effective_role(self, now: datetime) -> Role:
        if self.temporary_admin_until is not None and self.temporary_admin_until > now:
            return Role.ADMIN
        return self.role


@dataclass(slots=True)
class BookRecord:
    id: str
    title: str
    author: str
    created_at: datetime
    isbn: str | None = None
    summary: str | None = None
    genre: str = "General"
    dewey_decimal: str = "000"
    total_copies: int = 1
    available_copies: int = 1
    is_electronic: bool = False
    is_digital: bool = False
    is_locked: bool = True
    visibility: Visibility = Visibility.PUBLIC
    cover_image: str | None = None
    digital_file: str | None = None
    published_year: int | None = None
    publisher: str | None = None
    language: str = "English"
    pages: int | None = None
    updated_at: datetime | None = None


@dataclass(slots=True)
class ContentRecord:
    id: str
    type: ContentType
    title: str
    created_at: datetime
    description: str | None = None
    image_url: str | None = None
    category: str | None = None
    tags: list[str] = field(default_factory=list)
    is_published: bool = False
    visibility: Visibility = Visibility.PUBLIC


@dataclass(slots=True)
class NewsEventRecord:
    id: str
    title: str
    content: str
    type: NewsType
    created_at: datetime
    image_url: str | None = None
    is_published: bool = False
    visibility: Visibility = Visibility.PUBLIC
    event_date: datetime | None = None


@dataclass(slots=True)
class NotificationRecord:
    id: str
    user_id: str
    title: str
    message: str
    created_at: datetime
    type: str = "info"
    category: str = "general"
    read: bool = False
    action_url: str | None = None
    action_text: str | None = None


@dataclass(slots=True)
class ReservationRecord:
    id: str
    user_id: str
    book_id: str
    status: ReservationStatus
    reserved_at: datetime
    approved_by: str | None = None
    approved_at: datetime | None = None
    due_date: datetime | None = None
    returned_at: datetime | None = None
    notes: str | None = None


@dataclass(slots=True)
class MembershipApplicationRecord:
    id: str
    first_name: str
    last_name: str
    email: str
    phone: str
    street: str
    city: str
    state: str
    zip_code: str
    country: str
    date_of_birth: date
    gender: str
    preferred_genres: list[str]
    reading_frequency: str
    created_at: datetime
    alternate_phone: str | None = None
    has_disability: bool = False
    disability_details: str | None = None
    subscribe_newsletter: bool = False
    status: ApplicationStatus = ApplicationStatus.PENDING
    user_id: str | None = None
    review_notes: str | None = None
    reviewed_by: str | None = None
    reviewed_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(slots=True)
class ThemeRecord:
    key: str
    theme: dict[str, Any]
    updated_at: datetime


@dataclass(slots=True)
class InMemoryStore:
    """Simple, deterministic persistence layer for scaffolding and tests.

    Every public operation is a single find/create/update/delete against one
    collection. Writes commit through ``guarded_commit`` so an operation its
    caller has abandoned never mutates state. ``failure_message`` is a one-shot
    failpoint: when set, the next operation raises ``RuntimeError`` with that
    text and clears it.
    """

    users: dict[str, UserRecord] = field(default_factory=dict)
    books: dict[str, BookRecord] = field(default_factory=dict)
    contents: dict[str, ContentRecord] = field(default_factory=dict)
    news_events: dict[str, NewsEventRecord] = field(default_factory=dict)
    notifications: dict[str, NotificationRecord] = field(default_factory=dict)
    reservations: dict[str, ReservationRecord] = field(default_factory=dict)
    applications: dict[str, MembershipApplicationRecord] = field(default_factory=dict)
    themes: dict[str, ThemeRecord] = field(default_factory=dict)
    write_count: int = 0
    read_count: int = 0
    failure_message: str | None = None

    def _read(self) -> None:
        self._maybe_fail()
        self.read_count += 1

    @contextmanager
    def _write(self) -> Iterator[None]:
        self._maybe_fail()
        with guarded_commit():
            yield

    def _maybe_fail(self) -> None:
        if self.failure_message is None:
            return
        message = self.failure_message
        self.failure_message = None
        raise RuntimeError(message)

    # Users

    def create_user(
        self,
        *,
        email: str,
        role: Role = Role.GUEST,
        name: str | None = None,
        is_active: bool = True,
        profile: ProfileRecord | None = None,
        user_id: str | None = None,
        created_at: datetime | None = None,
    ) -> UserRecord:
        with self._write():
            user = UserRecord(
                id=user_id or _new_id(),
                email=email,
                role=role,
                created_at=created_at or _now(),
                name=name,
                is_active=is_active,
                profile=profile,
            )
            self.users[user.id] = user
            self.write_count += 1
            return user

    def get_user(self, user_id: str) -> UserRecord | None:
        self._read()
        return self.users.get(user_id)

    def list_users(self) -> list[UserRecord]:
        self._read()
        return sorted(self.users.values(), key=lambda record: record.created_at, reverse=True)

    def list_public_members(self) -> list[UserRecord]:
        """Active MEMBER/GUEST users with a complete public name, newest first."""
        self._read()
        members = [
            record
            for record in self.users.values()
            if record.role in (Role.MEMBER, Role.GUEST)
            and record.is_active
            and record.profile is not None
            and record.profile.first_name
            and record.profile.last_name
        ]
        members.sort(key=lambda record: record.created_at, reverse=True)
        return members

    def set_temporary_admin(self, user_id: str, until: datetime | None) -> UserRecord | None:
        with self._write():
            user = self.users.get(user_id)
            if user is None:
                return None
            user.temporary_admin_until = until
            self.write_count += 1
            return user

    # Books

    def create_book(self, **fields: Any) -> BookRecord:
        with self._write():
            book = BookRecord(id=_new_id(), created_at=_now(), **fields)
            self.books[book.id] = book
            self.write_count += 1
            return book

    def get_book(self, book_id: str) -> BookRecord | None:
        self._read()
        return self.books.get(book_id)

    def find_ebook(self, book_id: str) -> BookRecord | None:
        self._read()
        book = self.books.get(book_id)
        if book is None or not book.is_electronic or book.is_locked:
            return None
        return book

    def list_catalog_books(
        self,
        *,
        search: str = "",
        genre: str = "",
        offset: int = 0,
        limit: int = 9,
    ) -> tuple[list[BookRecord], int]:
        """Return one page of PUBLIC books plus the total match count."""
        self._read()
        needle = search.lower()
        matches = [
            record
            for record in self.books.values()
            if record.visibility is Visibility.PUBLIC
            and (not genre or record.genre == genre)
            and (
                not needle
                or needle in record.title.lower()
                or needle in record.author.lower()
                or needle in (record.summary or "").lower()
            )
        ]
        matches.sort(key=lambda record: record.created_at, reverse=True)
        return matches[offset : offset + limit], len(matches)

    def update_book(self, book_id: str, changes: dict[str, Any]) -> BookRecord | None:
        with self._write():
            book = self.books.get(book_id)
            if book is None:
                return None
            for key, value in changes.items():
                setattr(book, key, value)
            book.updated_at = _now()
            self.write_count += 1
            return book

    def delete_book(self, book_id: str) -> bool:
        """Delete a book together with its reservations."""
        with self._write():
            if self.books.pop(book_id, None) is None:
                return False
            for reservation_id in [r.id for r in self.reservations.values() if r.book_id == book_id]:
                del self.reservations[reservation_id]
            self.write_count += 1
            return True

    # Content

    def create_content(self, **fields: Any) -> ContentRecord:
        with self._write():
            item = ContentRecord(id=_new_id(), created_at=_now(), **fields)
            self.contents[item.id] = item
            self.write_count += 1
            return item

    def list_published_content(self, content_type: ContentType) -> list[ContentRecord]:
        self._read()
        items = [
            record
            for record in self.contents.values()
            if record.type is content_type and record.is_published
        ]
        items.sort(key=lambda record: record.created_at, reverse=True)
        return items

    def delete_content(self, content_id: str) -> bool:
        with self._write():
            if self.contents.pop(content_id, None) is None:
                return False
            self.write_count += 1
            return True

    def set_visibility(self, collection: str, record_id: str, visibility: Visibility) -> bool:
        """Set ``visibility`` on a book, news event or content record."""
        with self._write():
            records: dict[str, Any] = {
                "books": self.books,
                "news": self.news_events,
                "content": self.contents,
            }[collection]
            record = records.get(record_id)
            if record is None:
                return False
            record.visibility = visibility
            self.write_count += 1
            return True

    # News

    def create_news_event(self, **fields: Any) -> NewsEventRecord:
        with self._write():
            item = NewsEventRecord(id=_new_id(), created_at=_now(), **fields)
            self.news_events[item.id] = item
            self.write_count += 1
            return item

    def list_news_events(self) -> list[NewsEventRecord]:
        self._read()
        return sorted(self.news_events.values(), key=lambda record: record.created_at, reverse=True)

    def list_public_news(self) -> list[NewsEventRecord]:
        self._read()
        items = [
            record
            for record in self.news_events.values()
            if record.is_published and record.visibility is Visibility.PUBLIC
        ]
        items.sort(key=lambda record: record.event_date or record.created_at, reverse=True)
        return items

    def update_news_event(self, news_id: str, changes: dict[str, Any]) -> NewsEventRecord | None:
        with self._write():
            item = self.news_events.get(news_id)
            if item is None:
                return None
            for key, value in changes.items():
                setattr(item, key, value)
            self.write_count += 1
            return item

    def delete_news_event(self, news_id: str) -> bool:
        with self._write():
            if self.news_events.pop(news_id, None) is None:
                return False
            self.write_count += 1
            return True

    # Notifications

    def create_notification(self, *, user_id: str, title: str, message: str, **fields: Any) -> NotificationRecord:
        with self._write():
            notification = NotificationRecord(
                id=_new_id(),
                user_id=user_id,
                title=title,
                message=message,
                created_at=_now(),
                **fields,
            )
            self.notifications[notification.id] = notification
            self.write_count += 1
            return notification

    def list_notifications_for_user(self, user_id: str, *, limit: int = 50) -> list[NotificationRecord]:
        self._read()
        items = [record for record in self.notifications.values() if record.user_id == user_id]
        items.sort(key=lambda record: record.created_at, reverse=True)
        return items[:limit]

    def set_notification_read_for_user(
        self,
        *,
        user_id: str,
        notification_id: str,
        read: bool,
    ) -> NotificationRecord | None:
        with self._write():
            notification = self.notifications.get(notification_id)
            if notification is None or notification.user_id != user_id:
                return None
            notification.read = read
            self.write_count += 1
            return notification

    def delete_notification_for_user(self, *, user_id: str, notification_id: str) -> bool:
        with self._write():
            notification = self.notifications.get(notification_id)
            if notification is None or notification.user_id != user_id:
                return False
            del self.notifications[notification_id]
            self.write_count += 1
            return True

    def mark_all_notifications_read(self, user_id: str) -> int:
        """Mark every unread notification owned by ``user_id`` as read."""
        with self._write():
            updated = 0
            for record in self.notifications.values():
                if record.user_id == user_id and not record.read:
                    record.read = True
                    updated += 1
            if updated:
                self.write_count += 1
            return updated

    # Reservations

    def create_reservation(self, *, user_id: str, book_id: str, notes: str | None = None) -> ReservationRecord | None:
        """Create a PENDING reservation; ``None`` when the book does not exist.

        Raises ``ActiveReservationExists`` when the user already holds a
        non-terminal reservation for the same book.
        """
        with self._write():
            if book_id not in self.books:
                return None
            for existing in self.reservations.values():
                if existing.user_id == user_id and existing.book_id == book_id and not is_terminal(existing.status):
                    raise ActiveReservationExists(existing.id)
            reservation = ReservationRecord(
                id=_new_id(),
                user_id=user_id,
                book_id=book_id,
                status=ReservationStatus.PENDING,
                reserved_at=_now(),
                notes=notes,
            )
            self.reservations[reservation.id] = reservation
            self.write_count += 1
            return reservation

    def get_reservation(self, reservation_id: str) -> ReservationRecord | None:
        self._read()
        return self.reservations.get(reservation_id)

    def list_reservations_for_user(self, user_id: str) -> list[tuple[ReservationRecord, BookRecord | None]]:
        """Return the user's reservations, newest first, each with its book."""
        self._read()
        items = [record for record in self.reservations.values() if record.user_id == user_id]
        items.sort(key=lambda record: record.reserved_at, reverse=True)
        return [(record, self.books.get(record.book_id)) for record in items]

    def apply_reservation_status(
        self,
        *,
        reservation: ReservationRecord,
        status: ReservationStatus,
        changes: dict[str, Any],
        unlock_book: bool = False,
    ) -> ReservationRecord:
        """Apply a validated status change and its side effects together."""
        with self._write():
            reservation.status = status
            for key, value in changes.items():
                setattr(reservation, key, value)
            book = self.books.get(reservation.book_id)
            if unlock_book and book is not None:
                book.is_locked = False
                book.updated_at = _now()
            self.write_count += 1
            return reservation

    # Membership applications

    def create_application(self, **fields: Any) -> MembershipApplicationRecord:
        with self._write():
            application = MembershipApplicationRecord(id=_new_id(), created_at=_now(), **fields)
            self.applications[application.id] = application
            self.write_count += 1
            return application

    def list_applications(self) -> list[MembershipApplicationRecord]:
        self._read()
        return sorted(self.applications.values(), key=lambda record: record.created_at, reverse=True)

    def review_application(
        self,
        application_id: str,
        *,
        status: ApplicationStatus,
        review_notes: str | None,
        reviewed_by: str,
    ) -> MembershipApplicationRecord | None:
        """Record a review decision.

        The first transition to APPROVED also creates an active MEMBER account
        for the applicant's email unless one already exists.
        """
        with self._write():
            application = self.applications.get(application_id)
            if application is None:
                return None

            now = _now()
            previous_status = application.status
            application.status = status
            application.review_notes = review_notes
            application.reviewed_by = reviewed_by
            application.reviewed_at = now
            application.updated_at = now

            if status is ApplicationStatus.APPROVED and previous_status is not ApplicationStatus.APPROVED:
                existing = next((user for user in self.users.values() if user.email == application.email), None)
                if existing is None:
                    existing = UserRecord(
                        id=_new_id(),
                        email=application.email,
                        role=Role.MEMBER,
                        created_at=now,
                        name=f"{application.first_name} {application.last_name}",
                        profile=ProfileRecord(
                            first_name=application.first_name,
                            last_name=application.last_name,
                            city=application.city,
                            state=application.state,
                            preferred_genres=list(application.preferred_genres),
                        ),
                    )
                    self.users[existing.id] = existing
                application.user_id = existing.id

            self.write_count += 1
            return application

    # Theme

    def get_theme(self, key: str = GLOBAL_THEME_KEY) -> dict[str, Any]:
        self._read()
        record = self.themes.get(key)
        if record is None:
            return dict(DEFAULT_THEME)
        return dict(record.theme)

    def put_theme(self, theme: dict[str, Any], key: str = GLOBAL_THEME_KEY) -> dict[str, Any]:
        with self._write():
            self.themes[key] = ThemeRecord(key=key, theme=dict(theme), updated_at=_now())
            self.write_count += 1
            return dict(theme)
