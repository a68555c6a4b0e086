"""Notification service layer.

Every operation is scoped to the calling principal: a user can only read,
update or delete notifications addressed to them.
"""

import logging

from library_api.core.logging_config import safe_log_identifier
from library_api.errors import forbidden, not_found
from library_api.repositories.memory import InMemoryStore, NotificationRecord
from library_api.schemas.auth import AuthPrincipal
from library_api.schemas.notification import (
    CreateNotificationRequest,
    Notification,
    NotificationEnvelope,
    NotificationList,
    ReadAllResponse,
)

logger = logging.getLogger(__name__)

NOTIFICATION_LIST_LIMIT = 50


class NotificationService:
    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    def list_notifications(self, *, principal: AuthPrincipal) -> NotificationList:
        records = self._store.list_notifications_for_user(principal.user_id, limit=NOTIFICATION_LIST_LIMIT)
        return NotificationList(notifications=[self._to_notification(record) for record in records])

    def create_notification(
        self,
        *,
        principal: AuthPrincipal,
        payload: CreateNotificationRequest,
    ) -> NotificationEnvelope:
        target_user_id = payload.target_user_id or principal.user_id
        # Only staff may address notifications to someone else.
        if target_user_id != principal.user_id and not principal.is_staff:
            raise forbidden()

        record = self._store.create_notification(
            user_id=target_user_id,
            title=payload.title,
            message=payload.message,
            type=payload.type,
            category=payload.category,
            action_url=payload.action_url,
            action_text=payload.action_text,
        )
        return NotificationEnvelope(notification=self._to_notification(record))

    def set_read(self, *, principal: AuthPrincipal, notification_id: str, read: bool | None) -> NotificationEnvelope:
        record = self._store.set_notification_read_for_user(
            user_id=principal.user_id,
            notification_id=notification_id,
            read=True if read is None else read,
        )
        if record is None:
            raise not_found("Notification not found")
        return NotificationEnvelope(notification=self._to_notification(record))

    def delete_notification(self, *, principal: AuthPrincipal, notification_id: str) -> None:
        if not self._store.delete_notification_for_user(user_id=principal.user_id, notification_id=notification_id):
            raise not_found("Notification not found")

    def mark_all_read(self, *, principal: AuthPrincipal) -> ReadAllResponse:
        updated = self._store.mark_all_notifications_read(principal.user_id)
        logger.info(
            "notifications.read_all principal_id=%s updated=%s",
            safe_log_identifier(principal.user_id, prefix="pid"),
            updated,
        )
        return ReadAllResponse(message="All notifications marked as read", updated=updated)

    @staticmethod
    def _to_notification(record: NotificationRecord) -> Notification:
        return Notification(
            id=record.id,
            type=record.type,
            title=record.title,
            message=record.message,
            timestamp=record.created_at,
            read=record.read,
            category=record.category,
            action_url=record.action_url,
            action_text=record.action_text,
        )
