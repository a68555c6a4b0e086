"""Notification schemas."""

from datetime import datetime

from pydantic import Field

from library_api.schemas.base import ApiModel


class Notification(ApiModel):
    id: str
    type: str
    title: str
    message: str
    timestamp: datetime
    read: bool
    category: str
    action_url: str | None = None
    action_text: str | None = None


class NotificationList(ApiModel):
    notifications: list[Notification]


class CreateNotificationRequest(ApiModel):
    type: str = "info"
    title: str = Field(min_length=1)
    message: str = Field(min_length=1)
    category: str = "general"
    action_url: str | None = None
    action_text: str | None = None
    target_user_id: str | None = None


class UpdateNotificationRequest(ApiModel):
    read: bool | None = None


class NotificationEnvelope(ApiModel):
    success: bool = True
    notification: Notification


class ReadAllResponse(ApiModel):
    success: bool = True
    message: str
    updated: int
