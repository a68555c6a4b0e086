"""Notification routes; every operation is scoped to the caller."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, status

from library_api.routes.dependencies import (
    get_notification_service,
    get_resource_handler,
    json_body,
    require_authenticated,
)
from library_api.schemas.auth import AuthPrincipal
from library_api.schemas.base import StatusMessage
from library_api.schemas.error import GUARDED, error_responses
from library_api.schemas.notification import (
    CreateNotificationRequest,
    NotificationEnvelope,
    NotificationList,
    ReadAllResponse,
    UpdateNotificationRequest,
)
from library_api.services.handler import ResourceHandler
from library_api.services.notifications import NotificationService

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("", response_model=NotificationList, responses=error_responses(*GUARDED))
async def list_notifications(
    principal: Annotated[AuthPrincipal, Depends(require_authenticated)],
    service: Annotated[NotificationService, Depends(get_notification_service)],
    handler: Annotated[ResourceHandler, Depends(get_resource_handler)],
) -> NotificationList:
    return await handler.run("notifications.list", service.list_notifications, principal=principal)


@router.post(
    "",
    response_model=NotificationEnvelope,
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(*GUARDED),
)
async def create_notification(
    principal: Annotated[AuthPrincipal, Depends(require_authenticated)],
    payload: Annotated[CreateNotificationRequest, Depends(json_body(CreateNotificationRequest))],
    service: Annotated[NotificationService, Depends(get_notification_service)],
    handler: Annotated[ResourceHandler, Depends(get_resource_handler)],
) -> NotificationEnvelope:
    return await handler.run(
        "notifications.create",
        service.create_notification,
        principal=principal,
        payload=payload,
    )


@router.patch("/read-all", response_model=ReadAllResponse, responses=error_responses(*GUARDED))
async def mark_all_read(
    principal: Annotated[AuthPrincipal, Depends(require_authenticated)],
    service: Annotated[NotificationService, Depends(get_notification_service)],
    handler: Annotated[ResourceHandler, Depends(get_resource_handler)],
) -> ReadAllResponse:
    return await handler.run("notifications.read_all", service.mark_all_read, principal=principal)


@router.patch("/{notificationId}", response_model=NotificationEnvelope, responses=error_responses(*GUARDED, 404))
async def update_notification(
    principal: Annotated[AuthPrincipal, Depends(require_authenticated)],
    notification_id: Annotated[str, Path(alias="notificationId")],
    payload: Annotated[UpdateNotificationRequest, Depends(json_body(UpdateNotificationRequest))],
    service: Annotated[NotificationService, Depends(get_notification_service)],
    handler: Annotated[ResourceHandler, Depends(get_resource_handler)],
) -> NotificationEnvelope:
    return await handler.run(
        "notifications.set_read",
        service.set_read,
        principal=principal,
        notification_id=notification_id,
        read=payload.read,
    )


@router.delete("/{notificationId}", response_model=StatusMessage, responses=error_responses(*GUARDED, 404))
async def delete_notification(
    principal: Annotated[AuthPrincipal, Depends(require_authenticated)],
    notification_id: Annotated[str, Path(alias="notificationId")],
    service: Annotated[NotificationService, Depends(get_notification_service)],
    handler: Annotated[ResourceHandler, Depends(get_resource_handler)],
) -> StatusMessage:
    await handler.run(
        "notifications.delete",
        service.delete_notification,
        principal=principal,
        notification_id=notification_id,
    )
    return StatusMessage(message="Notification deleted successfully")
