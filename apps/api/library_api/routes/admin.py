"""Admin moderation routes: content visibility, news, theme, users and membership applications."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, status

from library_api.routes.dependencies import (
    get_content_service,
    get_membership_service,
    get_news_service,
    get_resource_handler,
    get_theme_service,
    get_user_service,
    json_body,
    require_admin,
)
from library_api.schemas.auth import AuthPrincipal
from library_api.schemas.base import OkResponse, StatusMessage
from library_api.schemas.content import (
    ContentEnvelope,
    ContentKind,
    CreateContentRequest,
    VisibilityUpdateRequest,
)
from library_api.schemas.error import GUARDED, error_responses
from library_api.schemas.membership import ApplicationReviewed, ApplicationSummary, ReviewApplicationRequest
from library_api.schemas.news import AdminNewsSummary, CreateNewsRequest, NewsEnvelope, UpdateNewsRequest
from library_api.schemas.theme import ThemeResponse, ThemeUpdated, UpdateThemeRequest
from library_api.schemas.user import PromoteUserRequest, UserList
from library_api.services.content import ContentService
from library_api.services.handler import ResourceHandler
from library_api.services.membership import MembershipService
from library_api.services.news import NewsService
from library_api.services.theme import ThemeService
from library_api.services.users import UserService

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.patch(
    "/content/{contentType}/{contentId}/visibility",
    response_model=StatusMessage,
    responses=error_responses(*GUARDED, 404),
)
async def update_content_visibility(
    _: Annotated[AuthPrincipal, Depends(require_admin)],
    kind: Annotated[ContentKind, Path(alias="contentType")],
    content_id: Annotated[str, Path(alias="contentId")],
    payload: Annotated[VisibilityUpdateRequest, Depends(json_body(VisibilityUpdateRequest))],
    service: Annotated[ContentService, Depends(get_content_service)],
    handler: Annotated[ResourceHandler, Depends(get_resource_handler)],
) -> StatusMessage:
    return await handler.run(
        "content.set_visibility",
        service.set_visibility,
        kind=kind,
        record_id=content_id,
        visibility=payload.visibility,
    )


@router.post(
    "/content",
    response_model=ContentEnvelope,
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(*GUARDED),
)
async def create_content(
    _: Annotated[AuthPrincipal, Depends(require_admin)],
    payload: Annotated[CreateContentRequest, Depends(json_body(CreateContentRequest))],
    service: Annotated[ContentService, Depends(get_content_service)],
    handler: Annotated[ResourceHandler, Depends(get_resource_handler)],
) -> ContentEnvelope:
    item = await handler.run("content.create", service.create_content, payload)
    return ContentEnvelope(item=item)


@router.delete("/content/{contentId}", response_model=OkResponse, responses=error_responses(*GUARDED, 404))
async def delete_content(
    _: Annotated[AuthPrincipal, Depends(require_admin)],
    content_id: Annotated[str, Path(alias="contentId")],
    service: Annotated[ContentService, Depends(get_content_service)],
    handler: Annotated[ResourceHandler, Depends(get_resource_handler)],
) -> OkResponse:
    await handler.run("content.delete", service.delete_content, content_id=content_id)
    return OkResponse()


@router.get("/news", response_model=list[AdminNewsSummary], responses=error_responses(*GUARDED))
async def list_news(
    _: Annotated[AuthPrincipal, Depends(require_admin)],
    service: Annotated[NewsService, Depends(get_news_service)],
    handler: Annotated[ResourceHandler, Depends(get_resource_handler)],
) -> list[AdminNewsSummary]:
    return await handler.run("news.list_admin", service.list_admin_news)


@router.post(
    "/news",
    response_model=NewsEnvelope,
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(*GUARDED),
)
async def create_news(
    _: Annotated[AuthPrincipal, Depends(require_admin)],
    payload: Annotated[CreateNewsRequest, Depends(json_body(CreateNewsRequest))],
    service: Annotated[NewsService, Depends(get_news_service)],
    handler: Annotated[ResourceHandler, Depends(get_resource_handler)],
) -> NewsEnvelope:
    item = await handler.run("news.create", service.create_news, payload)
    return NewsEnvelope(item=item)


@router.patch("/news/{newsId}", response_model=NewsEnvelope, responses=error_responses(*GUARDED, 404))
async def update_news(
    _: Annotated[AuthPrincipal, Depends(require_admin)],
    news_id: Annotated[str, Path(alias="newsId")],
    payload: Annotated[UpdateNewsRequest, Depends(json_body(UpdateNewsRequest))],
    service: Annotated[NewsService, Depends(get_news_service)],
    handler: Annotated[ResourceHandler, Depends(get_resource_handler)],
) -> NewsEnvelope:
    item = await handler.run("news.update", service.update_news, news_id=news_id, payload=payload)
    return NewsEnvelope(item=item)


@router.delete("/news/{newsId}", response_model=OkResponse, responses=error_responses(*GUARDED, 404))
async def delete_news(
    _: Annotated[AuthPrincipal, Depends(require_admin)],
    news_id: Annotated[str, Path(alias="newsId")],
    service: Annotated[NewsService, Depends(get_news_service)],
    handler: Annotated[ResourceHandler, Depends(get_resource_handler)],
) -> OkResponse:
    await handler.run("news.delete", service.delete_news, news_id=news_id)
    return OkResponse()


@router.get("/theme", response_model=ThemeResponse, responses=error_responses(500, 504))
async def get_theme(
    service: Annotated[ThemeService, Depends(get_theme_service)],
    handler: Annotated[ResourceHandler, Depends(get_resource_handler)],
) -> ThemeResponse:
    return await handler.run("theme.get", service.get_theme)


@router.post("/theme", response_model=ThemeUpdated, responses=error_responses(*GUARDED))
async def update_theme(
    _: Annotated[AuthPrincipal, Depends(require_admin)],
    payload: Annotated[UpdateThemeRequest, Depends(json_body(UpdateThemeRequest))],
    service: Annotated[ThemeService, Depends(get_theme_service)],
    handler: Annotated[ResourceHandler, Depends(get_resource_handler)],
) -> ThemeUpdated:
    return await handler.run("theme.update", service.update_theme, payload.theme)


@router.get("/users", response_model=UserList, responses=error_responses(*GUARDED))
async def list_users(
    _: Annotated[AuthPrincipal, Depends(require_admin)],
    service: Annotated[UserService, Depends(get_user_service)],
    handler: Annotated[ResourceHandler, Depends(get_resource_handler)],
) -> UserList:
    return await handler.run("users.list", service.list_users)


@router.post("/users/{userId}/promote", response_model=StatusMessage, responses=error_responses(*GUARDED, 404))
async def promote_user(
    principal: Annotated[AuthPrincipal, Depends(require_admin)],
    user_id: Annotated[str, Path(alias="userId")],
    payload: Annotated[PromoteUserRequest, Depends(json_body(PromoteUserRequest))],
    service: Annotated[UserService, Depends(get_user_service)],
    handler: Annotated[ResourceHandler, Depends(get_resource_handler)],
) -> StatusMessage:
    return await handler.run(
        "users.promote",
        service.promote_temporary_admin,
        actor=principal,
        user_id=user_id,
        duration_hours=payload.duration,
    )


@router.post("/users/{userId}/revoke", response_model=StatusMessage, responses=error_responses(*GUARDED, 404))
async def revoke_user(
    principal: Annotated[AuthPrincipal, Depends(require_admin)],
    user_id: Annotated[str, Path(alias="userId")],
    service: Annotated[UserService, Depends(get_user_service)],
    handler: Annotated[ResourceHandler, Depends(get_resource_handler)],
) -> StatusMessage:
    return await handler.run("users.revoke", service.revoke_temporary_admin, actor=principal, user_id=user_id)


@router.get("/applications", response_model=list[ApplicationSummary], responses=error_responses(*GUARDED))
async def list_applications(
    _: Annotated[AuthPrincipal, Depends(require_admin)],
    service: Annotated[MembershipService, Depends(get_membership_service)],
    handler: Annotated[ResourceHandler, Depends(get_resource_handler)],
) -> list[ApplicationSummary]:
    return await handler.run("membership.list", service.list_applications)


@router.patch(
    "/applications/{applicationId}",
    response_model=ApplicationReviewed,
    responses=error_responses(*GUARDED, 404),
)
async def review_application(
    principal: Annotated[AuthPrincipal, Depends(require_admin)],
    application_id: Annotated[str, Path(alias="applicationId")],
    payload: Annotated[ReviewApplicationRequest, Depends(json_body(ReviewApplicationRequest))],
    service: Annotated[MembershipService, Depends(get_membership_service)],
    handler: Annotated[ResourceHandler, Depends(get_resource_handler)],
) -> ApplicationReviewed:
    return await handler.run(
        "membership.review",
        service.review_application,
        reviewer=principal,
        application_id=application_id,
        status=payload.status,
        review_notes=payload.review_notes,
    )
