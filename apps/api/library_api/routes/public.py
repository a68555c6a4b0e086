"""Public routes: gallery, news feed and member directory."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response

from library_api.routes.dependencies import (
    get_content_service,
    get_news_service,
    get_resource_handler,
    get_user_service,
)
from library_api.schemas.content import GalleryResponse
from library_api.schemas.error import error_responses
from library_api.schemas.news import NewsPage
from library_api.schemas.user import PublicMemberDirectory
from library_api.services.content import ContentService
from library_api.services.handler import ResourceHandler
from library_api.services.news import NewsService, empty_news_page
from library_api.services.users import UserService

router = APIRouter(tags=["Public"])

_NO_CACHE_HEADERS = {
    "Cache-Control": "no-store, no-cache, must-revalidate, max-age=0",
    "Pragma": "no-cache",
    "Expires": "0",
}


@router.get("/gallery", response_model=GalleryResponse)
async def list_gallery(
    response: Response,
    service: Annotated[ContentService, Depends(get_content_service)],
    handler: Annotated[ResourceHandler, Depends(get_resource_handler)],
) -> GalleryResponse:
    response.headers.update(_NO_CACHE_HEADERS)
    return await handler.run_with_fallback(
        "content.list_gallery",
        lambda: GalleryResponse(items=[]),
        service.list_gallery,
    )


@router.get("/news", response_model=NewsPage)
async def list_news(
    service: Annotated[NewsService, Depends(get_news_service)],
    handler: Annotated[ResourceHandler, Depends(get_resource_handler)],
) -> NewsPage:
    return await handler.run_with_fallback("news.list_public", empty_news_page, service.list_public_news)


@router.get("/public/members", response_model=PublicMemberDirectory, responses=error_responses(500, 504))
async def list_public_members(
    service: Annotated[UserService, Depends(get_user_service)],
    handler: Annotated[ResourceHandler, Depends(get_resource_handler)],
) -> PublicMemberDirectory:
    return await handler.run("users.list_public_members", service.list_public_members)
