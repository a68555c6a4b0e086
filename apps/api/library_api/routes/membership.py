"""Public membership application intake."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from library_api.routes.dependencies import get_membership_service, get_resource_handler
from library_api.schemas.error import error_responses
from library_api.schemas.membership import ApplicationSubmitted, MembershipApplicationRequest
from library_api.services.handler import ResourceHandler
from library_api.services.membership import MembershipService

router = APIRouter(prefix="/membership", tags=["Membership"])


@router.post(
    "/apply",
    response_model=ApplicationSubmitted,
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(400, 500, 504),
)
async def submit_application(
    payload: MembershipApplicationRequest,
    service: Annotated[MembershipService, Depends(get_membership_service)],
    handler: Annotated[ResourceHandler, Depends(get_resource_handler)],
) -> ApplicationSubmitted:
    return await handler.run("membership.submit", service.submit_application, payload)
