"""Dependency wiring for routes: identity, role guards, services."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
import logging
from typing import Annotated, TypeVar
from uuid import uuid4

from fastapi import Depends, Request, Security
from fastapi.exceptions import RequestValidationError
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel, ValidationError

from library_api.adapters.auth import (
    AuthVerificationError,
    FirebaseTokenVerifier,
    MockTokenVerifier,
    TokenVerifier,
)
from library_api.core.config import Settings, get_settings
from library_api.core.logging_config import safe_log_identifier
from library_api.errors import forbidden, unauthorized
from library_api.repositories.memory import InMemoryStore
from library_api.schemas.auth import AuthPrincipal, Role
from library_api.services.books import BookService
from library_api.services.content import ContentService
from library_api.services.handler import ResourceHandler
from library_api.services.membership import MembershipService
from library_api.services.news import NewsService
from library_api.services.notifications import NotificationService
from library_api.services.reservations import ReservationService
from library_api.services.theme import ThemeService
from library_api.services.users import UserService

bearer_scheme = HTTPBearer(auto_error=False, scheme_name="bearerAuth")
logger = logging.getLogger(__name__)

ADMIN_ONLY: frozenset[Role] = frozenset({Role.ADMIN})
STAFF: frozenset[Role] = frozenset({Role.ADMIN, Role.LIBRARIAN})
MEMBERS: frozenset[Role] = frozenset({Role.MEMBER})
ANY_AUTHENTICATED: frozenset[Role] = frozenset(Role)

ModelT = TypeVar("ModelT", bound=BaseModel)


def _request_correlation_id(request: Request) -> str:
    existing = getattr(request.state, "correlation_id", None)
    if isinstance(existing, str) and existing:
        return existing

    correlation_id = request.headers.get("X-Correlation-Id")
    if correlation_id:
        request.state.correlation_id = correlation_id
        return correlation_id

    generated = f"req-{uuid4()}"
    request.state.correlation_id = generated
    return generated


def get_request_correlation_id(request: Request) -> str:
    return _request_correlation_id(request)


def get_token_verifier(settings: Annotated[Settings, Depends(get_settings)]) -> TokenVerifier:
    """Resolve provider adapter from configuration."""
    if settings.auth_provider == "firebase":
        return FirebaseTokenVerifier(
            project_id=settings.firebase_project_id,
            audience=settings.firebase_audience,
        )
    return MockTokenVerifier()


def get_store(request: Request) -> InMemoryStore:
    return request.app.state.store


def get_resource_handler(settings: Annotated[Settings, Depends(get_settings)]) -> ResourceHandler:
    return ResourceHandler(timeout_seconds=settings.request_timeout_seconds)


def get_user_service(
    store: Annotated[InMemoryStore, Depends(get_store)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> UserService:
    return UserService(store, temporary_admin_max_hours=settings.temporary_admin_max_hours)


async def get_authenticated_principal(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Security(bearer_scheme)],
    verifier: Annotated[TokenVerifier, Depends(get_token_verifier)],
    user_service: Annotated[UserService, Depends(get_user_service)],
    handler: Annotated[ResourceHandler, Depends(get_resource_handler)],
) -> AuthPrincipal:
    """Validate bearer token, apply the stored role and attach the principal to request context."""
    correlation_id = _request_correlation_id(request)
    safe_correlation_id = safe_log_identifier(correlation_id, prefix="cid")
    if credentials is None or credentials.scheme.lower() != "bearer" or not credentials.credentials:
        logger.warning(
            "auth.rejected correlation_id=%s method=%s path=%s reason=invalid_or_missing_bearer",
            safe_correlation_id,
            request.method,
            request.url.path,
        )
        raise unauthorized()

    try:
        claimed = verifier.verify_token(credentials.credentials)
    except AuthVerificationError as exc:
        logger.warning(
            "auth.rejected correlation_id=%s method=%s path=%s reason=token_verification_failed",
            safe_correlation_id,
            request.method,
            request.url.path,
        )
        raise unauthorized() from exc

    principal = await handler.run("users.resolve_principal", user_service.resolve_principal, claimed)

    logger.info(
        "auth.accepted correlation_id=%s method=%s path=%s principal_id=%s role=%s",
        safe_correlation_id,
        request.method,
        request.url.path,
        safe_log_identifier(principal.user_id, prefix="pid"),
        principal.role.value,
    )
    request.state.auth_principal = principal
    return principal


def require_roles(allowed: frozenset[Role] | set[Role]) -> Callable[..., Awaitable[AuthPrincipal]]:
    """Build a guard dependency that admits only principals whose role is in ``allowed``."""
    allowed_roles = frozenset(allowed)

    async def guard(
        request: Request,
        principal: Annotated[AuthPrincipal, Depends(get_authenticated_principal)],
    ) -> AuthPrincipal:
        if principal.role not in allowed_roles:
            logger.warning(
                "auth.forbidden correlation_id=%s method=%s path=%s principal_id=%s role=%s",
                safe_log_identifier(_request_correlation_id(request), prefix="cid"),
                request.method,
                request.url.path,
                safe_log_identifier(principal.user_id, prefix="pid"),
                principal.role.value,
            )
            raise forbidden()
        return principal

    return guard


require_admin = require_roles(ADMIN_ONLY)
require_staff = require_roles(STAFF)
require_member = require_roles(MEMBERS)
require_authenticated = require_roles(ANY_AUTHENTICATED)


def json_body(model: type[ModelT]) -> Callable[[Request], Awaitable[ModelT]]:
    """Build a dependency that decodes and validates the JSON body as ``model``.

    Guarded routes declare it after their role guard: the body is only read
    once the caller is authenticated and authorized, so a malformed payload
    from an anonymous caller still gets 401.
    """

    async def parse(request: Request) -> ModelT:
        raw = await request.body()
        try:
            return model.model_validate_json(raw)
        except ValidationError as exc:
            raise RequestValidationError(exc.errors(include_url=False)) from exc

    return parse


def get_book_service(store: Annotated[InMemoryStore, Depends(get_store)]) -> BookService:
    return BookService(store)


def get_content_service(store: Annotated[InMemoryStore, Depends(get_store)]) -> ContentService:
    return ContentService(store)


def get_membership_service(store: Annotated[InMemoryStore, Depends(get_store)]) -> MembershipService:
    return MembershipService(store)


def get_news_service(store: Annotated[InMemoryStore, Depends(get_store)]) -> NewsService:
    return NewsService(store)


def get_notification_service(store: Annotated[InMemoryStore, Depends(get_store)]) -> NotificationService:
    return NotificationService(store)


def get_reservation_service(
    store: Annotated[InMemoryStore, Depends(get_store)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> ReservationService:
    return ReservationService(store, loan_days=settings.reservation_loan_days)


def get_theme_service(store: Annotated[InMemoryStore, Depends(get_store)]) -> ThemeService:
    return ThemeService(store)
