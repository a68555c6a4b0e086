"""FastAPI application entrypoint."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from library_api.core.config import get_settings
from library_api.core.logging_config import configure_logging, safe_log_identifier
from library_api.errors import ApiError
from library_api.repositories.memory import InMemoryStore
from library_api.routes import (
    admin_router,
    books_router,
    member_router,
    membership_router,
    notifications_router,
    public_router,
    reservations_router,
)
from library_api.schemas.error import ErrorResponse

logger = logging.getLogger(__name__)

API_PREFIX = "/api"


def create_app(store: InMemoryStore | None = None) -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title="Library Portal API", version="1.0.0")
    app.state.store = store if store is not None else InMemoryStore()

    @app.exception_handler(ApiError)
    async def handle_api_error(_, exc: ApiError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.payload.model_dump(mode="json", exclude_none=True),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        # Validation details stay server-side; callers get a uniform 400.
        route = request.scope.get("route")
        logger.info(
            "request.invalid correlation_id=%s method=%s path=%s error_count=%s",
            safe_log_identifier(getattr(request.state, "correlation_id", None), prefix="cid"),
            request.method,
            getattr(route, "path", request.url.path),
            len(exc.errors()),
        )
        payload = ErrorResponse(error="Invalid request payload")
        return JSONResponse(status_code=400, content=payload.model_dump(exclude_none=True))

    app.include_router(admin_router, prefix=API_PREFIX)
    app.include_router(books_router, prefix=API_PREFIX)
    app.include_router(member_router, prefix=API_PREFIX)
    app.include_router(membership_router, prefix=API_PREFIX)
    app.include_router(notifications_router, prefix=API_PREFIX)
    app.include_router(public_router, prefix=API_PREFIX)
    app.include_router(reservations_router, prefix=API_PREFIX)

    return app


app = create_app()
