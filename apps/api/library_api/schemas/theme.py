"""Theme schemas."""

from typing import Any

from library_api.schemas.base import ApiModel


class ThemeResponse(ApiModel):
    theme: dict[str, Any]


class UpdateThemeRequest(ApiModel):
    theme: dict[str, Any] | None = None


class ThemeUpdated(ApiModel):
    message: str
    theme: dict[str, Any]
