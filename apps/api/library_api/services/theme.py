"""Global theme service layer."""

from typing import Any

from library_api.errors import bad_request
from library_api.repositories.memory import InMemoryStore
from library_api.schemas.theme import ThemeResponse, ThemeUpdated


class ThemeService:
    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    def get_theme(self) -> ThemeResponse:
        return ThemeResponse(theme=self._store.get_theme())

    def update_theme(self, theme: dict[str, Any] | None) -> ThemeUpdated:
        if not theme:
            raise bad_request("Theme data is required")
        return ThemeUpdated(message="Global theme updated successfully", theme=self._store.put_theme(theme))
