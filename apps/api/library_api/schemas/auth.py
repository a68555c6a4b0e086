"""Authentication schemas."""

from enum import Enum

from pydantic import BaseModel, Field


class Role(str, Enum):
    ADMIN = "ADMIN"
    LIBRARIAN = "LIBRARIAN"
    MEMBER = "MEMBER"
    GUEST = "GUEST"


class AuthPrincipal(BaseModel):
    """Normalized authenticated principal used by business services."""

    user_id: str = Field(min_length=1)
    role: Role = Role.GUEST

    @property
    def is_staff(self) -> bool:
        return self.role in (Role.ADMIN, Role.LIBRARIAN)
