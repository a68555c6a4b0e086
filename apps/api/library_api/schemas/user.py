"""User administration and public directory schemas."""

from datetime import datetime

from pydantic import Field

from library_api.schemas.auth import Role
from library_api.schemas.base import ApiModel


class PromoteUserRequest(ApiModel):
    duration: int = Field(ge=1, description="Temporary admin grant length in hours.")


class AdminUser(ApiModel):
    id: str
    name: str | None = None
    email: str
    role: Role
    effective_role: Role
    is_active: bool
    temporary_admin_until: datetime | None = None
    created_at: datetime


class UserList(ApiModel):
    users: list[AdminUser]


class PublicMemberProfile(ApiModel):
    first_name: str
    last_name: str
    profile_picture: str | None = None
    city: str | None = None
    state: str | None = None
    preferred_genres: list[str] = Field(default_factory=list)


class PublicMember(ApiModel):
    id: str
    name: str | None = None
    created_at: datetime
    profile: PublicMemberProfile


class PublicMemberDirectory(ApiModel):
    members: list[PublicMember]
    total: int
