"""User administration, role resolution and public directory service layer."""

from datetime import UTC, datetime, timedelta
import logging

from library_api.core.logging_config import safe_log_identifier
from library_api.errors import bad_request, not_found, unauthorized
from library_api.repositories.memory import InMemoryStore, UserRecord
from library_api.schemas.auth import AuthPrincipal
from library_api.schemas.base import StatusMessage
from library_api.schemas.user import (
    AdminUser,
    PublicMember,
    PublicMemberDirectory,
    PublicMemberProfile,
    UserList,
)

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, store: InMemoryStore, *, temporary_admin_max_hours: int = 168) -> None:
        self._store = store
        self._temporary_admin_max_hours = temporary_admin_max_hours

    def resolve_principal(self, principal: AuthPrincipal) -> AuthPrincipal:
        """Apply the stored role (including temporary admin grants) to a verified principal."""
        record = self._store.get_user(principal.user_id)
        if record is None:
            return principal
        if not record.is_active:
            raise unauthorized()

        role = record.effective_role(datetime.now(UTC))
        if role is principal.role:
            return principal
        return AuthPrincipal(user_id=principal.user_id, role=role)

    def list_users(self) -> UserList:
        now = datetime.now(UTC)
        return UserList(users=[self._to_admin_user(record, now) for record in self._store.list_users()])

    def promote_temporary_admin(self, *, actor: AuthPrincipal, user_id: str, duration_hours: int) -> StatusMessage:
        if duration_hours > self._temporary_admin_max_hours:
            raise bad_request(
                "Promotion duration exceeds the allowed maximum",
                details={"max_hours": self._temporary_admin_max_hours},
            )

        until = datetime.now(UTC) + timedelta(hours=duration_hours)
        if self._store.set_temporary_admin(user_id, until) is None:
            raise not_found("User not found")
        logger.info(
            "users.promoted actor_id=%s user_id=%s duration_hours=%s",
            safe_log_identifier(actor.user_id, prefix="pid"),
            safe_log_identifier(user_id, prefix="uid"),
            duration_hours,
        )
        return StatusMessage(message=f"User {user_id} promoted to temporary admin for {duration_hours} hours")

    def revoke_temporary_admin(self, *, actor: AuthPrincipal, user_id: str) -> StatusMessage:
        if self._store.set_temporary_admin(user_id, None) is None:
            raise not_found("User not found")
        logger.info(
            "users.revoked actor_id=%s user_id=%s",
            safe_log_identifier(actor.user_id, prefix="pid"),
            safe_log_identifier(user_id, prefix="uid"),
        )
        return StatusMessage(message=f"Temporary admin access revoked for user {user_id}")

    def list_public_members(self) -> PublicMemberDirectory:
        members = [
            PublicMember(
                id=record.id,
                name=record.name,
                created_at=record.created_at,
                profile=PublicMemberProfile(
                    first_name=record.profile.first_name,
                    last_name=record.profile.last_name,
                    profile_picture=record.profile.profile_picture,
                    city=record.profile.city,
                    state=record.profile.state,
                    preferred_genres=list(record.profile.preferred_genres),
                ),
            )
            for record in self._store.list_public_members()
            if record.profile is not None and record.profile.first_name and record.profile.last_name
        ]
        return PublicMemberDirectory(members=members, total=len(members))

    @staticmethod
    def _to_admin_user(record: UserRecord, now: datetime) -> AdminUser:
        return AdminUser(
            id=record.id,
            name=record.name,
            email=record.email,
            role=record.role,
            effective_role=record.effective_role(now),
            is_active=record.is_active,
            temporary_admin_until=record.temporary_admin_until,
            created_at=record.created_at,
        )
