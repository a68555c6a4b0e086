"""Authentication provider interfaces."""

from abc import ABC, abstractmethod

from library_api.schemas.auth import AuthPrincipal, Role


class AuthVerificationError(Exception):
    """Raised when a token cannot be verified or normalized."""


class TokenVerifier(ABC):
    """Provider-neutral token verification interface."""

    @abstractmethod
    def verify_token(self, token: str) -> AuthPrincipal:
        """Verify token and return normalized principal."""


def parse_role(value: object, *, default: Role = Role.GUEST) -> Role:
    """Normalize a provider role claim; unknown roles are rejected."""
    text = str(value or "").strip().upper()
    if not text:
        return default
    try:
        return Role(text)
    except ValueError as exc:
        raise AuthVerificationError("Bearer token carries an unknown role") from exc


__all__ = ["AuthVerificationError", "TokenVerifier", "parse_role"]
