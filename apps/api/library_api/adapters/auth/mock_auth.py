"""Mock auth verifier for local development and tests."""

from library_api.adapters.auth.base import AuthVerificationError, TokenVerifier, parse_role
from library_api.schemas.auth import AuthPrincipal


class MockTokenVerifier(TokenVerifier):
    """Accepts deterministic test tokens only.

    Expected token format:
    - ``test:<user_id>`` (role GUEST)
    - ``test:<user_id>:<role>`` where role is ADMIN, LIBRARIAN, MEMBER or GUEST
    """

    def verify_token(self, token: str) -> AuthPrincipal:
        parts = token.split(":")
        if len(parts) not in (2, 3) or parts[0] != "test":
            raise AuthVerificationError("Invalid bearer token")

        user_id = parts[1].strip()
        if not user_id:
            raise AuthVerificationError("Bearer token missing user identity")
        if len(parts) == 3 and not parts[2].strip():
            raise AuthVerificationError("Bearer token missing role")

        role = parse_role(parts[2] if len(parts) == 3 else None)
        return AuthPrincipal(user_id=user_id, role=role)


__all__ = ["MockTokenVerifier"]
