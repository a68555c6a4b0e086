"""Auth verifier adapters."""

from .base import AuthVerificationError, TokenVerifier, parse_role
from .firebase_auth import FirebaseTokenVerifier
from .mock_auth import MockTokenVerifier

__all__ = [
    "AuthVerificationError",
    "TokenVerifier",
    "FirebaseTokenVerifier",
    "MockTokenVerifier",
    "parse_role",
]
