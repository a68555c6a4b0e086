"""Authentication and role-guard tests."""

from __future__ import annotations

import os
import sys
import types
import unittest
from datetime import UTC, datetime, timedelta
from unittest.mock import patch

from fastapi import Request
from fastapi.testclient import TestClient

from library_api.adapters.auth.base import AuthVerificationError
from library_api.adapters.auth.firebase_auth import FirebaseTokenVerifier
from library_api.adapters.auth.mock_auth import MockTokenVerifier
from library_api.core.config import Settings, get_settings
from library_api.main import create_app
from library_api.repositories.memory import InMemoryStore
from library_api.routes.dependencies import get_theme_service, get_token_verifier
from library_api.schemas.auth import Role
from library_api.schemas.theme import ThemeUpdated


class _CapturingThemeService:
    def __init__(self) -> None:
        self.calls: list[dict] = []

    def update_theme(self, theme: dict | None) -> ThemeUpdated:
        self.calls.append(dict(theme or {}))
        return ThemeUpdated(message="captured", theme=dict(theme or {}))


class _SettingsEnvCase(unittest.TestCase):
    _env_keys = (
        "LIBRARY_AUTH_PROVIDER",
        "LIBRARY_FIREBASE_PROJECT_ID",
        "LIBRARY_FIREBASE_AUDIENCE",
        "LIBRARY_REQUEST_TIMEOUT_SECONDS",
    )

    def setUp(self) -> None:
        self._old_env = {k: os.environ.get(k) for k in self._env_keys}
        os.environ["LIBRARY_AUTH_PROVIDER"] = "mock"
        os.environ["LIBRARY_FIREBASE_PROJECT_ID"] = "test-project"
        os.environ["LIBRARY_FIREBASE_AUDIENCE"] = "test-audience"
        os.environ.pop("LIBRARY_REQUEST_TIMEOUT_SECONDS", None)
        get_settings.cache_clear()

    def tearDown(self) -> None:
        for key, value in self._old_env.items():
            if value is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = value
        get_settings.cache_clear()


class AuthApiTests(_SettingsEnvCase):
    def test_missing_authorization_header_returns_401_and_no_store_side_effect(self) -> None:
        app = create_app()
        client = TestClient(app)

        response = client.post("/api/admin/theme", json={"theme": {"primary": "#000000"}})

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {"error": "Unauthorized"})
        self.assertEqual(app.state.store.write_count, 0)

    def test_invalid_bearer_token_returns_401(self) -> None:
        app = create_app()
        client = TestClient(app)

        response = client.patch(
            "/api/notifications/read-all",
            headers={"Authorization": "Bearer not-a-valid-token"},
        )

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {"error": "Unauthorized"})

    def test_unknown_role_claim_is_rejected_as_unauthorized(self) -> None:
        app = create_app()
        client = TestClient(app)

        response = client.get("/api/notifications", headers={"Authorization": "Bearer test:user-1:superuser"})

        self.assertEqual(response.status_code, 401)

    def test_unauthenticated_promote_returns_401_even_with_invalid_body(self) -> None:
        app = create_app()
        client = TestClient(app)

        response = client.post("/api/admin/users/x/promote", json={})

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {"error": "Unauthorized"})

    def test_unauthenticated_malformed_json_returns_401_on_every_guarded_body_route(self) -> None:
        app = create_app()
        client = TestClient(app)
        guarded_body_routes = (
            ("POST", "/api/admin/users/x/promote"),
            ("POST", "/api/admin/theme"),
            ("POST", "/api/admin/content"),
            ("PATCH", "/api/admin/content/books/x/visibility"),
            ("POST", "/api/admin/news"),
            ("PATCH", "/api/admin/news/x"),
            ("PATCH", "/api/admin/applications/x"),
            ("POST", "/api/admin/books"),
            ("PATCH", "/api/books/x"),
            ("POST", "/api/notifications"),
            ("PATCH", "/api/notifications/x"),
            ("POST", "/api/reservations"),
            ("PATCH", "/api/reservations/x"),
        )

        for method, path in guarded_body_routes:
            with self.subTest(method=method, path=path):
                response = client.request(
                    method,
                    path,
                    content=b"{not json",
                    headers={"Content-Type": "application/json"},
                )
                self.assertEqual(response.status_code, 401)
                self.assertEqual(response.json(), {"error": "Unauthorized"})

        self.assertEqual(app.state.store.write_count, 0)

    def test_forbidden_role_with_malformed_json_returns_403(self) -> None:
        client = TestClient(create_app())

        response = client.post(
            "/api/admin/users/x/promote",
            content=b"{not json",
            headers={"Authorization": "Bearer test:member-1:MEMBER", "Content-Type": "application/json"},
        )

        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json(), {"error": "Forbidden"})

    def test_authorized_malformed_json_returns_400(self) -> None:
        client = TestClient(create_app())

        response = client.post(
            "/api/admin/users/x/promote",
            content=b"{not json",
            headers={"Authorization": "Bearer test:admin-1:ADMIN", "Content-Type": "application/json"},
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": "Invalid request payload"})

    def test_role_outside_allow_list_returns_403_and_service_is_not_called(self) -> None:
        app = create_app()
        client = TestClient(app)
        capturing_service = _CapturingThemeService()
        app.dependency_overrides[get_theme_service] = lambda: capturing_service

        for role in ("LIBRARIAN", "MEMBER", "GUEST"):
            with self.subTest(role=role):
                response = client.post(
                    "/api/admin/theme",
                    headers={"Authorization": f"Bearer test:user-1:{role}"},
                    json={"theme": {"primary": "#000000"}},
                )
                self.assertEqual(response.status_code, 403)
                self.assertEqual(response.json(), {"error": "Forbidden"})

        self.assertEqual(capturing_service.calls, [])
        self.assertEqual(app.state.store.write_count, 0)

    def test_allowed_role_reaches_the_service(self) -> None:
        app = create_app()
        client = TestClient(app)
        capturing_service = _CapturingThemeService()
        app.dependency_overrides[get_theme_service] = lambda: capturing_service

        response = client.post(
            "/api/admin/theme",
            headers={"Authorization": "Bearer test:admin-1:ADMIN"},
            json={"theme": {"primary": "#111111"}},
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(capturing_service.calls, [{"primary": "#111111"}])

    def test_auth_principal_is_attached_to_request_state(self) -> None:
        app = create_app()
        client = TestClient(app)
        capturing_service = _CapturingThemeService()
        observed: dict[str, object] = {}

        def _override_theme_service(request: Request) -> _CapturingThemeService:
            observed["user_id"] = request.state.auth_principal.user_id
            observed["role"] = request.state.auth_principal.role
            return capturing_service

        app.dependency_overrides[get_theme_service] = _override_theme_service

        response = client.post(
            "/api/admin/theme",
            headers={"Authorization": "Bearer test:admin-state:ADMIN"},
            json={"theme": {"primary": "#222222"}},
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(observed, {"user_id": "admin-state", "role": Role.ADMIN})

    def test_stored_role_overrides_claimed_role(self) -> None:
        store = InMemoryStore()
        store.create_user(user_id="demoted-1", email="demoted@example.org", role=Role.MEMBER)
        app = create_app(store)
        client = TestClient(app)

        response = client.get("/api/admin/news", headers={"Authorization": "Bearer test:demoted-1:ADMIN"})

        self.assertEqual(response.status_code, 403)

    def test_temporary_admin_grant_elevates_until_expiry(self) -> None:
        store = InMemoryStore()
        user = store.create_user(user_id="member-1", email="member@example.org", role=Role.MEMBER)
        app = create_app(store)
        client = TestClient(app)
        headers = {"Authorization": "Bearer test:member-1:MEMBER"}

        user.temporary_admin_until = datetime.now(UTC) + timedelta(hours=1)
        self.assertEqual(client.get("/api/admin/news", headers=headers).status_code, 200)

        user.temporary_admin_until = datetime.now(UTC) - timedelta(seconds=1)
        self.assertEqual(client.get("/api/admin/news", headers=headers).status_code, 403)

    def test_inactive_user_is_rejected(self) -> None:
        store = InMemoryStore()
        store.create_user(user_id="gone-1", email="gone@example.org", role=Role.ADMIN, is_active=False)
        app = create_app(store)
        client = TestClient(app)

        response = client.get("/api/admin/news", headers={"Authorization": "Bearer test:gone-1:ADMIN"})

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {"error": "Unauthorized"})


class AuthAdapterUnitTests(unittest.TestCase):
    def test_mock_token_verifier_normalizes_principal(self) -> None:
        verifier = MockTokenVerifier()

        principal = verifier.verify_token("test:user-999:librarian")

        self.assertEqual(principal.user_id, "user-999")
        self.assertEqual(principal.role, Role.LIBRARIAN)

    def test_mock_token_verifier_defaults_to_guest(self) -> None:
        principal = MockTokenVerifier().verify_token("test:user-1")

        self.assertEqual(principal.role, Role.GUEST)

    def test_mock_token_verifier_rejects_invalid_tokens(self) -> None:
        verifier = MockTokenVerifier()

        for token in ("invalid", "test:", "test:user-1:", "prod:user-1:ADMIN", "test:user-1:ROOT"):
            with self.subTest(token=token):
                with self.assertRaises(AuthVerificationError):
                    verifier.verify_token(token)

    def test_dependency_selects_firebase_verifier(self) -> None:
        settings = Settings(
            auth_provider="firebase",
            firebase_project_id="project-a",
            firebase_audience="aud-a",
        )

        verifier = get_token_verifier(settings)

        self.assertIsInstance(verifier, FirebaseTokenVerifier)

    def test_dependency_selects_mock_verifier(self) -> None:
        verifier = get_token_verifier(Settings(auth_provider="mock"))

        self.assertIsInstance(verifier, MockTokenVerifier)


class FirebaseVerifierUnitTests(unittest.TestCase):
    @staticmethod
    def _fake_firebase_modules(decoded_token: dict[str, str]) -> dict[str, types.ModuleType]:
        fake_admin = types.ModuleType("firebase_admin")
        fake_auth = types.ModuleType("firebase_admin.auth")

        fake_admin._apps = []

        def initialize_app() -> object:
            app_handle = object()
            fake_admin._apps.append(app_handle)
            return app_handle

        def verify_id_token(token: str, check_revoked: bool = True) -> dict[str, str]:
            if token != "valid-jwt":
                raise ValueError("invalid token")
            if not check_revoked:
                raise ValueError("must validate revoked tokens")
            return decoded_token

        fake_admin.initialize_app = initialize_app
        fake_admin.auth = fake_auth
        fake_auth.verify_id_token = verify_id_token

        return {
            "firebase_admin": fake_admin,
            "firebase_admin.auth": fake_auth,
        }

    def test_firebase_verifier_reads_role_claim(self) -> None:
        fake_modules = self._fake_firebase_modules(
            {
                "uid": "firebase-user-1",
                "aud": "aud-a",
                "iss": "https://securetoken.google.com/project-a",
                "role": "librarian",
            }
        )

        with patch.dict(sys.modules, fake_modules):
            verifier = FirebaseTokenVerifier(project_id="project-a", audience="aud-a")
            principal = verifier.verify_token("valid-jwt")

        self.assertEqual(principal.user_id, "firebase-user-1")
        self.assertEqual(principal.role, Role.LIBRARIAN)

    def test_firebase_verifier_without_role_claim_is_guest(self) -> None:
        fake_modules = self._fake_firebase_modules(
            {
                "uid": "firebase-user-2",
                "aud": "aud-a",
                "iss": "https://securetoken.google.com/project-a",
            }
        )

        with patch.dict(sys.modules, fake_modules):
            principal = FirebaseTokenVerifier(project_id="project-a", audience="aud-a").verify_token("valid-jwt")

        self.assertEqual(principal.role, Role.GUEST)

    def test_firebase_verifier_rejects_invalid_audience(self) -> None:
        fake_modules = self._fake_firebase_modules(
            {
                "uid": "firebase-user-1",
                "aud": "unexpected-aud",
                "iss": "https://securetoken.google.com/project-a",
            }
        )

        with patch.dict(sys.modules, fake_modules):
            verifier = FirebaseTokenVerifier(project_id="project-a", audience="aud-a")
            with self.assertRaises(AuthVerificationError):
                verifier.verify_token("valid-jwt")


if __name__ == "__main__":
    unittest.main()
