"""Notification ownership scoping tests."""

from __future__ import annotations

import os
import unittest

from fastapi.testclient import TestClient

from library_api.core.config import get_settings
from library_api.main import create_app
from library_api.repositories.memory import InMemoryStore


class _SettingsEnvCase(unittest.TestCase):
    _env_keys = ("LIBRARY_AUTH_PROVIDER",)

    def setUp(self) -> None:
        self._old_env = {k: os.environ.get(k) for k in self._env_keys}
        os.environ["LIBRARY_AUTH_PROVIDER"] = "mock"
        get_settings.cache_clear()

    def tearDown(self) -> None:
        for key, value in self._old_env.items():
            if value is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = value
        get_settings.cache_clear()


class NotificationScopingTests(_SettingsEnvCase):
    owner_headers = {"Authorization": "Bearer test:user-a:MEMBER"}
    other_headers = {"Authorization": "Bearer test:user-b:MEMBER"}

    def setUp(self) -> None:
        super().setUp()
        self.store = InMemoryStore()
        self.client = TestClient(create_app(self.store))
        self.own_first = self.store.create_notification(user_id="user-a", title="Due", message="Book due soon")
        self.own_second = self.store.create_notification(user_id="user-a", title="Ready", message="Pickup ready")
        self.foreign = self.store.create_notification(user_id="user-b", title="Other", message="Not yours")

    def test_read_all_only_touches_callers_notifications(self) -> None:
        response = self.client.patch("/api/notifications/read-all", headers=self.owner_headers)

        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.json(),
            {"success": True, "message": "All notifications marked as read", "updated": 2},
        )
        self.assertTrue(self.store.notifications[self.own_first.id].read)
        self.assertTrue(self.store.notifications[self.own_second.id].read)
        self.assertFalse(self.store.notifications[self.foreign.id].read)

    def test_read_all_without_credentials_changes_nothing(self) -> None:
        response = self.client.patch("/api/notifications/read-all")

        self.assertEqual(response.status_code, 401)
        self.assertFalse(any(record.read for record in self.store.notifications.values()))

    def test_list_returns_only_own_notifications(self) -> None:
        response = self.client.get("/api/notifications", headers=self.owner_headers)

        self.assertEqual(response.status_code, 200)
        ids = {item["id"] for item in response.json()["notifications"]}
        self.assertEqual(ids, {self.own_first.id, self.own_second.id})

    def test_update_and_delete_of_foreign_notification_return_404(self) -> None:
        update = self.client.patch(
            f"/api/notifications/{self.foreign.id}",
            headers=self.owner_headers,
            json={"read": True},
        )
        delete = self.client.delete(f"/api/notifications/{self.foreign.id}", headers=self.owner_headers)

        self.assertEqual(update.status_code, 404)
        self.assertEqual(delete.status_code, 404)
        self.assertFalse(self.store.notifications[self.foreign.id].read)
        self.assertIn(self.foreign.id, self.store.notifications)

    def test_owner_marks_single_notification_read_and_deletes_it(self) -> None:
        update = self.client.patch(f"/api/notifications/{self.own_first.id}", headers=self.owner_headers, json={})

        self.assertEqual(update.status_code, 200)
        self.assertTrue(update.json()["notification"]["read"])

        delete = self.client.delete(f"/api/notifications/{self.own_first.id}", headers=self.owner_headers)
        self.assertEqual(delete.status_code, 200)
        self.assertEqual(delete.json(), {"success": True, "message": "Notification deleted successfully"})
        self.assertNotIn(self.own_first.id, self.store.notifications)

    def test_create_notification_for_self(self) -> None:
        response = self.client.post(
            "/api/notifications",
            headers=self.other_headers,
            json={"title": "Reminder", "message": "Return books", "actionUrl": "/account"},
        )

        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertTrue(body["success"])
        self.assertEqual(body["notification"]["actionUrl"], "/account")
        self.assertFalse(body["notification"]["read"])
        created = self.store.notifications[body["notification"]["id"]]
        self.assertEqual(created.user_id, "user-b")

    def test_member_cannot_target_another_user(self) -> None:
        writes_before = self.store.write_count

        response = self.client.post(
            "/api/notifications",
            headers=self.other_headers,
            json={"title": "Spoof", "message": "Hi", "targetUserId": "user-a"},
        )

        self.assertEqual(response.status_code, 403)
        self.assertEqual(self.store.write_count, writes_before)

    def test_librarian_can_target_another_user(self) -> None:
        response = self.client.post(
            "/api/notifications",
            headers={"Authorization": "Bearer test:librarian-1:LIBRARIAN"},
            json={"title": "Hold ready", "message": "Pick up today", "targetUserId": "user-a"},
        )

        self.assertEqual(response.status_code, 201)
        created = self.store.notifications[response.json()["notification"]["id"]]
        self.assertEqual(created.user_id, "user-a")

    def test_create_requires_title_and_message(self) -> None:
        response = self.client.post("/api/notifications", headers=self.owner_headers, json={"title": "No body"})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": "Invalid request payload"})


if __name__ == "__main__":
    unittest.main()
