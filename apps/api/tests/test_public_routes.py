"""Public gallery, news feed and member directory tests."""

from __future__ import annotations

import os
import unittest
from datetime import UTC, datetime, timedelta

from fastapi.testclient import TestClient

from library_api.core.config import get_settings
from library_api.main import create_app
from library_api.repositories.memory import InMemoryStore, ProfileRecord
from library_api.schemas.auth import Role
from library_api.schemas.base import Visibility
from library_api.schemas.content import GALLERY_PLACEHOLDER_IMAGE, ContentType
from library_api.schemas.news import NewsType


class _SettingsEnvCase(unittest.TestCase):
    _env_keys = ("LIBRARY_AUTH_PROVIDER",)

    def setUp(self) -> None:
        self._old_env = {k: os.environ.get(k) for k in self._env_keys}
        os.environ["LIBRARY_AUTH_PROVIDER"] = "mock"
        get_settings.cache_clear()
        self.store = InMemoryStore()
        self.client = TestClient(create_app(self.store))

    def tearDown(self) -> None:
        for key, value in self._old_env.items():
            if value is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = value
        get_settings.cache_clear()


class GalleryTests(_SettingsEnvCase):
    def test_gallery_lists_published_gallery_items_with_defaults(self) -> None:
        published = self.store.create_content(type=ContentType.GALLERY, title="Mural", is_published=True)
        self.store.create_content(type=ContentType.GALLERY, title="Draft", is_published=False)
        self.store.create_content(type=ContentType.NEWS, title="Not gallery", is_published=True)

        response = self.client.get("/api/gallery")

        self.assertEqual(response.status_code, 200)
        self.assertIn("no-store", response.headers["cache-control"])
        self.assertEqual(response.headers["pragma"], "no-cache")
        (item,) = response.json()["items"]
        self.assertEqual(item["id"], published.id)
        self.assertEqual(item["imageUrl"], GALLERY_PLACEHOLDER_IMAGE)
        self.assertEqual(item["category"], "General")
        self.assertEqual(item["description"], "")

    def test_gallery_store_failure_returns_empty_list(self) -> None:
        self.store.create_content(type=ContentType.GALLERY, title="Mural", is_published=True)
        self.store.failure_message = "database unavailable"

        response = self.client.get("/api/gallery")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"items": []})
        self.assertIn("no-store", response.headers["cache-control"])


class NewsFeedTests(_SettingsEnvCase):
    def test_news_lists_published_public_items_newest_first(self) -> None:
        now = datetime.now(UTC)
        older = self.store.create_news_event(
            title="Older",
            content="a",
            type=NewsType.NEWS,
            is_published=True,
            event_date=now - timedelta(days=2),
        )
        newer = self.store.create_news_event(
            title="Newer",
            content="b",
            type=NewsType.EVENT,
            is_published=True,
            event_date=now - timedelta(days=1),
        )
        self.store.create_news_event(title="Draft", content="c", type=NewsType.NEWS, is_published=False)
        self.store.create_news_event(
            title="Members",
            content="d",
            type=NewsType.NEWS,
            is_published=True,
            visibility=Visibility.MEMBERS_ONLY,
        )

        response = self.client.get("/api/news")

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual([item["id"] for item in body["items"]], [newer.id, older.id])
        self.assertEqual(body["total"], 2)
        self.assertEqual(body["page"], 1)
        self.assertEqual(body["pageCount"], 1)

    def test_news_store_failure_returns_empty_page(self) -> None:
        self.store.failure_message = "database unavailable"

        response = self.client.get("/api/news")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"items": [], "page": 1, "total": 0, "pageCount": 1})


class MemberDirectoryTests(_SettingsEnvCase):
    def test_directory_requires_full_name_and_hides_email(self) -> None:
        listed = self.store.create_user(
            email="ada@example.org",
            role=Role.MEMBER,
            name="Ada",
            profile=ProfileRecord(first_name="Ada", last_name="Lovelace", city="London"),
        )
        self.store.create_user(
            email="guest@example.org",
            role=Role.GUEST,
            profile=ProfileRecord(first_name="Only", last_name=""),
        )
        self.store.create_user(email="noprofile@example.org", role=Role.MEMBER)
        self.store.create_user(
            email="staff@example.org",
            role=Role.LIBRARIAN,
            profile=ProfileRecord(first_name="Staff", last_name="Person"),
        )
        self.store.create_user(
            email="inactive@example.org",
            role=Role.MEMBER,
            is_active=False,
            profile=ProfileRecord(first_name="In", last_name="Active"),
        )

        response = self.client.get("/api/public/members")

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["total"], 1)
        (member,) = body["members"]
        self.assertEqual(member["id"], listed.id)
        self.assertEqual(member["profile"]["firstName"], "Ada")
        self.assertEqual(member["profile"]["lastName"], "Lovelace")
        self.assertNotIn("email", member)
        for entry in body["members"]:
            self.assertTrue(entry["profile"]["firstName"])
            self.assertTrue(entry["profile"]["lastName"])

    def test_directory_store_failure_returns_generic_500(self) -> None:
        self.store.failure_message = "password=hunter2 host=db.internal"

        response = self.client.get("/api/public/members")

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"error": "Internal server error"})


if __name__ == "__main__":
    unittest.main()
