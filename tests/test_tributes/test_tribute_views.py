"""Tests for the tribute API views."""

import uuid
from datetime import date

from django.contrib.auth.models import User
from django.test import TestCase
from rest_framework.test import APIClient

from src.core import app_settings
from src.memorials.models import Memorial
from src.tributes.models import Tribute


def create_memorial(slug="maria", published=True):
    return Memorial.objects.create(
        slug=slug, name="Maria", is_published=published,
        birth_date=date(1940, 1, 1), death_date=date(2020, 1, 1),
    )


def create_tribute(memorial, status=Tribute.Status.APPROVED, **kwargs):
    return Tribute.objects.create(
        memorial=memorial, author_name=kwargs.get("author_name", "Ana"),
        message=kwargs.get("message", "Rest in peace"), status=status,
    )


class TestMemorialTributesView(TestCase):

    def setUp(self):
        self.client = APIClient()
        self.memorial = create_memorial()

    def test_list_shows_only_approved(self):
        visible = create_tribute(self.memorial)
        create_tribute(self.memorial, status=Tribute.Status.PENDING)
        create_tribute(self.memorial, status=Tribute.Status.REJECTED)

        response = self.client.get("/api/memorials/maria/tributes/")
        assert response.status_code == 200
        assert [t["id"] for t in response.json()] == [str(visible.id)]
        assert "status" not in response.json()[0]

    def test_list_unpublished_memorial_returns_404(self):
        create_memorial(slug="hidden", published=False)
        assert self.client.get("/api/memorials/hidden/tributes/").status_code == 404

    def test_submit_without_moderation_is_visible(self):
        response = self.client.post(
            "/api/memorials/maria/tributes/",
            {"author_name": "Ana", "message": "We miss you"},
            format="json",
        )
        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "approved"
        assert data["visible"] is True

    def test_submit_with_moderation_is_not_visible(self):
        app_settings.set_setting("moderation_enabled", True)
        response = self.client.post(
            "/api/memorials/maria/tributes/",
            {"author_name": "Ana", "message": "We miss you"},
            format="json",
        )
        assert response.status_code == 201
        assert response.json()["visible"] is False
        assert self.client.get("/api/memorials/maria/tributes/").json() == []

    def test_submit_too_long_returns_400(self):
        response = self.client.post(
            "/api/memorials/maria/tributes/",
            {"author_name": "Ana", "message": "x" * 501},
            format="json",
        )
        assert response.status_code == 400
        assert response.json()["fields"] == ["message"]
        assert not Tribute.objects.exists()

    def test_submit_non_object_body_returns_400(self):
        response = self.client.post("/api/memorials/maria/tributes/", ["x"], format="json")
        assert response.status_code == 400
        assert response.json()["message"] == "Expected a JSON object"
        assert not Tribute.objects.exists()


class TestTributeLikeView(TestCase):

    def test_like_increments(self):
        tribute = create_tribute(create_memorial())
        client = APIClient()
        for expected in (1, 2, 3):
            response = client.post(f"/api/tributes/{tribute.id}/like/")
            assert response.status_code == 200
            assert response.json() == {"likes_count": expected}

    def test_like_unknown_returns_404(self):
        response = APIClient().post(f"/api/tributes/{uuid.uuid4()}/like/")
        assert response.status_code == 404


class TestAdminTributeViews(TestCase):

    def setUp(self):
        self.admin = User.objects.create_user(username="admin", password="pw", is_staff=True)
        self.client = APIClient()
        self.client.force_authenticate(user=self.admin)
        self.memorial = create_memorial()
        self.tributes = [
            create_tribute(self.memorial, status=Tribute.Status.PENDING) for _ in range(3)
        ]

    def test_anonymous_rejected(self):
        assert APIClient().get("/api/admin/tributes/").status_code == 401

    def test_queue(self):
        response = self.client.get("/api/admin/tributes/?status=pending")
        assert response.status_code == 200
        data = response.json()
        assert data["pending_count"] == 3
        assert data["tributes"][0]["memorial"]["name"] == "Maria"
        assert data["tributes"][0]["status"] == "pending"

    def test_status(self):
        tribute = self.tributes[0]
        for _ in range(2):
            response = self.client.post(
                f"/api/admin/tributes/{tribute.id}/status/", {"status": "approved"}, format="json"
            )
            assert response.status_code == 200
            assert response.json()["status"] == "approved"

    def test_status_invalid_target(self):
        response = self.client.post(
            f"/api/admin/tributes/{self.tributes[0].id}/status/", {"status": "pending"}, format="json"
        )
        assert response.status_code == 400

    def test_status_non_object_body_returns_400(self):
        response = self.client.post(
            f"/api/admin/tributes/{self.tributes[0].id}/status/", ["approved"], format="json"
        )
        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    def test_bulk_status(self):
        ids = [str(t.id) for t in self.tributes]
        response = self.client.post(
            "/api/admin/tributes/bulk-status/", {"ids": ids, "status": "rejected"}, format="json"
        )
        assert response.status_code == 200
        assert response.json()["updated"] == 3
        assert set(Tribute.objects.values_list("status", flat=True)) == {"rejected"}

    def test_bulk_status_unknown_id_returns_404_and_changes_nothing(self):
        ids = [str(t.id) for t in self.tributes] + [str(uuid.uuid4())]
        response = self.client.post(
            "/api/admin/tributes/bulk-status/", {"ids": ids, "status": "rejected"}, format="json"
        )
        assert response.status_code == 404
        assert set(Tribute.objects.values_list("status", flat=True)) == {"pending"}

    def test_bulk_status_requires_list(self):
        response = self.client.post(
            "/api/admin/tributes/bulk-status/", {"ids": "abc", "status": "rejected"}, format="json"
        )
        assert response.status_code == 400

    def test_bulk_status_non_object_body_returns_400(self):
        ids = [str(t.id) for t in self.tributes]
        response = self.client.post("/api/admin/tributes/bulk-status/", ids, format="json")
        assert response.status_code == 400
        assert set(Tribute.objects.values_list("status", flat=True)) == {"pending"}

    def test_delete(self):
        response = self.client.delete(f"/api/admin/tributes/{self.tributes[0].id}/")
        assert response.status_code == 204
        assert Tribute.objects.count() == 2
