"""Tests for dashboard login and token refresh."""

from django.contrib.auth.models import User
from django.test import TestCase
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken


class TestLoginView(TestCase):

    def setUp(self):
        self.client = APIClient()
        User.objects.create_user(
            username="admin", email="admin@example.com", password="secret", is_staff=True
        )

    def test_login_returns_token_pair(self):
        response = self.client.post(
            "/api/auth/login/", {"email": "admin@example.com", "password": "secret"}, format="json"
        )
        assert response.status_code == 200
        data = response.json()
        assert data["is_admin"] is True
        assert AccessToken(data["access"])["is_admin"] is True
        assert data["refresh"]

    def test_access_token_opens_admin_endpoints(self):
        access = self.client.post(
            "/api/auth/login/", {"email": "admin@example.com", "password": "secret"}, format="json"
        ).json()["access"]

        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {access}")
        assert self.client.get("/api/admin/stats/").status_code == 200

    def test_wrong_password_returns_401(self):
        response = self.client.post(
            "/api/auth/login/", {"email": "admin@example.com", "password": "nope"}, format="json"
        )
        assert response.status_code == 401
        assert response.json() == {"error": "invalid_credentials", "message": "Invalid credentials"}

    def test_unknown_email_returns_401(self):
        response = self.client.post(
            "/api/auth/login/", {"email": "who@example.com", "password": "secret"}, format="json"
        )
        assert response.status_code == 401

    def test_non_staff_user_refused(self):
        User.objects.create_user(
            username="visitor", email="visitor@example.com", password="secret"
        )
        response = self.client.post(
            "/api/auth/login/", {"email": "visitor@example.com", "password": "secret"}, format="json"
        )
        assert response.status_code == 401

    def test_missing_fields_returns_400(self):
        response = self.client.post("/api/auth/login/", {"email": "admin@example.com"}, format="json")
        assert response.status_code == 400
        assert response.json()["fields"] == ["password"]

    def test_non_object_body_returns_400(self):
        response = self.client.post("/api/auth/login/", ["admin"], format="json")
        assert response.status_code == 400


class TestRefreshView(TestCase):

    def setUp(self):
        self.client = APIClient()
        User.objects.create_user(
            username="admin", email="admin@example.com", password="secret", is_staff=True
        )
        self.refresh = self.client.post(
            "/api/auth/login/", {"email": "admin@example.com", "password": "secret"}, format="json"
        ).json()["refresh"]

    def test_refresh_returns_access_token(self):
        response = self.client.post("/api/auth/refresh/", {"refresh": self.refresh}, format="json")
        assert response.status_code == 200
        assert AccessToken(response.json()["access"])["is_admin"] is True

    def test_invalid_token_returns_401(self):
        response = self.client.post("/api/auth/refresh/", {"refresh": "not-a-token"}, format="json")
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid refresh token"

    def test_missing_token_returns_400(self):
        response = self.client.post("/api/auth/refresh/", {}, format="json")
        assert response.status_code == 400
        assert response.json()["fields"] == ["refresh"]
