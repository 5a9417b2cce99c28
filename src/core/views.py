"""Health and application settings endpoints."""

from django.db import DatabaseError, connection
from rest_framework import status
from rest_framework.permissions import IsAdminUser
from rest_framework.response import Response
from rest_framework.views import APIView

from src.api.auth import ADMIN_AUTHENTICATION
from src.tasks.notifications import notify_settings_changed
from . import app_settings
from .errors import ValidationError


class HealthView(APIView):
    """GET /api/health/ - server and database availability check."""

    permission_classes = []
    authentication_classes = []

    def get(self, request):
        try:
            connection.ensure_connection()
        except DatabaseError:
            return Response(
                {"status": "error", "message": "Database unavailable"},
                status=status.HTTP_503_SERVICE_UNAVAILABLE,
            )
        return Response({"status": "ok"})


class PublicSettingsView(APIView):
    """GET /api/public/settings/ - settings the visitor-facing pages need."""

    permission_classes = []
    authentication_classes = []

    def get(self, request):
        return Response({
            app_settings.AUTOPLAY_ENABLED: app_settings.autoplay_enabled(),
        })


class AdminSettingsView(APIView):
    """
    Read or update application settings.

    GET /api/admin/settings/
    PUT /api/admin/settings/
    Body: {"moderation_enabled": true}
    """

    authentication_classes = ADMIN_AUTHENTICATION
    permission_classes = [IsAdminUser]

    def get(self, request):
        return Response(app_settings.all_settings())

    def put(self, request):
        if not isinstance(request.data, dict) or not request.data:
            raise ValidationError("Provide at least one setting to update")

        app_settings.update_settings(request.data)
        values = app_settings.all_settings()
        if app_settings.AUTOPLAY_ENABLED in request.data:
            notify_settings_changed(values[app_settings.AUTOPLAY_ENABLED])
        return Response(values)
