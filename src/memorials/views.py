"""
API views for memorial pages.

Public:
- GET /api/memorials/{slug}/ - published memorial

Admin:
- GET/POST /api/admin/memorials/
- GET/PATCH/DELETE /api/admin/memorials/{id}/
- POST /api/admin/memorials/{id}/publish/
- GET /api/admin/stats/
- POST /api/admin/uploads/
"""

import logging

from rest_framework import status
from rest_framework.parsers import MultiPartParser
from rest_framework.permissions import IsAdminUser
from rest_framework.response import Response
from rest_framework.views import APIView

from src.api.auth import ADMIN_AUTHENTICATION
from src.core import app_settings
from src.core.errors import ValidationError, require_object
from src.tasks.notifications import notify_memorial_unpublished
from . import services
from .serializers import memorial_to_dict
from .tasks import record_visit
from .uploads import store_media

logger = logging.getLogger(__name__)


def client_ip(request) -> str | None:
    forwarded = request.META.get("HTTP_X_FORWARDED_FOR")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.META.get("REMOTE_ADDR")


class PublicMemorialView(APIView):
    """GET /api/memorials/{slug}/ - the public memorial page data."""

    permission_classes = []
    authentication_classes = []

    def get(self, request, slug):
        memorial = services.get_public_memorial(slug)

        # Visit tracking must never break the page
        try:
            record_visit.delay(str(memorial.id), client_ip(request))
        except Exception as e:
            logger.warning(f"Could not queue visit for memorial {memorial.id}: {e}")

        data = memorial_to_dict(memorial)
        data["autoplay_enabled"] = app_settings.autoplay_enabled()
        return Response(data)


class AdminMemorialListView(APIView):
    """
    List or create memorials.

    GET /api/admin/memorials/
    POST /api/admin/memorials/
    Body: {"name": "...", "birth_date": "1940-05-01", "death_date": "2020-01-01",
           "photos": [...], "videos": [...], "audios": [{"url": "...", "title": "..."}]}
    """

    authentication_classes = ADMIN_AUTHENTICATION
    permission_classes = [IsAdminUser]

    def get(self, request):
        return Response([
            memorial_to_dict(m, admin=True) for m in services.list_memorials()
        ])

    def post(self, request):
        memorial = services.create_memorial(request.data)
        return Response(memorial_to_dict(memorial, admin=True), status=status.HTTP_201_CREATED)


class AdminMemorialDetailView(APIView):
    """
    Get, update or delete a memorial.

    GET /api/admin/memorials/{id}/
    PATCH /api/admin/memorials/{id}/
    DELETE /api/admin/memorials/{id}/
    """

    authentication_classes = ADMIN_AUTHENTICATION
    permission_classes = [IsAdminUser]

    def get(self, request, memorial_id):
        memorial = services.get_memorial(memorial_id)
        return Response(memorial_to_dict(memorial, admin=True))

    def patch(self, request, memorial_id):
        memorial = services.update_memorial(memorial_id, request.data)
        return Response(memorial_to_dict(memorial, admin=True))

    def delete(self, request, memorial_id):
        services.delete_memorial(memorial_id)
        notify_memorial_unpublished(str(memorial_id))
        return Response(status=status.HTTP_204_NO_CONTENT)


class AdminMemorialPublishView(APIView):
    """
    Publish or unpublish a memorial.

    POST /api/admin/memorials/{id}/publish/
    Body: {"published": true}
    """

    authentication_classes = ADMIN_AUTHENTICATION
    permission_classes = [IsAdminUser]

    def post(self, request, memorial_id):
        published = require_object(request.data).get("published", True)
        if not isinstance(published, bool):
            raise ValidationError("published must be true or false", fields=["published"])

        memorial = services.set_published(memorial_id, published)
        if not published:
            notify_memorial_unpublished(str(memorial.id))
        return Response(memorial_to_dict(memorial, admin=True))


class AdminStatsView(APIView):
    """GET /api/admin/stats/ - dashboard counters."""

    authentication_classes = ADMIN_AUTHENTICATION
    permission_classes = [IsAdminUser]

    def get(self, request):
        return Response(services.get_stats())


class AdminUploadView(APIView):
    """
    Upload a media file.

    POST /api/admin/uploads/
    Body: multipart/form-data with 'file' and 'folder' (photos, videos, audios, ...)

    Returns:
        {"url": "https://..."}
    """

    authentication_classes = ADMIN_AUTHENTICATION
    permission_classes = [IsAdminUser]
    parser_classes = [MultiPartParser]

    def post(self, request):
        if "file" not in request.FILES:
            raise ValidationError("No file provided", fields=["file"])

        url = store_media(request.FILES["file"], request.data.get("folder", "photos"))
        return Response({"url": url}, status=status.HTTP_201_CREATED)
