"""
API views for tributes.

Public:
- GET/POST /api/memorials/{slug}/tributes/
- POST /api/tributes/{id}/like/

Admin:
- GET /api/admin/tributes/?status=pending
- POST /api/admin/tributes/{id}/status/
- DELETE /api/admin/tributes/{id}/
- POST /api/admin/tributes/bulk-status/
"""

import logging

from rest_framework import status
from rest_framework.permissions import IsAdminUser
from rest_framework.response import Response
from rest_framework.views import APIView

from src.api.auth import ADMIN_AUTHENTICATION
from src.core.errors import ValidationError, require_object
from src.memorials import services as memorial_services
from src.memorials.views import client_ip
from .moderation import engine
from .serializers import admin_tribute_to_dict, tribute_to_dict

logger = logging.getLogger(__name__)


class MemorialTributesView(APIView):
    """
    List approved tributes or leave a new one.

    GET /api/memorials/{slug}/tributes/
    POST /api/memorials/{slug}/tributes/
    Body: {"author_name": "...", "message": "...", "image_url": "..."}

    Returns (POST):
        {"tribute": {...}, "status": "pending", "visible": false}
    """

    permission_classes = []
    authentication_classes = []

    def get(self, request, slug):
        memorial = memorial_services.get_public_memorial(slug)
        return Response([tribute_to_dict(t) for t in engine.visible_tributes(memorial)])

    def post(self, request, slug):
        data = require_object(request.data)
        memorial = memorial_services.get_public_memorial(slug)
        tribute = engine.submit(
            memorial.id,
            author_name=data.get("author_name"),
            message=data.get("message"),
            image_url=data.get("image_url"),
        )
        # Clients only add the tribute to the wall when visible is true
        return Response(
            {
                "tribute": tribute_to_dict(tribute),
                "status": tribute.status,
                "visible": tribute.is_visible,
            },
            status=status.HTTP_201_CREATED,
        )


class TributeLikeView(APIView):
    """POST /api/tributes/{id}/like/ - returns {"likes_count": n}."""

    permission_classes = []
    authentication_classes = []

    def post(self, request, tribute_id):
        likes_count = engine.like(tribute_id, client_ip(request))
        return Response({"likes_count": likes_count})


class AdminTributeListView(APIView):
    """GET /api/admin/tributes/ - moderation queue, newest first."""

    authentication_classes = ADMIN_AUTHENTICATION
    permission_classes = [IsAdminUser]

    def get(self, request):
        tributes = engine.admin_queue(request.query_params.get("status"))
        return Response({
            "tributes": [admin_tribute_to_dict(t) for t in tributes],
            "pending_count": engine.pending_count(),
        })


class AdminTributeDetailView(APIView):
    """DELETE /api/admin/tributes/{id}/"""

    authentication_classes = ADMIN_AUTHENTICATION
    permission_classes = [IsAdminUser]

    def delete(self, request, tribute_id):
        engine.delete(tribute_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class AdminTributeStatusView(APIView):
    """
    Approve or reject one tribute.

    POST /api/admin/tributes/{id}/status/
    Body: {"status": "approved" | "rejected"}
    """

    authentication_classes = ADMIN_AUTHENTICATION
    permission_classes = [IsAdminUser]

    def post(self, request, tribute_id):
        data = require_object(request.data)
        tribute = engine.transition(tribute_id, data.get("status"))
        return Response({"id": str(tribute.id), "status": tribute.status})


class AdminTributeBulkStatusView(APIView):
    """
    Approve or reject several tributes at once. Either all change or none do.

    POST /api/admin/tributes/bulk-status/
    Body: {"ids": ["...", "..."], "status": "rejected"}
    """

    authentication_classes = ADMIN_AUTHENTICATION
    permission_classes = [IsAdminUser]

    def post(self, request):
        data = require_object(request.data)
        ids = data.get("ids")
        if not isinstance(ids, list):
            raise ValidationError("ids must be a list", fields=["ids"])

        updated = engine.bulk_transition(ids, data.get("status"))
        return Response({"updated": updated, "status": data.get("status")})
