"""
API views for memorial requests.

Public:
- POST /api/requests/ - submit a request

Admin:
- GET /api/admin/requests/?status=pending
- GET/DELETE /api/admin/requests/{id}/
- POST /api/admin/requests/{id}/status/
- POST /api/admin/requests/{id}/approve/
"""

import logging

from rest_framework import status
from rest_framework.permissions import IsAdminUser
from rest_framework.response import Response
from rest_framework.views import APIView

from src.api.auth import ADMIN_AUTHENTICATION
from src.core.errors import ValidationError, require_object
from src.memorials.serializers import memorial_to_dict
from . import workflow
from .serializers import request_to_dict

logger = logging.getLogger(__name__)


class SubmitRequestView(APIView):
    """
    Submit a memorial request for review.

    POST /api/requests/
    Body: {"name": "...", "birth_date": "...", "death_date": "...",
           "requester_name": "...", "requester_email": "...", ...}

    Returns:
        {"id": "...", "status": "pending"}
    """

    permission_classes = []
    authentication_classes = []

    def post(self, request):
        memorial_request = workflow.create_request(request.data)
        return Response(
            {"id": str(memorial_request.id), "status": memorial_request.status},
            status=status.HTTP_201_CREATED,
        )


class AdminRequestListView(APIView):
    """GET /api/admin/requests/ - all requests, newest first."""

    authentication_classes = ADMIN_AUTHENTICATION
    permission_classes = [IsAdminUser]

    def get(self, request):
        requests = workflow.list_requests(request.query_params.get("status"))
        return Response({
            "requests": [request_to_dict(r) for r in requests],
            "pending_count": workflow.pending_count(),
        })


class AdminRequestDetailView(APIView):
    """
    GET /api/admin/requests/{id}/
    DELETE /api/admin/requests/{id}/
    """

    authentication_classes = ADMIN_AUTHENTICATION
    permission_classes = [IsAdminUser]

    def get(self, request, request_id):
        return Response(request_to_dict(workflow.get_request(request_id)))

    def delete(self, request, request_id):
        workflow.remove(request_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class AdminRequestStatusView(APIView):
    """
    Change a request's review status.

    POST /api/admin/requests/{id}/status/
    Body: {"status": "in_review" | "rejected", "notes": "..."}
    """

    authentication_classes = ADMIN_AUTHENTICATION
    permission_classes = [IsAdminUser]

    def post(self, request, request_id):
        data = require_object(request.data)
        new_status = data.get("status")
        if not new_status:
            raise ValidationError("Missing required fields: status", fields=["status"])

        notes = data.get("notes")
        if notes is not None and not isinstance(notes, str):
            raise ValidationError("notes must be text", fields=["notes"])

        memorial_request = workflow.set_status(request_id, new_status, notes)
        return Response(request_to_dict(memorial_request))


class AdminRequestApproveView(APIView):
    """
    Approve a request and create its (unpublished) memorial.

    POST /api/admin/requests/{id}/approve/

    Returns:
        {"request": {...}, "memorial": {...}}
    """

    authentication_classes = ADMIN_AUTHENTICATION
    permission_classes = [IsAdminUser]

    def post(self, request, request_id):
        memorial = workflow.approve(request_id)
        memorial_request = workflow.get_request(request_id)
        return Response(
            {
                "request": request_to_dict(memorial_request),
                "memorial": memorial_to_dict(memorial, admin=True),
            },
            status=status.HTTP_201_CREATED,
        )
