"""
Admin login for the memorial dashboard.

Endpoints:
- POST /api/auth/login/ - staff email/password in, JWT pair out
- POST /api/auth/refresh/ - new access token for a refresh token

Failures raise the domain errors and are rendered by the project's
exception handler like every other endpoint.
"""

import logging

from django.contrib.auth import authenticate
from django.contrib.auth.models import User
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken

from src.core.errors import AuthenticationError, ValidationError, require_object

logger = logging.getLogger(__name__)


def _staff_user(email: str, password: str) -> User:
    # Accounts are looked up by email; Django authenticates by username
    user = User.objects.filter(email__iexact=email).first()
    if user is not None:
        user = authenticate(username=user.username, password=password)
    if user is None or not user.is_staff:
        logger.warning(f"Rejected dashboard login for {email}")
        raise AuthenticationError("Invalid credentials")
    return user


class LoginView(APIView):
    """
    Exchange staff credentials for a token pair.

    POST /api/auth/login/
    Body: {"email": "admin@example.com", "password": "secret"}

    Returns:
        {"access": "...", "refresh": "...", "is_admin": true}
    """

    authentication_classes = []
    permission_classes = []

    def post(self, request):
        data = require_object(request.data)
        missing = [
            f for f in ("email", "password")
            if not isinstance(data.get(f), str) or not data.get(f)
        ]
        if missing:
            raise ValidationError(
                f"Missing required fields: {', '.join(missing)}", fields=missing
            )

        user = _staff_user(data["email"], data["password"])
        refresh = RefreshToken.for_user(user)
        refresh["is_admin"] = True
        logger.info(f"Dashboard login by {user.username}")

        return Response({
            "access": str(refresh.access_token),
            "refresh": str(refresh),
            "is_admin": True,
        })


class RefreshView(APIView):
    """POST /api/auth/refresh/ with {"refresh": "..."} - returns {"access": "..."}."""

    authentication_classes = []
    permission_classes = []

    def post(self, request):
        token = require_object(request.data).get("refresh")
        if not isinstance(token, str) or not token:
            raise ValidationError("Missing required fields: refresh", fields=["refresh"])

        try:
            refresh = RefreshToken(token)
        except TokenError as e:
            raise AuthenticationError("Invalid refresh token") from e
        return Response({"access": str(refresh.access_token)})
