"""
Admin authentication.

Admin endpoints accept either a JWT bearer token for a staff user or the
X-API-Key header. Set API_KEY in .env or environment.
"""

from django.conf import settings
from django.contrib.auth.models import User
from rest_framework import authentication, exceptions
from rest_framework_simplejwt.authentication import JWTAuthentication


class APIKeyAuthentication(authentication.BaseAuthentication):
    """
    Authenticate requests via X-API-Key header.

    Usage in views:
        authentication_classes = [APIKeyAuthentication]

    Client usage:
        curl -H "X-API-Key: your-key" http://localhost:8000/api/admin/...
    """

    def authenticate(self, request):
        api_key = request.headers.get("X-API-Key")

        if not api_key:
            return None  # No auth attempted, let other authenticators try

        if not check_api_key(api_key):
            raise exceptions.AuthenticationFailed("Invalid API key")

        # API key holders act as the shared admin account
        user, created = User.objects.get_or_create(
            username="api_key_admin",
            defaults={"email": "admin@local", "is_active": True, "is_staff": True},
        )
        if not created and not user.is_staff:
            user.is_staff = True
            user.save(update_fields=["is_staff"])
        return (user, api_key)


def check_api_key(api_key: str) -> bool:
    """Check if an API key is valid."""
    return bool(settings.API_KEY) and api_key == settings.API_KEY


ADMIN_AUTHENTICATION = [JWTAuthentication, APIKeyAuthentication]
