import django
from django.conf import settings


def pytest_configure():
    """Configure Django settings before tests."""
    if not settings.configured:
        settings.configure(
            DEBUG=True,
            SECRET_KEY="test-secret-key-for-testing-only",
            DATABASES={
                "default": {
                    "ENGINE": "django.db.backends.sqlite3",
                    "NAME": ":memory:",
                }
            },
            INSTALLED_APPS=[
                "django.contrib.auth",
                "django.contrib.contenttypes",
                "rest_framework",
                "channels",
                "src.core",
                "src.memorial_requests",
                "src.memorials",
                "src.tributes",
            ],
            DEFAULT_AUTO_FIELD="django.db.models.BigAutoField",
            USE_TZ=True,
            ROOT_URLCONF="config.urls",
            REST_FRAMEWORK={
                "DEFAULT_AUTHENTICATION_CLASSES": [
                    "rest_framework_simplejwt.authentication.JWTAuthentication",
                    "src.api.auth.APIKeyAuthentication",
                ],
                "DEFAULT_PERMISSION_CLASSES": [],
                "UNAUTHENTICATED_USER": None,
                "EXCEPTION_HANDLER": "src.core.errors.exception_handler",
            },
            CHANNEL_LAYERS={
                "default": {"BACKEND": "channels.layers.InMemoryChannelLayer"},
            },
            API_KEY="test-api-key",
            TRIBUTE_MESSAGE_MAX_LENGTH=500,
            TRIBUTE_AUTHOR_MAX_LENGTH=100,
            MEDIA_UPLOAD_MAX_BYTES=1024 * 1024,
            MEDIA_ROOT="/tmp/test_media",
            MEDIA_URL="media/",
            STATIC_URL="static/",
        )
    django.setup()


def pytest_sessionstart(session):
    """Create database tables for in-memory SQLite test DB."""
    import contextlib

    from django.core.management import call_command

    unblock = contextlib.nullcontext()
    if session.config.pluginmanager.hasplugin("django"):
        from pytest_django.plugin import blocking_manager_key

        unblock = session.config.stash[blocking_manager_key].unblock()
    with unblock:
        call_command("migrate", "--run-syncdb", verbosity=0)
