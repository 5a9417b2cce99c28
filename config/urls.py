"""
URL configuration for the memorial-pages project.
"""

from django.conf import settings
from django.conf.urls.static import static
from django.urls import path, include

urlpatterns = [
    path("api/", include("src.api.urls")),
    path("api/", include("src.core.urls")),
    path("api/", include("src.memorials.urls")),
    path("api/", include("src.tributes.urls")),
    path("api/", include("src.memorial_requests.urls")),
]

# Serve media files in development
if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
