"""URL routing for memorial pages, stats and uploads."""

from django.urls import path
from . import views

urlpatterns = [
    path("memorials/<slug:slug>/", views.PublicMemorialView.as_view(), name="memorial-public"),
    path("admin/memorials/", views.AdminMemorialListView.as_view(), name="admin-memorial-list"),
    path("admin/memorials/<uuid:memorial_id>/", views.AdminMemorialDetailView.as_view(), name="admin-memorial-detail"),
    path(
        "admin/memorials/<uuid:memorial_id>/publish/",
        views.AdminMemorialPublishView.as_view(),
        name="admin-memorial-publish",
    ),
    path("admin/stats/", views.AdminStatsView.as_view(), name="admin-stats"),
    path("admin/uploads/", views.AdminUploadView.as_view(), name="admin-upload"),
]
