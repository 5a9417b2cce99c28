"""URL routing for tributes."""

from django.urls import path
from . import views

urlpatterns = [
    path("memorials/<slug:slug>/tributes/", views.MemorialTributesView.as_view(), name="memorial-tributes"),
    path("tributes/<uuid:tribute_id>/like/", views.TributeLikeView.as_view(), name="tribute-like"),
    path("admin/tributes/", views.AdminTributeListView.as_view(), name="admin-tribute-list"),
    path(
        "admin/tributes/bulk-status/",
        views.AdminTributeBulkStatusView.as_view(),
        name="admin-tribute-bulk-status",
    ),
    path("admin/tributes/<uuid:tribute_id>/", views.AdminTributeDetailView.as_view(), name="admin-tribute-detail"),
    path(
        "admin/tributes/<uuid:tribute_id>/status/",
        views.AdminTributeStatusView.as_view(),
        name="admin-tribute-status",
    ),
]
