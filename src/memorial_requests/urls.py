"""URL routing for memorial requests."""

from django.urls import path
from . import views

urlpatterns = [
    path("requests/", views.SubmitRequestView.as_view(), name="request-submit"),
    path("admin/requests/", views.AdminRequestListView.as_view(), name="admin-request-list"),
    path("admin/requests/<uuid:request_id>/", views.AdminRequestDetailView.as_view(), name="admin-request-detail"),
    path(
        "admin/requests/<uuid:request_id>/status/",
        views.AdminRequestStatusView.as_view(),
        name="admin-request-status",
    ),
    path(
        "admin/requests/<uuid:request_id>/approve/",
        views.AdminRequestApproveView.as_view(),
        name="admin-request-approve",
    ),
]
