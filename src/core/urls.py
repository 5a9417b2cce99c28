"""URL routing for health and settings."""

from django.urls import path
from . import views

urlpatterns = [
    path("health/", views.HealthView.as_view(), name="health"),
    path("public/settings/", views.PublicSettingsView.as_view(), name="public-settings"),
    path("admin/settings/", views.AdminSettingsView.as_view(), name="admin-settings"),
]
