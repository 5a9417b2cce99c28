"""
API URL routing.
"""

from django.urls import path

from .auth_views import LoginView, RefreshView

urlpatterns = [
    # Auth endpoints
    path("auth/login/", LoginView.as_view(), name="auth-login"),
    path("auth/refresh/", RefreshView.as_view(), name="auth-refresh"),
]
