"""Authentication endpoints."""

from django.urls import path

from ..views import auth

urlpatterns = [
    path("api/auth/register", auth.RegisterView.as_view(), name="auth_register"),
    path("api/auth/login", auth.LoginView.as_view(), name="auth_login"),
    path("api/auth/logout", auth.LogoutView.as_view(), name="auth_logout"),
    path("api/auth/me", auth.CurrentUserView.as_view(), name="auth_me"),
]
