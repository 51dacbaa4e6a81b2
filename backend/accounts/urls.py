"""
Accounts app URL configuration.

All routes are namespaced under ``accounts`` and included in the
project-level ``urls.py`` as::

    path('api/accounts/', include('accounts.urls')),

Endpoint Map
------------
Authentication
    POST   /auth/register/              → RegisterView
    POST   /auth/login/                 → LoginView
    POST   /auth/token/refresh/         → TokenRefreshView (SimpleJWT)

Current User
    GET    /me/                         → MeView

Administration
    GET    /officers/                   → OfficerListView
    PATCH  /users/{id}/role/            → UserRoleView
"""

from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView

from .views import (
    LoginView,
    MeView,
    OfficerListView,
    RegisterView,
    UserRoleView,
)

app_name = "accounts"

urlpatterns = [
    # ── Authentication ───────────────────────────────────────────────
    path("auth/register/", RegisterView.as_view(), name="register"),
    path("auth/login/", LoginView.as_view(), name="login"),
    path(
        "auth/token/refresh/",
        TokenRefreshView.as_view(),
        name="token-refresh",
    ),

    # ── Current User (Me) ───────────────────────────────────────────
    path("me/", MeView.as_view(), name="me"),

    # ── Administration ───────────────────────────────────────────────
    path("officers/", OfficerListView.as_view(), name="officer-list"),
    path("users/<int:pk>/role/", UserRoleView.as_view(), name="user-role"),
]
