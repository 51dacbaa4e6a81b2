"""
Accounts app views.

All views follow the **Thin View** pattern: validate input via
serializers, delegate to the service layer, and return the result
wrapped in a DRF ``Response``.  **No business logic** resides here.

View Map
--------
- ``RegisterView``     — POST /auth/register/
- ``LoginView``        — POST /auth/login/
- ``MeView``           — GET /me/
- ``OfficerListView``  — GET /officers/           (Admin)
- ``UserRoleView``     — PATCH /users/{id}/role/  (Admin)
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import generics, status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from .permissions import IsAdminRole
from .serializers import (
    AssignRoleSerializer,
    LoginRequestSerializer,
    OfficerSerializer,
    RegisterRequestSerializer,
    UserDetailSerializer,
)
from .services import (
    AuthenticationService,
    UserManagementService,
    UserRegistrationService,
)


# ═══════════════════════════════════════════════════════════════════
#  Authentication Views
# ═══════════════════════════════════════════════════════════════════


class RegisterView(generics.CreateAPIView):
    """
    POST /api/accounts/auth/register/

    Public endpoint.  Creates a new user with the ``Citizen`` role.

    Request body  → ``RegisterRequestSerializer``
    Response body → ``UserDetailSerializer`` (201 Created)
    """

    permission_classes = [AllowAny]
    authentication_classes = []
    serializer_class = RegisterRequestSerializer

    @extend_schema(
        summary="Register a citizen account",
        responses={201: UserDetailSerializer, 409: OpenApiResponse(description="Username or email taken.")},
        tags=["Accounts"],
    )
    def create(self, request: Request, *args, **kwargs) -> Response:
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = UserRegistrationService.register_user(serializer.validated_data)
        response_serializer = UserDetailSerializer(user)
        return Response(response_serializer.data, status=status.HTTP_201_CREATED)


class LoginView(APIView):
    """
    POST /api/accounts/auth/login/

    Public endpoint.  Authenticates with username or email plus
    password and returns a JWT pair with the user profile.
    """

    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(
        summary="Log in",
        request=LoginRequestSerializer,
        responses={200: OpenApiResponse(description="JWT pair and user profile."),
                   401: OpenApiResponse(description="Invalid credentials.")},
        tags=["Accounts"],
    )
    def post(self, request: Request) -> Response:
        serializer = LoginRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = AuthenticationService.authenticate(
            identifier=serializer.validated_data["identifier"],
            password=serializer.validated_data["password"],
        )
        if user is None:
            return Response(
                {"detail": "Invalid credentials."},
                status=status.HTTP_401_UNAUTHORIZED,
            )

        payload = AuthenticationService.generate_tokens(user)
        payload["user"] = UserDetailSerializer(user).data
        return Response(payload, status=status.HTTP_200_OK)


# ═══════════════════════════════════════════════════════════════════
#  Current User ("Me") View
# ═══════════════════════════════════════════════════════════════════


class MeView(APIView):
    """GET /api/accounts/me/ → the authenticated user's profile."""

    permission_classes = [IsAuthenticated]

    @extend_schema(summary="Current user", responses={200: UserDetailSerializer}, tags=["Accounts"])
    def get(self, request: Request) -> Response:
        return Response(UserDetailSerializer(request.user).data, status=status.HTTP_200_OK)


# ═══════════════════════════════════════════════════════════════════
#  Admin Views
# ═══════════════════════════════════════════════════════════════════


class OfficerListView(APIView):
    """
    GET /api/accounts/officers/?include_inactive=true

    Officer roster ordered by account creation, with each officer's
    open-complaint count.  Admin only.
    """

    permission_classes = [IsAuthenticated, IsAdminRole]

    @extend_schema(summary="List officers", responses={200: OfficerSerializer(many=True)}, tags=["Accounts"])
    def get(self, request: Request) -> Response:
        include_inactive = request.query_params.get("include_inactive") == "true"
        officers = UserManagementService.list_officers(active_only=not include_inactive)
        return Response(OfficerSerializer(officers, many=True).data, status=status.HTTP_200_OK)


class UserRoleView(APIView):
    """PATCH /api/accounts/users/{id}/role/ → change a user's role.  Admin only."""

    permission_classes = [IsAuthenticated, IsAdminRole]

    @extend_schema(
        summary="Change a user's role",
        request=AssignRoleSerializer,
        responses={200: UserDetailSerializer},
        tags=["Accounts"],
    )
    def patch(self, request: Request, pk: int) -> Response:
        serializer = AssignRoleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = UserManagementService.set_role(
            pk,
            serializer.validated_data["role"],
            performed_by=request.user,
        )
        return Response(UserDetailSerializer(user).data, status=status.HTTP_200_OK)
