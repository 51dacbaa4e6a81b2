"""
Core app views — **Thin Views**.

Each view delegates all business logic to the corresponding service in
``core.services``.  Views are responsible only for:

1. Extracting and validating query parameters / bodies.
2. Calling the service with the authenticated user.
3. Serialising the result and returning an HTTP ``Response``.
"""

from __future__ import annotations

from drf_spectacular.utils import (
    OpenApiParameter,
    OpenApiResponse,
    extend_schema,
)
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsAdminRole

from .serializers import (
    DashboardStatsSerializer,
    DeviceRegistrationResponseSerializer,
    DeviceRegistrationSerializer,
    MarkAllReadSerializer,
    NotificationListQuerySerializer,
    NotificationListSerializer,
    NotificationSerializer,
    SystemConstantsSerializer,
    UnreadCountSerializer,
)
from .services import (
    DashboardAggregationService,
    NotificationService,
    SystemConstantsService,
)


class DashboardStatsView(APIView):
    """
    **GET /api/core/dashboard/**

    Complaint counters by status, category and department.

    **Authentication**: Admin only.
    """

    permission_classes = [IsAuthenticated, IsAdminRole]

    @extend_schema(
        summary="Dashboard statistics",
        responses={200: OpenApiResponse(response=DashboardStatsSerializer, description="Complaint counters.")},
        tags=["Dashboard"],
    )
    def get(self, request: Request) -> Response:
        data = DashboardAggregationService().get_stats()
        return Response(DashboardStatsSerializer(data).data, status=status.HTTP_200_OK)


class SystemConstantsView(APIView):
    """
    **GET /api/core/constants/**

    Return every choice enumeration (categories, departments, statuses,
    priorities, roles, notification types) and the category → department
    table so the frontend never hardcodes them.

    **Authentication**: Not required (``AllowAny``).
    """

    permission_classes = [AllowAny]

    @extend_schema(
        summary="System constants",
        responses={200: OpenApiResponse(response=SystemConstantsSerializer, description="System constants.")},
        tags=["System"],
    )
    def get(self, request: Request) -> Response:
        data = SystemConstantsService.get_constants()
        return Response(SystemConstantsSerializer(data).data, status=status.HTTP_200_OK)


class NotificationViewSet(viewsets.ViewSet):
    """
    **Notification API** for the authenticated user.

    Endpoints
    ---------
    GET    /api/core/notifications/                   → paginated list + unread_count
    GET    /api/core/notifications/unread-count/      → unread counter
    POST   /api/core/notifications/{id}/read/         → mark one as read
    POST   /api/core/notifications/read-all/          → mark all as read
    DELETE /api/core/notifications/{id}/              → delete one
    POST   /api/core/notifications/register-device/   → store a push token

    Another user's notification answers 404, exactly like a missing one.
    """

    permission_classes = [IsAuthenticated]

    def _service(self, request: Request) -> NotificationService:
        return NotificationService(user_id=request.user.pk)

    @extend_schema(
        summary="List notifications",
        parameters=[
            OpenApiParameter("unread_only", bool, description="Only unread notifications."),
            OpenApiParameter("page", int, description="1-based page number."),
            OpenApiParameter("limit", int, description="Page size (default 50)."),
        ],
        responses={200: OpenApiResponse(response=NotificationListSerializer, description="Notification page.")},
        tags=["Notifications"],
    )
    def list(self, request: Request) -> Response:
        query = NotificationListQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        result, unread = self._service(request).list_notifications(**query.validated_data)
        payload = {
            "results": result.items,
            "total": result.total,
            "page": result.page,
            "pages": result.pages,
            "limit": result.limit,
            "unread_count": unread,
        }
        return Response(NotificationListSerializer(payload).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Delete notification",
        responses={204: None, 404: OpenApiResponse(description="Not found.")},
        tags=["Notifications"],
    )
    def destroy(self, request: Request, pk: str = None) -> Response:
        self._service(request).delete_notification(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        summary="Unread notification count",
        responses={200: UnreadCountSerializer},
        tags=["Notifications"],
    )
    @action(detail=False, methods=["get"], url_path="unread-count")
    def unread_count(self, request: Request) -> Response:
        count = self._service(request).unread_count()
        return Response({"unread_count": count}, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Mark notification as read",
        request=None,
        responses={200: NotificationSerializer, 404: OpenApiResponse(description="Not found.")},
        tags=["Notifications"],
    )
    @action(detail=True, methods=["post"], url_path="read")
    def mark_as_read(self, request: Request, pk: str = None) -> Response:
        notification = self._service(request).mark_notification_read(pk)
        return Response(NotificationSerializer(notification).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Mark all notifications as read",
        request=None,
        responses={200: MarkAllReadSerializer},
        tags=["Notifications"],
    )
    @action(detail=False, methods=["post"], url_path="read-all")
    def mark_all_as_read(self, request: Request) -> Response:
        service = self._service(request)
        updated = service.mark_all_read()
        return Response(
            {"updated": updated, "unread_count": service.unread_count()},
            status=status.HTTP_200_OK,
        )

    @extend_schema(
        summary="Register a push device",
        request=DeviceRegistrationSerializer,
        responses={
            201: DeviceRegistrationResponseSerializer,
            200: DeviceRegistrationResponseSerializer,
        },
        tags=["Notifications"],
    )
    @action(detail=False, methods=["post"], url_path="register-device")
    def register_device(self, request: Request) -> Response:
        serializer = DeviceRegistrationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        registration, created = self._service(request).register_device(**serializer.validated_data)
        return Response(
            {"id": registration.pk, "platform": registration.platform, "created": created},
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )
