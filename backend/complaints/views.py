"""
Complaints app ViewSets.

Architecture: Views are intentionally thin.
Every view follows the strict three-step pattern:

    1. Parse / validate input via a serializer.
    2. Delegate all business logic to ``ComplaintService`` or
       ``ComplaintQueryService``.
    3. Serialize the result and return a DRF ``Response``.

Who may call what is decided here (the workflow assumes it has been):

==========================  ===============================================
Endpoint                    Allowed
==========================  ===============================================
create                      Citizen
list / retrieve / comment   any authenticated user (citizens list only
                            their own complaints)
partial_update              submitter, assigned officer, or Admin
status                      assigned Officer or Admin
assign / destroy            Admin
assigned                    Officer
track                       anyone
==========================  ===============================================
"""

from __future__ import annotations

import logging

from drf_spectacular.utils import (
    OpenApiParameter,
    OpenApiResponse,
    extend_schema,
)
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response

from accounts.models import UserRole
from accounts.permissions import (
    IsAdminRole,
    IsCitizen,
    IsOfficer,
    IsOfficerOrAdmin,
    effective_role,
)

from .serializers import (
    AssignOfficerSerializer,
    CommentCreateSerializer,
    ComplaintCreateSerializer,
    ComplaintFilterSerializer,
    ComplaintPageSerializer,
    ComplaintSerializer,
    ComplaintTrackingSerializer,
    ComplaintUpdateSerializer,
    StatusUpdateSerializer,
)
from .services import build_complaint_service, build_query_service

logger = logging.getLogger(__name__)


class ComplaintViewSet(viewsets.ViewSet):
    """
    The single ViewSet for complaint endpoints.  Custom ``@action``
    methods handle status changes, assignment, comments, the officer
    queue and public tracking.
    """

    permission_classes = [IsAuthenticated]
    lookup_value_regex = r"\d+"

    _ACTION_PERMISSIONS = {
        "create": [IsAuthenticated, IsCitizen],
        "destroy": [IsAuthenticated, IsAdminRole],
        "assign": [IsAuthenticated, IsAdminRole],
        "update_status": [IsAuthenticated, IsOfficerOrAdmin],
        "assigned": [IsAuthenticated, IsOfficer],
        "track": [AllowAny],
    }

    def get_permissions(self):
        classes = self._ACTION_PERMISSIONS.get(self.action, self.permission_classes)
        return [permission() for permission in classes]

    # ── Helpers ──────────────────────────────────────────────────────

    @staticmethod
    def _detail(complaint) -> dict:
        return ComplaintSerializer(complaint).data

    # ── CRUD ─────────────────────────────────────────────────────────

    @extend_schema(
        summary="List complaints",
        parameters=[
            OpenApiParameter("status", str),
            OpenApiParameter("category", str),
            OpenApiParameter("department", str),
            OpenApiParameter("priority", str),
            OpenApiParameter("submitted_by", int),
            OpenApiParameter("assigned_to", int),
            OpenApiParameter("page", int),
            OpenApiParameter("limit", int, description="Page size (default 10)."),
        ],
        responses={200: ComplaintPageSerializer},
        tags=["Complaints"],
    )
    def list(self, request: Request) -> Response:
        query = ComplaintFilterSerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        filters = dict(query.validated_data)
        page = filters.pop("page", 1)
        limit = filters.pop("limit", None)
        if effective_role(request.user) == UserRole.CITIZEN:
            filters["submitted_by"] = request.user.pk

        result = build_query_service().list_complaints(filters, page=page, limit=limit)
        return Response(ComplaintPageSerializer(result).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Submit a complaint",
        request=ComplaintCreateSerializer,
        responses={201: ComplaintSerializer, 400: OpenApiResponse(description="Validation error.")},
        tags=["Complaints"],
    )
    def create(self, request: Request) -> Response:
        serializer = ComplaintCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        complaint = build_complaint_service().create_complaint(
            serializer.validated_data, submitter_id=request.user.pk,
        )
        return Response(self._detail(complaint), status=status.HTTP_201_CREATED)

    @extend_schema(
        summary="Retrieve a complaint",
        responses={200: ComplaintSerializer, 404: OpenApiResponse(description="Not found.")},
        tags=["Complaints"],
    )
    def retrieve(self, request: Request, pk: str = None) -> Response:
        complaint = build_query_service().get_complaint(pk)
        return Response(self._detail(complaint), status=status.HTTP_200_OK)

    @extend_schema(
        summary="Edit complaint details",
        request=ComplaintUpdateSerializer,
        responses={200: ComplaintSerializer, 403: OpenApiResponse(description="Not allowed.")},
        tags=["Complaints"],
    )
    def partial_update(self, request: Request, pk: str = None) -> Response:
        complaint = build_query_service().get_complaint(pk)
        user = request.user
        role = effective_role(user)
        is_owner = complaint.submitted_by == user.pk
        is_assigned_officer = role == UserRole.OFFICER and complaint.assigned_to == user.pk
        if not (is_owner or is_assigned_officer or role == UserRole.ADMIN):
            raise PermissionDenied("Not authorized to update this complaint.")

        serializer = ComplaintUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        complaint = build_complaint_service().update_complaint(pk, serializer.validated_data)
        return Response(self._detail(complaint), status=status.HTTP_200_OK)

    @extend_schema(
        summary="Delete a complaint",
        responses={204: None, 404: OpenApiResponse(description="Not found.")},
        tags=["Complaints"],
    )
    def destroy(self, request: Request, pk: str = None) -> Response:
        build_complaint_service().delete_complaint(pk)
        logger.info("Complaint %s deleted by admin %s", pk, request.user.pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    # ── Workflow actions ─────────────────────────────────────────────

    @extend_schema(
        summary="Change complaint status",
        request=StatusUpdateSerializer,
        responses={200: ComplaintSerializer, 403: OpenApiResponse(description="Not the assigned officer.")},
        tags=["Complaints"],
    )
    @action(detail=True, methods=["patch"], url_path="status")
    def update_status(self, request: Request, pk: str = None) -> Response:
        serializer = StatusUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        complaint = build_query_service().get_complaint(pk)
        if effective_role(request.user) == UserRole.OFFICER and complaint.assigned_to != request.user.pk:
            raise PermissionDenied("Not authorized to update this complaint status.")

        complaint = build_complaint_service().update_status(
            pk,
            serializer.validated_data["status"],
            actor_id=request.user.pk,
            notes=serializer.validated_data.get("notes"),
        )
        return Response(self._detail(complaint), status=status.HTTP_200_OK)

    @extend_schema(
        summary="Assign an officer",
        request=AssignOfficerSerializer,
        responses={200: ComplaintSerializer, 400: OpenApiResponse(description="Invalid officer.")},
        tags=["Complaints"],
    )
    @action(detail=True, methods=["patch"], url_path="assign")
    def assign(self, request: Request, pk: str = None) -> Response:
        serializer = AssignOfficerSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        complaint = build_complaint_service().assign_officer(
            pk,
            serializer.validated_data["officer_id"],
            actor_id=request.user.pk,
        )
        return Response(self._detail(complaint), status=status.HTTP_200_OK)

    @extend_schema(
        summary="Add a comment",
        request=CommentCreateSerializer,
        responses={201: ComplaintSerializer},
        tags=["Complaints"],
    )
    @action(detail=True, methods=["post"], url_path="comments")
    def comments(self, request: Request, pk: str = None) -> Response:
        serializer = CommentCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        complaint = build_complaint_service().add_comment(
            pk, request.user.pk, serializer.validated_data["text"],
        )
        return Response(self._detail(complaint), status=status.HTTP_201_CREATED)

    # ── Queues & tracking ────────────────────────────────────────────

    @extend_schema(
        summary="My assigned complaints",
        parameters=[
            OpenApiParameter("status", str),
            OpenApiParameter("page", int),
            OpenApiParameter("limit", int),
        ],
        responses={200: ComplaintPageSerializer},
        tags=["Complaints"],
    )
    @action(detail=False, methods=["get"], url_path="assigned")
    def assigned(self, request: Request) -> Response:
        query = ComplaintFilterSerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        result = build_query_service().assigned_to(
            request.user.pk,
            status=query.validated_data.get("status"),
            page=query.validated_data.get("page", 1),
            limit=query.validated_data.get("limit"),
        )
        return Response(ComplaintPageSerializer(result).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Track a complaint by its public id",
        responses={200: ComplaintTrackingSerializer, 404: OpenApiResponse(description="Unknown id.")},
        tags=["Complaints"],
    )
    @action(
        detail=False,
        methods=["get"],
        url_path=r"track/(?P<human_id>[^/]+)",
        authentication_classes=[],
    )
    def track(self, request: Request, human_id: str = None) -> Response:
        complaint = build_query_service().track(human_id)
        return Response(ComplaintTrackingSerializer(complaint).data, status=status.HTTP_200_OK)
