"""
Accounts Service Layer.

This module is the **single source of truth** for all business logic
within the ``accounts`` app.  Views must remain *thin*: they validate
input through serializers, call a service function / method, and
return the result wrapped in a DRF ``Response``.

Architecture
------------
- ``UserRegistrationService``  — citizen self-registration.
- ``AuthenticationService``    — identifier login + JWT issuance.
- ``UserManagementService``    — officer roster, role changes.
"""

from __future__ import annotations

import logging
from typing import Any

from django.contrib.auth import authenticate as django_authenticate
from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from django.db.models import Count, Q, QuerySet
from rest_framework_simplejwt.tokens import RefreshToken

from core.domain.exceptions import Conflict, NotFoundError, ValidationError

from .models import UserRole

User = get_user_model()
logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════
#  Registration Service
# ═══════════════════════════════════════════════════════════════════


class UserRegistrationService:
    """Creates citizen accounts."""

    @staticmethod
    def register_user(validated_data: dict[str, Any]) -> User:
        """
        Create a new user with the ``Citizen`` role.

        Parameters
        ----------
        validated_data : dict
            Cleaned data from ``RegisterRequestSerializer`` containing
            ``username``, ``password``, ``email``, ``first_name``,
            ``last_name`` and optionally ``mobile`` / ``address``.

        Raises
        ------
        core.domain.exceptions.Conflict
            If the username or email is already taken.
        """
        validated_data.pop("password_confirm", None)
        password = validated_data.pop("password")

        conflicts = []
        if User.objects.filter(username=validated_data.get("username")).exists():
            conflicts.append("username")
        if User.objects.filter(email__iexact=validated_data.get("email")).exists():
            conflicts.append("email")
        if conflicts:
            raise Conflict(
                f"The following field(s) already exist: {', '.join(conflicts)}."
            )

        try:
            with transaction.atomic():
                user = User.objects.create_user(
                    password=password,
                    role=UserRole.CITIZEN,
                    **validated_data,
                )
        except IntegrityError:
            raise Conflict(
                "A user with one of the provided unique fields already exists."
            )

        logger.info("Registered citizen %s (#%s)", user.username, user.pk)
        return user


# ═══════════════════════════════════════════════════════════════════
#  Authentication Service
# ═══════════════════════════════════════════════════════════════════


class AuthenticationService:
    """Identifier (username or email) login and JWT token generation."""

    @staticmethod
    def authenticate(identifier: str, password: str) -> User | None:
        """Return the active user matching the credentials, else ``None``."""
        return django_authenticate(identifier=identifier, password=password)

    @staticmethod
    def generate_tokens(user: User) -> dict[str, str]:
        """
        Issue a JWT access/refresh token pair for the given user.

        Returns ``{"access": "<token>", "refresh": "<token>"}``.
        """
        refresh = RefreshToken.for_user(user)
        refresh["role"] = user.role
        return {
            "access": str(refresh.access_token),
            "refresh": str(refresh),
        }


# ═══════════════════════════════════════════════════════════════════
#  User Management Service
# ═══════════════════════════════════════════════════════════════════


class UserManagementService:
    """Officer roster queries and role changes (Admin only at the view level)."""

    @staticmethod
    def list_officers(active_only: bool = True) -> QuerySet:
        """
        Officers ordered by account creation, each annotated with
        ``open_complaints`` (Pending + In Progress assigned to them).
        """
        from complaints.models import ComplaintStatus

        qs = User.objects.filter(role=UserRole.OFFICER)
        if active_only:
            qs = qs.filter(is_active=True)
        return qs.annotate(
            open_complaints=Count(
                "assigned_complaints",
                filter=Q(assigned_complaints__status__in=ComplaintStatus.open_values()),
            )
        ).order_by("date_joined", "pk")

    @staticmethod
    def set_role(user_id: int, role: str, performed_by: User) -> User:
        """
        Change ``user_id``'s role.

        Raises
        ------
        NotFoundError
            No such user.
        ValidationError
            ``role`` is not one of ``UserRole``.
        """
        if role not in UserRole.values:
            raise ValidationError(f"Unknown role '{role}'.", field="role")
        try:
            user = User.objects.get(pk=user_id)
        except User.DoesNotExist:
            raise NotFoundError(f"User {user_id} not found.")

        previous = user.role
        user.role = role
        user.save(update_fields=["role"])
        logger.info(
            "User #%s role changed %s → %s by %s",
            user.pk,
            previous,
            role,
            performed_by,
        )
        return user
