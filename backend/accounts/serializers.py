"""
Accounts app serializers.

Contains all Request and Response serializers for the accounts API.
Serializers handle field definitions, read/write constraints, and
basic validation.  **No business logic** lives here — all domain
rules are delegated to ``services.py``.
"""

from __future__ import annotations

import re
from typing import Any

from django.contrib.auth import get_user_model
from rest_framework import serializers

from .models import UserRole

User = get_user_model()

_MOBILE_REGEX = re.compile(r"^[0-9]{10}$")


# ═══════════════════════════════════════════════════════════════════
#  Authentication Serializers
# ═══════════════════════════════════════════════════════════════════


class RegisterRequestSerializer(serializers.ModelSerializer):
    """
    Validates new-user registration data.

    Required fields: username, password, password_confirm, email,
    first_name, last_name.  ``mobile`` (10 digits) and ``address`` are
    optional.  The response is rendered by ``UserDetailSerializer``.
    """

    password = serializers.CharField(
        write_only=True,
        min_length=8,
        style={"input_type": "password"},
        help_text="Minimum 8 characters.",
    )
    password_confirm = serializers.CharField(
        write_only=True,
        style={"input_type": "password"},
        help_text="Must match 'password'.",
    )

    class Meta:
        model = User
        fields = [
            "username",
            "password",
            "password_confirm",
            "email",
            "first_name",
            "last_name",
            "mobile",
            "address",
        ]
        extra_kwargs = {
            "first_name": {"required": True},
            "last_name": {"required": True},
            # Uniqueness is reported by the service as a 409.
            "username": {"validators": []},
            "email": {"required": True, "validators": []},
        }

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:
        """
        Cross-field validation:
        1. Ensure password and password_confirm match.
        2. Validate mobile format (10 digits) when supplied.
        """
        if attrs["password"] != attrs["password_confirm"]:
            raise serializers.ValidationError(
                {"password_confirm": "Passwords do not match."}
            )

        mobile = attrs.get("mobile", "")
        if mobile and not _MOBILE_REGEX.match(mobile):
            raise serializers.ValidationError(
                {"mobile": "Mobile number must be exactly 10 digits."}
            )

        attrs.pop("password_confirm")
        return attrs


class LoginRequestSerializer(serializers.Serializer):
    """
    Accepts login credentials.

    ``identifier`` may be the username or the email address.
    """

    identifier = serializers.CharField(
        help_text="Username or email.",
    )
    password = serializers.CharField(
        write_only=True,
        style={"input_type": "password"},
        help_text="User account password.",
    )


# ═══════════════════════════════════════════════════════════════════
#  User Serializers
# ═══════════════════════════════════════════════════════════════════


class UserDetailSerializer(serializers.ModelSerializer):
    """Full profile of a user, as returned by ``/me/`` and registration."""

    name = serializers.CharField(source="display_name", read_only=True)

    class Meta:
        model = User
        fields = [
            "id",
            "username",
            "email",
            "first_name",
            "last_name",
            "name",
            "role",
            "mobile",
            "address",
            "is_active",
            "date_joined",
        ]
        read_only_fields = fields


class OfficerSerializer(serializers.ModelSerializer):
    """Officer roster entry with current workload."""

    name = serializers.CharField(source="display_name", read_only=True)
    open_complaints = serializers.IntegerField(read_only=True, default=0)

    class Meta:
        model = User
        fields = ["id", "username", "name", "email", "is_active",
                  "date_joined", "open_complaints"]
        read_only_fields = fields


class AssignRoleSerializer(serializers.Serializer):
    """Payload for ``PATCH /users/{id}/role/``."""

    role = serializers.ChoiceField(choices=UserRole.choices)
