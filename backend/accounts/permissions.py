"""
Role-based DRF permission classes.

The complaint workflow assumes access control has already been decided;
these classes are where the HTTP layer decides it.

Usage::

    class ComplaintViewSet(viewsets.ViewSet):
        def get_permissions(self):
            if self.action == "destroy":
                return [role_required(UserRole.ADMIN)()]
            ...
"""

from __future__ import annotations

from rest_framework.permissions import BasePermission

from .models import UserRole


def effective_role(user) -> str | None:
    """Return the user's role, treating superusers as admins."""
    if not getattr(user, "is_authenticated", False):
        return None
    if user.is_superuser:
        return UserRole.ADMIN
    return getattr(user, "role", None)


class RolePermission(BasePermission):
    """Grants access when the authenticated user's role is in ``allowed_roles``."""

    allowed_roles: tuple[str, ...] = ()
    message = "Your role is not allowed to perform this action."

    def has_permission(self, request, view) -> bool:
        return effective_role(request.user) in self.allowed_roles


def role_required(*roles: str) -> type[RolePermission]:
    """Build a ``RolePermission`` subclass for the given roles."""
    names = "Or".join(str(r) for r in roles)
    return type(
        f"Is{names}",
        (RolePermission,),
        {
            "allowed_roles": tuple(roles),
            "message": f"Only {', '.join(str(r) for r in roles)} users may perform this action.",
        },
    )


IsCitizen = role_required(UserRole.CITIZEN)
IsOfficer = role_required(UserRole.OFFICER)
IsAdminRole = role_required(UserRole.ADMIN)
IsOfficerOrAdmin = role_required(UserRole.OFFICER, UserRole.ADMIN)
