"""
Accounts app models.

Defines the custom ``User`` model used across the project.  Every user
holds exactly one role: citizens file complaints, officers handle them,
admins assign and moderate.  ``date_joined`` doubles as the account
creation timestamp the default routing policy orders officers by.
"""

from django.contrib.auth.models import AbstractUser
from django.db import models


class UserRole(models.TextChoices):
    """The three roles known to the complaint workflow."""

    CITIZEN = "Citizen", "Citizen"
    OFFICER = "Officer", "Officer"
    ADMIN = "Admin", "Admin"


class User(AbstractUser):
    """
    Custom user model for the civic complaint system.

    Registration requires at minimum: username, password, email,
    first_name and last_name.  New users register as citizens; an admin
    promotes officers through the Django admin or
    ``UserManagementService.set_role``.
    """

    email = models.EmailField(
        unique=True,
        verbose_name="Email Address",
    )
    role = models.CharField(
        max_length=10,
        choices=UserRole.choices,
        default=UserRole.CITIZEN,
        verbose_name="Role",
        db_index=True,
    )
    mobile = models.CharField(
        max_length=15,
        blank=True,
        default="",
        verbose_name="Mobile Number",
    )
    address = models.CharField(
        max_length=500,
        blank=True,
        default="",
        verbose_name="Address",
    )

    REQUIRED_FIELDS = ["email", "first_name", "last_name"]

    class Meta:
        verbose_name = "User"
        verbose_name_plural = "Users"

    def __str__(self):
        return f"{self.username} ({self.display_name}) - {self.role}"

    # ── Helper predicates for role checks ────────────────────────────

    def has_role(self, role_name: str) -> bool:
        """Check if the user's current role matches the given name."""
        return self.role == role_name

    @property
    def is_officer(self) -> bool:
        return self.role == UserRole.OFFICER

    @property
    def is_admin_role(self) -> bool:
        return self.role == UserRole.ADMIN or self.is_superuser

    @property
    def display_name(self) -> str:
        return self.get_full_name() or self.username
