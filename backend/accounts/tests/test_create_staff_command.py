"""
Tests for the ``create_staff`` management command.
"""

from __future__ import annotations

from io import StringIO

from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase

from accounts.models import UserRole

User = get_user_model()


class TestCreateStaffCommand(TestCase):

    def _run(self, *args) -> str:
        out = StringIO()
        call_command("create_staff", *args, stdout=out)
        return out.getvalue()

    def test_creates_officer(self):
        output = self._run(
            "staff_officer", "staff_officer@city.test",
            "--first-name", "Ana", "--last-name", "Ortiz", "--password", "0fficer!Staff",
        )

        user = User.objects.get(username="staff_officer")
        self.assertEqual(user.role, UserRole.OFFICER)
        self.assertEqual(user.display_name, "Ana Ortiz")
        self.assertTrue(user.check_password("0fficer!Staff"))
        self.assertIn("Created Officer 'staff_officer'", output)

    def test_rerun_updates_role_and_keeps_password(self):
        self._run("staff_admin", "staff_admin@city.test", "--password", "Adm1n!Staff")

        output = self._run("staff_admin", "staff_admin@city.test", "--role", "Admin", "--inactive")

        user = User.objects.get(username="staff_admin")
        self.assertEqual(user.role, UserRole.ADMIN)
        self.assertFalse(user.is_active)
        self.assertTrue(user.check_password("Adm1n!Staff"))
        self.assertIn("Updated Admin", output)
        self.assertIn("[inactive]", output)
        self.assertEqual(User.objects.count(), 1)

    def test_new_account_needs_password(self):
        with self.assertRaises(CommandError):
            self._run("staff_nopass", "staff_nopass@city.test")
        self.assertFalse(User.objects.exists())

    def test_citizen_role_is_not_accepted(self):
        with self.assertRaises(CommandError):
            self._run("staff_cit", "staff_cit@city.test", "--role", "Citizen", "--password", "x")
