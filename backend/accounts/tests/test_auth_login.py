"""
Integration tests — login with username or email.

Endpoint under test:  POST /api/accounts/auth/login/
                      (named URL: accounts:login)
Request payload:      {"identifier": "<username|email>", "password": "<password>"}
Success response:     HTTP 200, body contains {"access": "...", "refresh": "...",
                      "user": {...}}
Failure response:     HTTP 401 for bad credentials, HTTP 400 for a
                      malformed body.
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

from accounts.models import UserRole

User = get_user_model()

# ── Constants ────────────────────────────────────────────────────────────────
_PASSWORD = "Str0ng!Pass99"

_USER_FIELDS = {
    "username":   "login_test_user",
    "email":      "login_test_user@example.com",
    "first_name": "Login",
    "last_name":  "Tester",
}


class TestAuthLogin(TestCase):
    """Integration tests for the identifier login endpoint."""

    @classmethod
    def setUpTestData(cls):
        cls.user = User.objects.create_user(
            password=_PASSWORD,
            role=UserRole.OFFICER,
            **_USER_FIELDS,
        )

    def setUp(self):
        # Fresh unauthenticated client for every test.
        self.client = APIClient()
        self.login_url = reverse("accounts:login")

    # ── Helper ───────────────────────────────────────────────────────────────

    def _post_login(self, identifier: str, password: str):
        return self.client.post(
            self.login_url,
            {"identifier": identifier, "password": password},
            format="json",
        )

    # ── Success tests ────────────────────────────────────────────────────────

    def test_login_with_username(self):
        resp = self._post_login(_USER_FIELDS["username"], _PASSWORD)

        self.assertEqual(
            resp.status_code,
            status.HTTP_200_OK,
            msg=f"Expected 200 logging in with username. Body: {resp.data}",
        )
        self._assert_token_shape(resp)
        self._assert_user_info(resp)

    def test_login_with_email_is_case_insensitive(self):
        resp = self._post_login(_USER_FIELDS["email"].upper(), _PASSWORD)

        self.assertEqual(
            resp.status_code,
            status.HTTP_200_OK,
            msg=f"Expected 200 logging in with email. Body: {resp.data}",
        )
        self._assert_user_info(resp)

    def test_access_token_carries_role_claim(self):
        resp = self._post_login(_USER_FIELDS["username"], _PASSWORD)

        token = AccessToken(resp.data["access"])
        self.assertEqual(token["role"], UserRole.OFFICER)
        self.assertEqual(str(token["user_id"]), str(self.user.pk))

    # ── Failure tests ────────────────────────────────────────────────────────

    def test_wrong_password_rejected(self):
        resp = self._post_login(_USER_FIELDS["username"], "Wr0ng!Password")

        self.assertEqual(
            resp.status_code,
            status.HTTP_401_UNAUTHORIZED,
            msg=f"Expected 401 for wrong password. Body: {resp.data}",
        )
        self.assertNotIn("access", resp.data)

    def test_unknown_identifier_rejected(self):
        resp = self._post_login("nobody_here", _PASSWORD)

        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertIn("detail", resp.data)

    def test_inactive_user_cannot_login(self):
        inactive = User.objects.create_user(
            username="inactive_login_user",
            password=_PASSWORD,
            email="inactive_login@example.com",
            is_active=False,
        )
        resp = self._post_login(inactive.username, _PASSWORD)

        self.assertEqual(
            resp.status_code,
            status.HTTP_401_UNAUTHORIZED,
            msg=f"Expected 401 for inactive user login. Body: {resp.data}",
        )

    def test_missing_password_field_rejected(self):
        resp = self.client.post(
            self.login_url,
            {"identifier": _USER_FIELDS["username"]},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

    def test_missing_identifier_field_rejected(self):
        resp = self.client.post(self.login_url, {"password": _PASSWORD}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

    # ── Shared assertion helpers ──────────────────────────────────────────────

    def _assert_token_shape(self, resp) -> None:
        for key in ("access", "refresh", "user"):
            self.assertIn(key, resp.data, msg=f"'{key}' missing from login response.")
        self.assertIsInstance(resp.data["access"], str)
        self.assertTrue(resp.data["access"])

    def _assert_user_info(self, resp) -> None:
        user = resp.data["user"]
        self.assertEqual(user["id"], self.user.pk)
        self.assertEqual(user["username"], _USER_FIELDS["username"])
        self.assertEqual(user["role"], UserRole.OFFICER)
        self.assertEqual(user["name"], "Login Tester")
