"""
Integration tests — citizen self-registration.

Endpoint under test:  POST /api/accounts/auth/register/
                      (named URL: accounts:register)
Expected status:      201 Created, 400 on invalid input, 409 on a taken
                      username or email.
Response serializer:  UserDetailSerializer (see accounts/serializers.py)
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from accounts.models import UserRole

User = get_user_model()


def _payload(suffix: str = "1", **overrides) -> dict:
    data = {
        "username": f"reg_user_{suffix}",
        "password": "Str0ng!Pass1",
        "password_confirm": "Str0ng!Pass1",
        "email": f"reg_user_{suffix}@example.com",
        "first_name": "Reg",
        "last_name": f"User{suffix}",
    }
    data.update(overrides)
    return data


class TestRegistration(TestCase):

    def setUp(self):
        self.client = APIClient()
        self.register_url = reverse("accounts:register")

    def _register(self, payload: dict):
        return self.client.post(self.register_url, payload, format="json")

    def test_register_returns_201_with_profile(self):
        resp = self._register(_payload(mobile="0123456789", address="12 Elm Road"))

        self.assertEqual(resp.status_code, status.HTTP_201_CREATED, msg=resp.data)
        for key in ("id", "username", "email", "name", "role", "mobile", "address", "date_joined"):
            self.assertIn(key, resp.data)
        self.assertEqual(resp.data["role"], UserRole.CITIZEN)
        self.assertEqual(resp.data["name"], "Reg User1")

    def test_password_is_hashed_and_not_echoed(self):
        resp = self._register(_payload())

        self.assertNotIn("password", resp.data)
        self.assertNotIn("password_confirm", resp.data)
        user = User.objects.get(username="reg_user_1")
        self.assertNotEqual(user.password, "Str0ng!Pass1")
        self.assertTrue(user.check_password("Str0ng!Pass1"))

    def test_role_in_payload_is_ignored(self):
        resp = self._register(_payload(role=UserRole.ADMIN))

        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual(User.objects.get(username="reg_user_1").role, UserRole.CITIZEN)

    def test_password_mismatch_rejected(self):
        resp = self._register(_payload(password_confirm="Different!Pass1"))

        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("password_confirm", resp.data)

    def test_short_password_rejected(self):
        resp = self._register(_payload(password="Ab1!", password_confirm="Ab1!"))
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

    def test_malformed_mobile_rejected(self):
        resp = self._register(_payload(mobile="12345"))

        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("mobile", resp.data)

    def test_missing_required_fields_rejected(self):
        payload = _payload()
        del payload["first_name"]
        del payload["email"]

        resp = self._register(payload)

        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("first_name", resp.data)
        self.assertIn("email", resp.data)

    def test_duplicate_email_is_a_conflict(self):
        self._register(_payload("1"))

        resp = self._register(_payload("2", email="REG_USER_1@example.com"))

        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)
        self.assertIn("email", resp.data["detail"])
        self.assertEqual(User.objects.count(), 1)
