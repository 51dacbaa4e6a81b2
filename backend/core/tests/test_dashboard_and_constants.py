from __future__ import annotations

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from accounts.models import UserRole
from complaints.models import Complaint

User = get_user_model()


class TestDashboardStats(TestCase):
    @classmethod
    def setUpTestData(cls) -> None:
        cls.admin = User.objects.create_user(
            username="dash_admin", password="Adm1n!Dash", email="dash_admin@test.local",
            role=UserRole.ADMIN,
        )
        cls.officer = User.objects.create_user(
            username="dash_officer", password="0fficer!Dash", email="dash_officer@test.local",
            role=UserRole.OFFICER,
        )
        rows = [
            ("Road", "Public Works", "Pending", cls.officer),
            ("Road", "Public Works", "In Progress", cls.officer),
            ("Water", "Water Supply", "Resolved", None),
            ("Other", "General", "Rejected", None),
        ]
        for i, (category, department, state, officer) in enumerate(rows):
            Complaint.objects.create(
                human_id=f"COMP-20260314-4000{i}",
                title=f"Complaint {i}",
                description="d",
                category=category,
                department=department,
                status=state,
                submitted_by=cls.admin,
                assigned_to=officer,
            )

    def setUp(self) -> None:
        self.client = APIClient()
        self.url = reverse("core:dashboard-stats")

    def test_counters(self):
        self.client.force_authenticate(user=self.admin)

        response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["total"], 4)
        self.assertEqual(
            (response.data["pending"], response.data["in_progress"],
             response.data["resolved"], response.data["rejected"]),
            (1, 1, 1, 1),
        )
        self.assertEqual(response.data["unassigned"], 2)
        by_category = {row["category"]: row["count"] for row in response.data["by_category"]}
        self.assertEqual(by_category, {"Other": 1, "Road": 2, "Water": 1})

    def test_admin_only(self):
        self.client.force_authenticate(user=self.officer)
        self.assertEqual(self.client.get(self.url).status_code, status.HTTP_403_FORBIDDEN)


class TestSystemConstants(TestCase):
    def test_public_constants(self):
        response = APIClient().get(reverse("core:system-constants"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        statuses = [item["value"] for item in response.data["complaint_statuses"]]
        self.assertEqual(statuses, ["Pending", "In Progress", "Resolved", "Rejected"])
        routing = {row["category"]: row["department"] for row in response.data["category_departments"]}
        self.assertEqual(routing["Electricity"], "Electricity Board")
        self.assertIn("Citizen", [item["value"] for item in response.data["user_roles"]])
