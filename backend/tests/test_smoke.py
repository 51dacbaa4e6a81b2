"""
Smoke tests — verify that Django boots, URL routing resolves, the
OpenAPI schema renders and the shared domain helpers behave.

Only the schema test needs a DB; the rest prove the plumbing works.
"""

from __future__ import annotations

import pytest
from django.urls import resolve, reverse
from rest_framework.test import APIClient


# ════════════════════════════════════════════════════════════════════
#  URL Routing Smoke Tests
# ════════════════════════════════════════════════════════════════════

class TestURLRouting:
    """Ensure all top-level app URL namespaces resolve without 404."""

    EXPECTED_URLS = [
        # (url_name, expected_path)
        ("complaints:complaint-list",    "/api/complaints/"),
        ("complaints:complaint-assigned", "/api/complaints/assigned/"),
        ("core:notification-list",        "/api/core/notifications/"),
        ("core:notification-mark-all-as-read", "/api/core/notifications/read-all/"),
        ("core:dashboard-stats",          "/api/core/dashboard/"),
        ("core:system-constants",         "/api/core/constants/"),
        ("accounts:login",                "/api/accounts/auth/login/"),
        ("accounts:officer-list",         "/api/accounts/officers/"),
    ]

    @pytest.mark.parametrize("url_name,expected_path", EXPECTED_URLS)
    def test_url_reverses(self, url_name: str, expected_path: str):
        """Named URL reverses to the expected path."""
        url = reverse(url_name)
        assert url == expected_path, f"{url_name} resolved to {url}, expected {expected_path}"

    @pytest.mark.parametrize("url_name,expected_path", EXPECTED_URLS)
    def test_path_resolves_to_view(self, url_name: str, expected_path: str):
        """Path resolves to a view function (not a 404)."""
        match = resolve(expected_path)
        assert match.func is not None

    def test_tracking_route_accepts_human_id(self):
        url = reverse("complaints:complaint-track", kwargs={"human_id": "COMP-20260314-12345"})
        assert url == "/api/complaints/track/COMP-20260314-12345/"


@pytest.mark.django_db
def test_openapi_schema_renders():
    response = APIClient().get(reverse("schema"))
    assert response.status_code == 200


# ════════════════════════════════════════════════════════════════════
#  Exception & Helper Behaviour Tests
# ════════════════════════════════════════════════════════════════════

class TestDomainExceptions:
    """Unit tests for domain exception classes."""

    def test_inheritance_chain(self):
        from core.domain.exceptions import (
            ConcurrentUpdateError,
            Conflict,
            DomainError,
            NotFoundError,
            StorageError,
            ValidationError,
        )
        assert issubclass(ConcurrentUpdateError, Conflict)
        assert issubclass(Conflict, DomainError)
        for exc in (NotFoundError, StorageError, ValidationError):
            assert issubclass(exc, DomainError)

    def test_validation_error_carries_field(self):
        from core.domain.exceptions import ValidationError
        err = ValidationError("Invalid officer.", field="officer_id")
        assert str(err) == "Invalid officer."
        assert err.field == "officer_id"

    def test_concurrent_update_message(self):
        from core.domain.exceptions import ConcurrentUpdateError
        err = ConcurrentUpdateError(pk=7, expected_version=3)
        assert "Complaint 7" in str(err)
        assert "expected version 3" in str(err)


class TestPagination:
    """Unit tests for ``core.domain.pagination``."""

    def test_page_count(self):
        from core.domain.pagination import Page
        assert Page(total=21, limit=10).pages == 3
        assert Page(total=0, limit=10).pages == 0
        assert Page(total=20, page=1, limit=10).has_next

    @pytest.mark.parametrize(
        "page,limit,expected",
        [
            (None, None, (1, 10, 0)),
            (3, 5, (3, 5, 10)),
            (0, -4, (1, 10, 0)),
        ],
    )
    def test_normalise_window(self, page, limit, expected):
        from core.domain.pagination import normalise_window
        assert normalise_window(page, limit, 10) == expected
