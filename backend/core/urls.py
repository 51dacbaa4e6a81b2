"""
Core app URL configuration.

URL prefix (registered in ``civicdesk/urls.py``)::

    path('api/core/', include('core.urls'))

Endpoint summary
----------------
GET    /api/core/dashboard/                          — Complaint counters (Admin).
GET    /api/core/constants/                          — Choice enumerations for dropdowns.
GET    /api/core/notifications/                      — Paginated notifications + unread_count.
GET    /api/core/notifications/unread-count/         — Unread counter.
POST   /api/core/notifications/{id}/read/            — Mark one notification as read.
POST   /api/core/notifications/read-all/             — Mark every notification as read.
DELETE /api/core/notifications/{id}/                 — Delete a notification.
POST   /api/core/notifications/register-device/      — Register a push token.
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from . import views

app_name = "core"

# ── Router for ViewSet-based endpoints ───────────────────────────────
router = DefaultRouter()
router.register(
    prefix=r"notifications",
    viewset=views.NotificationViewSet,
    basename="notification",
)

urlpatterns = [
    # ── Dashboard ────────────────────────────────────────────────────
    path(
        "dashboard/",
        views.DashboardStatsView.as_view(),
        name="dashboard-stats",
    ),

    # ── System Constants / Enums ─────────────────────────────────────
    path(
        "constants/",
        views.SystemConstantsView.as_view(),
        name="system-constants",
    ),

    # ── Notifications (router-generated URLs) ────────────────────────
    path("", include(router.urls)),
]
