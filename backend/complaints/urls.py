"""
Complaints app URL configuration.

URL prefix (registered in ``civicdesk/urls.py``)::

    path('api/', include('complaints.urls'))

Endpoint summary
----------------
GET    /api/complaints/                        — List (filters + pagination).
POST   /api/complaints/                        — Submit (Citizen).
GET    /api/complaints/{id}/                   — Retrieve.
PATCH  /api/complaints/{id}/                   — Edit details.
DELETE /api/complaints/{id}/                   — Delete (Admin).
POST   /api/complaints/{id}/comments/          — Add a comment.
PATCH  /api/complaints/{id}/status/            — Change status.
PATCH  /api/complaints/{id}/assign/            — Assign an officer (Admin).
GET    /api/complaints/assigned/               — Officer work queue.
GET    /api/complaints/track/{human_id}/       — Public tracking.
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import ComplaintViewSet

app_name = "complaints"

router = DefaultRouter()
router.register(r"complaints", ComplaintViewSet, basename="complaint")

urlpatterns = [
    path("", include(router.urls)),
]
