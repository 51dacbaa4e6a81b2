"""ASGI entry point for the civicdesk project."""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "civicdesk.settings")

application = get_asgi_application()
