"""WSGI entry point for Upkeep."""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "upkeep.settings.prod")

application = get_wsgi_application()
