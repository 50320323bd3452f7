"""WSGI entry point for the ClassBridge backend."""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "classbridge.settings")

application = get_wsgi_application()
