import logging
from functools import lru_cache

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from supabase import create_client, Client

logger = logging.getLogger(__name__)

SUPABASE_BACKEND = "supabase"
DJANGO_BACKEND = "django"


def store_backend() -> str:
    backend = (getattr(settings, "CHAT_STORE_BACKEND", DJANGO_BACKEND) or DJANGO_BACKEND).lower()
    if backend not in (DJANGO_BACKEND, SUPABASE_BACKEND):
        raise ImproperlyConfigured(f"Unknown CHAT_STORE_BACKEND: {backend!r}")
    return backend


@lru_cache(maxsize=1)
def get_supabase_client() -> Client:
    """Create and cache the service-role Supabase client."""
    url = getattr(settings, "SUPABASE_URL", "")
    key = getattr(settings, "SUPABASE_SERVICE_KEY", "")
    if not (url and key):
        raise ImproperlyConfigured("SUPABASE_URL and SUPABASE_SERVICE_KEY must be set for the supabase store")
    logger.info("Creating Supabase client for %s", url)
    return create_client(url, key)
