import os

from .base import *  # noqa
from django.core.exceptions import ImproperlyConfigured

DEBUG = False
SECRET_KEY = env("SECRET_KEY")

# --- CORS/CSRF ristretti all'origine dell'admin UI (da .env) ---
ALLOWED_HOSTS = env.list("ALLOWED_HOSTS")
CORS_ALLOWED_ORIGINS = env.list("CORS_ALLOWED_ORIGINS")
CSRF_TRUSTED_ORIGINS = env.list("CSRF_TRUSTED_ORIGINS", default=[])

# Security headers minime
SECURE_CONTENT_TYPE_NOSNIFF = True
SECURE_SSL_REDIRECT = env.bool("SECURE_SSL_REDIRECT", default=True)
SECURE_HSTS_SECONDS = 31536000
SECURE_REFERRER_POLICY = "strict-origin"

# In prod il repo del sito va indicato esplicitamente
if "SITE_REPO_ROOT" not in os.environ:
    raise ImproperlyConfigured(
        "SITE_REPO_ROOT non configurato: indica la working copy git del sito statico."
    )
