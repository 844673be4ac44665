"""Impostazioni base.

Every path the portal touches (config files, render data, content, deploy
logs) is resolved against SITE_REPO_ROOT, the working copy of the static
site repository that git add/commit/push run in.
"""
import os
import sys
from pathlib import Path
import environ

# Setup environ
env = environ.Env(DEBUG=(bool, False), PUBLISH_IN_BACKGROUND=(bool, True))
# Carica .env
environ.Env.read_env(os.getenv("ENV_FILE", ".env"))

BASE_DIR = Path(__file__).resolve().parent.parent.parent

SECRET_KEY = env("SECRET_KEY", default="dev-insecure-change-me")
DEBUG = env.bool("DEBUG") if "DEBUG" in os.environ else False
ALLOWED_HOSTS = env.list("ALLOWED_HOSTS") if "ALLOWED_HOSTS" in os.environ else []
CORS_ALLOWED_ORIGINS = env.list("CORS_ALLOWED_ORIGINS", default=None) or []
CSRF_TRUSTED_ORIGINS = env.list("CSRF_TRUSTED_ORIGINS", default=None) or []

# Lo stato vive in file JSON dentro il repo del sito; il DB serve solo a contrib.auth
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": BASE_DIR / "db.sqlite3",
    }
}
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "django.contrib.auth",
    # App di progetto
    "portal.apps.PortalConfig",
    # Terze parti
    "corsheaders",
    "rest_framework",
]

MIDDLEWARE = [
    "corsheaders.middleware.CorsMiddleware",
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
    "core.middleware.api_errors.ApiErrorAsJsonMiddleware",
]

MIDDLEWARE.append("core.middleware.exception_logging.VerboseExceptionLoggingMiddleware")

ROOT_URLCONF = "urls"
WSGI_APPLICATION = "wsgi.application"

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

# The portal is operated by a trusted operator: no auth layer, JSON only.
REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": [
        "rest_framework.permissions.AllowAny",
    ],
    "DEFAULT_RENDERER_CLASSES": [
        "rest_framework.renderers.JSONRenderer",
    ],
    "DEFAULT_PARSER_CLASSES": [
        "rest_framework.parsers.JSONParser",
    ],
    "UNAUTHENTICATED_USER": None,
    "EXCEPTION_HANDLER": "core.rest.exceptions.custom_exception_handler",
}

# --- Site repository layout ---
SITE_REPO_ROOT = env("SITE_REPO_ROOT", default=str(BASE_DIR))
SITE_GIT_REMOTE = env("SITE_GIT_REMOTE", default="")
SITE_GIT_BRANCH = env("SITE_GIT_BRANCH", default="")
HOMEPAGE_CONFIG_FILE = env("HOMEPAGE_CONFIG_FILE", default=".homepage-config.json")
HOMEPAGE_DATA_FILE = env("HOMEPAGE_DATA_FILE", default="src/data/homepage-config.json")
ADMIN_SETTINGS_FILE = env("ADMIN_SETTINGS_FILE", default=".admin-settings.json")
CONTENT_DIR = env("CONTENT_DIR", default="src/content")
DEPLOY_LOG_DIR = env("DEPLOY_LOG_DIR", default="logs")
# Materialize publishes on a daemon thread; off = synchronous (tests, commands)
PUBLISH_IN_BACKGROUND = env.bool("PUBLISH_IN_BACKGROUND", default=True)

# Logging
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {"format": "%(levelname)s %(name)s %(message)s"},
        "verbose": {
            "format": "%(asctime)s %(levelname)s [%(name)s] %(module)s:%(lineno)d %(message)s"
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "stream": sys.stdout,
            "formatter": "verbose",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": "INFO",
    },
    "loggers": {
        "django.request": {"handlers": ["console"], "level": "ERROR", "propagate": False},
        "core.rest.exceptions": {"level": "INFO"},
        # Debug publisher/git dettagliato
        "portal": {"handlers": ["console"], "level": "DEBUG", "propagate": False},
    },
}
