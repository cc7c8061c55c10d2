"""Django settings for the gridboard project."""

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "gridboard-insecure-development-key")

DEBUG = os.environ.get("DJANGO_DEBUG", "1") == "1"

ALLOWED_HOSTS = [
    host.strip()
    for host in os.environ.get("DJANGO_ALLOWED_HOSTS", "localhost,127.0.0.1,testserver").split(",")
    if host.strip()
]

INSTALLED_APPS = [
    "gridboard",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
]

ROOT_URLCONF = "gridboard_site.urls"

WSGI_APPLICATION = "gridboard_site.wsgi.application"

# No models and no DATABASES: the grid is kept per visitor in a signed cookie.
SESSION_ENGINE = "django.contrib.sessions.backends.signed_cookies"

USE_TZ = True
TIME_ZONE = "UTC"

GRIDBOARD_INITIAL_ITEMS = [
    {"id": 1, "columns": 4},
    {"id": 2, "columns": 4},
    {"id": 3, "columns": 4},
]

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {"format": "%(asctime)s %(levelname)s %(name)s: %(message)s"},
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "simple"},
    },
    "loggers": {
        "gridboard": {
            "handlers": ["console"],
            "level": os.environ.get("GRIDBOARD_LOG_LEVEL", "INFO"),
            "propagate": False,
        },
    },
}
