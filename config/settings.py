"""
Django settings for the worklog-guard project.

Every deployment-specific value is read from the environment so the same
settings module serves local development, CI and production.
"""
import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "worklog-guard-insecure-dev-key")
DEBUG = os.environ.get("DJANGO_DEBUG", "true").lower() in ("1", "true", "yes")
ALLOWED_HOSTS = [h.strip() for h in os.environ.get("DJANGO_ALLOWED_HOSTS", "*").split(",") if h.strip()]

INSTALLED_APPS = [
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.staticfiles",
    "rest_framework",
    "django_ratelimit",
    "upstream",
    "workcalendar",
    "conflicts",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
]

ROOT_URLCONF = "config.urls"
WSGI_APPLICATION = "config.wsgi.application"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": os.environ.get("DJANGO_SQLITE_PATH", str(BASE_DIR / "db.sqlite3")),
    }
}

CACHES = {
    "default": {
        "BACKEND": os.environ.get("DJANGO_CACHE_BACKEND", "django.core.cache.backends.locmem.LocMemCache"),
        "LOCATION": os.environ.get("DJANGO_CACHE_LOCATION", "worklog-guard"),
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

LANGUAGE_CODE = "en-us"
TIME_ZONE = os.environ.get("DJANGO_TIME_ZONE", "UTC")
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"

# The caller's bearer token is forwarded to the upstream API as-is; no local
# authentication backend is involved.
REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": ["upstream.permissions.HasUpstreamCredentials"],
    "DEFAULT_RENDERER_CLASSES": ["rest_framework.renderers.JSONRenderer"],
    "UNAUTHENTICATED_USER": None,
    "EXCEPTION_HANDLER": "upstream.utils.custom_exception_handler",
}

# Upstream timesheet / leave API
UPSTREAM_API_BASE_URL = os.environ.get("UPSTREAM_API_BASE_URL", "http://localhost:8000")
UPSTREAM_API_TIMEOUT = float(os.environ.get("UPSTREAM_API_TIMEOUT", "10"))
UPSTREAM_API_ENDPOINTS = {
    "timesheet_by_date": "/v1/timesheets/by-date",
    "leave_requests": "/v1/leaves/requests",
    "monthly_timesheet": "/v1/timesheets/monthly",
    "leave_application": "/v1/leaves/application",
    "timesheet_entries": "/v1/activities/submit",
    "compoff_request": "/v1/compoff/request",
}

WORKLOG_VALIDATION = {
    "MAX_HOURS_WITH_HALF_DAY_LEAVE": float(os.environ.get("MAX_HOURS_WITH_HALF_DAY_LEAVE", "6")),
    "MIN_HOURS_PER_ENTRY": 0.5,
    "MAX_HOURS_PER_ENTRY": 15,
    "HOURS_INPUT_STEP": 0.5,
    "MIN_TASK_DESCRIPTION_LENGTH": 10,
    "MAX_TASK_TITLE_LENGTH": 200,
    "MIN_LEAVE_REASON_LENGTH": 10,
    "MAX_LEAVE_RANGE_DAYS": int(os.environ.get("MAX_LEAVE_RANGE_DAYS", "92")),
}

LIVE_VALIDATION_TIMEOUT = int(os.environ.get("LIVE_VALIDATION_TIMEOUT", str(15 * 60)))

HOLIDAY_CACHE_TIMEOUT = int(os.environ.get("HOLIDAY_CACHE_TIMEOUT", str(60 * 60 * 6)))
CONFLICT_CHECK_RATE = os.environ.get("CONFLICT_CHECK_RATE", "120/m")

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "{asctime} {levelname} {name} {message}",
            "style": "{",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": os.environ.get("DJANGO_LOG_LEVEL", "INFO"),
    },
    "loggers": {
        "upstream": {"level": "INFO"},
        "workcalendar": {"level": "INFO"},
        "conflicts": {"level": "INFO"},
    },
}
