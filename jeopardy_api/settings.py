"""
Django settings for jeopardy_api project.

Every deployment-specific value is read from the environment so the same
settings module serves development, tests and production.
"""

import os
from pathlib import Path


def env_bool(name, default=False):
    return os.environ.get(name, str(default)).lower() in ("1", "true", "yes")


def env_int(name, default):
    return int(os.environ.get(name, default))


def env_float(name, default):
    return float(os.environ.get(name, default))


BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "django-insecure-jeopardy-development-key")

DEBUG = env_bool("DJANGO_DEBUG", False)

ALLOWED_HOSTS = [host.strip() for host in os.environ.get("DJANGO_ALLOWED_HOSTS", "localhost,127.0.0.1").split(",") if host.strip()]

INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.staticfiles",
    "django_prometheus",
    "jeopardy_app",
]

MIDDLEWARE = [
    "django_prometheus.middleware.PrometheusBeforeMiddleware",
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
    "django_prometheus.middleware.PrometheusAfterMiddleware",
]

ROOT_URLCONF = "jeopardy_api.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
            ],
        },
    },
]

WSGI_APPLICATION = "jeopardy_api.wsgi.application"

# Sessions hold the boards, nothing else is stored
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": os.environ.get("DJANGO_DB_PATH", str(BASE_DIR / "db.sqlite3")),
    }
}

CACHES = {
    "default": {
        "BACKEND": os.environ.get("DJANGO_CACHE_BACKEND", "django.core.cache.backends.locmem.LocMemCache"),
        "LOCATION": os.environ.get("DJANGO_CACHE_LOCATION", "jeopardy"),
    },
    # Board locks must be visible to every worker process; run createcachetable for the default
    "locks": {
        "BACKEND": os.environ.get("JEOPARDY_LOCK_CACHE_BACKEND", "django.core.cache.backends.db.DatabaseCache"),
        "LOCATION": os.environ.get("JEOPARDY_LOCK_CACHE_LOCATION", "jeopardy_locks"),
    },
}

SESSION_ENGINE = "django.contrib.sessions.backends.db"
SESSION_COOKIE_AGE = env_int("DJANGO_SESSION_COOKIE_AGE", 60 * 60 * 24 * 7)

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"
STATIC_ROOT = os.environ.get("DJANGO_STATIC_ROOT", str(BASE_DIR / "staticfiles"))

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# Board
JEOPARDY_CATEGORY_COUNT = env_int("JEOPARDY_CATEGORY_COUNT", 6)
JEOPARDY_QUESTIONS_PER_CATEGORY = env_int("JEOPARDY_QUESTIONS_PER_CATEGORY", 5)
JEOPARDY_CANDIDATE_POOL_SIZE = env_int("JEOPARDY_CANDIDATE_POOL_SIZE", 100)
JEOPARDY_PARALLEL_FETCH = env_bool("JEOPARDY_PARALLEL_FETCH", False)
JEOPARDY_MAX_FETCH_WORKERS = env_int("JEOPARDY_MAX_FETCH_WORKERS", 4)
JEOPARDY_SESSION_LOCK_TIMEOUT = env_float("JEOPARDY_SESSION_LOCK_TIMEOUT", 10.0)
JEOPARDY_LOCK_CACHE = "locks"
JEOPARDY_BOARD_MAX_AGE_DAYS = env_int("JEOPARDY_BOARD_MAX_AGE_DAYS", 7)

# Trivia data source
TRIVIA_API_BASE_URL = os.environ.get("TRIVIA_API_BASE_URL", "https://jservice.io/api")
TRIVIA_API_TIMEOUT = env_float("TRIVIA_API_TIMEOUT", 5.0)
TRIVIA_API_MAX_RETRIES = env_int("TRIVIA_API_MAX_RETRIES", 3)
TRIVIA_API_MIN_DELAY = env_float("TRIVIA_API_MIN_DELAY", 0.0)
TRIVIA_API_CACHE_TIMEOUT = env_int("TRIVIA_API_CACHE_TIMEOUT", 3600 * 24)

# Prometheus
PROMETHEUS_METRICS_ENABLED = env_bool("PROMETHEUS_METRICS_ENABLED", True)
PROMETHEUS_METRICS_AUTH_USERNAME = os.environ.get("PROMETHEUS_METRICS_AUTH_USERNAME", "prometheus")
PROMETHEUS_METRICS_AUTH_PASSWORD = os.environ.get("PROMETHEUS_METRICS_AUTH_PASSWORD", "")

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
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
        "django": {
            "handlers": ["console"],
            "level": os.environ.get("DJANGO_LOG_LEVEL", "INFO"),
            "propagate": False,
        },
    },
}
