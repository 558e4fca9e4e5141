"""
WSGI config for jeopardy_api project.

It exposes the WSGI callable as a module-level variable named ``application``.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "jeopardy_api.settings")

if os.environ.get("OTEL_EXPORTER_OTLP_ENDPOINT"):
    from jeopardy_api.opentelemetry_config import initialize

    initialize()

application = get_wsgi_application()
