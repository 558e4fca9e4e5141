import base64
import binascii
from functools import wraps

from django.conf import settings
from django.http import HttpResponse


def basic_auth_required(view_func):
    """
    Decorator that implements Basic Authentication for views.
    Guards the Prometheus metrics endpoints.
    """

    @wraps(view_func)
    def _wrapped_view(request, *args, **kwargs):
        if not settings.PROMETHEUS_METRICS_ENABLED:
            return HttpResponse("Metrics collection is disabled", status=404)

        auth_header = request.META.get("HTTP_AUTHORIZATION")
        if not auth_header or " " not in auth_header:
            return unauthorized_response()

        auth_type, auth_string = auth_header.split(" ", 1)
        if auth_type.lower() != "basic":
            return unauthorized_response()

        try:
            auth_decoded = base64.b64decode(auth_string).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError):
            return unauthorized_response()
        if ":" not in auth_decoded:
            return unauthorized_response()

        username, password = auth_decoded.split(":", 1)
        # An empty configured password never matches
        if (
            settings.PROMETHEUS_METRICS_AUTH_PASSWORD
            and username == settings.PROMETHEUS_METRICS_AUTH_USERNAME
            and password == settings.PROMETHEUS_METRICS_AUTH_PASSWORD
        ):
            return view_func(request, *args, **kwargs)

        return unauthorized_response()

    return _wrapped_view


def unauthorized_response():
    """Return a 401 Unauthorized response with WWW-Authenticate header"""
    response = HttpResponse("Unauthorized: Authentication credentials were not provided or are invalid.", status=401)
    response["WWW-Authenticate"] = 'Basic realm="Prometheus Metrics"'
    return response
