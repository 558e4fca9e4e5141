"""
Tracing utilities for the Jeopardy board.

This module provides decorators and context managers for adding OpenTelemetry
tracing to application code. Every helper is a no-op unless
OTEL_EXPORTER_OTLP_ENDPOINT is set.
"""

import os
import time
from contextlib import contextmanager
from functools import wraps

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

# Cache for tracing enabled status
_TRACING_ENABLED = None


def is_tracing_enabled():
    """
    Check if OpenTelemetry tracing is configured.

    Returns:
        bool: True if an OTLP endpoint is configured, False otherwise
    """
    global _TRACING_ENABLED

    if _TRACING_ENABLED is None:
        _TRACING_ENABLED = bool(os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT"))
    return _TRACING_ENABLED


def reset_tracing_cache():
    """
    Reset the tracing enabled cache. Useful for testing or when environment
    variables change during runtime.
    """
    global _TRACING_ENABLED
    _TRACING_ENABLED = None


class DummySpan:
    def set_attribute(self, key, value):
        pass

    def set_status(self, status):
        pass

    def record_exception(self, exception):
        pass


def _record_success(span, start_time):
    span.set_attribute("operation.success", True)
    span.set_attribute("operation.execution_time_ms", (time.time() - start_time) * 1000)
    span.set_status(Status(StatusCode.OK))


def _record_failure(span, start_time, e):
    span.set_attribute("operation.success", False)
    span.set_attribute("operation.execution_time_ms", (time.time() - start_time) * 1000)
    span.set_attribute("operation.error", str(e))
    span.set_attribute("operation.error_type", type(e).__name__)
    span.record_exception(e)
    span.set_status(Status(StatusCode.ERROR, str(e)))


@contextmanager
def trace_operation(operation_name, **attributes):
    """
    Context manager for tracing operations with OpenTelemetry.

    Args:
        operation_name (str): Name of the operation being traced
        **attributes: Additional attributes to add to the span

    Example:
        with trace_operation("board.load_category", category_id=42) as span:
            category = builder.load_category(42)
    """
    if not is_tracing_enabled():
        yield DummySpan()
        return

    tracer = trace.get_tracer(__name__)

    with tracer.start_as_current_span(operation_name, attributes=attributes) as span:
        start_time = time.time()
        try:
            yield span
            _record_success(span, start_time)
        except Exception as e:
            _record_failure(span, start_time, e)
            raise


def trace_view(view_name, **attributes):
    """
    Decorator specifically for tracing Django views and API endpoints.

    Args:
        view_name (str): Name of the view being traced
        **attributes: Additional attributes to add to the span
    """

    def decorator(func):
        @wraps(func)
        def wrapper(request, *args, **kwargs):
            if not is_tracing_enabled():
                return func(request, *args, **kwargs)
            tracer = trace.get_tracer(__name__)

            view_attributes = {
                "http.method": request.method,
                "http.url": request.build_absolute_uri(),
                "session.id": request.session.session_key if hasattr(request, "session") else None,
                **attributes,
            }
            # OpenTelemetry rejects None attribute values
            view_attributes = {k: v for k, v in view_attributes.items() if v is not None}

            with tracer.start_as_current_span(f"view.{view_name}", attributes=view_attributes) as span:
                start_time = time.time()
                try:
                    result = func(request, *args, **kwargs)
                    _record_success(span, start_time)
                    span.set_attribute("http.status_code", getattr(result, "status_code", 200))
                    return result
                except Exception as e:
                    _record_failure(span, start_time, e)
                    raise

        return wrapper

    return decorator


def add_span_attribute(key, value):
    """
    Add an attribute to the current span.

    Example:
        add_span_attribute("board.id", board.board_id)
    """
    if not is_tracing_enabled():
        return

    current_span = trace.get_current_span()
    if current_span:
        current_span.set_attribute(key, value)
