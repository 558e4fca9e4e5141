"""
OpenTelemetry configuration for the Jeopardy board.

This module sets up OpenTelemetry tracing and metrics collection. It is only
initialised when OTEL_EXPORTER_OTLP_ENDPOINT is set.
"""

import base64
import logging
import os

from opentelemetry import metrics, trace
from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.django import DjangoInstrumentor
from opentelemetry.instrumentation.logging import LoggingInstrumentor
from opentelemetry.instrumentation.requests import RequestsInstrumentor
from opentelemetry.instrumentation.sqlite3 import SQLite3Instrumentor
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.sdk.trace.sampling import ALWAYS_ON

logger = logging.getLogger(__name__)


def _auth_headers():
    """Basic auth headers for the OTLP endpoint, if credentials are configured."""
    instance_id = os.getenv("OTEL_EXPORTER_AUTH_USER")
    api_token = os.getenv("OTEL_EXPORTER_AUTH_TOKEN")
    if not instance_id or not api_token:
        return None
    auth_b64 = base64.b64encode(f"{instance_id}:{api_token}".encode("utf-8")).decode("utf-8")
    return [("authorization", f"Basic {auth_b64}")]


def setup_opentelemetry():
    """Set up OpenTelemetry tracing and metrics."""
    service_name = os.getenv("OTEL_SERVICE_NAME", "jeopardy-board")
    environment = os.getenv("OTEL_ENVIRONMENT", "development")
    otlp_endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")
    insecure = os.getenv("OTEL_EXPORTER_OTLP_INSECURE", "false").lower() in ("1", "true", "yes")
    headers = _auth_headers()

    logger.info(f"OpenTelemetry setup: service={service_name}, env={environment}, otlp={otlp_endpoint}")

    resource = Resource.create({"service.name": service_name, "deployment.environment": environment})
    trace_provider = TracerProvider(sampler=ALWAYS_ON, resource=resource)

    try:
        otlp_trace_exporter = OTLPSpanExporter(endpoint=otlp_endpoint, insecure=insecure, headers=headers)
        trace_provider.add_span_processor(BatchSpanProcessor(otlp_trace_exporter))
    except Exception as e:
        logger.error(f"Failed to create OTLP trace exporter: {e}")

    trace.set_tracer_provider(trace_provider)

    metric_readers = []
    try:
        otlp_metric_exporter = OTLPMetricExporter(endpoint=otlp_endpoint, insecure=insecure, headers=headers)
        metric_readers.append(PeriodicExportingMetricReader(otlp_metric_exporter))
    except Exception as e:
        logger.error(f"Failed to create OTLP metric exporter: {e}")

    meter_provider = MeterProvider(metric_readers=metric_readers, resource=resource)
    metrics.set_meter_provider(meter_provider)

    logger.debug("OpenTelemetry setup complete")
    return trace.get_tracer(__name__), metrics.get_meter(__name__)


def instrument_django():
    """Instrument Django, outgoing trivia API requests, sqlite and logging."""
    DjangoInstrumentor().instrument(
        response_hook=lambda span, request, response: span.set_attribute(
            "http.response_size", len(response.content) if hasattr(response, "content") else 0
        )
    )
    RequestsInstrumentor().instrument()
    SQLite3Instrumentor().instrument()
    LoggingInstrumentor().instrument(set_logging_format=True, log_level=os.getenv("OTEL_LOG_LEVEL", "INFO"))


# Global tracer and meter instances
tracer = None
meter = None


def initialize():
    """Initialize OpenTelemetry globally."""
    global tracer, meter

    if tracer is None:
        tracer, meter = setup_opentelemetry()
        instrument_django()

    return tracer, meter
