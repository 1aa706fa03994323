"""
OpenTelemetry tracing for the Catalog Service

HTTP requests and MongoDB driver calls get spans from the library
instrumentors; event bus handlers get one span each via `handler_span`.
Export is left to the OpenTelemetry SDK/environment configuration.
"""

from contextlib import contextmanager
from typing import Iterator, Optional

from opentelemetry import trace
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.pymongo import PymongoInstrumentor

from app.core.config import config
from app.core.logger import logger

tracer = trace.get_tracer(config.service_name, config.service_version)


def instrument_app(app) -> bool:
    """
    Attach request and driver instrumentation to the application.

    Returns False when telemetry is disabled by configuration.
    """
    if not config.telemetry_enabled:
        logger.info("OpenTelemetry instrumentation disabled")
        return False

    try:
        FastAPIInstrumentor.instrument_app(app)
        PymongoInstrumentor().instrument()
    except Exception as e:
        logger.error(f"Failed to instrument application: {e}", error=e)
        return False

    logger.info(
        "OpenTelemetry instrumentation enabled",
        metadata={"instrumented": ["fastapi", "pymongo"]}
    )
    return True


@contextmanager
def handler_span(event_type: str, handler_name: str, attributes: Optional[dict] = None) -> Iterator[trace.Span]:
    """Span around a single event handler invocation"""
    with tracer.start_as_current_span(f"event {event_type}") as span:
        span.set_attribute("catalog.event.type", event_type)
        span.set_attribute("catalog.event.handler", handler_name)
        for key, value in (attributes or {}).items():
            if value is not None:
                span.set_attribute(f"catalog.event.{key}", value)
        yield span

