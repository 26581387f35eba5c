"""
OpenTelemetry tracing.

Services open spans through ``get_tracer(__name__)``. Without
``setup_tracing`` the OpenTelemetry API hands out no-op tracers, so spans
cost nothing in tests.
"""

import logging
from typing import Optional

from opentelemetry import trace

logger = logging.getLogger(__name__)

_initialized = False


def setup_tracing(service_name: str = "bazaar-backend", enable: bool = True, console_export: bool = False) -> None:
    """
    Install a tracer provider and auto-instrument Django.

    Args:
        service_name: Name reported on every span
        enable: Enable/disable tracing
        console_export: Print finished spans to stdout (local debugging)
    """
    global _initialized

    if _initialized:
        logger.warning("Tracing already initialized. Skipping.")
        return

    if not enable:
        logger.info("Tracing disabled via configuration")
        return

    from opentelemetry.instrumentation.django import DjangoInstrumentor
    from opentelemetry.sdk.resources import SERVICE_NAME, Resource
    from opentelemetry.sdk.trace import TracerProvider
    from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

    tracer_provider = TracerProvider(resource=Resource(attributes={SERVICE_NAME: service_name}))
    if console_export:
        tracer_provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))
    trace.set_tracer_provider(tracer_provider)

    DjangoInstrumentor().instrument()

    _initialized = True
    logger.info(f"OpenTelemetry tracing initialized for service: {service_name}")


def get_tracer(name: Optional[str] = None) -> trace.Tracer:
    """
    Get a tracer for creating custom spans.

    Example:
        tracer = get_tracer(__name__)

        with tracer.start_as_current_span("favorite_toggle") as span:
            span.set_attribute("item.id", str(item_id))
    """
    return trace.get_tracer(name or __name__)
