"""
Observability Module - OpenTelemetry tracing for datastore operations.

USAGE:
------
# At application startup:
from vector_datastore.observability import init_tracing

init_tracing()  # Installs a TracerProvider if TRACING_ENABLED=true

# Around a datastore call:
from vector_datastore.observability import get_tracer, operation_span

with operation_span(get_tracer(), "search", "articles") as span:
    ...
    span.set_attribute(DATASTORE_RESULT_COUNT, 3)
"""

from __future__ import annotations

import logging

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

from vector_datastore.observability.config import (
    TracingConfig,
    get_config,
    reset_config,
)
from vector_datastore.observability.tracer import (
    TracerProtocol,
    SpanProtocol,
    NoOpTracer,
    NoOpSpan,
    get_tracer,
    operation_span,
    reset_tracer,
)
from vector_datastore.observability.attributes import (
    DB_SYSTEM,
    DB_OPERATION,
    DB_COLLECTION_NAME,
    DATASTORE_DOCUMENT_COUNT,
    DATASTORE_RESULT_COUNT,
    DATASTORE_COLLECTION_COUNT,
    DATASTORE_ERROR_STAGE,
    operation_attributes,
)

logger = logging.getLogger(__name__)

# OpenTelemetry accepts the global TracerProvider only once per process, so the
# provider installed here is kept for the life of the process.
_provider: TracerProvider | None = None


def init_tracing(config: TracingConfig | None = None) -> bool:
    """
    Install an SDK TracerProvider as the process-global provider.

    Safe to call repeatedly: once a provider is installed, later calls reuse
    it (and ignore ``config``).

    Args:
        config: Optional config (uses env vars if not provided)

    Returns:
        True if a provider is installed, False if tracing is disabled
    """
    global _provider
    if _provider is not None:
        return True

    config = config or get_config()

    if not config.enabled:
        logger.debug("Tracing disabled")
        return False

    if config.collector_endpoint:
        from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter

        exporter = OTLPSpanExporter(endpoint=config.collector_endpoint)
        logger.info(f"Exporting spans to: {config.collector_endpoint}")
    else:
        exporter = ConsoleSpanExporter()
        logger.info("Exporting spans to console")

    provider = TracerProvider(resource=Resource.create({"service.name": config.service_name}))
    provider.add_span_processor(BatchSpanProcessor(exporter))
    trace.set_tracer_provider(provider)

    _provider = provider
    reset_tracer()
    return True


def shutdown_tracing() -> None:
    """
    Flush pending spans.

    The provider stays installed and keeps accepting spans; the SDK shuts it
    down at interpreter exit.
    """
    if _provider is None:
        return

    _provider.force_flush()
    reset_tracer()


__all__ = [
    # Initialization
    "init_tracing",
    "shutdown_tracing",
    # Config
    "TracingConfig",
    "get_config",
    "reset_config",
    # Tracer
    "TracerProtocol",
    "SpanProtocol",
    "NoOpTracer",
    "NoOpSpan",
    "get_tracer",
    "operation_span",
    "reset_tracer",
    # Attributes
    "DB_SYSTEM",
    "DB_OPERATION",
    "DB_COLLECTION_NAME",
    "DATASTORE_DOCUMENT_COUNT",
    "DATASTORE_RESULT_COUNT",
    "DATASTORE_COLLECTION_COUNT",
    "DATASTORE_ERROR_STAGE",
    "operation_attributes",
]
