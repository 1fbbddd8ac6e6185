"""
Tracers for datastore operations.

get_tracer() hands out an OTelTracer once init_tracing() has installed an
SDK TracerProvider, and a NoOpTracer otherwise. operation_span() is what the
repository uses: one span per call, named ``datastore.<operation>``, closed
with status ok, or error plus the failing stage.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, ContextManager, Iterator, Protocol

from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.trace import StatusCode

from vector_datastore.core.errors import DatastoreError
from vector_datastore.observability.attributes import (
    DATASTORE_ERROR_STAGE,
    operation_attributes,
)

INSTRUMENTATION_SCOPE = "vector_datastore"

_STATUS_CODES = {"ok": StatusCode.OK, "error": StatusCode.ERROR}


class SpanProtocol(Protocol):
    def set_attribute(self, key: str, value: Any) -> None:
        ...

    def set_status(self, status: str, description: str | None = None) -> None:
        """``status`` is "ok" or "error"."""
        ...

    def record_exception(self, exception: Exception) -> None:
        ...


class TracerProtocol(Protocol):
    def start_span(
        self, name: str, attributes: dict[str, Any] | None = None
    ) -> ContextManager[SpanProtocol]:
        ...


# ---------------------------------------------------------------------------
# NOOP (tracing disabled)
# ---------------------------------------------------------------------------


class NoOpSpan:
    def set_attribute(self, key: str, value: Any) -> None:
        pass

    def set_status(self, status: str, description: str | None = None) -> None:
        pass

    def record_exception(self, exception: Exception) -> None:
        pass


class NoOpTracer:
    @contextmanager
    def start_span(
        self, name: str, attributes: dict[str, Any] | None = None
    ) -> Iterator[NoOpSpan]:
        yield NoOpSpan()


# ---------------------------------------------------------------------------
# OPENTELEMETRY
# ---------------------------------------------------------------------------


class OTelSpan:
    """Adapts an OTel span to the string-status SpanProtocol."""

    def __init__(self, span: trace.Span):
        self._span = span

    def set_attribute(self, key: str, value: Any) -> None:
        self._span.set_attribute(key, value)

    def set_status(self, status: str, description: str | None = None) -> None:
        self._span.set_status(_STATUS_CODES.get(status, StatusCode.ERROR), description)

    def record_exception(self, exception: Exception) -> None:
        self._span.record_exception(exception)


class OTelTracer:
    def __init__(self, tracer: trace.Tracer):
        self._tracer = tracer

    @contextmanager
    def start_span(
        self, name: str, attributes: dict[str, Any] | None = None
    ) -> Iterator[OTelSpan]:
        # operation_span records failures itself, with the datastore stage
        with self._tracer.start_as_current_span(
            name,
            attributes=attributes,
            record_exception=False,
            set_status_on_exception=False,
        ) as span:
            yield OTelSpan(span)


# ---------------------------------------------------------------------------
# DATASTORE OPERATION SPANS
# ---------------------------------------------------------------------------


@contextmanager
def operation_span(
    tracer: TracerProtocol,
    operation: str,
    collection_name: str | None = None,
    db_system: str = "milvus",
) -> Iterator[SpanProtocol]:
    """
    Run one repository operation inside a span.

    A DatastoreError marks the span failed and tags it with the error's
    stage before propagating. Other exceptions propagate without touching
    the span status.
    """
    attributes = operation_attributes(operation, collection_name, db_system=db_system)
    with tracer.start_span(f"datastore.{operation}", attributes=attributes) as span:
        try:
            yield span
        except DatastoreError as e:
            span.set_attribute(DATASTORE_ERROR_STAGE, e.stage)
            span.record_exception(e)
            span.set_status("error", str(e))
            raise
        span.set_status("ok")


# ---------------------------------------------------------------------------
# FACTORY
# ---------------------------------------------------------------------------


_tracer: TracerProtocol | None = None


def get_tracer() -> TracerProtocol:
    """Process-wide tracer, chosen on first call (reset_tracer() to re-pick)."""
    global _tracer
    if _tracer is None:
        from vector_datastore.observability.config import get_config

        installed = isinstance(trace.get_tracer_provider(), TracerProvider)
        if get_config().enabled and installed:
            _tracer = OTelTracer(trace.get_tracer(INSTRUMENTATION_SCOPE))
        else:
            _tracer = NoOpTracer()
    return _tracer


def reset_tracer() -> None:
    global _tracer
    _tracer = None
