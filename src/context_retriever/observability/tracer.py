"""
Span tracing for retrieval calls.

get_tracer() hands out either an OpenTelemetry-backed tracer or a NoOpTracer.
Callers only ever see the small span surface below: a batch of attributes,
then exactly one of mark_ok() / mark_error().
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator, Mapping, Protocol

# OTel accepts only primitives and homogeneous sequences of them
_PRIMITIVES = (str, bool, int, float)


def clean_attributes(attributes: Mapping[str, Any] | None) -> dict[str, Any]:
    """Drop None values and coerce other sequences to lists of primitives."""
    cleaned: dict[str, Any] = {}
    for key, value in (attributes or {}).items():
        if value is None:
            continue
        if isinstance(value, _PRIMITIVES):
            cleaned[key] = value
        elif isinstance(value, (list, tuple)):
            cleaned[key] = [v if isinstance(v, _PRIMITIVES) else str(v) for v in value]
        else:
            cleaned[key] = str(value)
    return cleaned


class SpanProtocol(Protocol):
    def set_attributes(self, attributes: Mapping[str, Any]) -> None:
        ...

    def mark_ok(self) -> None:
        ...

    def mark_error(self, exception: BaseException) -> None:
        """Record the exception and set error status."""
        ...


class TracerProtocol(Protocol):
    def start_span(
        self, name: str, attributes: Mapping[str, Any] | None = None
    ) -> Iterator[SpanProtocol]:
        """Context manager yielding a span."""
        ...


# ---------------------------------------------------------------------------
# DISABLED
# ---------------------------------------------------------------------------


class NoOpSpan:
    def set_attributes(self, attributes: Mapping[str, Any]) -> None:
        pass

    def mark_ok(self) -> None:
        pass

    def mark_error(self, exception: BaseException) -> None:
        pass


class NoOpTracer:
    @contextmanager
    def start_span(
        self, name: str, attributes: Mapping[str, Any] | None = None
    ) -> Iterator[NoOpSpan]:
        yield NoOpSpan()


# ---------------------------------------------------------------------------
# OPENTELEMETRY
# ---------------------------------------------------------------------------


class OTelSpan:
    def __init__(self, span: Any):
        self._span = span

    def set_attributes(self, attributes: Mapping[str, Any]) -> None:
        self._span.set_attributes(clean_attributes(attributes))

    def mark_ok(self) -> None:
        from opentelemetry.trace import Status, StatusCode

        self._span.set_status(Status(StatusCode.OK))

    def mark_error(self, exception: BaseException) -> None:
        from opentelemetry.trace import Status, StatusCode

        self._span.record_exception(exception)
        self._span.set_status(Status(StatusCode.ERROR, str(exception)))


class OTelTracer:
    def __init__(self, tracer: Any):
        self._tracer = tracer

    @contextmanager
    def start_span(
        self, name: str, attributes: Mapping[str, Any] | None = None
    ) -> Iterator[OTelSpan]:
        # errors are recorded through mark_error, not by the context manager
        with self._tracer.start_as_current_span(
            name,
            attributes=clean_attributes(attributes),
            record_exception=False,
            set_status_on_exception=False,
        ) as span:
            yield OTelSpan(span)


# ---------------------------------------------------------------------------
# FACTORY
# ---------------------------------------------------------------------------


_tracer: TracerProtocol | None = None


def _build_tracer(service_name: str) -> TracerProtocol:
    from context_retriever.observability.config import get_config

    if not get_config().enabled:
        return NoOpTracer()

    try:
        from opentelemetry import trace
        from opentelemetry.sdk.trace import TracerProvider
    except ImportError:
        return NoOpTracer()

    # no SDK provider until init_phoenix() has run
    if not isinstance(trace.get_tracer_provider(), TracerProvider):
        return NoOpTracer()

    return OTelTracer(trace.get_tracer(service_name))


def get_tracer(service_name: str = "context-retriever") -> TracerProtocol:
    """
    Get the process tracer, building it on first use.

    Args:
        service_name: Instrumentation scope name (used on first call only)
    """
    global _tracer
    if _tracer is None:
        _tracer = _build_tracer(service_name)
    return _tracer


def reset_tracer() -> None:
    """Forget the cached tracer (after init_phoenix, and in tests)."""
    global _tracer
    _tracer = None
