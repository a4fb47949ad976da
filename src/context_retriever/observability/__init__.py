"""
Observability - Phoenix + OpenTelemetry tracing for retrieval.

Tracing is off unless PHOENIX_ENABLED is set. When off, or when the
`observability` extra is not installed, get_tracer() returns a NoOpTracer.

USAGE:
------
from context_retriever.observability import get_tracer, init_phoenix

init_phoenix()

with get_tracer().start_span("my_operation", attributes={"key": "value"}) as span:
    ...
    span.set_attributes({"result": "success"})
    span.mark_ok()
"""

from context_retriever.observability.config import (
    TracingConfig,
    get_config,
    reset_config,
)
from context_retriever.observability.tracer import (
    NoOpSpan,
    NoOpTracer,
    SpanProtocol,
    TracerProtocol,
    get_tracer,
    reset_tracer,
)
from context_retriever.observability.phoenix import init_phoenix, shutdown_phoenix

__all__ = [
    "init_phoenix",
    "shutdown_phoenix",
    "TracingConfig",
    "get_config",
    "reset_config",
    "SpanProtocol",
    "TracerProtocol",
    "NoOpSpan",
    "NoOpTracer",
    "get_tracer",
    "reset_tracer",
]
