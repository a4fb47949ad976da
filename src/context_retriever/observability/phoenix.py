"""
Phoenix setup.

init_phoenix() registers a global OpenTelemetry tracer provider that exports
to Arize Phoenix: a remote collector when PHOENIX_COLLECTOR_ENDPOINT is set,
otherwise a local Phoenix app launched in-process.
"""

from __future__ import annotations

import logging

from context_retriever.observability.config import TracingConfig, get_config, reset_config
from context_retriever.observability.tracer import reset_tracer

logger = logging.getLogger(__name__)

_initialized = False


def init_phoenix(config: TracingConfig | None = None) -> bool:
    """
    Start exporting retrieval spans to Phoenix.

    Call once at startup. Safe to call again; later calls are no-ops.

    Returns:
        True if tracing is live, False if disabled or Phoenix is unavailable
    """
    global _initialized
    if _initialized:
        return True

    config = config or get_config()
    if not config.enabled:
        logger.debug("Phoenix tracing disabled")
        return False

    try:
        from phoenix.otel import register

        if config.collector_endpoint:
            register(project_name=config.project_name, endpoint=config.collector_endpoint)
            logger.info(f"Phoenix exporting to: {config.collector_endpoint}")
        else:
            import phoenix as px

            session = px.launch_app()
            register(project_name=config.project_name)
            logger.info(f"Phoenix UI available at: {session.url}")
    except ImportError as e:
        logger.warning(f"Phoenix not installed, tracing disabled: {e}")
        return False
    except Exception as e:
        logger.error(f"Failed to initialize Phoenix: {e}")
        return False

    # the cached tracer predates the provider
    reset_tracer()
    _initialized = True
    return True


def shutdown_phoenix() -> None:
    """Flush pending spans and drop cached tracing state."""
    global _initialized
    if not _initialized:
        return

    from opentelemetry import trace

    provider = trace.get_tracer_provider()
    shutdown = getattr(provider, "shutdown", None)
    if shutdown is not None:
        try:
            shutdown()
        except Exception as e:
            logger.warning(f"Error shutting down tracer provider: {e}")

    reset_tracer()
    reset_config()
    _initialized = False
