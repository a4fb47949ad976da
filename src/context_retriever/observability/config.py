"""
Phoenix/OpenTelemetry Configuration

Loads tracing settings from environment variables.
Supports graceful degradation when Phoenix is not installed.
"""

import os
from dataclasses import dataclass

_TRUTHY = ("true", "1", "yes")


@dataclass
class TracingConfig:
    """Configuration for retrieval tracing.

    Environment Variables:
        PHOENIX_ENABLED: Enable Phoenix tracing (default: false)
        PHOENIX_PROJECT_NAME: Project name in Phoenix UI (default: context-retriever)
        PHOENIX_COLLECTOR_ENDPOINT: Remote endpoint (optional, local if empty)
        PHOENIX_CAPTURE_CONTENT: Record query text on spans (default: false)

    PRIVACY WARNING:
        Setting PHOENIX_CAPTURE_CONTENT=true exports raw user queries to the
        collector. Leave it off unless the corpus and queries are safe to ship.
    """

    enabled: bool = False
    project_name: str = "context-retriever"
    collector_endpoint: str | None = None
    capture_content: bool = False

    @classmethod
    def from_env(cls) -> "TracingConfig":
        """Load config from environment variables."""
        return cls(
            enabled=os.environ.get("PHOENIX_ENABLED", "false").lower() in _TRUTHY,
            project_name=os.environ.get("PHOENIX_PROJECT_NAME", "context-retriever"),
            collector_endpoint=os.environ.get("PHOENIX_COLLECTOR_ENDPOINT") or None,
            capture_content=os.environ.get("PHOENIX_CAPTURE_CONTENT", "false").lower() in _TRUTHY,
        )


# Process-wide tracing settings (not document state)
_config: TracingConfig | None = None


def get_config() -> TracingConfig:
    """Get the tracing config (lazy-loaded from env)."""
    global _config
    if _config is None:
        _config = TracingConfig.from_env()
    return _config


def reset_config() -> None:
    """Reset config (useful for testing)."""
    global _config
    _config = None
