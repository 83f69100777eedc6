"""
Observability Module - logging plus optional Phoenix/OpenTelemetry tracing.

USAGE:
------
# At application startup:
from embedding_lab.observability import init_phoenix

init_phoenix()  # Starts local Phoenix UI if PHOENIX_ENABLED=true

# In code that needs tracing:
from embedding_lab.observability import get_tracer

tracer = get_tracer()
with tracer.start_span("retrieval.search", attributes={"retrieval.method": "mmr"}) as span:
    ...
    span.set_attribute("retrieval.result_count", 5)
"""

from __future__ import annotations

import logging

from embedding_lab.observability.config import (
    PhoenixConfig,
    get_config,
    reset_config,
)
from embedding_lab.observability.tracer import (
    TracerProtocol,
    SpanProtocol,
    NoOpTracer,
    NoOpSpan,
    get_tracer,
    reset_tracer,
)

logger = logging.getLogger(__name__)

LOCAL_PHOENIX_ENDPOINT = "http://localhost:6006/v1/traces"

_phoenix_initialized = False


def init_phoenix(config: PhoenixConfig | None = None) -> bool:
    """
    Initialize Phoenix tracing once per process.

    Args:
        config: Optional config (uses env vars if not provided)

    Returns:
        True if tracing was initialized, False if disabled or unavailable
    """
    global _phoenix_initialized
    if _phoenix_initialized:
        return True

    config = config or get_config()

    if not config.enabled:
        logger.debug("Phoenix observability disabled")
        return False

    try:
        from opentelemetry import trace
        from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
        from opentelemetry.sdk.resources import Resource
        from opentelemetry.sdk.trace import TracerProvider
        from opentelemetry.sdk.trace.export import BatchSpanProcessor
    except ImportError as e:
        logger.warning(f"OpenTelemetry not installed, tracing disabled: {e}")
        return False

    endpoint = config.collector_endpoint
    if endpoint:
        logger.info(f"Phoenix connecting to remote: {endpoint}")
    else:
        try:
            import phoenix as px
        except ImportError as e:
            logger.warning(f"Phoenix not installed, tracing disabled: {e}")
            return False
        session = px.launch_app()
        endpoint = LOCAL_PHOENIX_ENDPOINT
        logger.info(f"Phoenix UI available at: {session.url}")

    provider = TracerProvider(
        resource=Resource.create({"openinference.project.name": config.project_name})
    )
    provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=endpoint)))
    trace.set_tracer_provider(provider)
    reset_tracer()

    _phoenix_initialized = True
    return True


def shutdown_phoenix() -> None:
    """Flush spans and reset tracing state."""
    global _phoenix_initialized

    if not _phoenix_initialized:
        return

    from opentelemetry import trace

    provider = trace.get_tracer_provider()
    if hasattr(provider, "shutdown"):
        provider.shutdown()

    reset_tracer()
    reset_config()
    _phoenix_initialized = False


__all__ = [
    "init_phoenix",
    "shutdown_phoenix",
    "PhoenixConfig",
    "get_config",
    "reset_config",
    "TracerProtocol",
    "SpanProtocol",
    "NoOpTracer",
    "NoOpSpan",
    "get_tracer",
    "reset_tracer",
]
