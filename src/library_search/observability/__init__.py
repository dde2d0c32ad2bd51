"""Observability module for OpenTelemetry-aligned tracing, metrics, and logging."""

from library_search.observability.context import get_trace_context, set_trace_context, trace_context
from library_search.observability.logging import JsonFormatter, configure_logging
from library_search.observability.metrics import (
    INDEXED_RECORDS,
    MATCHES,
    ROMANIZATION_FAILURES,
    SEARCH_LATENCY,
    SEARCH_REQUESTS,
    get_metrics,
    get_metrics_content_type,
    init_metrics,
    set_metrics_enabled,
    track_latency,
)
from library_search.observability.tracing import create_span, get_tracer, init_tracing, set_tracing_enabled


__all__ = [
    "INDEXED_RECORDS",
    "MATCHES",
    "ROMANIZATION_FAILURES",
    "SEARCH_LATENCY",
    "SEARCH_REQUESTS",
    "JsonFormatter",
    "configure_logging",
    "create_span",
    "get_metrics",
    "get_metrics_content_type",
    "get_trace_context",
    "get_tracer",
    "init_metrics",
    "init_tracing",
    "set_metrics_enabled",
    "set_trace_context",
    "set_tracing_enabled",
    "trace_context",
    "track_latency",
]
