"""Observability module for OpenTelemetry tracing, Prometheus metrics and logging."""

from keyword_indexer.observability.logging import JsonFormatter, configure_logging
from keyword_indexer.observability.metrics import (
    INDEXED_DOCUMENTS,
    INDEXED_KEYWORDS,
    SEARCH_COUNT,
    SEARCH_LATENCY,
    SPELLING_CORRECTIONS,
    get_metrics,
    get_metrics_content_type,
    track_latency,
)
from keyword_indexer.observability.tracing import create_span, current_trace_ids, get_tracer, init_tracing


__all__ = [
    "INDEXED_DOCUMENTS",
    "INDEXED_KEYWORDS",
    "SEARCH_COUNT",
    "SEARCH_LATENCY",
    "SPELLING_CORRECTIONS",
    "JsonFormatter",
    "configure_logging",
    "create_span",
    "current_trace_ids",
    "get_metrics",
    "get_metrics_content_type",
    "get_tracer",
    "init_tracing",
    "track_latency",
]
