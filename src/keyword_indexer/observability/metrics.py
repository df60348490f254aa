"""Prometheus metrics for indexing and search."""

from __future__ import annotations

from contextlib import contextmanager
import time
from typing import TYPE_CHECKING

from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest


if TYPE_CHECKING:
    from collections.abc import Generator


SEARCH_LATENCY = Histogram(
    "keyword_search_latency_seconds",
    "Keyword index search latency per phase",
    ["phase"],
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0),
)

SEARCH_COUNT = Counter(
    "keyword_searches_total",
    "Queries answered, by the phase that produced the result",
    ["phase"],
)

SPELLING_CORRECTIONS = Counter(
    "spelling_corrections_total",
    "Spelling corrector invocations",
    ["outcome"],
)

INDEXED_KEYWORDS = Counter(
    "indexed_keywords_total",
    "Keyword insertions, by channel",
    ["channel"],
)

INDEXED_DOCUMENTS = Counter(
    "indexed_documents_total",
    "Document ingestions, by outcome",
    ["outcome"],
)


@contextmanager
def track_latency(histogram: Histogram, **labels: str) -> Generator[None, None, None]:
    """Context manager to track operation latency."""
    start = time.perf_counter()
    try:
        yield
    finally:
        histogram.labels(**labels).observe(time.perf_counter() - start)


def get_metrics() -> bytes:
    """Generate Prometheus metrics output."""
    return generate_latest()


def get_metrics_content_type() -> str:
    """Get content type for a metrics endpoint."""
    return CONTENT_TYPE_LATEST
