"""Unit tests for observability module."""

import json
import logging
import sys

from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from opentelemetry.trace import StatusCode
from prometheus_client import CollectorRegistry, Histogram
import pytest

from keyword_indexer.domain import DocType, Document, QueryResult
from keyword_indexer.observability import (
    JsonFormatter,
    configure_logging,
    create_span,
    current_trace_ids,
    get_metrics,
    get_metrics_content_type,
    init_tracing,
    tracing as tracing_module,
    track_latency,
)


def make_record(msg="test message", level=logging.INFO, name="keyword_indexer.search.fuzzy", exc_info=None):
    return logging.LogRecord(
        name=name,
        level=level,
        pathname="test.py",
        lineno=1,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )


@pytest.fixture
def span_exporter(monkeypatch):
    """Route create_span to an in-memory exporter."""
    exporter = InMemorySpanExporter()
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(exporter))
    monkeypatch.setitem(tracing_module._tracer_holder, "tracer", provider.get_tracer("test"))
    return exporter


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.mark.unit
class TestJsonFormatter:
    """Tests for structured JSON logging."""

    def test_format_includes_trace_context(self):
        data = json.loads(JsonFormatter().format(make_record()))

        assert data["message"] == "test message"
        assert data["level"] == "INFO"
        assert data["logger"] == "keyword_indexer.search.fuzzy"
        assert data["component"] == "fuzzy"
        assert "timestamp" in data
        assert data["trace_id"] == ""
        assert data["span_id"] == ""

    def test_format_includes_extra_fields(self):
        record = make_record()
        record.document = "https://example.com/chats"
        record.keywords = {"chat", "souris"}

        data = json.loads(JsonFormatter().format(record))

        assert data["document"] == "https://example.com/chats"
        assert data["keywords"] == ["chat", "souris"]

    def test_domain_objects_are_serialized(self):
        record = make_record()
        record.document = Document(name="a", title="A", doctype=DocType.OFFLINE)
        record.result = QueryResult(spelling_suggestion="chat", using_suggestion=True)

        data = json.loads(JsonFormatter(service="keyword-indexer").format(record))

        assert data["service"] == "keyword-indexer"
        assert data["document"] == {"name": "a", "title": "A", "doctype": "offline", "description": ""}
        assert data["result"]["spelling_suggestion"] == "chat"

    def test_secret_fields_are_redacted(self):
        record = make_record()
        record.token = "s3cr3t"

        data = json.loads(JsonFormatter().format(record))

        assert data["token"] == "[REDACTED]"

    def test_long_messages_are_truncated(self):
        data = json.loads(JsonFormatter().format(make_record(msg="x" * 5000)))

        assert len(data["message"]) == JsonFormatter.MAX_MESSAGE_LEN + 3

    def test_exception_is_formatted(self):
        try:
            raise ValueError("bad weight")
        except ValueError:
            record = make_record(level=logging.ERROR, exc_info=sys.exc_info())

        data = json.loads(JsonFormatter().format(record))

        assert "ValueError: bad weight" in data["exception"]

    def test_trace_ids_inside_span(self, span_exporter):
        with create_span("search.query") as span:
            data = json.loads(JsonFormatter().format(make_record()))
            context = span.get_span_context()

        assert data["trace_id"] == format(context.trace_id, "032x")
        assert data["span_id"] == format(context.span_id, "016x")


@pytest.mark.unit
class TestConfigureLogging:
    """Tests for root logger configuration."""

    def test_json_output(self, restore_root_logger):
        configure_logging(level="debug", json_output=True)

        assert restore_root_logger.level == logging.DEBUG
        assert len(restore_root_logger.handlers) == 1
        assert isinstance(restore_root_logger.handlers[0].formatter, JsonFormatter)

    def test_plain_output_and_logger_levels(self, restore_root_logger):
        configure_logging(level="warning", json_output=False, logger_levels={"keyword_indexer.search": "error"})

        assert restore_root_logger.level == logging.WARNING
        assert not isinstance(restore_root_logger.handlers[0].formatter, JsonFormatter)
        assert logging.getLogger("keyword_indexer.search").level == logging.ERROR
        logging.getLogger("keyword_indexer.search").setLevel(logging.NOTSET)

    def test_unknown_level_falls_back_to_info(self, restore_root_logger):
        configure_logging(level="verbose")

        assert restore_root_logger.level == logging.INFO


@pytest.mark.unit
class TestTracing:
    """Tests for span helpers."""

    def test_span_attributes(self, span_exporter):
        with create_span("index.document", attributes={"document.doctype": "online"}):
            pass

        (span,) = span_exporter.get_finished_spans()
        assert span.name == "index.document"
        assert span.attributes["document.doctype"] == "online"

    def test_exception_marks_span_failed(self, span_exporter):
        with pytest.raises(RuntimeError):
            with create_span("search.query"):
                raise RuntimeError("database is locked")

        (span,) = span_exporter.get_finished_spans()
        assert span.status.status_code == StatusCode.ERROR
        assert [event.name for event in span.events] == ["exception"]

    def test_no_active_span(self):
        assert current_trace_ids() == {"trace_id": "", "span_id": ""}

    def test_init_tracing_sets_service_name(self, monkeypatch):
        monkeypatch.setitem(tracing_module._tracer_holder, "tracer", None)

        provider = init_tracing(service_name="test-indexer", resource_attributes={"deployment.environment": "test"})

        assert provider.resource.attributes["service.name"] == "test-indexer"
        assert provider.resource.attributes["deployment.environment"] == "test"
        assert tracing_module.get_tracer() is not None


@pytest.mark.unit
class TestMetrics:
    """Tests for Prometheus helpers."""

    def test_track_latency_observes_once(self):
        registry = CollectorRegistry()
        histogram = Histogram("test_latency_seconds", "Test latency", ["phase"], registry=registry)

        with track_latency(histogram, phase="initial"):
            pass

        assert registry.get_sample_value("test_latency_seconds_count", {"phase": "initial"}) == 1.0

    def test_track_latency_observes_on_error(self):
        registry = CollectorRegistry()
        histogram = Histogram("test_error_latency_seconds", "Test latency", ["phase"], registry=registry)

        with pytest.raises(RuntimeError):
            with track_latency(histogram, phase="initial"):
                raise RuntimeError("boom")

        assert registry.get_sample_value("test_error_latency_seconds_count", {"phase": "initial"}) == 1.0

    def test_metrics_exposition(self):
        assert b"keyword_searches" in get_metrics()
        assert get_metrics_content_type().startswith("text/plain")
