"""Structured JSON logging with trace correlation.

Indexer log calls often pass domain objects through ``extra`` (a ``Document``,
a ``QueryResult``); the formatter renders those as plain JSON instead of their
repr so log pipelines can filter on document names and hit counts.
"""

from __future__ import annotations

import dataclasses
from datetime import datetime, timezone
from enum import Enum
import logging
from pathlib import Path
import sys
from typing import Any

import orjson
from pydantic import BaseModel

from keyword_indexer.observability.tracing import current_trace_ids


# Attributes every LogRecord carries; anything else was passed via ``extra``.
_RESERVED_ATTRS = frozenset(vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))) | {"message", "asctime"}

PLAIN_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class JsonFormatter(logging.Formatter):
    """JSON formatter with OpenTelemetry trace correlation.

    Args:
        service: Value of the ``service`` field on every entry, omitted when empty
        max_message_len: Longest message kept before truncation
        max_field_len: Longest string extra field kept before truncation
    """

    REDACT_KEYS = frozenset({"password", "token", "api_key", "secret", "authorization"})
    MAX_MESSAGE_LEN = 2000
    MAX_FIELD_LEN = 500

    def __init__(
        self,
        service: str = "",
        *,
        max_message_len: int = MAX_MESSAGE_LEN,
        max_field_len: int = MAX_FIELD_LEN,
    ) -> None:
        super().__init__()
        self.service = service
        self.max_message_len = max_message_len
        self.max_field_len = max_field_len

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": _truncate(record.getMessage(), self.max_message_len),
            **current_trace_ids(),
        }
        if self.service:
            entry["service"] = self.service
        if "." in record.name:
            entry["component"] = record.name.rsplit(".", 1)[-1]
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        entry.update(
            (key, self._field(key, value))
            for key, value in record.__dict__.items()
            if key not in _RESERVED_ATTRS and not key.startswith("_")
        )
        return orjson.dumps(entry, default=_jsonable).decode("utf-8")

    def _field(self, key: str, value: Any) -> Any:
        if key.lower() in self.REDACT_KEYS:
            return "[REDACTED]"
        if isinstance(value, str):
            return _truncate(value, self.max_field_len)
        return value


def _truncate(text: str, limit: int) -> str:
    return text if len(text) <= limit else text[:limit] + "..."


def _jsonable(value: Any) -> Any:
    """Fallback serializer for values orjson does not handle natively."""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {field.name: getattr(value, field.name) for field in dataclasses.fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (set, frozenset)):
        try:
            return sorted(value)
        except TypeError:
            return list(value)
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, (bytes, bytearray)):
        return value.decode("utf-8", errors="replace")
    if isinstance(value, BaseException):
        return f"{type(value).__name__}: {value}"
    return repr(value)


def configure_logging(
    level: str = "INFO",
    json_output: bool = True,
    *,
    service: str = "",
    logger_levels: dict[str, str] | None = None,
) -> None:
    """Replace the root logger's handlers with a single stdout handler.

    Args:
        level: Root log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: Emit structured JSON logs when True
        service: Service name stamped on JSON entries
        logger_levels: Per-logger level overrides (logger name -> level string)
    """
    root = logging.getLogger()
    root.setLevel(_resolve_level(level))
    for existing in root.handlers[:]:
        root.removeHandler(existing)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter(service) if json_output else logging.Formatter(PLAIN_FORMAT))
    root.addHandler(handler)

    for logger_name, logger_level in (logger_levels or {}).items():
        logging.getLogger(logger_name).setLevel(_resolve_level(logger_level))


def _resolve_level(name: str) -> int:
    resolved = logging.getLevelName(name.upper())
    return resolved if isinstance(resolved, int) else logging.INFO
