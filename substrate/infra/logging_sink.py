"""Stdlib logging adapter for the LogSink port.

- Each tagged record is logged at the matching level on a logging.Logger
- The whole record travels as ``extra={"substrate_record": ...}``
- Sensitive keys are redacted, nested mappings included
- JsonRecordFormatter renders one JSON object per line for log aggregation
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterable

    from substrate.shared.types import LogRecord

RECORD_ATTR = "substrate_record"

_SENSITIVE_KEYS = frozenset(
    {
        "password",
        "token",
        "secret",
        "api_key",
        "authorization",
        "cookie",
        "jwt",
        "credential",
    }
)

_REDACTED = "[REDACTED]"


def _redact_sensitive(data: Mapping[str, Any], keys: frozenset[str]) -> dict[str, Any]:
    """Redact values of sensitive keys."""
    result: dict[str, Any] = {}
    for key, value in data.items():
        if str(key).lower() in keys:
            result[key] = _REDACTED
        elif isinstance(value, Mapping):
            result[key] = _redact_sensitive(value, keys)
        else:
            result[key] = value
    return result


class StdlibLogSink:
    """LogSink writing tagged records to a stdlib logger."""

    def __init__(
        self,
        logger: logging.Logger | None = None,
        *,
        name: str = "substrate",
        redact_keys: Iterable[str] = (),
    ) -> None:
        self._logger = logger if logger is not None else logging.getLogger(name)
        self._redact_keys = _SENSITIVE_KEYS | {k.lower() for k in redact_keys}

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def _emit(self, level: int, record: LogRecord) -> None:
        if not self._logger.isEnabledFor(level):
            return
        safe = _redact_sensitive(record, self._redact_keys)
        self._logger.log(level, "%s", safe.get("msg", ""), extra={RECORD_ATTR: safe})

    def debug(self, record: LogRecord) -> None:
        self._emit(logging.DEBUG, record)

    def info(self, record: LogRecord) -> None:
        self._emit(logging.INFO, record)

    def warning(self, record: LogRecord) -> None:
        self._emit(logging.WARNING, record)

    def error(self, record: LogRecord) -> None:
        self._emit(logging.ERROR, record)


class JsonRecordFormatter(logging.Formatter):
    """Render tagged records as single-line JSON.

    Records that did not come through StdlibLogSink fall back to a JSON
    object holding the plain message.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
        }
        data = getattr(record, RECORD_ATTR, None)
        if isinstance(data, Mapping):
            payload.update(data)
        else:
            payload["msg"] = record.getMessage()
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)
