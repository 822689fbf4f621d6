"""Sink ports - the two capabilities the context core needs from the outside.

Structural protocols: any object with the right methods qualifies, so a
print-based test double, a stdlib logging adapter or a Prometheus adapter can
all be plugged in by configure(). Sinks receive a fully decorated record and
own formatting and transport. A log sink may name its warning method
``warn`` instead of ``warning``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Callable

    from substrate.shared.types import LogRecord, MetricRecord


@runtime_checkable
class LogSink(Protocol):
    """Port: accepts a structured log record at one of four severities."""

    def debug(self, record: LogRecord) -> None:
        """Emit a debug record."""
        ...

    def info(self, record: LogRecord) -> None:
        """Emit an info record."""
        ...

    def warning(self, record: LogRecord) -> None:
        """Emit a warning record."""
        ...

    def error(self, record: LogRecord) -> None:
        """Emit an error record."""
        ...


@runtime_checkable
class MetricsSink(Protocol):
    """Port: accepts a named counter increment with its tags."""

    def increment(self, record: MetricRecord) -> None:
        """Increment the counter named by record["counter"].

        Args:
            record: {"counter": name, "tags": merged tags for this call}.
        """
        ...


LOG_SINK_METHODS: tuple[str, ...] = ("debug", "info", "warning", "error")
METRICS_SINK_METHODS: tuple[str, ...] = ("increment",)

# Alternative names a sink may use for a required method.
METHOD_ALIASES: dict[str, tuple[str, ...]] = {"warning": ("warn",)}


def sink_method(sink: object, name: str) -> Callable[..., Any] | None:
    """Return sink's method called name, or its first callable alias, or None."""
    for candidate in (name, *METHOD_ALIASES.get(name, ())):
        method = getattr(sink, candidate, None)
        if callable(method):
            return method
    return None


def missing_methods(sink: object, required: tuple[str, ...]) -> list[str]:
    """Return the required method names that sink provides neither directly nor by alias."""
    return [name for name in required if sink_method(sink, name) is None]
