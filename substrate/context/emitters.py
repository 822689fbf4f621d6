"""Tagged emitters: thin wrappers merging a TagSet into every emission.

The wrapped sink is shared and never mutated. fork() builds a new emitter of
the same class over the same sink with a patched TagSet; the original stays
valid for anyone still holding it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from substrate.context.tags import TagSet
from substrate.ports.sinks import sink_method

if TYPE_CHECKING:
    from collections.abc import Mapping
    from typing import Self

    from substrate.ports.sinks import LogSink, MetricsSink
    from substrate.shared.types import LogRecord, MetricRecord, TagPatch


class _TaggedEmitter:
    """Common state of the logger-shaped and metrics-shaped emitters."""

    __slots__ = ("_sink", "_tags")

    def __init__(self, sink: Any, tags: TagSet | None = None) -> None:
        self._sink = sink
        self._tags = tags if tags is not None else TagSet()

    @property
    def tags(self) -> TagSet:
        return self._tags

    @property
    def sink(self) -> Any:
        return self._sink

    def fork(self, patch: TagPatch = None) -> Self:
        """Return a new emitter over the same sink with patched tags."""
        return type(self)(self._sink, self._tags.patch(patch))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(tags={self._tags.as_dict()!r})"


class TaggedLogger(_TaggedEmitter):
    """Logger whose records carry the current tags at the top level.

    Record shape: {**tags, "msg": message}, plus "extras" only when extras
    were explicitly passed (an empty mapping counts).
    """

    _sink: LogSink

    def __init__(self, sink: LogSink, tags: TagSet | None = None) -> None:
        super().__init__(sink, tags)

    def _decorate(self, message: str, extras: Mapping[str, Any] | None) -> LogRecord:
        record: LogRecord = {**self._tags, "msg": message}
        if extras is not None:
            record["extras"] = extras
        return record

    def debug(self, message: str, extras: Mapping[str, Any] | None = None) -> None:
        self._sink.debug(self._decorate(message, extras))

    def info(self, message: str, extras: Mapping[str, Any] | None = None) -> None:
        self._sink.info(self._decorate(message, extras))

    def warning(self, message: str, extras: Mapping[str, Any] | None = None) -> None:
        # Sinks may implement warn() in place of warning().
        emit = sink_method(self._sink, "warning")
        if emit is None:
            msg = f"{type(self._sink).__name__} has neither warning() nor warn()"
            raise AttributeError(msg)
        emit(self._decorate(message, extras))

    warn = warning

    def error(self, message: str, extras: Mapping[str, Any] | None = None) -> None:
        self._sink.error(self._decorate(message, extras))


class TaggedMetrics(_TaggedEmitter):
    """Metrics emitter merging the current tags into each increment."""

    _sink: MetricsSink

    def __init__(self, sink: MetricsSink, tags: TagSet | None = None) -> None:
        super().__init__(sink, tags)

    def increment(self, counter: str, extras: Mapping[str, Any] | None = None) -> None:
        """Increment counter with {**tags, **extras}.

        Extras override same-named tags for this call only; they never enter
        the persistent TagSet.
        """
        metric: MetricRecord = {
            "counter": counter,
            "tags": {**self._tags, **(extras or {})},
        }
        self._sink.increment(metric)
