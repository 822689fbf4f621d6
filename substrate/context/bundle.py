"""Context bundle: the (tagged logger, tagged metrics) pair of one context.

fork_logger()/fork_metrics() replace an emitter on this very object, so
every continuation sharing the bundle sees the new tags from then on.
fork() builds a separate bundle; nothing done to one is visible on the other.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from substrate.context.emitters import TaggedLogger, TaggedMetrics

if TYPE_CHECKING:
    from substrate.ports.sinks import LogSink, MetricsSink
    from substrate.shared.types import TagPatch


class ContextBundle:
    """Currently active emitters for a continuation."""

    __slots__ = ("_logger", "_metrics")

    def __init__(self, log_sink: LogSink, metrics_sink: MetricsSink) -> None:
        self._logger = TaggedLogger(log_sink)
        self._metrics = TaggedMetrics(metrics_sink)

    @classmethod
    def _from_emitters(cls, logger: TaggedLogger, metrics: TaggedMetrics) -> ContextBundle:
        bundle = cls.__new__(cls)
        bundle._logger = logger
        bundle._metrics = metrics
        return bundle

    @property
    def logger(self) -> TaggedLogger:
        return self._logger

    @property
    def metrics(self) -> TaggedMetrics:
        return self._metrics

    def fork_logger(self, patch: TagPatch = None) -> ContextBundle:
        """Replace this bundle's logger with a patched fork. Returns self."""
        self._logger = self._logger.fork(patch)
        return self

    def fork_metrics(self, patch: TagPatch = None) -> ContextBundle:
        """Replace this bundle's metrics emitter with a patched fork. Returns self."""
        self._metrics = self._metrics.fork(patch)
        return self

    def fork(self) -> ContextBundle:
        """Return an independent bundle starting from a snapshot of this one."""
        return ContextBundle._from_emitters(self._logger.fork(), self._metrics.fork())

    def __repr__(self) -> str:
        return f"ContextBundle(logger={self._logger!r}, metrics={self._metrics!r})"
