"""prometheus_client adapter for the MetricsSink port.

- One Counter per series name, created on first increment; counter names
  that sanitize to the same series share it
- Label names are the tag keys seen on that first increment (sorted)
- Later increments fill missing labels with "" and drop unknown keys
- Pass a custom CollectorRegistry for testing isolation; None uses the
  global default registry
"""

from __future__ import annotations

import json
import logging
import re
from typing import TYPE_CHECKING, Any

from prometheus_client import REGISTRY, CollectorRegistry, Counter

if TYPE_CHECKING:
    from collections.abc import Mapping

    from substrate.shared.types import MetricRecord

logger = logging.getLogger(__name__)

_INVALID_NAME_CHARS = re.compile(r"[^a-zA-Z0-9_:]")
_INVALID_LABEL_CHARS = re.compile(r"[^a-zA-Z0-9_]")


def _sanitize_metric_name(name: str) -> str:
    cleaned = _INVALID_NAME_CHARS.sub("_", name)
    if not cleaned or cleaned[0].isdigit():
        cleaned = f"_{cleaned}"
    return cleaned


def _sanitize_label_name(name: str) -> str:
    cleaned = _INVALID_LABEL_CHARS.sub("_", str(name))
    # Leading "__" is reserved for Prometheus internal labels.
    cleaned = cleaned.lstrip("_") or "tag"
    if cleaned[0].isdigit():
        cleaned = f"tag_{cleaned}"
    return cleaned


def _label_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return json.dumps(value, sort_keys=True, default=str)


def _series_name(name: str) -> str:
    """Name prometheus_client registers a counter under: sanitized, without "_total"."""
    cleaned = _sanitize_metric_name(name)
    if cleaned.endswith("_total"):
        cleaned = cleaned[: -len("_total")] or "_"
    return cleaned


class PrometheusMetricsSink:
    """MetricsSink backed by prometheus_client counters."""

    def __init__(
        self,
        *,
        registry: CollectorRegistry | None = None,
        namespace: str = "",
    ) -> None:
        self._registry = registry if registry is not None else REGISTRY
        self._namespace = namespace
        # Keyed by series name, so names that sanitize alike share one counter.
        self._counters: dict[str, tuple[Counter, tuple[str, ...]]] = {}

    @property
    def registry(self) -> CollectorRegistry:
        return self._registry

    def _counter_for(self, name: str, labels: Mapping[str, str]) -> tuple[Counter, tuple[str, ...]]:
        series = _series_name(name)
        entry = self._counters.get(series)
        if entry is None:
            labelnames = tuple(sorted(labels))
            counter = Counter(
                series,
                f"Substrate counter {name}",
                labelnames,
                namespace=self._namespace,
                registry=self._registry,
            )
            entry = (counter, labelnames)
            self._counters[series] = entry
            logger.debug("Registered counter %s with labels %s", series, labelnames)
        return entry

    def _labels_for(self, name: str, tags: Mapping[str, Any]) -> dict[str, str]:
        labels: dict[str, str] = {}
        sources: dict[str, str] = {}
        for key, value in tags.items():
            label = _sanitize_label_name(key)
            if label in sources:
                logger.warning(
                    "Counter %s tags %r and %r both map to label %s, keeping %r",
                    name,
                    sources[label],
                    key,
                    label,
                    key,
                )
            sources[label] = key
            labels[label] = _label_value(value)
        return labels

    def increment(self, record: MetricRecord) -> None:
        name = record["counter"]
        labels = self._labels_for(name, record.get("tags", {}))
        counter, labelnames = self._counter_for(name, labels)

        unknown = set(labels) - set(labelnames)
        if unknown:
            logger.warning(
                "Counter %s registered with labels %s, dropping tags %s",
                name,
                labelnames,
                sorted(unknown),
            )

        if not labelnames:
            counter.inc()
            return
        counter.labels(**{label: labels.get(label, "") for label in labelnames}).inc()
