"""Concrete sink adapters (stdlib logging, Prometheus)."""

from substrate.infra.logging_sink import JsonRecordFormatter, StdlibLogSink
from substrate.infra.prometheus_sink import PrometheusMetricsSink

__all__ = [
    "JsonRecordFormatter",
    "PrometheusMetricsSink",
    "StdlibLogSink",
]
