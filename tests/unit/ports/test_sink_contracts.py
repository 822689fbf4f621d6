"""Sink port contract tests.

Verifies the sink protocols keep the method names configure() checks for,
and that the shipped adapters and test doubles satisfy them.
"""

from __future__ import annotations

import inspect

import pytest
from prometheus_client import CollectorRegistry

from substrate.infra import PrometheusMetricsSink, StdlibLogSink
from substrate.ports import LogSink, MetricsSink
from substrate.ports.sinks import (
    LOG_SINK_METHODS,
    METRICS_SINK_METHODS,
    missing_methods,
    sink_method,
)
from tests.fakes import RecordingLogSink, RecordingMetricsSink, WarnLogSink


@pytest.mark.unit
class TestLogSinkContract:
    @pytest.mark.parametrize("method", LOG_SINK_METHODS)
    def test_protocol_declares_method(self, method: str) -> None:
        params = list(inspect.signature(getattr(LogSink, method)).parameters)
        assert params == ["self", "record"]

    def test_adapters_satisfy_protocol(self) -> None:
        assert isinstance(StdlibLogSink(name="substrate.test.contract"), LogSink)
        assert isinstance(RecordingLogSink(), LogSink)


@pytest.mark.unit
class TestMetricsSinkContract:
    def test_protocol_declares_increment(self) -> None:
        params = list(inspect.signature(MetricsSink.increment).parameters)
        assert params == ["self", "record"]

    def test_adapters_satisfy_protocol(self) -> None:
        assert isinstance(PrometheusMetricsSink(registry=CollectorRegistry()), MetricsSink)
        assert isinstance(RecordingMetricsSink(), MetricsSink)


@pytest.mark.unit
class TestMissingMethods:
    def test_complete_sink(self) -> None:
        assert missing_methods(RecordingLogSink(), LOG_SINK_METHODS) == []

    def test_reports_absent_methods_in_order(self) -> None:
        class HalfSink:
            def info(self, record: dict) -> None: ...

        assert missing_methods(HalfSink(), LOG_SINK_METHODS) == ["debug", "warning", "error"]

    def test_non_callable_attribute_counts_as_missing(self) -> None:
        class AttrSink:
            increment = 0

        assert missing_methods(AttrSink(), METRICS_SINK_METHODS) == ["increment"]

    def test_warn_satisfies_warning(self) -> None:
        assert missing_methods(WarnLogSink(), LOG_SINK_METHODS) == []


@pytest.mark.unit
class TestSinkMethod:
    def test_returns_direct_method(self) -> None:
        sink = RecordingLogSink()
        assert sink_method(sink, "warning") == sink.warning

    def test_falls_back_to_alias(self) -> None:
        sink = WarnLogSink()
        assert sink_method(sink, "warning") == sink.warn

    def test_none_when_absent(self) -> None:
        assert sink_method(object(), "warning") is None
        assert sink_method(object(), "increment") is None
