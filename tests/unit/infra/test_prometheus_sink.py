"""Tests for the Prometheus metrics sink."""

from __future__ import annotations

import logging

import pytest
from prometheus_client import CollectorRegistry

from substrate.infra.prometheus_sink import (
    PrometheusMetricsSink,
    _label_value,
    _sanitize_label_name,
    _sanitize_metric_name,
    _series_name,
)


@pytest.fixture
def registry() -> CollectorRegistry:
    """Isolated Prometheus registry per test."""
    return CollectorRegistry()


@pytest.fixture
def sink(registry: CollectorRegistry) -> PrometheusMetricsSink:
    return PrometheusMetricsSink(registry=registry)


class TestIncrement:
    def test_counter_without_tags(self, sink: PrometheusMetricsSink, registry: CollectorRegistry) -> None:
        sink.increment({"counter": "jobs", "tags": {}})
        sink.increment({"counter": "jobs", "tags": {}})
        assert registry.get_sample_value("jobs_total") == 2.0

    def test_tags_become_labels(self, sink: PrometheusMetricsSink, registry: CollectorRegistry) -> None:
        sink.increment({"counter": "requests", "tags": {"route": "/a", "ok": True}})
        sink.increment({"counter": "requests", "tags": {"route": "/a", "ok": True}})
        sink.increment({"counter": "requests", "tags": {"route": "/b", "ok": False}})
        assert registry.get_sample_value("requests_total", {"route": "/a", "ok": "true"}) == 2.0
        assert registry.get_sample_value("requests_total", {"route": "/b", "ok": "false"}) == 1.0

    def test_missing_labels_filled_with_empty_string(
        self, sink: PrometheusMetricsSink, registry: CollectorRegistry
    ) -> None:
        sink.increment({"counter": "hits", "tags": {"a": "1", "b": "2"}})
        sink.increment({"counter": "hits", "tags": {"a": "1"}})
        assert registry.get_sample_value("hits_total", {"a": "1", "b": ""}) == 1.0

    def test_unknown_tags_dropped_with_warning(
        self,
        sink: PrometheusMetricsSink,
        registry: CollectorRegistry,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        sink.increment({"counter": "hits", "tags": {"a": "1"}})
        with caplog.at_level(logging.WARNING, logger="substrate.infra.prometheus_sink"):
            sink.increment({"counter": "hits", "tags": {"a": "1", "extra": "x"}})
        assert registry.get_sample_value("hits_total", {"a": "1"}) == 2.0
        assert any("dropping tags ['extra']" in r.getMessage() for r in caplog.records)

    def test_namespace_prefixes_metric(self, registry: CollectorRegistry) -> None:
        sink = PrometheusMetricsSink(registry=registry, namespace="app")
        sink.increment({"counter": "logins", "tags": {}})
        assert registry.get_sample_value("app_logins_total") == 1.0

    def test_sanitizes_names(self, sink: PrometheusMetricsSink, registry: CollectorRegistry) -> None:
        sink.increment({"counter": "cache.miss", "tags": {"user-id": "7"}})
        assert registry.get_sample_value("cache_miss_total", {"user_id": "7"}) == 1.0

    @pytest.mark.parametrize(
        ("first", "second"),
        [("requests_total", "requests"), ("http-requests", "http_requests")],
    )
    def test_names_with_same_series_share_counter(
        self, first: str, second: str, sink: PrometheusMetricsSink, registry: CollectorRegistry
    ) -> None:
        sink.increment({"counter": first, "tags": {}})
        sink.increment({"counter": second, "tags": {}})
        assert registry.get_sample_value(f"{second}_total") == 2.0

    def test_colliding_tag_keys_warn_and_keep_last(
        self,
        sink: PrometheusMetricsSink,
        registry: CollectorRegistry,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        with caplog.at_level(logging.WARNING, logger="substrate.infra.prometheus_sink"):
            sink.increment({"counter": "hits", "tags": {"a-b": "1", "a_b": "2"}})
        assert registry.get_sample_value("hits_total", {"a_b": "2"}) == 1.0
        assert any("both map to label a_b" in r.getMessage() for r in caplog.records)

    def test_registry_exposed(self, sink: PrometheusMetricsSink, registry: CollectorRegistry) -> None:
        assert sink.registry is registry


class TestHelpers:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("ok_name", "ok_name"), ("a.b-c", "a_b_c"), ("1st", "_1st"), ("", "_")],
    )
    def test_metric_name(self, raw: str, expected: str) -> None:
        assert _sanitize_metric_name(raw) == expected

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("requests", "requests"), ("requests_total", "requests"), ("a.b_total", "a_b"), ("_total", "_")],
    )
    def test_series_name(self, raw: str, expected: str) -> None:
        assert _series_name(raw) == expected

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("route", "route"), ("user-id", "user_id"), ("__internal", "internal"), ("9lives", "tag_9lives")],
    )
    def test_label_name(self, raw: str, expected: str) -> None:
        assert _sanitize_label_name(raw) == expected

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (None, ""),
            ("s", "s"),
            (True, "true"),
            (3, "3"),
            (1.5, "1.5"),
            (["a", "b"], '["a", "b"]'),
            ({"b": 1, "a": 2}, '{"a": 2, "b": 1}'),
        ],
    )
    def test_label_value(self, value: object, expected: str) -> None:
        assert _label_value(value) == expected
