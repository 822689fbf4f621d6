"""Root conftest - shared fixtures for all test layers.

The substrate keeps its sinks in process-wide state that may be set only
once. Every test starts unconfigured; the state is restored afterwards.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from substrate.context import runtime
from tests.fakes import RecordingLogSink, RecordingMetricsSink

if TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.fixture(autouse=True)
def _unconfigured(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Reset the process-wide sinks for test isolation."""
    monkeypatch.setattr(runtime, "_state", None)
    yield


@pytest.fixture
def log_sink() -> RecordingLogSink:
    return RecordingLogSink()


@pytest.fixture
def metrics_sink() -> RecordingMetricsSink:
    return RecordingMetricsSink()


@pytest.fixture
def configured(
    log_sink: RecordingLogSink,
    metrics_sink: RecordingMetricsSink,
) -> tuple[RecordingLogSink, RecordingMetricsSink]:
    """Substrate configured with recording sinks."""
    runtime.configure(logger=log_sink, metrics=metrics_sink)
    return log_sink, metrics_sink
