"""Shared Fake sinks for testing without unittest.mock.

All Fake implementations follow the sink port contracts:
real Python classes recording what they receive, no MagicMock.
"""

from tests.fakes.sinks import (
    FailingLogSink,
    RecordingLogSink,
    RecordingMetricsSink,
    WarnLogSink,
)

__all__ = [
    "FailingLogSink",
    "RecordingLogSink",
    "RecordingMetricsSink",
    "WarnLogSink",
]
