"""Port interfaces - boundary contracts for the emission backends.

    LogSink     - structured log records (debug/info/warning/error)
    MetricsSink - counter increments with tags
"""

from substrate.ports.sinks import LogSink, MetricsSink

__all__ = [
    "LogSink",
    "MetricsSink",
]
