"""Composition root -- wires the default sinks into the substrate.

- Reads SubstrateSettings (explicit, or from SUBSTRATE_* environment variables)
- Builds the stdlib logging sink, optionally with a JSON handler
- Builds the Prometheus metrics sink
- Calls configure() exactly once

Applications that bring their own sinks call substrate.configure() directly
and skip this module.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from substrate.config import SubstrateSettings
from substrate.context.runtime import configure
from substrate.infra.logging_sink import JsonRecordFormatter, StdlibLogSink
from substrate.infra.prometheus_sink import PrometheusMetricsSink

if TYPE_CHECKING:
    from prometheus_client import CollectorRegistry

logger = logging.getLogger(__name__)


def _install_json_handler(target: logging.Logger) -> None:
    """Attach a JSON stream handler once; repeated bootstraps do not stack handlers."""
    for handler in target.handlers:
        if isinstance(handler.formatter, JsonRecordFormatter):
            return
    handler = logging.StreamHandler()
    handler.setFormatter(JsonRecordFormatter())
    target.addHandler(handler)


def configure_default_sinks(
    settings: SubstrateSettings | None = None,
    *,
    registry: CollectorRegistry | None = None,
) -> tuple[StdlibLogSink, PrometheusMetricsSink]:
    """Build the default sinks from settings and configure the substrate with them.

    Returns the (log sink, metrics sink) pair so callers can expose the
    Prometheus registry or tweak the logger.
    """
    settings = settings or SubstrateSettings.from_env()

    target = logging.getLogger(settings.logger_name)
    target.setLevel(settings.level_number)
    if settings.json_logs:
        _install_json_handler(target)

    log_sink = StdlibLogSink(target, redact_keys=settings.redact_keys)
    metrics_sink = PrometheusMetricsSink(registry=registry, namespace=settings.metrics_namespace)

    configure(logger=log_sink, metrics=metrics_sink)
    logger.info(
        "Default sinks wired (logger=%s, level=%s, namespace=%r)",
        settings.logger_name,
        settings.log_level,
        settings.metrics_namespace,
    )
    return log_sink, metrics_sink
