"""Settings for wiring the default sinks.

Only the bootstrap reads these. The context core itself takes its sinks from
configure() and reads no environment.
"""

from __future__ import annotations

import logging
import os
import re
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, field_validator

if TYPE_CHECKING:
    from collections.abc import Mapping

_METRIC_PREFIX_RE = re.compile(r"^[a-zA-Z_:][a-zA-Z0-9_:]*$")
_TRUTHY = frozenset({"1", "true", "yes", "on"})


class SubstrateSettings(BaseModel):
    """Default sink wiring options."""

    model_config = ConfigDict(frozen=True)

    logger_name: str = "substrate"
    log_level: str = "INFO"
    metrics_namespace: str = ""
    json_logs: bool = True
    redact_keys: frozenset[str] = frozenset()

    @field_validator("logger_name")
    @classmethod
    def validate_logger_name(cls, v: str) -> str:
        if not v or not v.strip():
            msg = "Logger name cannot be empty"
            raise ValueError(msg)
        return v.strip()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in logging.getLevelNamesMapping():
            msg = f"Unknown log level: {v}"
            raise ValueError(msg)
        return level

    @field_validator("metrics_namespace")
    @classmethod
    def validate_metrics_namespace(cls, v: str) -> str:
        if v and not _METRIC_PREFIX_RE.match(v):
            msg = f"Invalid metrics namespace: {v}"
            raise ValueError(msg)
        return v

    @property
    def level_number(self) -> int:
        return logging.getLevelNamesMapping()[self.log_level]

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> SubstrateSettings:
        """Build settings from SUBSTRATE_* environment variables."""
        env = os.environ if environ is None else environ
        redact_raw = env.get("SUBSTRATE_REDACT_KEYS", "")
        return cls(
            logger_name=env.get("SUBSTRATE_LOGGER_NAME", "substrate"),
            log_level=env.get("SUBSTRATE_LOG_LEVEL", "INFO"),
            metrics_namespace=env.get("SUBSTRATE_METRICS_NAMESPACE", ""),
            json_logs=env.get("SUBSTRATE_JSON_LOGS", "true").strip().lower() in _TRUTHY,
            redact_keys=frozenset(k.strip() for k in redact_raw.split(",") if k.strip()),
        )
