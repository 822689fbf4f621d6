"""substrate - implicit tag propagation for logs and metrics.

Configure the raw sinks once, then run each unit of work under a bundle:

    configure(logger=my_log_sink, metrics=my_metrics_sink)

    def handle(request):
        patch_logger_tags({"request_id": request.id})
        logger().info("handling")          # {"request_id": ..., "msg": "handling"}
        fork(background_cleanup)           # own copy of the tags from here on

    from_scratch(handle, request)

Propagation rules:
    inherit       - share the current bundle (or start fresh)
    from_scratch  - always a brand-new bundle
    fork          - independent copy of the current bundle
"""

from substrate.context.bundle import ContextBundle
from substrate.context.emitters import TaggedLogger, TaggedMetrics
from substrate.context.runtime import (
    Propagation,
    configure,
    current_bundle,
    fork,
    fork_immediate,
    fork_timeout,
    from_scratch,
    inherit,
    is_configured,
    logger,
    metrics,
    patch_logger_tags,
    patch_metrics_tags,
    scope,
)
from substrate.context.tags import TagSet
from substrate.shared.errors import (
    AlreadyConfiguredError,
    InvalidPatchArgumentError,
    NoActiveContextError,
    NotConfiguredError,
    SinkContractError,
    SubstrateError,
)

__all__ = [
    "AlreadyConfiguredError",
    "ContextBundle",
    "InvalidPatchArgumentError",
    "NoActiveContextError",
    "NotConfiguredError",
    "Propagation",
    "SinkContractError",
    "SubstrateError",
    "TagSet",
    "TaggedLogger",
    "TaggedMetrics",
    "configure",
    "current_bundle",
    "fork",
    "fork_immediate",
    "fork_timeout",
    "from_scratch",
    "inherit",
    "is_configured",
    "logger",
    "metrics",
    "patch_logger_tags",
    "patch_metrics_tags",
    "scope",
]
