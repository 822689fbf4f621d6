"""Context core: tag sets, tagged emitters, bundles and propagation rules."""

from substrate.context.bundle import ContextBundle
from substrate.context.emitters import TaggedLogger, TaggedMetrics
from substrate.context.tags import TagSet

__all__ = [
    "ContextBundle",
    "TagSet",
    "TaggedLogger",
    "TaggedMetrics",
]
