"""Shared types flowing between the context core and the sinks.

Tag values are scalars, sequences of scalars, or nested tag-shaped mappings.
Records handed to sinks are plain dicts built fresh for every emission.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import Any, TypedDict, Union

TagScalar = Union[str, int, float, bool, None]
TagValue = Union[TagScalar, Sequence[Any], Mapping[str, Any]]

Tags = Mapping[str, TagValue]

# A patch is a full replacement function or a mapping merged over the current tags.
TagPatch = Union[Callable[[Tags], Tags], Tags, None]

# Log records carry the tags spread at the top level next to "msg"
# (and "extras" when given), so the key set is open.
LogRecord = dict[str, Any]


class MetricRecord(TypedDict):
    """Record handed to MetricsSink.increment()."""

    counter: str
    tags: dict[str, Any]


__all__ = [
    "LogRecord",
    "MetricRecord",
    "TagPatch",
    "TagScalar",
    "TagValue",
    "Tags",
]
